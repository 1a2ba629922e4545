"""
Dashboard example demonstrating the refresh cycle with:
- Configuration from a YAML file or the environment
- Model-backed analysis when DEEPSEEK_API_KEY is set, heuristics otherwise
- Periodic refresh and chart rendering
"""

import argparse
import time

import matplotlib.pyplot as plt

from ecosync import EcoSyncConfig, EnergyDashboard
from ecosync.visualization import EnergyChartPlotter


def main():
    parser = argparse.ArgumentParser(description="Run the EcoSync dashboard loop")
    parser.add_argument("--config", help="YAML or JSON configuration file")
    parser.add_argument("--cycles", type=int, default=1, help="number of refreshes")
    parser.add_argument("--chart", help="save the energy chart to this path")
    args = parser.parse_args()

    if args.config:
        config = EcoSyncConfig.load_from_file(args.config)
    else:
        config = EcoSyncConfig.from_env()

    if not config.validate_and_log():
        raise SystemExit(1)

    dashboard = EnergyDashboard(config)

    for cycle in range(args.cycles):
        if cycle:
            time.sleep(config.simulation.refresh_interval_seconds)
        snapshot = dashboard.refresh()
        print(f"[{snapshot.confidence.last_updated}] source={snapshot.analysis_source} "
              f"rate={snapshot.analysis.consumption_rate} kWh/h "
              f"prepaid={snapshot.prepaid.days_remaining} days ({snapshot.prepaid.risk_level.value})")
        for rec in snapshot.recommendations:
            print(f"    - {rec.title}")

    print(f"\nEngine stats: {dashboard.engine.get_performance_stats()}")

    if args.chart:
        snapshot = dashboard.last_snapshot
        fig = EnergyChartPlotter().plot_series(snapshot.series, snapshot.analysis)
        fig.savefig(args.chart)
        plt.close(fig)
        print(f"Chart saved to {args.chart}")


if __name__ == "__main__":
    main()
