"""Chart rendering for energy series and savings projections."""

from typing import Optional, Sequence, Tuple
import numpy as np
import matplotlib.pyplot as plt

from .analysis import series_to_frame
from .calculators import project_savings, DEFAULT_GRID_COST_PER_KWH
from .models import EnergyDataPoint, AIAnalysis
from .validation import SeriesValidator


class EnergyChartPlotter:
    """Plots the usage/solar chart and the savings simulator curve."""

    def __init__(self, style: Optional[str] = None):
        """Initialize plotter with an optional matplotlib style."""
        if style:
            plt.style.use(style)

    def plot_series(
        self,
        series: Sequence[EnergyDataPoint],
        analysis: Optional[AIAnalysis] = None,
        figsize: Tuple[int, int] = (12, 6)
    ) -> plt.Figure:
        """Plot usage and solar over time with the forecast window shaded."""
        SeriesValidator.validate_series(series)
        df = series_to_frame(series)
        x = np.arange(len(df))

        fig, ax = plt.subplots(figsize=figsize)
        ax.plot(x, df["usage"], color="tab:blue", label="Usage (kWh)")
        ax.plot(x, df["solar"], color="tab:orange", label="Solar (kWh)")
        ax.fill_between(x, df["solar"], alpha=0.2, color="tab:orange")

        forecast = np.flatnonzero(df["predicted"].to_numpy())
        if len(forecast):
            ax.axvspan(forecast[0] - 0.5, forecast[-1] + 0.5, color="grey", alpha=0.15,
                       label="Forecast")

        if analysis is not None:
            labels = df["time"].tolist()
            for label in analysis.peak_usage_hours:
                if label in labels:
                    i = labels.index(label)
                    ax.scatter(i, df["usage"].iloc[i], color="tab:red", zorder=3)

        step = max(1, len(df) // 12)
        ax.set_xticks(x[::step])
        ax.set_xticklabels(df["time"].iloc[::step], rotation=45)
        ax.set_xlabel("Time")
        ax.set_ylabel("Energy (kWh)")
        ax.set_title("Energy Usage vs Solar Generation")
        ax.grid(True)
        ax.legend(loc="upper left")
        fig.tight_layout()

        return fig

    def plot_savings_curve(
        self,
        current_usage: float,
        percents: Optional[Sequence[float]] = None,
        grid_cost_per_kwh: float = DEFAULT_GRID_COST_PER_KWH,
        figsize: Tuple[int, int] = (10, 6)
    ) -> plt.Figure:
        """Plot monthly savings against the solar increase percentage."""
        if percents is None:
            percents = range(0, 101, 5)

        projections = [project_savings(current_usage, p, grid_cost_per_kwh) for p in percents]

        fig, ax = plt.subplots(figsize=figsize)
        ax.plot(list(percents), [p.monthly_savings for p in projections], "g-", label="Monthly savings")
        ax.set_xlabel("Solar increase (%)")
        ax.set_ylabel("Savings per month")
        ax.set_title("Savings Projection")
        ax.grid(True)

        co2_ax = ax.twinx()
        co2_ax.plot(list(percents), [p.co2_reduced for p in projections], "b--", label="CO2 reduced")
        co2_ax.set_ylabel("CO2 reduced (kg)")

        fig.tight_layout()
        return fig
