"""
Basic usage example of the EcoSync library.
This example demonstrates the deterministic pipeline:
- Generating a synthetic day of usage and solar data
- Detecting peaks and solar windows
- Producing recommendations
- Prepaid risk and savings projections
"""

from ecosync import (
    generate_series, analyze, synthesize_recommendations,
    compute_prepaid_status, project_savings
)


def main():
    series = generate_series(24, seed=42)
    print(f"Generated {len(series)} points, {sum(p.predicted for p in series)} forecast")

    analysis = analyze(series)
    print(f"\nAverage consumption: {analysis.consumption_rate} kWh/h")
    print(f"Peak hours: {', '.join(analysis.peak_usage_hours) or 'none'}")
    print(f"Solar windows: {', '.join(analysis.solar_windows) or 'none'}")
    for insight in analysis.insights:
        print(f"  [{insight.category}] {insight.finding} ({insight.impact})")

    print("\nRecommendations:")
    for rec in synthesize_recommendations(analysis, prepaid_balance=45000):
        print(f"  {rec.priority.value:>6}  {rec.title} ({rec.confidence}%)")

    status = compute_prepaid_status(45000, 18.4)
    print(f"\nPrepaid: {status.balance} {status.currency}, "
          f"{status.days_remaining} days left, risk {status.risk_level.value}")

    print("\nSavings projection:")
    for percent in (10, 30, 50):
        projection = project_savings(analysis.consumption_rate, percent)
        print(f"  +{percent}% solar: save {projection.monthly_savings:,.0f} RWF/month, "
              f"{projection.co2_reduced} kg CO2")


if __name__ == "__main__":
    main()
