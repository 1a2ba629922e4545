"""Tests for pattern analysis."""

import sys
from pathlib import Path
import unittest
from datetime import datetime

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ecosync.analysis import PatternAnalyzer, analyze, series_to_frame, summarize_series
from ecosync.exceptions import InvalidInputError
from ecosync.models import EnergyDataPoint


def point(hour, usage, solar=0.0, predicted=False):
    return EnergyDataPoint(time=f"{hour:02d}:00", usage=usage, solar=solar, predicted=predicted)


def household_day():
    """Midday solar surplus and a heavy evening on the grid."""
    series = []
    for hour in range(24):
        if 10 <= hour <= 13:
            series.append(point(hour, 1.0, 8.0))
        elif 18 <= hour <= 22:
            series.append(point(hour, 6.0))
        else:
            series.append(point(hour, 2.0))
    return series


class TestPatternAnalyzer(unittest.TestCase):
    """Thresholds, truncation and insight ordering."""

    def setUp(self):
        self.analyzer = PatternAnalyzer()

    def test_flat_series_has_no_peaks_or_windows(self):
        series = [point(h, 3.0) for h in range(24)]
        analysis = self.analyzer.analyze(series)

        self.assertEqual(analysis.peak_usage_hours, [])
        self.assertEqual(analysis.solar_windows, [])
        self.assertEqual(analysis.consumption_rate, 3.0)
        self.assertEqual([i.category for i in analysis.insights], ["Usage Pattern"])

    def test_peaks_and_windows_truncated_to_three(self):
        analysis = self.analyzer.analyze(household_day())

        self.assertEqual(analysis.peak_usage_hours, ["18:00", "19:00", "20:00"])
        self.assertEqual(analysis.solar_windows, ["10:00", "11:00", "12:00"])
        self.assertEqual(analysis.consumption_rate, 2.67)

    def test_insight_order(self):
        analysis = self.analyzer.analyze(household_day())

        self.assertEqual(
            [i.category for i in analysis.insights],
            ["Solar Optimization", "Grid Dependency", "Usage Pattern"]
        )
        self.assertEqual(analysis.insights[0].impact, "28.0 kWh wasted in past 24h")
        self.assertEqual(analysis.insights[1].impact, "30.0 kWh from grid during peak hours")

    def test_forecast_points_count_toward_mean_only(self):
        series = [point(h, u) for h, u in zip(range(4), [2.0, 2.0, 2.0, 5.0])]
        series += [point(4, 10.0, predicted=True), point(5, 10.0, predicted=True)]

        analysis = self.analyzer.analyze(series)

        # mean 31/6 puts the 5.0 hour below the 1.3x threshold
        self.assertEqual(analysis.peak_usage_hours, [])
        self.assertEqual(analysis.consumption_rate, 5.17)

    def test_forecast_points_never_reported(self):
        series = [point(h, 1.0) for h in range(6)] + [point(6, 9.0, 9.0, predicted=True)]
        analysis = self.analyzer.analyze(series)
        self.assertNotIn("06:00", analysis.peak_usage_hours)
        self.assertNotIn("06:00", analysis.solar_windows)

    def test_solar_window_requires_below_average_usage(self):
        series = [point(h, 2.0) for h in range(10)]
        series.append(point(10, 2.5, 5.0))
        series.append(point(11, 1.0, 5.0))
        analysis = self.analyzer.analyze(series)
        self.assertEqual(analysis.solar_windows, ["11:00"])

    def test_evening_insight_uses_hour_of_day(self):
        series = [point(h, 5.0) for h in range(17, 23)]
        analysis = self.analyzer.analyze(series)
        # 17:00 is outside the evening window: 5 hours x 5 kWh
        self.assertEqual(analysis.insights[0].category, "Grid Dependency")
        self.assertEqual(analysis.insights[0].impact, "25.0 kWh from grid during peak hours")

    def test_wasted_solar_threshold_is_exclusive(self):
        series = [point(11, 0.0, 5.0), point(12, 0.0, 5.0)]
        analysis = self.analyzer.analyze(series)
        self.assertNotIn("Solar Optimization", [i.category for i in analysis.insights])

    def test_trends_are_fixed(self):
        first = self.analyzer.analyze(household_day()).trends
        second = self.analyzer.analyze([point(h, 3.0) for h in range(24)]).trends
        self.assertEqual(len(first), 3)
        self.assertEqual(first, second)

    def test_idempotent(self):
        series = household_day()
        self.assertEqual(analyze(series), analyze(series))

    def test_empty_series_rejected(self):
        with self.assertRaises(InvalidInputError):
            self.analyzer.analyze([])

    def test_unparseable_labels_rejected(self):
        for label in ("06:00 PM", "noon", "25:00", ""):
            with self.subTest(label=label):
                series = [point(10, 3.0), EnergyDataPoint(time=label, usage=3.0, solar=0.0)]
                with self.assertRaises(InvalidInputError):
                    self.analyzer.analyze(series)

    def test_timestamp_takes_precedence_over_label(self):
        evening = EnergyDataPoint(time="6 pm", usage=20.0, solar=0.0,
                                  timestamp=datetime(2026, 10, 19, 18))
        self.assertEqual(evening.hour_of_day, 18)
        analysis = self.analyzer.analyze([evening])
        self.assertEqual(analysis.insights[0].category, "Grid Dependency")

    def test_to_dict_uses_camel_case(self):
        data = self.analyzer.analyze(household_day()).to_dict()
        self.assertEqual(
            set(data),
            {"peakUsageHours", "solarWindows", "consumptionRate", "trends", "insights"}
        )


class TestSeriesSummary(unittest.TestCase):
    """DataFrame helpers."""

    def test_frame_columns(self):
        df = series_to_frame(household_day())
        self.assertEqual(len(df), 24)
        self.assertEqual(list(df["hour"][:3]), [0, 1, 2])
        self.assertEqual(df.loc[18, "net_grid"], 6.0)

    def test_summary_totals(self):
        summary = summarize_series(household_day())
        self.assertEqual(summary["total_usage"], 64.0)
        self.assertEqual(summary["total_solar"], 32.0)
        self.assertEqual(summary["grid_import"], 60.0)
        self.assertEqual(summary["peak_time"], "18:00")

    def test_summary_ignores_forecast(self):
        series = household_day() + [point(0, 50.0, predicted=True)]
        self.assertEqual(summarize_series(series)["peak_usage"], 6.0)


if __name__ == "__main__":
    unittest.main()
