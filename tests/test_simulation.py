"""Tests for the synthetic series generator."""

import sys
from pathlib import Path
import unittest
from datetime import datetime

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ecosync.exceptions import InvalidInputError, ValidationTypeError
from ecosync.simulation import SeriesGenerator, generate_series, FORECAST_HOURS


NOW = datetime(2026, 10, 19, 14, 30)


class TestSeriesGenerator(unittest.TestCase):
    """Shape and bounds of generated series."""

    def setUp(self):
        self.series = SeriesGenerator(seed=7).generate(24, now=NOW)

    def test_history_and_forecast_counts(self):
        self.assertEqual(len(self.series), 24 + FORECAST_HOURS)
        self.assertEqual(sum(1 for p in self.series if not p.predicted), 24)
        self.assertEqual(sum(1 for p in self.series if p.predicted), 6)

    def test_forecast_points_follow_history(self):
        flags = [p.predicted for p in self.series]
        self.assertEqual(flags, [False] * 24 + [True] * 6)

    def test_labels_are_hourly_and_chronological(self):
        self.assertEqual(self.series[0].time, "14:00")
        self.assertEqual(self.series[24].time, "14:00")
        self.assertEqual(self.series[-1].time, "19:00")
        timestamps = [p.timestamp for p in self.series]
        self.assertEqual(timestamps, sorted(timestamps))

    def test_values_are_non_negative(self):
        for seed in range(20):
            for point in SeriesGenerator(seed=seed).generate(48, now=NOW):
                self.assertGreaterEqual(point.usage, 0)
                self.assertGreaterEqual(point.solar, 0)

    def test_no_solar_outside_daylight(self):
        for seed in range(10):
            for point in SeriesGenerator(seed=seed).generate(48, now=NOW):
                if not 6 <= point.hour_of_day <= 18:
                    self.assertEqual(point.solar, 0.0)

    def test_usage_envelope(self):
        for seed in range(10):
            for point in SeriesGenerator(seed=seed).generate(24, now=NOW):
                hour = point.hour_of_day
                if 6 <= hour <= 9:
                    low, high = 5.0, 8.5
                elif 18 <= hour <= 22:
                    low, high = 6.0, 10.5
                elif 10 <= hour <= 17:
                    low, high = 3.0, 6.0
                else:
                    low, high = 2.0, 3.5
                self.assertGreaterEqual(point.usage, low)
                self.assertLessEqual(point.usage, high)

    def test_solar_peaks_at_noon(self):
        for seed in range(10):
            noon = [p for p in SeriesGenerator(seed=seed).generate(24, now=NOW)
                    if p.hour_of_day == 12][0]
            self.assertGreaterEqual(noon.solar, 7.2)
            self.assertLessEqual(noon.solar, 8.0)

    def test_values_rounded_to_two_decimals(self):
        for point in self.series:
            self.assertEqual(point.usage, round(point.usage, 2))
            self.assertEqual(point.solar, round(point.solar, 2))

    def test_same_seed_same_series(self):
        first = generate_series(24, seed=3, now=NOW)
        second = generate_series(24, seed=3, now=NOW)
        self.assertEqual(first, second)

    def test_clock_is_used_when_now_missing(self):
        generator = SeriesGenerator(seed=1, clock=lambda: NOW)
        self.assertEqual(generator.generate(2)[0].time, "12:00")

    def test_zero_history_is_forecast_only(self):
        series = SeriesGenerator(seed=1).generate(0, now=NOW)
        self.assertEqual(len(series), 6)
        self.assertTrue(all(p.predicted for p in series))

    def test_invalid_history_length(self):
        generator = SeriesGenerator(seed=1)
        with self.assertRaises(InvalidInputError):
            generator.generate(-1, now=NOW)
        with self.assertRaises(ValidationTypeError):
            generator.generate(2.5, now=NOW)


if __name__ == "__main__":
    unittest.main()
