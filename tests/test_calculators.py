"""Tests for the prepaid and savings calculators."""

import sys
from pathlib import Path
import unittest
from datetime import datetime

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from ecosync.calculators import (
    compute_prepaid_status, project_savings, get_confidence_metrics, classify_risk
)
from ecosync.exceptions import InvalidInputError, PrepaidCalculationError
from ecosync.models import RiskLevel


class TestPrepaidStatus(unittest.TestCase):
    """Days remaining and risk tiers."""

    def test_large_balance_is_low_risk(self):
        status = compute_prepaid_status(45000, 18.4)
        self.assertAlmostEqual(status.days_remaining, round(45000 / 18.4, 1))
        self.assertEqual(status.risk_level, RiskLevel.LOW)
        self.assertEqual(status.currency, "RWF")
        self.assertEqual(status.daily_average_usage, 18.4)

    def test_small_balance_is_high_risk(self):
        status = compute_prepaid_status(10, 18.4)
        self.assertEqual(status.days_remaining, 0.5)
        self.assertEqual(status.risk_level, RiskLevel.HIGH)
        self.assertEqual(status.hours_remaining, 12)

    def test_tier_boundaries(self):
        self.assertEqual(compute_prepaid_status(59.8, 20).risk_level, RiskLevel.HIGH)
        self.assertEqual(compute_prepaid_status(60, 20).risk_level, RiskLevel.MEDIUM)
        self.assertEqual(compute_prepaid_status(100, 20).risk_level, RiskLevel.MEDIUM)
        self.assertEqual(compute_prepaid_status(140, 20).risk_level, RiskLevel.LOW)

    def test_tier_uses_unrounded_days(self):
        # 2.96 days rounds to 3.0 but is still under three days
        status = compute_prepaid_status(59.2, 20)
        self.assertEqual(status.days_remaining, 3.0)
        self.assertEqual(status.risk_level, RiskLevel.HIGH)

    def test_zero_usage_fails(self):
        with self.assertRaises(PrepaidCalculationError):
            compute_prepaid_status(100, 0)
        with self.assertRaises(ZeroDivisionError):
            compute_prepaid_status(100, 0.0)

    def test_negative_inputs_rejected(self):
        with self.assertRaises(InvalidInputError):
            compute_prepaid_status(-1, 18.4)
        with self.assertRaises(InvalidInputError):
            compute_prepaid_status(100, -2)

    def test_non_finite_rejected(self):
        with self.assertRaises(InvalidInputError):
            compute_prepaid_status(float("inf"), 18.4)

    def test_numpy_scalars_accepted(self):
        status = compute_prepaid_status(np.int64(100), np.float32(20.0))
        self.assertEqual(status.days_remaining, 5.0)
        self.assertEqual(status.risk_level, RiskLevel.MEDIUM)
        self.assertIsInstance(status.balance, float)
        self.assertEqual(compute_prepaid_status(np.int32(70), np.int64(10)).days_remaining, 7.0)

    def test_bool_rejected(self):
        with self.assertRaises(InvalidInputError):
            compute_prepaid_status(True, 18.4)

    def test_balance_percentage_capped(self):
        self.assertEqual(compute_prepaid_status(45000, 18.4).balance_percentage, 100.0)
        self.assertAlmostEqual(compute_prepaid_status(150, 10).balance_percentage, 50.0)

    def test_classify_risk(self):
        self.assertEqual(classify_risk(0), RiskLevel.HIGH)
        self.assertEqual(classify_risk(6.99), RiskLevel.MEDIUM)
        self.assertEqual(classify_risk(7), RiskLevel.LOW)


class TestSavingsProjection(unittest.TestCase):
    """Monthly cost arithmetic."""

    def test_reference_scenario(self):
        projection = project_savings(10, 30, 150)
        self.assertEqual(projection.current_monthly_cost, 45000)
        self.assertEqual(projection.projected_monthly_cost, 31500)
        self.assertEqual(projection.monthly_savings, 13500)
        self.assertEqual(projection.co2_reduced, 45.0)
        self.assertEqual(projection.grid_dependency_reduction, 30.0)

    def test_default_grid_cost(self):
        self.assertEqual(project_savings(10, 30), project_savings(10, 30, 150))

    def test_savings_is_difference_of_costs(self):
        for usage in (0, 0.37, 2.67, 3.14159, 10, 18.4):
            for percent in (0, 7.5, 33.3, 50, 99.9, 100):
                projection = project_savings(usage, percent, 133.7)
                self.assertEqual(
                    projection.monthly_savings,
                    projection.current_monthly_cost - projection.projected_monthly_cost
                )

    def test_zero_percent_saves_nothing(self):
        projection = project_savings(3.5, 0)
        self.assertEqual(projection.monthly_savings, 0)
        self.assertEqual(projection.co2_reduced, 0)

    def test_percent_rounded_to_one_decimal(self):
        self.assertEqual(project_savings(5, 33.333).grid_dependency_reduction, 33.3)

    def test_out_of_range_percent_is_not_clamped(self):
        with self.assertLogs("ecosync.calculators", level="WARNING"):
            projection = project_savings(10, 150, 150)
        self.assertEqual(projection.projected_monthly_cost, -22500)
        self.assertEqual(projection.grid_dependency_reduction, 150.0)

    def test_non_finite_inputs_rejected(self):
        for usage, percent in ((float("nan"), 30), (10, float("nan")), (float("inf"), 30),
                               (10, float("-inf"))):
            with self.subTest(usage=usage, percent=percent):
                with self.assertRaises(InvalidInputError):
                    project_savings(usage, percent)

    def test_negative_usage_rejected(self):
        with self.assertRaises(InvalidInputError):
            project_savings(-1, 30)

    def test_numpy_usage_accepted(self):
        self.assertEqual(project_savings(np.int64(10), np.float64(30)), project_savings(10, 30))


class TestConfidenceMetrics(unittest.TestCase):

    def test_static_values(self):
        metrics = get_confidence_metrics(datetime(2026, 10, 19, 9, 5))
        self.assertEqual(metrics.prediction_accuracy, 87)
        self.assertEqual(metrics.data_points, 336)
        self.assertEqual(metrics.last_updated, "09:05")
        self.assertEqual(metrics.to_dict()["dataFreshness"], "Real-time")


if __name__ == "__main__":
    unittest.main()
