"""Prepaid risk and savings calculators."""

from datetime import datetime
from typing import Optional
import logging

from .exceptions import PrepaidCalculationError
from .models import (
    PrepaidStatus, RiskLevel, SavingsProjection, ConfidenceMetrics, format_time_label
)
from .validation import EnergyValidator

logger = logging.getLogger("ecosync.calculators")

DEFAULT_CURRENCY = "RWF"
DEFAULT_GRID_COST_PER_KWH = 150.0
DAYS_PER_MONTH = 30
EMISSIONS_FACTOR = 0.5  # kg CO2 per grid kWh

HIGH_RISK_DAYS = 3
MEDIUM_RISK_DAYS = 7

MODEL_VERSION = "EcoSync AI v1.0 (MVP Simulation)"


def classify_risk(days_remaining: float) -> RiskLevel:
    """Map days until depletion to a risk tier."""
    if days_remaining < HIGH_RISK_DAYS:
        return RiskLevel.HIGH
    if days_remaining < MEDIUM_RISK_DAYS:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def compute_prepaid_status(
    balance: float,
    daily_usage: float,
    currency: str = DEFAULT_CURRENCY
) -> PrepaidStatus:
    """Estimate how long a prepaid balance lasts at the given daily usage."""
    EnergyValidator.validate_quantity(balance, "balance")
    EnergyValidator.validate_quantity(daily_usage, "daily_usage")

    if daily_usage == 0:
        raise PrepaidCalculationError(
            "Daily usage must be greater than zero to estimate days remaining"
        )

    days_remaining = balance / daily_usage
    risk_level = classify_risk(days_remaining)

    if risk_level is RiskLevel.HIGH:
        logger.warning(f"Prepaid balance {balance} {currency} lasts {days_remaining:.1f} days")

    return PrepaidStatus(
        balance=float(balance),
        currency=currency,
        days_remaining=round(days_remaining, 1),
        daily_average_usage=float(daily_usage),
        risk_level=risk_level
    )


def project_savings(
    current_usage: float,
    solar_increase_percent: float,
    grid_cost_per_kwh: float = DEFAULT_GRID_COST_PER_KWH
) -> SavingsProjection:
    """Project monthly cost and CO2 if more of the usage came from solar.

    The percentage is not clamped; values outside 0-100 produce negative
    or oversized projections and are only logged.
    """
    EnergyValidator.validate_quantity(current_usage, "current_usage")
    EnergyValidator.validate_number(solar_increase_percent, "solar_increase_percent")
    EnergyValidator.validate_quantity(grid_cost_per_kwh, "grid_cost_per_kwh")

    if not 0 <= solar_increase_percent <= 100:
        logger.warning(f"Solar increase {solar_increase_percent}% is outside 0-100")

    current_monthly_cost = current_usage * DAYS_PER_MONTH * grid_cost_per_kwh

    grid_reduction = (solar_increase_percent / 100) * current_usage
    new_grid_usage = current_usage - grid_reduction
    projected_monthly_cost = new_grid_usage * DAYS_PER_MONTH * grid_cost_per_kwh

    co2_reduced = grid_reduction * DAYS_PER_MONTH * EMISSIONS_FACTOR

    current_rounded = float(round(current_monthly_cost))
    projected_rounded = float(round(projected_monthly_cost))

    return SavingsProjection(
        current_monthly_cost=current_rounded,
        projected_monthly_cost=projected_rounded,
        monthly_savings=current_rounded - projected_rounded,
        co2_reduced=round(co2_reduced, 1),
        grid_dependency_reduction=round(solar_increase_percent, 1)
    )


def get_confidence_metrics(now: Optional[datetime] = None) -> ConfidenceMetrics:
    """Trust panel values; accuracy and data points are simulated."""
    return ConfidenceMetrics(
        prediction_accuracy=87,
        data_freshness="Real-time",
        last_updated=format_time_label(now or datetime.now()),
        data_points=14 * 24,
        model_version=MODEL_VERSION
    )
