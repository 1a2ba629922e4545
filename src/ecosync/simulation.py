"""Synthetic energy series for demos and tests."""

from datetime import datetime, timedelta
from typing import Callable, List, Optional
import logging
import numpy as np

from .models import EnergyDataPoint, format_time_label
from .validation import EnergyValidator

FORECAST_HOURS = 6

# Daily load shape: (first hour, last hour, low, high) of the extra usage
LOAD_SHAPE = [
    (6, 9, 3.0, 5.0),     # morning peak
    (18, 22, 4.0, 7.0),   # evening peak
    (10, 17, 1.0, 2.5),   # midday
]
BASE_LOAD = (2.0, 3.5)

SOLAR_START_HOUR = 6
SOLAR_END_HOUR = 18
SOLAR_PEAK_OFFSET = 6  # hours after sunrise, local noon
SOLAR_SLOPE = 1.2
SOLAR_JITTER = 0.8


class SeriesGenerator:
    """Generates hourly usage and solar samples with a daily cycle."""

    def __init__(
        self,
        seed: Optional[int] = None,
        rng: Optional[np.random.RandomState] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        """Initialize generator with a seedable random source."""
        self.rng = rng if rng is not None else np.random.RandomState(seed)
        self.clock = clock or datetime.now
        self.logger = logging.getLogger("ecosync.simulation")

    def usage_for_hour(self, hour: int) -> float:
        """Draw household usage for an hour of day."""
        usage = self.rng.uniform(*BASE_LOAD)
        for first, last, low, high in LOAD_SHAPE:
            if first <= hour <= last:
                usage += self.rng.uniform(low, high)
                break
        return usage

    def solar_for_hour(self, hour: int) -> float:
        """Draw solar generation for an hour of day."""
        if not SOLAR_START_HOUR <= hour <= SOLAR_END_HOUR:
            return 0.0

        distance_from_peak = abs((hour - SOLAR_START_HOUR) - SOLAR_PEAK_OFFSET)
        solar = (6 - distance_from_peak) * SOLAR_SLOPE + self.rng.uniform(0, SOLAR_JITTER)
        return max(0.0, solar)

    def generate(
        self,
        hours_of_history: int = 24,
        now: Optional[datetime] = None
    ) -> List[EnergyDataPoint]:
        """Generate history followed by a short forecast window."""
        EnergyValidator.validate_hours(hours_of_history)

        now = (now or self.clock()).replace(minute=0, second=0, microsecond=0)
        series = []

        for offset in range(-hours_of_history, FORECAST_HOURS):
            timestamp = now + timedelta(hours=offset)
            hour = timestamp.hour

            usage = self.usage_for_hour(hour)
            solar = self.solar_for_hour(hour)

            series.append(EnergyDataPoint(
                time=format_time_label(timestamp),
                usage=round(float(usage), 2),
                solar=round(float(solar), 2),
                predicted=offset >= 0,
                timestamp=timestamp
            ))

        self.logger.debug(
            f"Generated {len(series)} points ({hours_of_history} historical, "
            f"{FORECAST_HOURS} forecast) ending {series[-1].time}"
        )
        return series


def generate_series(
    hours_of_history: int = 24,
    seed: Optional[int] = None,
    now: Optional[datetime] = None
) -> List[EnergyDataPoint]:
    """Generate a synthetic series with a fresh generator."""
    return SeriesGenerator(seed=seed).generate(hours_of_history, now=now)
