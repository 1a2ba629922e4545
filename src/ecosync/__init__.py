"""EcoSync household energy intelligence library."""

from .simulation import SeriesGenerator, generate_series
from .analysis import PatternAnalyzer, analyze
from .recommendations import RecommendationSynthesizer, synthesize_recommendations
from .calculators import compute_prepaid_status, project_savings, get_confidence_metrics
from .config import EcoSyncConfig
from .dashboard import EnergyDashboard, DashboardSnapshot
from .exceptions import EcoSyncError, InvalidInputError, PrepaidCalculationError

from . import engine
from . import models

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    "SeriesGenerator",
    "generate_series",
    "PatternAnalyzer",
    "analyze",
    "RecommendationSynthesizer",
    "synthesize_recommendations",
    "compute_prepaid_status",
    "project_savings",
    "get_confidence_metrics",
    "EcoSyncConfig",
    "EnergyDashboard",
    "DashboardSnapshot",
    "EcoSyncError",
    "InvalidInputError",
    "PrepaidCalculationError",
    "engine",
    "models"
]
