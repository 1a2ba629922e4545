"""
Configuration package for the EcoSync library.
Settings for the AI service, the simulator, the tariff and logging.
"""

from .base import (
    BaseConfig,
    ConfigFormat,
    ConfigValidationResult
)

from .ecosync_config import (
    AIServiceConfig,
    SimulationConfig,
    TariffConfig,
    MonitoringConfig,
    EcoSyncConfig
)

__all__ = [
    # Base configuration classes
    "BaseConfig",
    "ConfigFormat",
    "ConfigValidationResult",

    # Components
    "AIServiceConfig",
    "SimulationConfig",
    "TariffConfig",
    "MonitoringConfig",

    # Main configuration class
    "EcoSyncConfig"
]
