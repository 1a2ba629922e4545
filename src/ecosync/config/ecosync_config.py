"""
Main EcoSync configuration class that integrates all configuration components.
"""

from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Mapping
import logging
import os

from .base import BaseConfig, ConfigValidationResult

PLACEHOLDER_API_KEY = "your_deepseek_api_key_here"


@dataclass
class AIServiceConfig:
    """Configuration for the language model service."""
    provider: str = "deepseek"
    api_key: str = ""
    base_url: str = "https://api.deepseek.com/v1"
    chat_model: str = "deepseek-chat"
    vision_model: str = "deepseek-vl"
    timeout_seconds: float = 30.0
    enabled: bool = True

    @property
    def is_configured(self) -> bool:
        """Whether a usable API key is present."""
        return bool(self.api_key) and self.api_key != PLACEHOLDER_API_KEY

    @property
    def masked_key(self) -> str:
        """API key with only its edges visible."""
        if not self.api_key:
            return "Not set"
        return f"{self.api_key[:10]}...{self.api_key[-4:]}"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'AIServiceConfig':
        """Read the service settings from environment variables."""
        environ = os.environ if environ is None else environ
        return cls(
            api_key=environ.get("DEEPSEEK_API_KEY", ""),
            base_url=environ.get("DEEPSEEK_API_URL") or cls.base_url,
            chat_model=environ.get("DEEPSEEK_MODEL") or cls.chat_model,
            vision_model=environ.get("DEEPSEEK_VISION_MODEL") or cls.vision_model
        )

    def validate(self) -> ConfigValidationResult:
        """Validate service configuration."""
        result = ConfigValidationResult(is_valid=True)

        if not self.base_url.startswith(("http://", "https://")):
            result.add_error(f"Invalid base URL: {self.base_url}")

        if not self.chat_model:
            result.add_error("Chat model cannot be empty")

        if self.timeout_seconds <= 0:
            result.add_error(f"Timeout must be > 0, got {self.timeout_seconds}")

        if self.enabled and not self.is_configured:
            result.add_warning("API key not configured, heuristic analysis will be used")

        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary; the API key is never written out."""
        return {
            "provider": self.provider,
            "base_url": self.base_url,
            "chat_model": self.chat_model,
            "vision_model": self.vision_model,
            "timeout_seconds": self.timeout_seconds,
            "enabled": self.enabled
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AIServiceConfig':
        """Create from dictionary."""
        return cls(
            provider=data.get("provider", "deepseek"),
            api_key=data.get("api_key", ""),
            base_url=data.get("base_url", "https://api.deepseek.com/v1"),
            chat_model=data.get("chat_model", "deepseek-chat"),
            vision_model=data.get("vision_model", "deepseek-vl"),
            timeout_seconds=data.get("timeout_seconds", 30.0),
            enabled=data.get("enabled", True)
        )


@dataclass
class SimulationConfig:
    """Configuration for the synthetic series."""
    hours_of_history: int = 24
    random_seed: Optional[int] = None
    refresh_interval_seconds: int = 30

    def validate(self) -> ConfigValidationResult:
        """Validate simulation configuration."""
        result = ConfigValidationResult(is_valid=True)

        if self.hours_of_history < 0:
            result.add_error(f"Hours of history must be >= 0, got {self.hours_of_history}")
        elif self.hours_of_history == 0:
            result.add_warning("No history hours; analysis will only see forecast points")

        if self.refresh_interval_seconds <= 0:
            result.add_error(f"Refresh interval must be > 0, got {self.refresh_interval_seconds}")

        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hours_of_history": self.hours_of_history,
            "random_seed": self.random_seed,
            "refresh_interval_seconds": self.refresh_interval_seconds
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        return cls(
            hours_of_history=data.get("hours_of_history", 24),
            random_seed=data.get("random_seed"),
            refresh_interval_seconds=data.get("refresh_interval_seconds", 30)
        )


@dataclass
class TariffConfig:
    """Configuration for the prepaid account and grid tariff."""
    currency: str = "RWF"
    grid_cost_per_kwh: float = 150.0
    initial_balance: float = 45000.0
    daily_usage: float = 18.4  # kWh

    def validate(self) -> ConfigValidationResult:
        """Validate tariff configuration."""
        result = ConfigValidationResult(is_valid=True)

        if not self.currency:
            result.add_error("Currency cannot be empty")

        if self.grid_cost_per_kwh < 0:
            result.add_error(f"Grid cost must be >= 0, got {self.grid_cost_per_kwh}")

        if self.initial_balance < 0:
            result.add_error(f"Initial balance must be >= 0, got {self.initial_balance}")

        if self.daily_usage <= 0:
            result.add_error(f"Daily usage must be > 0, got {self.daily_usage}")

        return result

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currency": self.currency,
            "grid_cost_per_kwh": self.grid_cost_per_kwh,
            "initial_balance": self.initial_balance,
            "daily_usage": self.daily_usage
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TariffConfig':
        return cls(
            currency=data.get("currency", "RWF"),
            grid_cost_per_kwh=data.get("grid_cost_per_kwh", 150.0),
            initial_balance=data.get("initial_balance", 45000.0),
            daily_usage=data.get("daily_usage", 18.4)
        )


@dataclass
class MonitoringConfig:
    """Configuration for logging."""
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def validate(self) -> ConfigValidationResult:
        """Validate monitoring configuration."""
        result = ConfigValidationResult(is_valid=True)

        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.log_level not in valid_log_levels:
            result.add_error(f"Invalid log level: {self.log_level}")

        return result

    def to_dict(self) -> Dict[str, Any]:
        return {"log_level": self.log_level, "log_file": self.log_file}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MonitoringConfig':
        return cls(
            log_level=data.get("log_level", "INFO"),
            log_file=data.get("log_file")
        )


@dataclass
class EcoSyncConfig(BaseConfig):
    """Main EcoSync configuration class."""

    name: str = "EcoSync"
    location: str = ""

    ai_service: AIServiceConfig = field(default_factory=AIServiceConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    tariff: TariffConfig = field(default_factory=TariffConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)

    config_version: str = "1.0"

    def __post_init__(self):
        self._setup_logging()

    def _setup_logging(self):
        """Setup logging based on monitoring configuration."""
        logger = logging.getLogger("ecosync")
        level = getattr(logging, self.monitoring.log_level, logging.INFO)
        logger.setLevel(level)

        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        if not logger.handlers:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)

        if self.monitoring.log_file:
            log_path = os.path.abspath(self.monitoring.log_file)
            already_attached = any(
                isinstance(h, logging.FileHandler) and h.baseFilename == log_path
                for h in logger.handlers
            )
            if not already_attached:
                file_handler = logging.FileHandler(log_path)
                file_handler.setFormatter(formatter)
                logger.addHandler(file_handler)

    @classmethod
    def from_env(cls, **kwargs) -> 'EcoSyncConfig':
        """Build a default configuration with the AI service read from the environment."""
        return cls(ai_service=AIServiceConfig.from_env(), **kwargs)

    def validate(self) -> ConfigValidationResult:
        """Validate the entire configuration."""
        result = ConfigValidationResult(is_valid=True)

        if not self.name:
            result.add_error("Name cannot be empty")

        components = [
            ("ai_service", self.ai_service),
            ("simulation", self.simulation),
            ("tariff", self.tariff),
            ("monitoring", self.monitoring)
        ]

        for component_name, component in components:
            result.extend(component.validate(), prefix=component_name)

        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "name": self.name,
            "location": self.location,
            "ai_service": self.ai_service.to_dict(),
            "simulation": self.simulation.to_dict(),
            "tariff": self.tariff.to_dict(),
            "monitoring": self.monitoring.to_dict(),
            "config_version": self.config_version
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EcoSyncConfig':
        """Create configuration from dictionary."""
        return cls(
            name=data.get("name", "EcoSync"),
            location=data.get("location", ""),
            ai_service=AIServiceConfig.from_dict(data.get("ai_service") or {}),
            simulation=SimulationConfig.from_dict(data.get("simulation") or {}),
            tariff=TariffConfig.from_dict(data.get("tariff") or {}),
            monitoring=MonitoringConfig.from_dict(data.get("monitoring") or {}),
            config_version=data.get("config_version", "1.0")
        )

    def merge(self, other: 'EcoSyncConfig') -> 'EcoSyncConfig':
        """Overlay another configuration, keeping whichever API key is set.

        The key never passes through to_dict, so it is carried over here.
        """
        merged = super().merge(other)
        merged.ai_service.api_key = other.ai_service.api_key or self.ai_service.api_key
        return merged

    def validate_and_log(self, strict: bool = False) -> bool:
        """Validate configuration and log results; strict mode raises on errors."""
        result = self.validate()

        logger = logging.getLogger("ecosync.config")

        if result.is_valid:
            logger.info("Configuration validation passed")
        else:
            logger.error("Configuration validation failed")
            for error in result.errors:
                logger.error(f"Validation error: {error}")

        for warning in result.warnings:
            logger.warning(f"Validation warning: {warning}")

        if strict:
            result.raise_for_errors()

        return result.is_valid
