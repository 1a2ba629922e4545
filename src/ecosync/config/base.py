"""
Configuration primitives shared by the EcoSync settings objects.

Settings serialize to plain dictionaries and are persisted as YAML or JSON,
with the format picked from the file suffix.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, Union, List
from pathlib import Path
from enum import Enum
import json
import logging

import yaml

from ..exceptions import ConfigurationError

logger = logging.getLogger("ecosync.config")


class ConfigFormat(Enum):
    """Formats a configuration file can be written in."""
    YAML = "yaml"
    JSON = "json"

    @classmethod
    def from_path(cls, path: Path) -> 'ConfigFormat':
        suffix = path.suffix.lower()
        if suffix in (".yaml", ".yml"):
            return cls.YAML
        if suffix == ".json":
            return cls.JSON
        raise ConfigurationError(f"Unsupported configuration file type: {suffix or path.name}")


@dataclass
class ConfigValidationResult:
    """Errors and warnings collected while checking a configuration."""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def extend(self, other: 'ConfigValidationResult', prefix: str = "") -> None:
        """Fold a component's result into this one, tagging each message."""
        label = f"{prefix}: " if prefix else ""
        for error in other.errors:
            self.add_error(f"{label}{error}")
        for warning in other.warnings:
            self.add_warning(f"{label}{warning}")

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ConfigurationError("; ".join(self.errors))


class BaseConfig(ABC):
    """Settings object that can be validated, serialized and persisted."""

    @abstractmethod
    def validate(self) -> ConfigValidationResult:
        pass

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        pass

    @classmethod
    @abstractmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BaseConfig':
        pass

    def save_to_file(self, file_path: Union[str, Path], format: Optional[ConfigFormat] = None) -> Path:
        """Write the settings to disk; the suffix decides the format unless one is given."""
        path = Path(file_path)
        format = format or ConfigFormat.from_path(path)

        with open(path, "w") as f:
            if format is ConfigFormat.YAML:
                yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
            else:
                json.dump(self.to_dict(), f, indent=2)

        logger.debug(f"Saved {self.__class__.__name__} to {path}")
        return path

    @classmethod
    def load_from_file(cls, file_path: Union[str, Path]) -> 'BaseConfig':
        """Read settings written by save_to_file (or by hand)."""
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        format = ConfigFormat.from_path(path)
        with open(path) as f:
            data = yaml.safe_load(f) if format is ConfigFormat.YAML else json.load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"{path} must contain a mapping, got {type(data).__name__}")

        logger.debug(f"Loaded {cls.__name__} from {path}")
        return cls.from_dict(data)

    def merge(self, other: 'BaseConfig') -> 'BaseConfig':
        """Overlay another configuration's values on top of this one."""
        return self.__class__.from_dict(_overlay(self.to_dict(), other.to_dict()))


def _overlay(base: Dict[str, Any], top: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in top.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _overlay(merged[key], value)
        else:
            merged[key] = value
    return merged
