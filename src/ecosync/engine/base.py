"""
Base classes and interfaces for the analysis engine.
Provides a plugin architecture for model-backed analysis with rule-based fallbacks.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List, Callable, Sequence
from datetime import datetime
import logging
import math
import time
from enum import Enum

from ..exceptions import AnalysisError
from ..models import EnergyDataPoint, AIAnalysis, AIRecommendation
from ..validation import SeriesValidator


class EngineStatus(Enum):
    """Status of an engine call."""
    SUCCESS = "success"
    FAILED = "failed"
    FALLBACK_USED = "fallback_used"


@dataclass
class EngineResult:
    """Result of an analysis or recommendation call."""
    status: EngineStatus
    payload: Any
    source: str
    elapsed: float
    fallback_used: bool = False
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status in (EngineStatus.SUCCESS, EngineStatus.FALLBACK_USED)

    def unwrap(self) -> Any:
        """Return the payload or raise if every path failed."""
        if not self.ok:
            raise AnalysisError(self.error or "All analysis methods failed")
        return self.payload


class AnalysisPlugin(ABC):
    """Base class for model-backed analysis providers."""

    def __init__(self, name: str, version: str = "1.0"):
        self.name = name
        self.version = version
        self.logger = logging.getLogger(f"ecosync.engine.{name}")
        self._last_elapsed = 0.0
        self._call_count = 0
        self._success_count = 0

    @abstractmethod
    def analyze(self, series: Sequence[EnergyDataPoint]) -> AIAnalysis:
        """Analyze an energy series."""
        pass

    @abstractmethod
    def recommend(
        self,
        analysis: AIAnalysis,
        prepaid_balance: float,
        current_usage: float
    ) -> List[AIRecommendation]:
        """Produce recommendations for an analysis."""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the provider is ready to use."""
        pass

    def get_metadata(self) -> Dict[str, Any]:
        """Return provider information for logging/debugging."""
        return {
            "name": self.name,
            "version": self.version,
            "is_available": self.is_available(),
            "call_count": self._call_count,
            "success_rate": self._success_count / max(1, self._call_count),
            "last_elapsed": self._last_elapsed
        }

    def _record_call(self, success: bool, elapsed: float) -> None:
        """Record call statistics."""
        self._call_count += 1
        if success:
            self._success_count += 1
        self._last_elapsed = elapsed


class RuleBasedAnalyzer(ABC):
    """Base class for deterministic fallbacks."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"ecosync.rules.{name}")

    @abstractmethod
    def analyze(self, series: Sequence[EnergyDataPoint]) -> AIAnalysis:
        """Analyze using rules."""
        pass

    @abstractmethod
    def recommend(
        self,
        analysis: AIAnalysis,
        prepaid_balance: float,
        current_usage: float
    ) -> List[AIRecommendation]:
        """Recommend using rules."""
        pass

    def get_metadata(self) -> Dict[str, Any]:
        """Return rule engine metadata."""
        return {
            "name": self.name,
            "type": "rule_based",
            "always_available": True
        }


class AnalysisEngine:
    """Routes analysis to the active plugin and falls back to rules."""

    def __init__(self, name: str = "analysis_engine"):
        self.name = name
        self.logger = logging.getLogger(f"ecosync.engine.{name}")

        self._plugins: Dict[str, AnalysisPlugin] = {}
        self._fallback: Optional[RuleBasedAnalyzer] = None
        self._active_plugin: Optional[str] = None

        self._call_history: List[Dict[str, Any]] = []
        self._max_history = 1000

        self._enable_fallback = True
        self._validate_results = True

    def register_plugin(self, plugin: AnalysisPlugin) -> None:
        """Register a model-backed plugin."""
        self._plugins[plugin.name] = plugin
        self.logger.info(f"Registered analysis plugin: {plugin.name}")

        if self._active_plugin is None and plugin.is_available():
            self._active_plugin = plugin.name
            self.logger.info(f"Set active plugin: {plugin.name}")

    def register_fallback(self, fallback: RuleBasedAnalyzer) -> None:
        """Register the rule-based fallback."""
        self._fallback = fallback
        self.logger.info(f"Registered fallback rules: {fallback.name}")

    def set_active_plugin(self, plugin_name: str) -> bool:
        """Set the active plugin."""
        if plugin_name not in self._plugins:
            self.logger.error(f"Plugin {plugin_name} not found")
            return False

        if not self._plugins[plugin_name].is_available():
            self.logger.error(f"Plugin {plugin_name} is not available")
            return False

        self._active_plugin = plugin_name
        self.logger.info(f"Set active plugin: {plugin_name}")
        return True

    @property
    def active_plugin(self) -> Optional[str]:
        return self._active_plugin

    def analyze(self, series: Sequence[EnergyDataPoint], force_fallback: bool = False) -> EngineResult:
        """Analyze a series with plugin and fallback support."""
        SeriesValidator.validate_series(series)
        return self._run(
            "analyze",
            lambda provider: provider.analyze(series),
            force_fallback
        )

    def recommend(
        self,
        analysis: AIAnalysis,
        prepaid_balance: float,
        current_usage: float,
        force_fallback: bool = False
    ) -> EngineResult:
        """Produce recommendations with plugin and fallback support."""
        return self._run(
            "recommend",
            lambda provider: provider.recommend(analysis, prepaid_balance, current_usage),
            force_fallback
        )

    def _run(self, operation: str, call: Callable[[Any], Any], force_fallback: bool) -> EngineResult:
        start_time = time.time()

        if not force_fallback and self._active_plugin:
            plugin = self._plugins[self._active_plugin]

            if plugin.is_available():
                try:
                    self.logger.debug(f"Running {operation} with plugin: {plugin.name}")
                    payload = call(plugin)
                    valid = not self._validate_results or self._validate_payload(operation, payload)

                    elapsed = time.time() - start_time
                    plugin._record_call(valid, elapsed)

                    if valid:
                        result = EngineResult(
                            status=EngineStatus.SUCCESS,
                            payload=payload,
                            source=plugin.name,
                            elapsed=elapsed
                        )
                        self._record_history(operation, result)
                        return result

                    self.logger.warning(f"Plugin {operation} result failed validation, using fallback")

                except Exception as e:
                    plugin._record_call(False, time.time() - start_time)
                    self.logger.warning(f"Plugin {plugin.name} failed: {e}")

        if self._enable_fallback and self._fallback is not None:
            self.logger.info(f"Using fallback rules for {operation}")
            try:
                payload = call(self._fallback)
                result = EngineResult(
                    status=EngineStatus.FALLBACK_USED,
                    payload=payload,
                    source=self._fallback.name,
                    elapsed=time.time() - start_time,
                    fallback_used=True
                )
                self._record_history(operation, result)
                return result

            except Exception as e:
                self.logger.error(f"Fallback rules failed: {e}")

        result = EngineResult(
            status=EngineStatus.FAILED,
            payload=None,
            source="failed",
            elapsed=time.time() - start_time,
            error=f"All methods failed for {operation}"
        )
        self._record_history(operation, result)
        return result

    def _validate_payload(self, operation: str, payload: Any) -> bool:
        """Sanity checks on plugin output."""
        if operation == "analyze":
            return (
                isinstance(payload, AIAnalysis)
                and math.isfinite(payload.consumption_rate)
                and payload.consumption_rate >= 0
                and len(payload.peak_usage_hours) <= 3
                and len(payload.solar_windows) <= 3
            )
        if operation == "recommend":
            return (
                isinstance(payload, list)
                and len(payload) > 0
                and all(isinstance(r, AIRecommendation) for r in payload)
            )
        return payload is not None

    def _record_history(self, operation: str, result: EngineResult) -> None:
        """Record call history for analysis."""
        self._call_history.append({
            "timestamp": datetime.now(),
            "operation": operation,
            "source": result.source,
            "status": result.status.value,
            "elapsed": result.elapsed,
            "fallback_used": result.fallback_used
        })

        if len(self._call_history) > self._max_history:
            self._call_history = self._call_history[-self._max_history:]

    def get_performance_stats(self) -> Dict[str, Any]:
        """Get call statistics over the last 100 calls."""
        if not self._call_history:
            return {}

        recent_history = self._call_history[-100:]
        total = len(recent_history)
        successful = sum(1 for h in recent_history if h["status"] != EngineStatus.FAILED.value)
        fallbacks = sum(1 for h in recent_history if h["fallback_used"])

        return {
            "total_calls": total,
            "success_rate": successful / total,
            "fallback_usage_rate": fallbacks / total,
            "avg_elapsed": sum(h["elapsed"] for h in recent_history) / total,
            "active_plugin": self._active_plugin,
            "available_plugins": [name for name, plugin in self._plugins.items()
                                  if plugin.is_available()],
            "fallback": self._fallback.name if self._fallback else None
        }

    def get_plugin_info(self) -> Dict[str, Dict[str, Any]]:
        """Get information about all registered plugins."""
        return {name: plugin.get_metadata()
                for name, plugin in self._plugins.items()}

    def configure(self, config: Dict[str, Any]) -> None:
        """Configure the engine."""
        self._enable_fallback = config.get("enable_fallback", True)
        self._validate_results = config.get("validate_results", True)
        self._max_history = config.get("max_history", 1000)

        self.logger.info(f"Analysis engine configured: {config}")


class EngineFactory:
    """Factory for creating analysis engines with standard configurations."""

    @staticmethod
    def create_engine(ai_config=None, engine_type: str = "standard") -> AnalysisEngine:
        """Create an engine with heuristic fallback and, if configured, the LLM plugin."""
        from .heuristic import HeuristicRules

        engine = AnalysisEngine(f"{engine_type}_engine")
        engine.register_fallback(HeuristicRules())

        if engine_type == "standard" and ai_config is not None and ai_config.enabled:
            from ..llm import LLMAnalysisPlugin
            engine.register_plugin(LLMAnalysisPlugin(ai_config))

        return engine
