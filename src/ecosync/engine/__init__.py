"""
Analysis engine for EcoSync.

A model-backed plugin answers analysis and recommendation calls when it is
configured; the deterministic heuristics answer otherwise and whenever the
plugin fails.
"""

from .base import (
    EngineStatus,
    EngineResult,
    AnalysisPlugin,
    RuleBasedAnalyzer,
    AnalysisEngine,
    EngineFactory
)
from .heuristic import HeuristicRules

__all__ = [
    "EngineStatus",
    "EngineResult",
    "AnalysisPlugin",
    "RuleBasedAnalyzer",
    "AnalysisEngine",
    "EngineFactory",
    "HeuristicRules"
]
