"""Dashboard pipeline: one refresh produces every panel's data."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Any, List, Optional
import logging

from .analysis import summarize_series
from .calculators import compute_prepaid_status, project_savings, get_confidence_metrics
from .config import EcoSyncConfig
from .engine import AnalysisEngine, EngineFactory
from .exceptions import InvalidInputError
from .models import (
    EnergyDataPoint, AIAnalysis, AIRecommendation, PrepaidStatus,
    SavingsProjection, ConfidenceMetrics
)
from .simulation import SeriesGenerator


@dataclass
class DashboardSnapshot:
    """Everything the dashboard renders after one refresh."""
    generated_at: datetime
    series: List[EnergyDataPoint]
    summary: Dict[str, Any]
    analysis: AIAnalysis
    recommendations: List[AIRecommendation]
    prepaid: PrepaidStatus
    confidence: ConfidenceMetrics
    analysis_source: str
    fallback_used: bool = False
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generatedAt": self.generated_at.isoformat(),
            "energyData": [point.to_dict() for point in self.series],
            "summary": self.summary,
            "analysis": self.analysis.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "prepaidStatus": self.prepaid.to_dict(),
            "confidenceMetrics": self.confidence.to_dict(),
            "analysisSource": self.analysis_source,
            "fallbackUsed": self.fallback_used
        }


class EnergyDashboard:
    """Runs the generator, analysis and calculators for each refresh.

    Each refresh is independent; the only carried state is the prepaid
    balance and the latest snapshot.
    """

    def __init__(
        self,
        config: Optional[EcoSyncConfig] = None,
        engine: Optional[AnalysisEngine] = None,
        generator: Optional[SeriesGenerator] = None
    ):
        self.config = config or EcoSyncConfig()
        self.engine = engine or EngineFactory.create_engine(self.config.ai_service)
        self.generator = generator or SeriesGenerator(seed=self.config.simulation.random_seed)
        self.balance = self.config.tariff.initial_balance
        self.last_snapshot: Optional[DashboardSnapshot] = None
        self.logger = logging.getLogger("ecosync.dashboard")

    def refresh(self, now: Optional[datetime] = None) -> DashboardSnapshot:
        """Recompute every panel from a freshly generated series."""
        now = now or datetime.now()
        tariff = self.config.tariff

        series = self.generator.generate(self.config.simulation.hours_of_history, now=now)

        analysis_result = self.engine.analyze(series)
        analysis = analysis_result.unwrap()

        recommendation_result = self.engine.recommend(
            analysis, self.balance, analysis.consumption_rate
        )

        snapshot = DashboardSnapshot(
            generated_at=now,
            series=series,
            summary=summarize_series(series),
            analysis=analysis,
            recommendations=recommendation_result.unwrap(),
            prepaid=compute_prepaid_status(self.balance, tariff.daily_usage, tariff.currency),
            confidence=get_confidence_metrics(now),
            analysis_source=analysis_result.source,
            fallback_used=analysis_result.fallback_used or recommendation_result.fallback_used
        )

        self.last_snapshot = snapshot
        self.logger.info(
            f"Dashboard refreshed: {len(snapshot.recommendations)} recommendations, "
            f"prepaid risk {snapshot.prepaid.risk_level.value}, source {snapshot.analysis_source}"
        )
        return snapshot

    def project(self, solar_increase_percent: float) -> SavingsProjection:
        """Savings projection from the latest consumption rate."""
        if self.last_snapshot is None:
            self.refresh()
        return project_savings(
            self.last_snapshot.analysis.consumption_rate,
            solar_increase_percent,
            self.config.tariff.grid_cost_per_kwh
        )

    def top_up(self, amount: float) -> PrepaidStatus:
        """Add credit to the prepaid balance."""
        if amount <= 0:
            raise InvalidInputError(f"Top-up amount must be positive, got {amount}")
        self.balance += amount
        self.logger.info(f"Balance topped up by {amount}, now {self.balance}")
        tariff = self.config.tariff
        return compute_prepaid_status(self.balance, tariff.daily_usage, tariff.currency)
