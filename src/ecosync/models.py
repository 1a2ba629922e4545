"""Data models for the EcoSync energy library."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Any, List, Optional

from .exceptions import InvalidInputError

TIME_LABEL_FORMAT = "%H:%M"


def format_time_label(timestamp: datetime) -> str:
    """Format a timestamp as the display label used across the dashboard."""
    return timestamp.strftime(TIME_LABEL_FORMAT)


def parse_time_label(label: str) -> int:
    """Hour of day encoded in a 24h "HH:MM" label."""
    try:
        return datetime.strptime(label, TIME_LABEL_FORMAT).hour
    except (TypeError, ValueError):
        raise InvalidInputError(f"Time label must be 24h HH:MM, got {label!r}") from None


class Priority(str, Enum):
    """Recommendation priority."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RiskLevel(str, Enum):
    """Prepaid balance depletion risk tier."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class EnergyDataPoint:
    """One hourly observation or forecast."""
    time: str
    usage: float  # kWh
    solar: float  # kWh
    predicted: bool = False
    timestamp: Optional[datetime] = field(default=None, compare=False)

    @property
    def hour_of_day(self) -> int:
        """Hour of day this point belongs to."""
        if self.timestamp is not None:
            return self.timestamp.hour
        return parse_time_label(self.time)

    @property
    def net_grid(self) -> float:
        """Usage not covered by solar."""
        return max(0.0, self.usage - self.solar)

    @property
    def surplus_solar(self) -> float:
        """Solar not consumed by the household."""
        return max(0.0, self.solar - self.usage)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "time": self.time,
            "usage": self.usage,
            "solar": self.solar,
            "predicted": self.predicted
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EnergyDataPoint':
        return cls(
            time=str(data["time"]),
            usage=float(data["usage"]),
            solar=float(data.get("solar", 0.0)),
            predicted=bool(data.get("predicted", False))
        )


@dataclass
class AIInsight:
    """A single finding about the household's usage."""
    category: str
    finding: str
    impact: str

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category, "finding": self.finding, "impact": self.impact}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AIInsight':
        return cls(
            category=str(data.get("category", "")),
            finding=str(data.get("finding", "")),
            impact=str(data.get("impact", ""))
        )


@dataclass
class AIAnalysis:
    """Derived usage patterns for one series."""
    peak_usage_hours: List[str]
    solar_windows: List[str]
    consumption_rate: float  # mean kWh per hour
    trends: List[str] = field(default_factory=list)
    insights: List[AIInsight] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "peakUsageHours": list(self.peak_usage_hours),
            "solarWindows": list(self.solar_windows),
            "consumptionRate": self.consumption_rate,
            "trends": list(self.trends),
            "insights": [insight.to_dict() for insight in self.insights]
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AIAnalysis':
        return cls(
            peak_usage_hours=[str(h) for h in data.get("peakUsageHours", [])],
            solar_windows=[str(h) for h in data.get("solarWindows", [])],
            consumption_rate=float(data.get("consumptionRate", 0.0)),
            trends=[str(t) for t in data.get("trends", [])],
            insights=[AIInsight.from_dict(i) for i in data.get("insights", [])]
        )


@dataclass
class AIRecommendation:
    """An actionable suggestion shown to the household."""
    id: str
    title: str
    description: str
    confidence: int  # 0-100
    reasoning: List[str]
    priority: Priority
    action_time: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "confidence": self.confidence,
            "reasoning": list(self.reasoning),
            "priority": self.priority.value
        }
        if self.action_time is not None:
            data["actionTime"] = self.action_time
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'AIRecommendation':
        priority = str(data.get("priority", "medium")).lower()
        if priority not in {p.value for p in Priority}:
            priority = Priority.MEDIUM.value
        confidence = int(round(float(data.get("confidence", 0))))
        return cls(
            id=str(data.get("id", "")),
            title=str(data.get("title", "")),
            description=str(data.get("description", "")),
            confidence=max(0, min(100, confidence)),
            reasoning=[str(r) for r in data.get("reasoning", [])],
            priority=Priority(priority),
            action_time=data.get("actionTime") or None
        )


@dataclass
class PrepaidStatus:
    """Prepaid electricity balance and how long it will last."""
    balance: float
    currency: str
    days_remaining: float
    daily_average_usage: float
    risk_level: RiskLevel

    @property
    def hours_remaining(self) -> int:
        return int(self.days_remaining * 24)

    @property
    def balance_percentage(self) -> float:
        """Share of a 30-day month the balance covers."""
        return min(100.0, self.days_remaining / 30 * 100)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "balance": self.balance,
            "currency": self.currency,
            "daysRemaining": self.days_remaining,
            "dailyAverageUsage": self.daily_average_usage,
            "riskLevel": self.risk_level.value
        }


@dataclass
class SavingsProjection:
    """Monthly cost and emissions under a higher solar share."""
    current_monthly_cost: float
    projected_monthly_cost: float
    monthly_savings: float
    co2_reduced: float  # kg
    grid_dependency_reduction: float  # percent

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentMonthlyCost": self.current_monthly_cost,
            "projectedMonthlyCost": self.projected_monthly_cost,
            "monthlySavings": self.monthly_savings,
            "co2Reduced": self.co2_reduced,
            "gridDependencyReduction": self.grid_dependency_reduction
        }


@dataclass
class ConfidenceMetrics:
    """Values for the dashboard trust panel."""
    prediction_accuracy: int
    data_freshness: str
    last_updated: str
    data_points: int
    model_version: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predictionAccuracy": self.prediction_accuracy,
            "dataFreshness": self.data_freshness,
            "lastUpdated": self.last_updated,
            "dataPoints": self.data_points,
            "modelVersion": self.model_version
        }


@dataclass
class MeterReading:
    """Reading extracted from a photo of an energy meter."""
    reading: float
    unit: str
    confidence: int
    analysis: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MeterReading':
        return cls(
            reading=float(data.get("reading", 0.0)),
            unit=str(data.get("unit", "kWh")),
            confidence=int(data.get("confidence", 0)),
            analysis=str(data.get("analysis", ""))
        )


@dataclass
class PanelInspection:
    """Condition report for a photo of a solar panel."""
    condition: str  # excellent, good, fair, poor
    issues: List[str]
    recommendations: List[str]
    estimated_efficiency: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PanelInspection':
        return cls(
            condition=str(data.get("condition", "fair")),
            issues=[str(i) for i in data.get("issues", [])],
            recommendations=[str(r) for r in data.get("recommendations", [])],
            estimated_efficiency=float(data.get("estimatedEfficiency", 0.0))
        )
