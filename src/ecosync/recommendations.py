"""Recommendation synthesis from an analysis and a prepaid balance."""

from typing import List
import logging

from .models import AIAnalysis, AIRecommendation, Priority

LOW_BALANCE_THRESHOLD = 50.0


class RecommendationSynthesizer:
    """Turns an analysis into an ordered list of recommendations.

    Order is fixed: solar optimization (when solar windows were found),
    prepaid warning (when the balance is low), then the efficiency and
    storage tips which are always present.
    """

    def __init__(self):
        self.logger = logging.getLogger("ecosync.recommendations")

    def synthesize(self, analysis: AIAnalysis, prepaid_balance: float) -> List[AIRecommendation]:
        """Build recommendations for one refresh."""
        recommendations = []

        if analysis.solar_windows:
            recommendations.append(self._solar_optimization(analysis.solar_windows))

        if prepaid_balance < LOW_BALANCE_THRESHOLD:
            recommendations.append(self._prepaid_warning())

        recommendations.append(self._evening_efficiency())
        recommendations.append(self._battery_storage())

        self.logger.debug(
            f"Synthesized {len(recommendations)} recommendations: "
            f"{[r.id for r in recommendations]}"
        )
        return recommendations

    @staticmethod
    def _solar_optimization(solar_windows: List[str]) -> AIRecommendation:
        start, end = solar_windows[0], solar_windows[-1]
        return AIRecommendation(
            id="solar-opt-1",
            title="Shift Energy-Intensive Tasks to Solar Hours",
            description=(
                f"AI predicts high solar output from {start} to {end}. Schedule washing "
                "machines, dishwashers, and charging during this window."
            ),
            confidence=87,
            reasoning=[
                "Solar generation will exceed usage by 3.2 kWh",
                "Reduces grid dependency by 35%",
                "Historical pattern shows consistent generation",
                "Weather forecast indicates clear conditions"
            ],
            priority=Priority.HIGH,
            action_time=start
        )

    @staticmethod
    def _prepaid_warning() -> AIRecommendation:
        return AIRecommendation(
            id="prepaid-1",
            title="Critical: Top Up Electricity Soon",
            description=(
                "Based on your current usage trend, your prepaid balance will deplete in "
                "less than 3 days. Consider topping up to avoid interruption."
            ),
            confidence=92,
            reasoning=[
                "Daily consumption rate: 18.4 kWh",
                "Current balance supports 2.4 days",
                "Weekend usage typically 15% higher",
                "No solar coverage during peak evening hours"
            ],
            priority=Priority.HIGH
        )

    @staticmethod
    def _evening_efficiency() -> AIRecommendation:
        return AIRecommendation(
            id="efficiency-1",
            title="Reduce Evening Peak Consumption",
            description=(
                "Your evening energy usage is 45% higher than optimal. Small adjustments "
                "can save RWF 8,500/month."
            ),
            confidence=79,
            reasoning=[
                "Evening peak detected between 18:00-22:00",
                "Zero solar availability during this period",
                "Grid electricity costs 60% more",
                "Behavioral pattern identified over 14 days"
            ],
            priority=Priority.MEDIUM
        )

    @staticmethod
    def _battery_storage() -> AIRecommendation:
        return AIRecommendation(
            id="storage-1",
            title="Battery Storage Could Save 40% More",
            description=(
                "AI simulation shows battery storage would capture unused daytime solar "
                "for evening use, reducing grid dependency significantly."
            ),
            confidence=84,
            reasoning=[
                "Average 4.2 kWh excess solar daily",
                "Evening shortfall averages 3.8 kWh",
                "ROI period: 18-24 months",
                "Reduces outage risk by 85%"
            ],
            priority=Priority.LOW
        )


def synthesize_recommendations(analysis: AIAnalysis, prepaid_balance: float) -> List[AIRecommendation]:
    """Synthesize recommendations with the default synthesizer."""
    return RecommendationSynthesizer().synthesize(analysis, prepaid_balance)
