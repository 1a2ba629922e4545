"""Deterministic analysis rules used when no model is available."""

from typing import List, Sequence

from .base import RuleBasedAnalyzer
from ..analysis import PatternAnalyzer
from ..models import EnergyDataPoint, AIAnalysis, AIRecommendation
from ..recommendations import RecommendationSynthesizer


class HeuristicRules(RuleBasedAnalyzer):
    """Threshold-based pattern analysis and canned recommendations."""

    def __init__(self):
        super().__init__("heuristic")
        self.analyzer = PatternAnalyzer()
        self.synthesizer = RecommendationSynthesizer()

    def analyze(self, series: Sequence[EnergyDataPoint]) -> AIAnalysis:
        return self.analyzer.analyze(series)

    def recommend(
        self,
        analysis: AIAnalysis,
        prepaid_balance: float,
        current_usage: float
    ) -> List[AIRecommendation]:
        # current usage only informs the model-backed path
        return self.synthesizer.synthesize(analysis, prepaid_balance)
