"""
Natural language explanation generator for GRPV results.

Converts the four category scores into:
- A short analysis line per category
- Warnings for concerning raw factors
- A rating, a Buy/Hold/Sell recommendation and the reason for it
- An overall summary
"""

import logging
from typing import Dict, List

from ezana_scoring.scoring.factor_scorer import family_average
from ezana_scoring.scoring.overall import OverallScorer
from ezana_scoring.utils.config import RISK
from ezana_scoring.utils.models import CompositeScore, FactorSet

logger = logging.getLogger(__name__)


CATEGORY_LABELS = {
    'growth': 'Growth',
    'risk': 'Risk',
    'profitability': 'Profitability',
    'valuation': 'Valuation'
}

# how each category reads at the top and bottom of the scale
CATEGORY_PHRASES = {
    'growth': ('revenue is growing strongly', 'revenue growth is weak or negative'),
    'risk': ('leverage and volatility are low', 'leverage or volatility is elevated'),
    'profitability': ('margins and yield are healthy', 'margins are thin'),
    'valuation': ('the stock looks inexpensive', 'the stock looks expensive')
}

WARNING_THRESHOLDS = {
    'high_debt': 2.0,
    'high_beta': 1.5,
    'negative_growth': -0.05,
    'extreme_pe': 100
}


class ExplanationEngine:
    """
    Generates explanations for GRPV scores.
    """

    def __init__(self, overall_scorer: OverallScorer = None):
        self.overall_scorer = overall_scorer or OverallScorer()

    def generate_explanation(
        self,
        symbol: str,
        score: CompositeScore,
        growth_factors: FactorSet = None,
        risk_factors: FactorSet = None,
        valuation_factors: FactorSet = None
    ) -> Dict:
        """
        Returns:
            {
                'analysis': Dict[str, str],
                'warnings': List[str],
                'rating': str,
                'recommendation': str,
                'recommendation_reason': str,
                'summary': str
            }
        """
        # same overall as the one stored on the result
        overall = score.overall
        interpretation = self.overall_scorer.interpret_score(overall)
        category_scores = score.as_dict()

        analysis = {
            category: self._analyze_category(category, value)
            for category, value in category_scores.items()
        }
        analysis['overall'] = (
            f"Overall GRPV score of {overall:.1f}/100 ({interpretation['rating']})"
        )

        warnings = self._generate_warnings(
            growth_factors or {},
            risk_factors or {},
            valuation_factors or {}
        )

        return {
            'analysis': analysis,
            'warnings': warnings,
            'rating': interpretation['rating'],
            'recommendation': interpretation['recommendation'],
            'recommendation_reason': self._recommendation_reason(
                interpretation['recommendation'],
                category_scores
            ),
            'summary': self._generate_summary(
                symbol,
                overall,
                interpretation['rating'],
                category_scores
            )
        }

    def _analyze_category(self, category: str, value: float) -> str:
        strong, weak = CATEGORY_PHRASES[category]
        label = CATEGORY_LABELS[category]

        if value >= 70:
            return f"{label} score of {value:.1f}: {strong}"
        elif value <= 30:
            return f"{label} score of {value:.1f}: {weak}"
        return f"{label} score of {value:.1f}: in line with the market"

    def _generate_warnings(
        self,
        growth_factors: FactorSet,
        risk_factors: FactorSet,
        valuation_factors: FactorSet
    ) -> List[str]:
        warnings = []

        debt = family_average(risk_factors, RISK['debt_label'])
        if debt is not None and debt > WARNING_THRESHOLDS['high_debt']:
            warnings.append(f"High leverage: average Debt/Equity of {debt:.2f}")

        beta = risk_factors.get(RISK['beta_key'])
        if beta is not None and beta > WARNING_THRESHOLDS['high_beta']:
            warnings.append(f"High volatility: beta of {beta:.2f}")

        if growth_factors:
            avg_growth = sum(growth_factors.values()) / len(growth_factors)
            if avg_growth < WARNING_THRESHOLDS['negative_growth']:
                warnings.append(f"Revenue declining: average growth of {avg_growth:.1%}")

        pe = family_average(valuation_factors, 'P/E')
        if pe is not None and pe > WARNING_THRESHOLDS['extreme_pe']:
            warnings.append(f"Extreme valuation: average P/E of {pe:.1f}")
        elif pe is not None and pe < 0:
            warnings.append("Negative P/E indicates the company is unprofitable")

        return warnings

    def _recommendation_reason(
        self,
        recommendation: str,
        category_scores: Dict[str, float]
    ) -> str:
        best = max(category_scores.items(), key=lambda x: x[1])
        worst = min(category_scores.items(), key=lambda x: x[1])

        if recommendation == 'Buy':
            return f"Strong overall profile led by {best[0]} ({best[1]:.0f}/100)"
        elif recommendation == 'Hold':
            return (
                f"Mixed profile: {best[0]} ({best[1]:.0f}/100) offsets "
                f"{worst[0]} ({worst[1]:.0f}/100)"
            )
        return f"Weak overall profile, dragged down by {worst[0]} ({worst[1]:.0f}/100)"

    def _generate_summary(
        self,
        symbol: str,
        overall: float,
        rating: str,
        category_scores: Dict[str, float]
    ) -> str:
        best_cat = max(category_scores.items(), key=lambda x: x[1])
        worst_cat = min(category_scores.items(), key=lambda x: x[1])

        return (
            f"{symbol} receives a {rating.lower()} GRPV score of {overall:.1f}/100. "
            f"Strongest in {best_cat[0]} ({best_cat[1]:.0f}/100), "
            f"weakest in {worst_cat[0]} ({worst_cat[1]:.0f}/100)."
        )
