"""
Calculates the overall 0-100 GRPV score.

Overall = Σ (category_weight × category_score)

With the default equal weights that is 0.25 × (growth + risk + profitability + valuation).
"""

import logging
from typing import Dict, List, Tuple

from ezana_scoring.utils.config import (
    CATEGORY_WEIGHTS,
    RATING_BANDS,
    RECOMMENDATION_BANDS,
)
from ezana_scoring.utils.models import CompositeScore

logger = logging.getLogger(__name__)


def band_label(value: float, bands: List[Tuple[float, str]], floor: str = "") -> str:
    """First label whose lower bound (inclusive) the value reaches"""
    for lower_bound, label in bands:
        if value >= lower_bound:
            return label
    return floor


class OverallScorer:
    """
    Combines category scores into the overall score.

    Example:
        Growth: 60, Risk: 40, Profitability: 80, Valuation: 20
        Overall = 0.25*60 + 0.25*40 + 0.25*80 + 0.25*20 = 50.0
    """

    def __init__(self, category_weights: Dict[str, float] = None):
        """
        Args:
            category_weights: Dict mapping category -> weight
                              Must sum to 1.0
        """
        self.category_weights = dict(category_weights or CATEGORY_WEIGHTS)

        total_weight = sum(self.category_weights.values())
        if not 0.99 <= total_weight <= 1.01:
            logger.warning(
                f"Category weights sum to {total_weight}, not 1.0. "
                f"Normalizing..."
            )
            for cat in self.category_weights:
                self.category_weights[cat] /= total_weight

    def score_overall(self, score: CompositeScore) -> float:
        """Weighted average of the four sub-scores, clamped to [0, 100]"""
        sub_scores = score.as_dict()

        overall = sum(
            weight * sub_scores.get(category, 0.0)
            for category, weight in self.category_weights.items()
        )

        return max(0.0, min(100.0, overall))

    def breakdown(self, score: CompositeScore) -> Dict[str, Dict]:
        """Per-category contribution to the overall score"""
        sub_scores = score.as_dict()

        return {
            category: {
                'score': sub_scores.get(category, 0.0),
                'weight': weight,
                'contribution': weight * sub_scores.get(category, 0.0)
            }
            for category, weight in self.category_weights.items()
        }

    def interpret_score(self, overall: float) -> Dict[str, str]:
        """
        Rating and Buy/Hold/Sell recommendation for an overall score.

        Returns:
            {'rating': str, 'recommendation': str}
        """
        return {
            'rating': band_label(overall, RATING_BANDS, floor='Poor'),
            'recommendation': band_label(overall, RECOMMENDATION_BANDS, floor='Sell')
        }
