"""
Converts raw GRPV factor sets into 0-100 category scores.

A factor set is a dict of free-form labels to values, e.g.
    {"Q1 Revenue Growth": 0.20, "Year 1 Debt/Equity": 1.1, "Beta": 1.3}

Factors are grouped into families by substring match on the label
("Year 2 P/E" belongs to the P/E family). Every scorer is total: empty or
degenerate input gives a defined default (0 or 50), never an exception.
"""

import logging
from typing import Dict, Optional

import numpy as np

from ezana_scoring.utils.config import (
    GROWTH_RANGE,
    RISK,
    PROFITABILITY_FAMILIES,
    VALUATION_FAMILIES,
)
from ezana_scoring.utils.models import CompositeScore, FactorSet

logger = logging.getLogger(__name__)


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def family_average(
    factors: FactorSet,
    label: str,
    default: Optional[float] = None,
    exact: bool = False
) -> Optional[float]:
    """
    Mean of every factor whose label contains `label`.

    With exact=True only the key equal to `label` counts.
    Returns `default` when the family has no entries.
    """
    if exact:
        values = [factors[label]] if label in factors else []
    else:
        values = [value for key, value in factors.items() if label in key]

    if not values:
        return default

    return float(np.mean(values))


class FactorScorer:
    """
    Scores the four GRPV categories.

    Example:
        >>> scorer = FactorScorer()
        >>> scorer.score_growth({"Q1 Revenue Growth": 0.20, "Q2 Revenue Growth": 0.10})
        62.5
    """

    def __init__(
        self,
        profitability_families: Dict = None,
        valuation_families: Dict = None
    ):
        self.profitability_families = profitability_families or PROFITABILITY_FAMILIES
        self.valuation_families = valuation_families or VALUATION_FAMILIES

    def score_growth(self, factors: FactorSet) -> float:
        """
        Average growth rate mapped from [-10%, +30%] onto [0, 100].

        -10% or worse = 0, 30% or better = 100.
        """
        if not factors:
            return 0.0

        avg_growth = float(np.mean(list(factors.values())))
        score = (avg_growth - GROWTH_RANGE['floor']) / GROWTH_RANGE['span'] * 100

        return clamp(score)

    def score_risk(self, factors: FactorSet) -> float:
        """
        Leverage and volatility combined into a score where higher = safer.

        Needs at least a debt/equity entry and a beta entry. With fewer than two
        factors the neutral score (50) is returned, which reads as "medium risk"
        even though it really means "no data".
        """
        if len(factors) < RISK['min_factors']:
            logger.warning(
                f"Only {len(factors)} risk factor(s), "
                f"using neutral score {RISK['neutral_score']}"
            )
            return RISK['neutral_score']

        avg_debt_to_equity = family_average(
            factors,
            RISK['debt_label'],
            default=RISK['default_debt_to_equity']
        )
        beta = factors.get(RISK['beta_key'], RISK['default_beta'])

        # higher = riskier at this point
        debt_score = min(100.0, avg_debt_to_equity * RISK['debt_multiplier'])
        beta_score = min(100.0, beta * RISK['beta_multiplier'])

        combined = (
            beta_score * RISK['beta_weight'] +
            debt_score * RISK['debt_weight']
        )

        return clamp(100 - combined)

    def score_profitability(self, factors: FactorSet) -> float:
        """
        Weighted blend of margin and yield families.

        A family with no entries contributes 0.
        """
        if not factors:
            return 0.0

        combined = 0.0

        for family in self.profitability_families.values():
            avg = family_average(factors, family['label'], default=0.0)
            combined += avg * family['multiplier'] * family['weight']

        return clamp(combined)

    def score_valuation(self, factors: FactorSet) -> float:
        """
        Weighted blend of valuation multiples. Cheaper = higher score,
        except EPS where more is better.

        Families with no entries fall back to their configured defaults
        (P/E 20, PEG 2, P/B 5, EV/Revenue 8, EPS 0, market cap relative 1).
        """
        if not factors:
            return 0.0

        combined = 0.0

        for name, family in self.valuation_families.items():
            avg = family_average(
                factors,
                family['label'],
                default=family['default'],
                exact=family.get('exact_key', False)
            )

            if family['lower_is_better']:
                family_score = max(0.0, 100 - (avg - family['anchor']) * family['slope'])
            else:
                family_score = clamp((avg - family['anchor']) * family['slope'])

            logger.debug(f"Valuation family {name}: avg={avg:.2f}, score={family_score:.1f}")
            combined += family_score * family['weight']

        return clamp(combined)

    def score_all(
        self,
        growth_factors: FactorSet,
        risk_factors: FactorSet,
        profitability_factors: FactorSet,
        valuation_factors: FactorSet
    ) -> CompositeScore:
        """Score every category and bundle the result"""
        return CompositeScore(
            growth=self.score_growth(growth_factors),
            risk=self.score_risk(risk_factors),
            profitability=self.score_profitability(profitability_factors),
            valuation=self.score_valuation(valuation_factors)
        )


# Testing
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)

    scorer = FactorScorer()

    print("\n" + "="*50)
    print("FACTOR SCORER TESTS")
    print("="*50)

    growth = {"Q1 Revenue Growth": 0.20, "Q2 Revenue Growth": 0.10}
    risk = {"Year 1 Debt/Equity": 1.0, "Beta": 1.5}

    print(f"\nGrowth score: {scorer.score_growth(growth):.1f} (should be 62.5)")
    print(f"Risk score: {scorer.score_risk(risk):.1f} (should be 20.0)")
    print(f"Risk score, one factor: {scorer.score_risk({'Beta': 1.0}):.1f} (should be 50.0)")
