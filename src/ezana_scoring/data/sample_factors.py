"""
Seeded sample factor sets for demos and tests.

The value ranges match what the live dashboard showed before a real data feed
was wired in. Each generator owns its RNG, so the same seed always produces the
same factors.
"""

import logging
from typing import Optional

import numpy as np

from ezana_scoring.data.symbols import get_company_name
from ezana_scoring.utils.models import FactorSet, FactorSnapshot

logger = logging.getLogger(__name__)

# label -> (low, high), sampled uniformly as [low, high)
SAMPLE_RANGES = {
    'growth': {
        'Revenue Growth': (-0.05, 0.25)
    },
    'risk': {
        'Debt/Equity': (0.0, 2.0)
    },
    'profitability': {
        'Profit Margin': (0.0, 0.3),
        'Operating Margin': (0.0, 0.4),
        'Dividend Yield': (0.0, 0.05),
        'EBITDA/Sales': (0.0, 0.5)
    },
    'valuation': {
        'P/E': (5.0, 55.0),
        'PEG': (0.5, 3.5),
        'P/B': (1.0, 11.0),
        'EV/Revenue': (1.0, 16.0),
        'EPS': (-5.0, 15.0)
    }
}

BETA_RANGE = (0.0, 2.5)
MARKET_CAP_RELATIVE_RANGE = (0.0, 3.0)

PERIODS = {
    'quarters': 8,
    'debt_years': 5,
    'years': 3
}


class SampleFactorGenerator:
    """
    Example:
        >>> generator = SampleFactorGenerator(seed=42)
        >>> snapshot = generator.generate('AAPL')
        >>> len(snapshot.growth)
        8
    """

    def __init__(self, seed: Optional[int] = None, rng: np.random.Generator = None):
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def _uniform(self, bounds) -> float:
        low, high = bounds
        return float(self.rng.uniform(low, high))

    def growth_factors(self) -> FactorSet:
        low_high = SAMPLE_RANGES['growth']['Revenue Growth']
        return {
            f"Q{i} Revenue Growth": self._uniform(low_high)
            for i in range(1, PERIODS['quarters'] + 1)
        }

    def risk_factors(self) -> FactorSet:
        low_high = SAMPLE_RANGES['risk']['Debt/Equity']
        factors = {
            f"Year {i} Debt/Equity": self._uniform(low_high)
            for i in range(1, PERIODS['debt_years'] + 1)
        }
        factors["Beta"] = self._uniform(BETA_RANGE)
        return factors

    def profitability_factors(self) -> FactorSet:
        return self._yearly(SAMPLE_RANGES['profitability'])

    def valuation_factors(self) -> FactorSet:
        factors = {"Market Cap Relative": self._uniform(MARKET_CAP_RELATIVE_RANGE)}
        factors.update(self._yearly(SAMPLE_RANGES['valuation']))
        return factors

    def _yearly(self, ranges) -> FactorSet:
        factors = {}
        for i in range(1, PERIODS['years'] + 1):
            for label, bounds in ranges.items():
                factors[f"Year {i} {label}"] = self._uniform(bounds)
        return factors

    def generate(self, symbol: str) -> FactorSnapshot:
        """Full snapshot for a symbol, same interface as the live factor source"""
        symbol = symbol.upper()
        logger.debug(f"Generating sample factors for {symbol}")

        return FactorSnapshot(
            symbol=symbol,
            company_name=get_company_name(symbol),
            growth=self.growth_factors(),
            risk=self.risk_factors(),
            profitability=self.profitability_factors(),
            valuation=self.valuation_factors()
        )

    # lets the generator stand in for YahooFactorSource
    get_factors = generate
