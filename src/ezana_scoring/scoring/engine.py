"""
Main GRPV engine - orchestrates the scoring pipeline for one (symbol, requester).

cache lookup -> factor fetch -> category scores -> explanation -> cache write
"""

import logging
from typing import Callable, List, Optional
from datetime import datetime

from ezana_scoring.data.factor_source import YahooFactorSource
from ezana_scoring.data.score_cache import ScoreCache
from ezana_scoring.data.symbols import search_symbols
from ezana_scoring.scoring.explanation import ExplanationEngine
from ezana_scoring.scoring.factor_scorer import FactorScorer
from ezana_scoring.utils.config import CACHE
from ezana_scoring.utils.models import GRPVResult

logger = logging.getLogger(__name__)


class GRPVEngine:

    def __init__(
        self,
        factor_source=None,
        cache: ScoreCache = None,
        scorer: FactorScorer = None,
        explainer: ExplanationEngine = None,
        db_path: str = CACHE['db_path'],
        clock: Callable[[], datetime] = None
    ):
        """
        Args:
            factor_source: Anything with get_factors(symbol) -> FactorSnapshot
            cache: Result store, created at db_path when omitted
            clock: Timestamps new results, defaults to the cache's clock so
                   freshness is judged on the same timeline
        """
        self.factor_source = factor_source or YahooFactorSource()
        self.cache = cache or ScoreCache(db_path)
        self.scorer = scorer or FactorScorer()
        self.explainer = explainer or ExplanationEngine()
        self.clock = clock or self.cache.clock

        logger.info("GRPVEngine initialized")

    def score_stock(
        self,
        symbol: str,
        requester: str,
        force_refresh: bool = False
    ) -> Optional[GRPVResult]:
        """
        Score a symbol for a requester.

        A result computed for the same requester within the cache TTL is
        returned as is unless force_refresh is set.

        Returns:
            GRPVResult or None if scoring fails
        """
        symbol = symbol.upper()
        logger.info(f"Starting GRPV pipeline for {symbol}")

        try:
            return self.cache.get_or_compute(
                symbol,
                requester,
                lambda: self._compute(symbol, requester),
                force_refresh=force_refresh
            )

        except Exception as e:
            logger.error(f"Error scoring {symbol}: {e}", exc_info=True)
            return None

    def _compute(self, symbol: str, requester: str) -> Optional[GRPVResult]:
        # Step 1: Fetch factors
        logger.info("Step 1: Fetching factors...")
        snapshot = self.factor_source.get_factors(symbol)

        if snapshot is None:
            logger.error(f"Failed to fetch factors for {symbol}")
            return None

        # Step 2: Score categories
        logger.info("Step 2: Scoring categories...")
        score = self.scorer.score_all(
            snapshot.growth,
            snapshot.risk,
            snapshot.profitability,
            snapshot.valuation
        )

        # Step 3: Explain
        logger.info("Step 3: Generating explanation...")
        explanation = self.explainer.generate_explanation(
            symbol,
            score,
            growth_factors=snapshot.growth,
            risk_factors=snapshot.risk,
            valuation_factors=snapshot.valuation
        )

        for warning in explanation['warnings']:
            logger.info(f"{symbol}: {warning}")

        now = self.clock()

        result = GRPVResult(
            symbol=symbol,
            requester=requester,
            company_name=snapshot.company_name,
            growth_factors=snapshot.growth,
            risk_factors=snapshot.risk,
            profitability_factors=snapshot.profitability,
            valuation_factors=snapshot.valuation,
            score=score,
            rating=explanation['rating'],
            recommendation=explanation['recommendation'],
            recommendation_reason=explanation['recommendation_reason'],
            analysis=explanation['analysis'],
            summary=explanation['summary'],
            created_at=now,
            updated_at=now
        )

        logger.info(f"Successfully scored {symbol}: {score.overall:.1f}/100")
        return result

    def get_result(self, symbol: str, requester: str) -> Optional[GRPVResult]:
        """Cached result for a requester, None when missing or stale"""
        return self.cache.get(symbol.upper(), requester)

    def get_user_results(self, requester: str) -> List[GRPVResult]:
        """Every stored result for a requester, most recent first"""
        return self.cache.list_for_requester(requester)

    def delete_result(self, symbol: str, requester: str) -> bool:
        deleted = self.cache.delete(symbol.upper(), requester)

        if deleted:
            logger.info(f"Deleted GRPV result for {symbol.upper()}")
        else:
            logger.warning(f"No GRPV result for {symbol.upper()} to delete")

        return deleted

    def search_symbols(self, query: str, limit: int = 10) -> List[str]:
        return search_symbols(query, limit=limit)


# Testing
if __name__ == "__main__":
    from ezana_scoring.data.sample_factors import SampleFactorGenerator

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    engine = GRPVEngine(
        factor_source=SampleFactorGenerator(seed=7),
        cache=ScoreCache("data/demo_grpv.db")
    )

    result = engine.score_stock("AAPL", "demo-user", force_refresh=True)

    if result:
        print("\n" + "="*50)
        print(f"{result.symbol} ({result.company_name})")
        print("="*50)
        for category, value in result.score.as_dict().items():
            print(f"  {category:>13}: {value:5.1f}")
        print(f"  {'overall':>13}: {result.score.overall:5.1f}")
        print(f"\n{result.rating} - {result.recommendation}: {result.recommendation_reason}")
        print(result.summary)
