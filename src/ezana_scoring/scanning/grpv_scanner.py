"""
Batch GRPV scanner.

Scores a list of symbols in parallel and ranks them by overall score.
"""

import pandas as pd
import logging
from typing import Dict, List, Optional
from concurrent.futures import ThreadPoolExecutor, as_completed
from tqdm import tqdm

from ezana_scoring.data.symbols import get_default_universe
from ezana_scoring.scoring.engine import GRPVEngine

logger = logging.getLogger(__name__)

CATEGORIES = ('growth', 'risk', 'profitability', 'valuation')


class GRPVScanner:
    """
    Usage:
        scanner = GRPVScanner(engine)
        top = scanner.scan_top(['AAPL', 'MSFT', 'NVDA'], limit=2)
    """

    def __init__(self, engine: GRPVEngine = None, requester: str = "scanner"):
        self.engine = engine or GRPVEngine()
        self.requester = requester

    def scan(
        self,
        symbols: List[str] = None,
        max_workers: int = 4,
        show_progress: bool = True
    ) -> pd.DataFrame:
        """
        Score symbols in parallel.

        Concurrent requests for the same symbol are computed once, the score
        cache serializes them.

        Returns:
            DataFrame sorted by overall score, empty if nothing could be scored
        """
        symbols = symbols or get_default_universe()
        results = []

        logger.info(f"Scanning {len(symbols)} symbols...")

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            future_to_symbol = {
                executor.submit(self._score_single, symbol): symbol
                for symbol in symbols
            }

            for future in tqdm(
                as_completed(future_to_symbol),
                total=len(symbols),
                desc="Scoring symbols",
                disable=not show_progress
            ):
                symbol = future_to_symbol[future]

                try:
                    row = future.result()
                    if row:
                        results.append(row)
                except Exception as e:
                    logger.error(f"Error scoring {symbol}: {e}")

        if not results:
            return pd.DataFrame()

        df = pd.DataFrame(results)
        df = df.sort_values('overall_score', ascending=False).reset_index(drop=True)

        return df

    def _score_single(self, symbol: str) -> Optional[Dict]:
        result = self.engine.score_stock(symbol, self.requester)

        if not result:
            return None

        row = {
            'symbol': result.symbol,
            'company_name': result.company_name,
            'overall_score': result.score.overall
        }
        for category in CATEGORIES:
            row[f'{category}_score'] = getattr(result.score, category)
        row['rating'] = result.rating
        row['recommendation'] = result.recommendation

        return row

    def scan_top(
        self,
        symbols: List[str] = None,
        limit: int = 10,
        min_score: float = 0.0
    ) -> pd.DataFrame:
        all_results = self.scan(symbols)

        if all_results.empty:
            return all_results

        filtered = all_results[all_results['overall_score'] >= min_score]
        return filtered.head(limit)

    def scan_by_category(
        self,
        category: str,
        symbols: List[str] = None,
        limit: int = 10
    ) -> pd.DataFrame:
        if category not in CATEGORIES:
            logger.error(f"Invalid category: {category}")
            return pd.DataFrame()

        all_results = self.scan(symbols)

        if all_results.empty:
            return all_results

        sorted_df = all_results.sort_values(f'{category}_score', ascending=False)
        return sorted_df.head(limit).reset_index(drop=True)


# Testing
if __name__ == "__main__":
    from ezana_scoring.data.sample_factors import SampleFactorGenerator
    from ezana_scoring.data.score_cache import ScoreCache

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    engine = GRPVEngine(
        factor_source=SampleFactorGenerator(seed=1),
        cache=ScoreCache("data/demo_scan.db")
    )
    scanner = GRPVScanner(engine)

    results = scanner.scan_top(limit=5)

    print("\n" + "="*70)
    print("TOP SYMBOLS")
    print("="*70)

    for idx, row in results.iterrows():
        print(f"\n{idx+1}. {row['symbol']} - {row['overall_score']:.1f}/100 ({row['recommendation']})")
        print(f"   Growth: {row['growth_score']:.0f} | "
              f"Risk: {row['risk_score']:.0f} | "
              f"Profit: {row['profitability_score']:.0f} | "
              f"Val: {row['valuation_score']:.0f}")
