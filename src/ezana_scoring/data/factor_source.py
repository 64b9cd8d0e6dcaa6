"""
Builds GRPV factor sets from Yahoo Finance with rate limiting and retry logic.

Labels follow the "<period> <family>" pattern the scorer groups on, e.g.
"Q1 Revenue Growth", "Year 2 Debt/Equity", "Year 1 P/E".
"""

import yfinance as yf
import pandas as pd
import logging
import math
import time
from typing import Dict, Optional

from ezana_scoring.data.symbols import get_company_name
from ezana_scoring.utils.config import FETCH
from ezana_scoring.utils.models import FactorSet, FactorSnapshot

logger = logging.getLogger(__name__)


def _clean(value) -> Optional[float]:
    """None for missing or NaN values, float otherwise"""
    if value is None:
        return None
    try:
        value = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _statement_row(statement: pd.DataFrame, *names: str) -> pd.Series:
    """
    First matching row of a financial statement as floats, newest column first.

    Missing cells stay NaN so rows taken from the same statement line up by
    column. Missing statements or rows give an empty Series.
    """
    if statement is None or statement.empty:
        return pd.Series(dtype=float)

    for name in names:
        if name in statement.index:
            row = pd.to_numeric(statement.loc[name], errors='coerce')
            return row.replace([math.inf, -math.inf], math.nan)

    return pd.Series(dtype=float)


class YahooFactorSource:
    """
    Wrapper around yfinance with rate limiting and retry logic.

    Usage:
        source = YahooFactorSource()
        snapshot = source.get_factors('AAPL')
    """

    def __init__(
        self,
        requests_per_second: float = FETCH['requests_per_second'],
        max_retries: int = FETCH['max_retries']
    ):
        self.min_request_interval = 1.0 / requests_per_second
        self.max_retries = max_retries
        self.last_request_time = 0

    def _wait_for_rate_limit(self):
        """Ensure we don't exceed rate limit"""
        elapsed = time.time() - self.last_request_time
        if elapsed < self.min_request_interval:
            sleep_time = self.min_request_interval - elapsed
            logger.debug(f"Rate limiting: sleeping {sleep_time:.2f}s")
            time.sleep(sleep_time)
        self.last_request_time = time.time()

    def _fetch_with_retry(self, symbol: str):
        """
        Fetch a ticker with exponential backoff on rate limiting.

        Returns:
            yfinance.Ticker object or None
        """
        for attempt in range(self.max_retries):
            try:
                self._wait_for_rate_limit()
                stock = yf.Ticker(symbol)
                info = stock.info

                if info and len(info) > 5:
                    logger.debug(f"Got {len(info)} fields for {symbol}")
                    return stock

                logger.warning(
                    f"Insufficient data for {symbol} "
                    f"(got {len(info) if info else 0} fields), attempt {attempt + 1}"
                )

            except Exception as e:
                error_msg = str(e)

                if "429" in error_msg or "Too Many Requests" in error_msg:
                    wait_time = (2 ** attempt) * 2  # 2s, 4s, 8s
                    logger.warning(f"Rate limited on {symbol}, waiting {wait_time}s...")
                    time.sleep(wait_time)
                else:
                    logger.error(f"Error fetching {symbol}: {e}")

                    if attempt < self.max_retries - 1:
                        time.sleep(1)
                    else:
                        return None

        logger.error(f"Failed to fetch {symbol} after {self.max_retries} attempts")
        return None

    def get_factors(self, symbol: str) -> Optional[FactorSnapshot]:
        """
        Fetch the four factor sets for a symbol.

        Returns:
            FactorSnapshot or None if the fetch fails
        """
        symbol = symbol.upper()

        stock = self._fetch_with_retry(symbol)

        if not stock:
            logger.error(f"Failed to fetch ticker object for {symbol}")
            return None

        try:
            info = stock.info

            snapshot = FactorSnapshot(
                symbol=symbol,
                company_name=info.get('longName') or info.get('shortName') or get_company_name(symbol),
                growth=self._growth_factors(stock, info),
                risk=self._risk_factors(stock, info),
                profitability=self._profitability_factors(info),
                valuation=self._valuation_factors(info)
            )

            logger.info(
                f"Built factors for {symbol}: "
                f"{len(snapshot.growth)} growth, {len(snapshot.risk)} risk, "
                f"{len(snapshot.profitability)} profitability, "
                f"{len(snapshot.valuation)} valuation"
            )
            return snapshot

        except Exception as e:
            logger.error(f"Failed to build factors for {symbol}: {type(e).__name__}: {e}", exc_info=True)
            return None

    def _growth_factors(self, stock, info: Dict) -> FactorSet:
        """
        Quarter-over-quarter revenue growth, most recent quarter first.

        Falls back to Yahoo's own revenueGrowth figure when there are fewer
        than two quarters of revenue.
        """
        factors = {}

        try:
            revenue = _statement_row(stock.quarterly_income_stmt, 'Total Revenue', 'Revenue')
        except Exception as e:
            logger.debug(f"Could not load quarterly income statement: {e}")
            revenue = pd.Series(dtype=float)

        # each quarter against the one right before it, a gap leaves NaN
        previous = revenue.shift(-1)
        growth = ((revenue - previous) / previous.abs()).replace([math.inf, -math.inf], math.nan)

        for i, value in enumerate(growth):
            if pd.notna(value):
                factors[f"Q{i + 1} Revenue Growth"] = float(value)

        if not factors:
            revenue_growth = _clean(info.get('revenueGrowth'))
            if revenue_growth is not None:
                factors["Q1 Revenue Growth"] = revenue_growth

        return factors

    def _risk_factors(self, stock, info: Dict) -> FactorSet:
        """Yearly debt/equity ratios plus beta"""
        factors = {}

        try:
            balance_sheet = stock.balance_sheet
            debt = _statement_row(balance_sheet, 'Total Debt')
            equity = _statement_row(balance_sheet, 'Stockholders Equity', 'Total Equity Gross Minority Interest')
        except Exception as e:
            logger.debug(f"Could not load balance sheet: {e}")
            debt, equity = pd.Series(dtype=float), pd.Series(dtype=float)

        # matched by fiscal year column, years missing on either side are skipped
        ratios = (debt / equity.where(equity > 0)).reindex(debt.index)

        for i, ratio in enumerate(ratios):
            if pd.notna(ratio):
                factors[f"Year {i + 1} Debt/Equity"] = float(ratio)

        if not factors:
            # Yahoo reports debtToEquity as a percentage
            debt_to_equity = _clean(info.get('debtToEquity'))
            if debt_to_equity is not None:
                factors["Year 1 Debt/Equity"] = debt_to_equity / 100

        beta = _clean(info.get('beta'))
        if beta is not None:
            factors["Beta"] = beta

        return factors

    def _profitability_factors(self, info: Dict) -> FactorSet:
        fields = {
            'Profit Margin': info.get('profitMargins'),
            'Operating Margin': info.get('operatingMargins'),
            'Dividend Yield': info.get('trailingAnnualDividendYield'),
            'EBITDA/Sales': info.get('ebitdaMargins')
        }

        return {
            f"Year 1 {label}": value
            for label, value in ((k, _clean(v)) for k, v in fields.items())
            if value is not None
        }

    def _valuation_factors(self, info: Dict) -> FactorSet:
        fields = {
            'P/E': info.get('trailingPE') or info.get('forwardPE'),
            'PEG': info.get('pegRatio') or info.get('trailingPegRatio'),
            'P/B': info.get('priceToBook'),
            'EV/Revenue': info.get('enterpriseToRevenue'),
            'EPS': info.get('trailingEps')
        }

        factors = {
            f"Year 1 {label}": value
            for label, value in ((k, _clean(v)) for k, v in fields.items())
            if value is not None
        }

        market_cap = _clean(info.get('marketCap'))
        if market_cap:
            factors["Market Cap Relative"] = market_cap / FETCH['reference_market_cap']

        return factors


# Testing
if __name__ == "__main__":
    logging.basicConfig(
        level=logging.DEBUG,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    source = YahooFactorSource()

    print("\nFetching AAPL factors...")
    print("-" * 50)

    snapshot = source.get_factors('AAPL')

    if snapshot:
        print(f"\n{snapshot.symbol} - {snapshot.company_name}")
        for category in ('growth', 'risk', 'profitability', 'valuation'):
            print(f"\n{category.title()}:")
            for label, value in getattr(snapshot, category).items():
                print(f"  {label}: {value:.4f}")
    else:
        print("\nFailed to fetch factors")
