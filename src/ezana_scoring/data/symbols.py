"""
Known symbols and their company names.

Used for symbol search and as the default universe for batch scans.
Unknown symbols get a placeholder name instead of failing.
"""

import logging
from typing import List

logger = logging.getLogger(__name__)

COMPANY_NAMES = {
    'AAPL': 'Apple Inc.',
    'MSFT': 'Microsoft Corporation',
    'AMZN': 'Amazon.com Inc.',
    'GOOGL': 'Alphabet Inc.',
    'META': 'Meta Platforms Inc.',
    'TSLA': 'Tesla Inc.',
    'NVDA': 'NVIDIA Corporation',
    'JPM': 'JPMorgan Chase & Co.',
    'V': 'Visa Inc.',
    'JNJ': 'Johnson & Johnson'
}


def get_company_name(symbol: str) -> str:
    symbol = symbol.upper()
    return COMPANY_NAMES.get(symbol, f"{symbol} Inc.")


def search_symbols(query: str, limit: int = 10) -> List[str]:
    """
    Symbols whose ticker or company name contains the query (case-insensitive).

    Ticker matches come first. An empty query matches nothing.
    """
    query = query.strip().upper()

    if not query:
        return []

    ticker_matches = [s for s in COMPANY_NAMES if query in s]
    name_matches = [
        s for s, name in COMPANY_NAMES.items()
        if query in name.upper() and s not in ticker_matches
    ]

    matches = ticker_matches + name_matches
    logger.debug(f"Search '{query}' matched {len(matches)} symbols")

    return matches[:limit]


def get_default_universe() -> List[str]:
    return list(COMPANY_NAMES.keys())
