"""
Fills in the derived fields of the public officials metric cards.

Every card follows the same pattern:
    (a) sum / average / min / max over its recent records
    (b) a compliance or quality rate = matching count / total count * 100
    (c) growth of the latest period over the one before
    (d) a trend label from that growth, using the card type's thresholds

Cards are recomputed in full each time. The input card is never modified,
a populated copy is returned.
"""

import logging
from typing import List, Optional, Tuple

import numpy as np

from ezana_scoring.aggregation.statistics import (
    growth_rate,
    risk_level_label,
    sentiment_label,
    trend_label,
)
from ezana_scoring.cards.models import (
    ChamberTradingCard,
    ComplianceAlert,
    ConflictAlert,
    Contract,
    ContractStatus,
    CongressTradingCard,
    DailySentimentData,
    GovernmentContractsCard,
    IndicatorType,
    LobbyingActivityCard,
    LobbyingReport,
    MarketIndicator,
    MarketRiskFactor,
    MarketSentimentCard,
    PartyTradingData,
    PatentMomentumCard,
    PatentQualityMetric,
    SentimentType,
    TopTrader,
    Trade,
    TradingCard,
)
from ezana_scoring.utils.config import CARD_QUERIES, MONTHLY_RANKING_FIELDS
from ezana_scoring.utils.models import Priority

logger = logging.getLogger(__name__)


def latest_two(periods: list, key: str) -> Tuple:
    """(latest, previous) periods ordered by `key`, None where missing"""
    ordered = sorted(periods, key=lambda p: getattr(p, key), reverse=True)
    latest = ordered[0] if ordered else None
    previous = ordered[1] if len(ordered) > 1 else None
    return latest, previous


def period_growth(periods: list, key: str, value: str) -> float:
    """Growth of the latest period over the previous one, 0 with fewer than two"""
    latest, previous = latest_two(periods, key)
    if latest is None or previous is None:
        return 0.0
    return growth_rate(getattr(latest, value), getattr(previous, value))


def value_stats(values: List[float]) -> Tuple[float, float, float, float]:
    """(average, max, min, sum), all 0 for no values"""
    if not values:
        return 0.0, 0.0, 0.0, 0.0
    return float(np.mean(values)), max(values), min(values), float(sum(values))


def share(count: int, total: int) -> float:
    if total == 0:
        return 0.0
    return count / total * 100


class CardMetricsCalculator:
    """
    Usage:
        calculator = CardMetricsCalculator()
        card = calculator.calculate(raw_card)
    """

    def calculate(self, card):
        """
        Returns:
            A copy of the card with every derived field populated
        """
        card = card.model_copy(deep=True)

        if isinstance(card, TradingCard):
            self._calculate_trading(card)
        elif isinstance(card, GovernmentContractsCard):
            self._calculate_contracts(card)
        elif isinstance(card, LobbyingActivityCard):
            self._calculate_lobbying(card)
        elif isinstance(card, PatentMomentumCard):
            self._calculate_patents(card)
        elif isinstance(card, MarketSentimentCard):
            self._calculate_sentiment(card)
        else:
            raise TypeError(f"Not a metric card: {type(card).__name__}")

        logger.debug(f"Calculated {card.display_name} metrics")
        return card

    def _calculate_trading(self, card: TradingCard):
        values = [t.trade_value for t in card.recent_trades]
        (
            card.average_trade_size,
            card.largest_trade,
            card.smallest_trade,
            card.total_market_value
        ) = value_stats(values)

        latest, _ = latest_two(card.monthly_data, 'month')
        if latest is not None:
            card.total_trades = latest.total_trades
            card.total_volume = latest.total_volume

        card.growth_rate = period_growth(card.monthly_data, 'month', 'total_volume')
        card.trend = trend_label(card.growth_rate, card.card_type)

        if isinstance(card, CongressTradingCard):
            # trades not flagged as potential conflicts count as compliant
            if card.total_trades > 0:
                compliant = card.total_trades - card.potential_conflicts
                card.compliance_score = compliant / card.total_trades * 100

        if isinstance(card, ChamberTradingCard):
            returns = [t.total_return for t in card.top_traders if t.total_return != 0]
            if returns:
                card.average_return = float(np.mean(returns))
                card.best_performing_trader = max(returns)
                card.worst_performing_trader = min(returns)

            for party in card.party_data:
                if party.total_trades > 0:
                    party.average_trade_size = party.total_volume / party.total_trades

    def _calculate_contracts(self, card: GovernmentContractsCard):
        contracts = card.recent_contracts

        (
            card.average_contract_value,
            card.largest_contract,
            card.smallest_contract,
            card.total_awarded_value
        ) = value_stats([c.contract_value for c in contracts])

        latest, _ = latest_two(card.monthly_data, 'month')
        if latest is not None:
            card.total_contracts = latest.total_contracts
            card.total_value = latest.total_value

        completed = [c for c in contracts if c.status == ContractStatus.COMPLETED]
        if completed:
            card.completion_rate = share(len(completed), len(contracts))
            card.on_time_delivery_rate = share(
                sum(1 for c in completed if c.is_on_time),
                len(completed)
            )
            card.cost_savings_rate = share(
                sum(1 for c in completed if c.cost_savings > 0),
                len(completed)
            )
            card.quality_rating = float(np.mean([c.quality_score for c in completed]))

        card.compliance_rate = share(sum(1 for c in contracts if c.is_on_time), len(contracts))

        card.growth_rate = period_growth(card.monthly_data, 'month', 'total_value')
        card.trend = trend_label(card.growth_rate, card.card_type)

    def _calculate_lobbying(self, card: LobbyingActivityCard):
        reports = card.recent_reports

        (
            card.average_spending,
            card.highest_spending,
            card.lowest_spending,
            card.total_disbursements
        ) = value_stats([r.total_spending for r in reports])

        latest, _ = latest_two(card.monthly_data, 'month')
        if latest is not None:
            card.total_reports = latest.total_reports
            card.total_spending = latest.total_spending

        if reports:
            card.compliance_rate = share(sum(1 for r in reports if r.is_compliant), len(reports))
            card.late_reports = sum(1 for r in reports if r.is_late)
            card.incomplete_reports = sum(1 for r in reports if not r.is_complete)

        issue_total = sum(i.total_spending for i in card.issue_data)
        if issue_total > 0:
            for issue in card.issue_data:
                issue.percentage_of_total = issue.total_spending / issue_total * 100

        card.growth_rate = period_growth(card.monthly_data, 'month', 'total_spending')
        card.trend = trend_label(card.growth_rate, card.card_type)

    def _calculate_patents(self, card: PatentMomentumCard):
        # totals first, the per-company averages divide by them
        latest, _ = latest_two(card.monthly_data, 'month')
        if latest is not None:
            card.total_patents = latest.total_patents
            card.active_patents = latest.active_patents
            card.pending_patents = latest.pending_patents

        if card.top_companies:
            counts = [c.patent_count for c in card.top_companies]
            card.highest_patent_count = max(counts)
            card.lowest_patent_count = min(counts)

        if card.unique_companies > 0:
            card.average_patents_per_company = card.total_patents / card.unique_companies
        if card.unique_inventors > 0:
            card.average_patents_per_inventor = card.total_patents / card.unique_inventors

        if card.quality_metrics:
            card.average_patent_quality = float(np.mean([q.quality_score for q in card.quality_metrics]))
            card.citation_rate = float(np.mean([q.citation_rate for q in card.quality_metrics]))
            card.litigation_rate = float(np.mean([q.litigation_rate for q in card.quality_metrics]))

        technology_total = sum(t.patent_count for t in card.technology_data)
        if technology_total > 0:
            for tech in card.technology_data:
                tech.percentage_of_total = tech.patent_count / technology_total * 100

        card.growth_rate = period_growth(card.monthly_data, 'month', 'total_patents')
        card.trend = trend_label(card.growth_rate, card.card_type)

    def _calculate_sentiment(self, card: MarketSentimentCard):
        indicators = card.market_indicators

        if indicators:
            card.total_indicators = len(indicators)
            card.bullish_indicators = sum(1 for i in indicators if i.sentiment == SentimentType.BULLISH)
            card.bearish_indicators = sum(1 for i in indicators if i.sentiment == SentimentType.BEARISH)
            card.neutral_indicators = sum(1 for i in indicators if i.sentiment == SentimentType.NEUTRAL)

            card.bullish_percentage = share(card.bullish_indicators, card.total_indicators)
            card.bearish_percentage = share(card.bearish_indicators, card.total_indicators)
            card.neutral_percentage = share(card.neutral_indicators, card.total_indicators)

        current_day, previous_day = latest_two(card.daily_data, 'day')
        if current_day is not None:
            card.sentiment_score = current_day.sentiment_score
            card.overall_sentiment = sentiment_label(current_day.sentiment_score)
        if current_day is not None and previous_day is not None:
            card.previous_sentiment_score = previous_day.sentiment_score
            card.sentiment_change = current_day.sentiment_score - previous_day.sentiment_score

        if card.risk_factors:
            card.risk_level = float(np.mean([r.severity for r in card.risk_factors]))
            card.risk_category = risk_level_label(card.risk_level)

        volatility = [
            t.value for t in card.technical_indicators
            if t.indicator_type == IndicatorType.VOLATILITY
        ]
        if volatility:
            card.market_volatility = float(np.mean(volatility))

        card.weekly_change = period_growth(card.weekly_data, 'week_start', 'average_sentiment')
        card.sentiment_trend = trend_label(card.weekly_change, card.card_type)


def high_priority_conflicts(card: TradingCard) -> List[ConflictAlert]:
    """High-priority conflict alerts on a trading card, most severe first"""
    return sorted(
        (a for a in card.conflict_alerts if a.priority == Priority.HIGH),
        key=lambda a: a.severity,
        reverse=True
    )


# Card lookups
# filters keep records at or above the threshold, largest first


def _ranked(records, key: str, count: Optional[int] = None) -> list:
    ordered = sorted(records, key=lambda r: getattr(r, key), reverse=True)
    return ordered if count is None else ordered[:count]


def _at_least(records, key: str, threshold: float) -> list:
    return _ranked((r for r in records if getattr(r, key) >= threshold), key)


def top_months(card, count: int = CARD_QUERIES['top_months']) -> list:
    """
    Busiest months of a card's history.

    Ranked by volume for trading cards, value for contracts, spending for
    lobbying and patent count for patents.
    """
    if card.card_type not in MONTHLY_RANKING_FIELDS:
        raise TypeError(f"{type(card).__name__} has no monthly history")
    return _ranked(card.monthly_data, MONTHLY_RANKING_FIELDS[card.card_type], count)


def top_days(card: MarketSentimentCard, count: int = CARD_QUERIES['top_days']) -> List[DailySentimentData]:
    return _ranked(card.daily_data, 'sentiment_score', count)


def top_traders_by_volume(card: ChamberTradingCard, count: int = CARD_QUERIES['top_traders']) -> List[TopTrader]:
    return _ranked(card.top_traders, 'total_volume', count)


def top_traders_by_return(card: ChamberTradingCard, count: int = CARD_QUERIES['top_traders']) -> List[TopTrader]:
    return _ranked(card.top_traders, 'total_return', count)


def party_ranking(card: ChamberTradingCard) -> List[PartyTradingData]:
    return _ranked(card.party_data, 'total_volume')


def party_performance(card: ChamberTradingCard, party: str) -> float:
    """Average return of a party (case-insensitive), 0 when it isn't listed"""
    for data in card.party_data:
        if data.party.lower() == party.lower():
            return data.average_return
    return 0.0


def high_value_trades(card: TradingCard, threshold: Optional[float] = None) -> List[Trade]:
    """Recent trades worth at least the threshold (card type default when omitted)"""
    if threshold is None:
        threshold = CARD_QUERIES['high_value_trade'][card.card_type]
    return _at_least(card.recent_trades, 'trade_value', threshold)


def high_value_contracts(
    card: GovernmentContractsCard,
    threshold: float = CARD_QUERIES['high_value_contract']
) -> List[Contract]:
    return _at_least(card.recent_contracts, 'contract_value', threshold)


def high_spending_reports(
    card: LobbyingActivityCard,
    threshold: float = CARD_QUERIES['high_spending_report']
) -> List[LobbyingReport]:
    return _at_least(card.recent_reports, 'total_spending', threshold)


def high_priority_compliance_alerts(card: LobbyingActivityCard) -> List[ComplianceAlert]:
    """High-priority lobbying compliance alerts, most severe first"""
    return _ranked((a for a in card.compliance_alerts if a.priority == Priority.HIGH), 'severity')


def high_quality_patents(
    card: PatentMomentumCard,
    threshold: float = CARD_QUERIES['high_quality_patent']
) -> List[PatentQualityMetric]:
    return _at_least(card.quality_metrics, 'quality_score', threshold)


def high_risk_factors(
    card: MarketSentimentCard,
    threshold: float = CARD_QUERIES['high_risk_factor']
) -> List[MarketRiskFactor]:
    return _at_least(card.risk_factors, 'severity', threshold)


def bullish_indicators(card: MarketSentimentCard) -> List[MarketIndicator]:
    """Bullish indicators, strongest first"""
    return _ranked((i for i in card.market_indicators if i.sentiment == SentimentType.BULLISH), 'strength')


def bearish_indicators(card: MarketSentimentCard) -> List[MarketIndicator]:
    """Bearish indicators, strongest first"""
    return _ranked((i for i in card.market_indicators if i.sentiment == SentimentType.BEARISH), 'strength')
