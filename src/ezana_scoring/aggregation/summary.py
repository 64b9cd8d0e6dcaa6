"""
Cross-card aggregation for the public officials dashboard.

Takes the seven metric cards, computes their derived fields, then builds:
- Total data points and overall compliance
- Overall risk level from conflicts and market volatility
- Data quality, update freshness and coverage, plus a health label
- Rule-based insights and alerts
- Cross-card correlations

Each pass is stateless: give it fresh cards, get a fresh summary.
"""

import logging
from pydantic import BaseModel, Field
from typing import Dict, List
from datetime import datetime

import numpy as np

from ezana_scoring.aggregation.insights import generate_alerts, generate_insights
from ezana_scoring.aggregation.statistics import (
    correlation_strength,
    coverage_score,
    data_quality,
    health_status,
    pearson_correlation,
    risk_level_label,
    update_freshness,
)
from ezana_scoring.cards.calculator import CardMetricsCalculator
from ezana_scoring.cards.models import (
    CongressTradingCard,
    GovernmentContractsCard,
    HouseTradingCard,
    LobbyingActivityCard,
    MarketSentimentCard,
    PatentMomentumCard,
    SenatorTradingCard,
)
from ezana_scoring.utils.config import EXPECTED_CARD_COUNT, THRESHOLDS
from ezana_scoring.utils.models import Alert, CorrelationResult, Insight, Priority

logger = logging.getLogger(__name__)


class PublicOfficialsSummary(BaseModel):
    congress: CongressTradingCard = Field(default_factory=CongressTradingCard)
    house: HouseTradingCard = Field(default_factory=HouseTradingCard)
    senator: SenatorTradingCard = Field(default_factory=SenatorTradingCard)
    contracts: GovernmentContractsCard = Field(default_factory=GovernmentContractsCard)
    lobbying: LobbyingActivityCard = Field(default_factory=LobbyingActivityCard)
    patents: PatentMomentumCard = Field(default_factory=PatentMomentumCard)
    sentiment: MarketSentimentCard = Field(default_factory=MarketSentimentCard)

    total_data_points: int = 0
    overall_compliance_score: float = 0.0
    overall_risk_level: str = ""

    data_quality_score: float = 0.0
    update_frequency: float = 0.0
    coverage_score: float = 0.0
    data_health_status: str = ""

    insights: List[Insight] = []
    alerts: List[Alert] = []
    correlations: List[CorrelationResult] = []

    last_refreshed: datetime = Field(default_factory=datetime.now)

    def cards(self) -> list:
        return [
            self.congress,
            self.house,
            self.senator,
            self.contracts,
            self.lobbying,
            self.patents,
            self.sentiment
        ]


def _recent_and_total(card):
    """(recent record count, reported total) for a computed card"""
    if isinstance(card, GovernmentContractsCard):
        return len(card.recent_contracts), card.total_contracts
    if isinstance(card, LobbyingActivityCard):
        return len(card.recent_reports), card.total_reports
    if isinstance(card, PatentMomentumCard):
        return len(card.recent_patents), card.total_patents
    if isinstance(card, MarketSentimentCard):
        return len(card.market_indicators), card.total_indicators
    return len(card.recent_trades), card.total_trades


# card display name -> headline performance figure
CARD_PERFORMANCE = {
    'congress trading': lambda s: s.congress.compliance_score,
    'government contracts': lambda s: s.contracts.compliance_rate,
    'house trading': lambda s: s.house.average_return,
    'lobbying activity': lambda s: s.lobbying.compliance_rate,
    'senator trading': lambda s: s.senator.average_return,
    'patent momentum': lambda s: s.patents.average_patent_quality,
    'market sentiment': lambda s: s.sentiment.sentiment_score
}


class PublicOfficialsAggregator:
    """
    Usage:
        aggregator = PublicOfficialsAggregator()
        summary = aggregator.aggregate(congress=congress_card, house=house_card)
        for alert in summary.alerts:
            print(alert.title)
    """

    def __init__(
        self,
        calculator: CardMetricsCalculator = None,
        thresholds: Dict = None
    ):
        self.calculator = calculator or CardMetricsCalculator()
        self.thresholds = thresholds or THRESHOLDS

    def aggregate(
        self,
        congress: CongressTradingCard = None,
        house: HouseTradingCard = None,
        senator: SenatorTradingCard = None,
        contracts: GovernmentContractsCard = None,
        lobbying: LobbyingActivityCard = None,
        patents: PatentMomentumCard = None,
        sentiment: MarketSentimentCard = None,
        now: datetime = None
    ) -> PublicOfficialsSummary:
        """
        Build the summary for one pass. Missing cards are treated as empty.

        Args:
            now: Reference time for freshness and finding timestamps

        Returns:
            PublicOfficialsSummary with every summary field populated
        """
        now = now or datetime.now()
        logger.info("Aggregating public officials cards...")

        summary = PublicOfficialsSummary(
            congress=self.calculator.calculate(congress or CongressTradingCard()),
            house=self.calculator.calculate(house or HouseTradingCard()),
            senator=self.calculator.calculate(senator or SenatorTradingCard()),
            contracts=self.calculator.calculate(contracts or GovernmentContractsCard()),
            lobbying=self.calculator.calculate(lobbying or LobbyingActivityCard()),
            patents=self.calculator.calculate(patents or PatentMomentumCard()),
            sentiment=self.calculator.calculate(sentiment or MarketSentimentCard()),
            last_refreshed=now
        )

        summary.total_data_points = sum(_recent_and_total(c)[0] for c in summary.cards())
        summary.overall_compliance_score = self._overall_compliance(summary)
        summary.overall_risk_level = self._overall_risk_level(summary)
        self._data_health(summary, now)

        summary.insights = generate_insights(summary, now, self.thresholds)
        summary.alerts = generate_alerts(summary, now, self.thresholds)
        summary.correlations = self._correlations(summary)

        logger.info(
            f"Summary: {summary.total_data_points} data points, "
            f"{len(summary.insights)} insights, {len(summary.alerts)} alerts, "
            f"health {summary.data_health_status}"
        )

        return summary

    def _overall_compliance(self, summary: PublicOfficialsSummary) -> float:
        """Mean of the non-zero compliance figures, 0 when there are none"""
        scores = [
            score for score in (
                summary.congress.compliance_score,
                summary.contracts.compliance_rate,
                summary.lobbying.compliance_rate
            )
            if score > 0
        ]

        if not scores:
            return 0.0

        return float(np.mean(scores))

    def _overall_risk_level(self, summary: PublicOfficialsSummary) -> str:
        risk_factors = [
            card.potential_conflicts * self.thresholds['conflict_risk_weight']
            for card in (summary.congress, summary.house, summary.senator)
            if card.potential_conflicts > 0
        ]

        if summary.sentiment.market_volatility > 0:
            risk_factors.append(
                summary.sentiment.market_volatility * self.thresholds['volatility_risk_weight']
            )

        if not risk_factors:
            return ""

        return risk_level_label(float(np.mean(risk_factors)))

    def _data_health(self, summary: PublicOfficialsSummary, now: datetime):
        quality_scores = []
        update_scores = []
        present = 0

        for card in summary.cards():
            recent, total = _recent_and_total(card)

            if recent > 0:
                quality_scores.append(data_quality(recent, total))
                update_scores.append(update_freshness(card.last_updated, now))

            if total > 0:
                present += 1

        if quality_scores:
            summary.data_quality_score = float(np.mean(quality_scores))
        if update_scores:
            summary.update_frequency = float(np.mean(update_scores))

        summary.coverage_score = coverage_score(present, EXPECTED_CARD_COUNT)
        summary.data_health_status = health_status(
            summary.data_quality_score,
            summary.update_frequency,
            summary.coverage_score
        )

    def _correlations(self, summary: PublicOfficialsSummary) -> List[CorrelationResult]:
        """
        Trading volume vs contract value, month by month.

        Only months present in both the congress and contracts histories count.
        """
        correlations = []

        if summary.congress.total_volume > 0 and summary.contracts.total_value > 0:
            volume_by_month = {m.month: m.total_volume for m in summary.congress.monthly_data}
            value_by_month = {m.month: m.total_value for m in summary.contracts.monthly_data}
            months = sorted(set(volume_by_month) & set(value_by_month))

            r = pearson_correlation(
                [volume_by_month[m] for m in months],
                [value_by_month[m] for m in months]
            )

            correlations.append(CorrelationResult(
                source1="Trading Volume",
                source2="Government Contracts",
                coefficient=r,
                strength=correlation_strength(r),
                description="Correlation between trading volume and government contract values"
            ))

        return correlations


def high_priority_insights(summary: PublicOfficialsSummary) -> List[Insight]:
    """High-priority insights, newest first"""
    return sorted(
        (i for i in summary.insights if i.priority == Priority.HIGH),
        key=lambda i: i.generated_at,
        reverse=True
    )


def high_priority_alerts(summary: PublicOfficialsSummary) -> List[Alert]:
    """High-priority alerts, newest first"""
    return sorted(
        (a for a in summary.alerts if a.priority == Priority.HIGH),
        key=lambda a: a.generated_at,
        reverse=True
    )


def card_performance(summary: PublicOfficialsSummary, card_name: str) -> float:
    """Headline figure for a card by display name, 0 for unknown names"""
    lookup = CARD_PERFORMANCE.get(card_name.strip().lower())
    if lookup is None:
        logger.warning(f"Unknown card: {card_name}")
        return 0.0
    return lookup(summary)
