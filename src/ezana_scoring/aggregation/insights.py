"""
Rule-based insights and alerts for the public officials summary.

Each rule looks at an already-computed summary and returns a finding or None.
Rules are independent and run in order on every aggregation pass. There is no
deduplication across passes.
"""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ezana_scoring.utils.config import THRESHOLDS
from ezana_scoring.utils.models import Alert, Insight, Priority

logger = logging.getLogger(__name__)


def volume_dominance_insight(summary, now: datetime, thresholds=THRESHOLDS) -> Optional[Insight]:
    congress_volume = summary.congress.total_volume
    house_volume = summary.house.total_volume

    if congress_volume <= 0 or house_volume <= 0:
        return None

    if congress_volume > house_volume * thresholds['volume_dominance']:
        return Insight(
            category="Trading Analysis",
            title="Congress Dominates Trading Volume",
            description=(
                f"Congressional trading volume (${congress_volume:,.0f}) significantly "
                f"exceeds House trading volume (${house_volume:,.0f})"
            ),
            priority=Priority.MEDIUM,
            generated_at=now
        )
    return None


def low_compliance_insight(summary, now: datetime, thresholds=THRESHOLDS) -> Optional[Insight]:
    # a summary with no compliance data at all scores 0 and fires this too
    if summary.overall_compliance_score < thresholds['low_compliance']:
        return Insight(
            category="Compliance",
            title="Low Overall Compliance",
            description=(
                f"Overall compliance score is {summary.overall_compliance_score:.1f}%, "
                f"indicating potential regulatory concerns"
            ),
            priority=Priority.HIGH,
            generated_at=now
        )
    return None


def patent_growth_insight(summary, now: datetime, thresholds=THRESHOLDS) -> Optional[Insight]:
    patent_growth = summary.patents.growth_rate

    if patent_growth > thresholds['patent_growth']:
        return Insight(
            category="Innovation",
            title="Strong Patent Growth",
            description=(
                f"Patent momentum shows {patent_growth:.1f}% monthly growth, "
                f"indicating strong innovation activity"
            ),
            priority=Priority.LOW,
            generated_at=now
        )
    return None


def bullish_sentiment_insight(summary, now: datetime, thresholds=THRESHOLDS) -> Optional[Insight]:
    sentiment = summary.sentiment

    if sentiment.sentiment_score > thresholds['bullish_sentiment']:
        return Insight(
            category="Market Sentiment",
            title="Bullish Market Sentiment",
            description=(
                f"Market sentiment is {sentiment.overall_sentiment} "
                f"with a score of {sentiment.sentiment_score:.1f}"
            ),
            priority=Priority.LOW,
            generated_at=now
        )
    return None


def conflict_alert(summary, now: datetime, thresholds=THRESHOLDS) -> Optional[Alert]:
    """One alert listing every chamber over the conflict threshold"""
    chambers = [
        ("Congress", summary.congress),
        ("House", summary.house),
        ("Senate", summary.senator)
    ]

    high_conflicts = [
        f"{name}: {card.potential_conflicts}"
        for name, card in chambers
        if card.potential_conflicts > thresholds['high_conflicts']
    ]

    if not high_conflicts:
        return None

    return Alert(
        category="Conflict Alert",
        title="High Conflict Levels Detected",
        description=f"High conflict levels detected: {', '.join(high_conflicts)}",
        priority=Priority.HIGH,
        generated_at=now
    )


def data_quality_alert(summary, now: datetime, thresholds=THRESHOLDS) -> Optional[Alert]:
    if summary.data_quality_score < thresholds['low_data_quality']:
        return Alert(
            category="Data Quality",
            title="Low Data Quality",
            description=(
                f"Data quality score is {summary.data_quality_score:.1f}%, "
                f"indicating potential data integrity issues"
            ),
            priority=Priority.MEDIUM,
            generated_at=now
        )
    return None


def data_freshness_alert(summary, now: datetime, thresholds=THRESHOLDS) -> Optional[Alert]:
    if summary.update_frequency < thresholds['stale_updates']:
        return Alert(
            category="Data Freshness",
            title="Data Update Delays",
            description=(
                f"Update frequency score is {summary.update_frequency:.1f}%, "
                f"indicating potential data staleness"
            ),
            priority=Priority.MEDIUM,
            generated_at=now
        )
    return None


INSIGHT_RULES: List[Callable] = [
    volume_dominance_insight,
    low_compliance_insight,
    patent_growth_insight,
    bullish_sentiment_insight
]

ALERT_RULES: List[Callable] = [
    conflict_alert,
    data_quality_alert,
    data_freshness_alert
]


def run_rules(rules: List[Callable], summary, now: datetime = None, thresholds=THRESHOLDS) -> list:
    """Evaluate rules in order, collecting every finding they produce"""
    now = now or datetime.now()
    findings = []

    for rule in rules:
        finding = rule(summary, now, thresholds)
        if finding is not None:
            logger.debug(f"{rule.__name__}: {finding.title}")
            findings.append(finding)

    return findings


def generate_insights(summary, now: datetime = None, thresholds=THRESHOLDS) -> List[Insight]:
    return run_rules(INSIGHT_RULES, summary, now, thresholds)


def generate_alerts(summary, now: datetime = None, thresholds=THRESHOLDS) -> List[Alert]:
    return run_rules(ALERT_RULES, summary, now, thresholds)
