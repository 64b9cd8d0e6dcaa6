"""
Summary statistics shared by the metric cards and the cross-card aggregator.

Every function guards its denominator and returns a defined fallback (usually 0)
on degenerate input, so the dashboard always gets a number.
"""

import logging
from datetime import datetime
from typing import Sequence

import numpy as np
from scipy import stats

from ezana_scoring.scoring.overall import band_label
from ezana_scoring.utils.config import (
    CORRELATION_BANDS,
    FRESHNESS_FLOOR,
    FRESHNESS_STEPS,
    HEALTH_BANDS,
    RISK_LEVEL_BANDS,
    SENTIMENT_LABEL_BANDS,
    TREND_FLOOR_LABELS,
    TREND_THRESHOLDS,
)

logger = logging.getLogger(__name__)


def data_quality(recent_count: int, total_count: int) -> float:
    """Share of records that are recent, as a percentage. 0 when there are none."""
    if total_count == 0:
        return 0.0
    return recent_count / total_count * 100


def update_freshness(last_updated: datetime, now: datetime = None) -> float:
    """
    Step score for how recently a source was updated.

    <= 1 day: 100, <= 7 days: 80, <= 30 days: 60, <= 90 days: 40, older: 20.
    Breakpoints are inclusive, so exactly 1.0 days still scores 100.
    """
    now = now or datetime.now()
    days_since_update = (now - last_updated).total_seconds() / 86400

    for max_days, score in FRESHNESS_STEPS:
        if days_since_update <= max_days:
            return score

    return FRESHNESS_FLOOR


def coverage_score(present_count: int, expected_count: int) -> float:
    if expected_count == 0:
        return 0.0
    return present_count / expected_count * 100


def health_status(quality: float, freshness: float, coverage: float) -> str:
    average = (quality + freshness + coverage) / 3
    return band_label(average, HEALTH_BANDS, floor='Critical')


def pearson_correlation(series_a: Sequence[float], series_b: Sequence[float]) -> float:
    """
    Pearson r of two equal-length series.

    Returns 0 when the lengths differ, there are fewer than two points,
    or either series is constant.
    """
    if len(series_a) != len(series_b) or len(series_a) < 2:
        return 0.0

    a = np.asarray(series_a, dtype=float)
    b = np.asarray(series_b, dtype=float)

    if np.var(a) == 0 or np.var(b) == 0:
        return 0.0

    r, _ = stats.pearsonr(a, b)

    # floating point can land a hair outside [-1, 1]
    return float(np.clip(r, -1.0, 1.0))


def correlation_strength(r: float) -> str:
    return band_label(abs(r), CORRELATION_BANDS, floor='Very Weak')


def growth_rate(current: float, previous: float) -> float:
    """Percentage change from previous to current. 0 when previous is 0."""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def trend_label(rate: float, card_type: str) -> str:
    """
    Qualitative trend for a growth rate, using the card type's own thresholds.

    Comparisons are strict: a congress rate of exactly 10 is "Increasing",
    not "Strongly Increasing".
    """
    if card_type not in TREND_THRESHOLDS:
        raise ValueError(f"Unknown card type: {card_type}")

    for threshold, label in TREND_THRESHOLDS[card_type]:
        if rate > threshold:
            return label

    return TREND_FLOOR_LABELS[card_type]


def risk_level_label(risk_score: float) -> str:
    for max_score, label in RISK_LEVEL_BANDS:
        if risk_score <= max_score:
            return label
    return 'Extreme'


def sentiment_label(score: float) -> str:
    return band_label(score, SENTIMENT_LABEL_BANDS, floor='Extremely Bearish')
