"""
Portfolio health score for the main dashboard.

Blends four components into a 0-100 health score:
- Risk: (10 - risk score) * 10, only when a risk score is known
- Diversification score as reported
- Today's P&L: 80 + 2 * P&L percent
- Dividends: 80 + 2 * monthly dividend change percent

Each component is clamped to [0, 100] before averaging.
"""

import logging
from pydantic import BaseModel, Field
from typing import Dict, List
from datetime import datetime

import numpy as np

from ezana_scoring.scoring.factor_scorer import clamp
from ezana_scoring.scoring.overall import band_label
from ezana_scoring.utils.config import PORTFOLIO_HEALTH_BANDS, PORTFOLIO_THRESHOLDS
from ezana_scoring.utils.models import Alert, Insight, Priority

logger = logging.getLogger(__name__)


class PortfolioSnapshot(BaseModel):
    """Card values the health score is computed from"""
    risk_score: float = Field(0.0, ge=0, le=10)
    diversification_score: float = 0.0
    today_pnl: float = 0.0
    today_pnl_percentage: float = 0.0
    dividend_change_amount: float = 0.0
    dividend_change_percentage: float = 0.0
    # asset class -> current minus target allocation, in percentage points
    allocation_deviations: Dict[str, float] = {}


class PortfolioHealth(BaseModel):
    score: float = Field(0.0, ge=0, le=100)
    status: str = ""
    components: Dict[str, float] = {}
    insights: List[Insight] = []
    alerts: List[Alert] = []


class PortfolioHealthCalculator:

    def __init__(self, thresholds: Dict = None):
        self.thresholds = thresholds or PORTFOLIO_THRESHOLDS

    def calculate(self, snapshot: PortfolioSnapshot, now: datetime = None) -> PortfolioHealth:
        now = now or datetime.now()
        components = self._components(snapshot)
        score = float(np.mean(list(components.values())))

        health = PortfolioHealth(
            score=score,
            status=band_label(score, PORTFOLIO_HEALTH_BANDS, floor='Critical'),
            components=components,
            insights=self._insights(snapshot, now),
            alerts=self._alerts(snapshot, now)
        )

        logger.info(f"Portfolio health {health.score:.1f} ({health.status})")
        return health

    def _components(self, snapshot: PortfolioSnapshot) -> Dict[str, float]:
        baseline = self.thresholds['pnl_baseline']
        multiplier = self.thresholds['pnl_multiplier']

        components = {}

        if snapshot.risk_score > 0:
            components['risk'] = clamp((10 - snapshot.risk_score) * 10)

        components['diversification'] = clamp(snapshot.diversification_score)
        components['pnl'] = clamp(baseline + snapshot.today_pnl_percentage * multiplier)
        components['dividends'] = clamp(baseline + snapshot.dividend_change_percentage * multiplier)

        return components

    def needs_rebalancing(self, snapshot: PortfolioSnapshot) -> bool:
        return any(
            abs(deviation) > self.thresholds['rebalance_deviation']
            for deviation in snapshot.allocation_deviations.values()
        )

    def _insights(self, snapshot: PortfolioSnapshot, now: datetime) -> List[Insight]:
        insights = []

        if snapshot.risk_score > self.thresholds['high_risk']:
            insights.append(Insight(
                category="Risk Management",
                title="High Risk Portfolio Detected",
                description=(
                    "Your portfolio risk score is elevated. "
                    "Consider diversifying into more conservative assets."
                ),
                priority=Priority.HIGH,
                generated_at=now
            ))

        if self.needs_rebalancing(snapshot):
            drifted = sorted(
                name for name, deviation in snapshot.allocation_deviations.items()
                if abs(deviation) > self.thresholds['rebalance_deviation']
            )
            insights.append(Insight(
                category="Rebalancing",
                title="Portfolio Rebalancing Recommended",
                description=(
                    f"Allocation has drifted from target for: {', '.join(drifted)}. "
                    f"Rebalancing can help maintain your desired risk profile."
                ),
                priority=Priority.MEDIUM,
                generated_at=now
            ))

        return insights

    def _alerts(self, snapshot: PortfolioSnapshot, now: datetime) -> List[Alert]:
        alerts = []

        if snapshot.today_pnl < self.thresholds['significant_loss']:
            alerts.append(Alert(
                category="Performance",
                title="Significant Daily Loss",
                description=(
                    f"Your portfolio lost ${abs(snapshot.today_pnl):,.0f} today. "
                    f"Review your positions and consider risk management strategies."
                ),
                priority=Priority.HIGH,
                generated_at=now
            ))

        if snapshot.risk_score > self.thresholds['critical_risk']:
            alerts.append(Alert(
                category="Risk",
                title="Critical Risk Level",
                description=(
                    "Your portfolio risk score has reached a critical level. "
                    "Immediate attention is recommended."
                ),
                priority=Priority.CRITICAL,
                generated_at=now
            ))

        return alerts
