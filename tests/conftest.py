"""Shared fixtures for the ezana-scoring test suite."""

from datetime import date, datetime, timedelta

import pytest

from ezana_scoring.cards.models import (
    CongressTradingCard,
    Contract,
    ContractStatus,
    GovernmentContractsCard,
    HouseTradingCard,
    MonthlyContractData,
    MonthlyTradingData,
    Trade,
)
from ezana_scoring.data.score_cache import ScoreCache
from ezana_scoring.scoring.engine import GRPVEngine
from ezana_scoring.scoring.factor_scorer import FactorScorer
from ezana_scoring.utils.models import FactorSnapshot

NOW = datetime(2024, 6, 15, 12, 0, 0)


# ---------------------------------------------------------------------------
# Factor fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def scorer() -> FactorScorer:
    return FactorScorer()


@pytest.fixture
def growth_factors():
    """Average growth of 15%."""
    return {"Q1 Revenue Growth": 0.20, "Q2 Revenue Growth": 0.10}


@pytest.fixture
def risk_factors():
    """D/E of 1.0 and beta of 1.5."""
    return {"Year 1 Debt/Equity": 1.0, "Beta": 1.5}


@pytest.fixture
def profitability_factors():
    return {
        "Year 1 Profit Margin": 0.15,
        "Year 1 Operating Margin": 0.20,
        "Year 1 Dividend Yield": 0.02,
        "Year 1 EBITDA/Sales": 0.25,
    }


@pytest.fixture
def valuation_factors():
    return {
        "Year 1 P/E": 15.0,
        "Year 1 PEG": 1.0,
        "Year 1 P/B": 1.0,
        "Year 1 EV/Revenue": 1.0,
        "Year 1 EPS": 15.0,
        "Market Cap Relative": 1.0,
    }


# ---------------------------------------------------------------------------
# Collaborator fixtures
# ---------------------------------------------------------------------------


class FakeFactorSource:
    """Returns fixed factors and counts calls."""

    def __init__(self, snapshot_factory):
        self.snapshot_factory = snapshot_factory
        self.calls = []

    def get_factors(self, symbol):
        self.calls.append(symbol)
        return self.snapshot_factory(symbol)


@pytest.fixture
def fake_source(growth_factors, risk_factors, profitability_factors, valuation_factors):
    def make(symbol):
        return FactorSnapshot(
            symbol=symbol,
            company_name=f"{symbol} Corp",
            growth=growth_factors,
            risk=risk_factors,
            profitability=profitability_factors,
            valuation=valuation_factors,
        )

    return FakeFactorSource(make)


@pytest.fixture
def cache(tmp_path) -> ScoreCache:
    return ScoreCache(str(tmp_path / "scores.db"))


@pytest.fixture
def engine(fake_source, cache) -> GRPVEngine:
    return GRPVEngine(factor_source=fake_source, cache=cache)


# ---------------------------------------------------------------------------
# Card fixtures
# ---------------------------------------------------------------------------


def make_trades(values, start=date(2024, 6, 1)):
    return [
        Trade(
            trade_date=start + timedelta(days=i),
            trader_name=f"Member {i}",
            ticker="AAPL",
            trade_value=value,
        )
        for i, value in enumerate(values)
    ]


@pytest.fixture
def congress_card() -> CongressTradingCard:
    """Volume grows 200k -> 240k (20%), 2 of 10 trades flagged."""
    return CongressTradingCard(
        last_updated=NOW - timedelta(hours=6),
        recent_trades=make_trades([1000.0, 5000.0, 3000.0]),
        monthly_data=[
            MonthlyTradingData(month=date(2024, 6, 1), total_trades=10, total_volume=240_000),
            MonthlyTradingData(month=date(2024, 5, 1), total_trades=8, total_volume=200_000),
        ],
        potential_conflicts=2,
    )


@pytest.fixture
def house_card() -> HouseTradingCard:
    return HouseTradingCard(
        last_updated=NOW - timedelta(days=3),
        recent_trades=make_trades([2000.0, 4000.0]),
        monthly_data=[
            MonthlyTradingData(month=date(2024, 6, 1), total_trades=4, total_volume=100_000),
            MonthlyTradingData(month=date(2024, 5, 1), total_trades=4, total_volume=100_000),
        ],
    )


@pytest.fixture
def contracts_card() -> GovernmentContractsCard:
    return GovernmentContractsCard(
        last_updated=NOW - timedelta(hours=1),
        recent_contracts=[
            Contract(
                contract_number="C-1",
                award_date=date(2024, 6, 1),
                contract_value=1_000_000,
                status=ContractStatus.COMPLETED,
                is_on_time=True,
                cost_savings=5_000,
                quality_score=4.0,
            ),
            Contract(
                contract_number="C-2",
                award_date=date(2024, 6, 2),
                contract_value=3_000_000,
                status=ContractStatus.COMPLETED,
                is_on_time=False,
                quality_score=3.0,
            ),
            Contract(
                contract_number="C-3",
                award_date=date(2024, 6, 3),
                contract_value=2_000_000,
                status=ContractStatus.IN_PROGRESS,
                is_on_time=True,
            ),
            Contract(
                contract_number="C-4",
                award_date=date(2024, 6, 4),
                contract_value=2_000_000,
                status=ContractStatus.AWARDED,
            ),
        ],
        monthly_data=[
            MonthlyContractData(month=date(2024, 4, 1), total_contracts=3, total_value=5_000_000),
            MonthlyContractData(month=date(2024, 6, 1), total_contracts=4, total_value=8_000_000),
            MonthlyContractData(month=date(2024, 5, 1), total_contracts=4, total_value=6_000_000),
        ],
    )
