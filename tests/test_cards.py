"""Tests for metric card derivations."""

from datetime import date

import pytest

from ezana_scoring.cards.calculator import (
    CardMetricsCalculator,
    bearish_indicators,
    bullish_indicators,
    high_priority_compliance_alerts,
    high_priority_conflicts,
    high_quality_patents,
    high_risk_factors,
    high_spending_reports,
    high_value_contracts,
    high_value_trades,
    party_performance,
    party_ranking,
    top_days,
    top_months,
    top_traders_by_return,
    top_traders_by_volume,
)
from ezana_scoring.cards.models import (
    ComplianceAlert,
    ConflictAlert,
    CongressTradingCard,
    DailySentimentData,
    HouseTradingCard,
    IndicatorType,
    IssueBreakdown,
    LobbyingActivityCard,
    LobbyingReport,
    MarketIndicator,
    MarketRiskFactor,
    MarketSentimentCard,
    MonthlyLobbyingData,
    MonthlyPatentData,
    MonthlyTradingData,
    PartyTradingData,
    PatentCompany,
    PatentMomentumCard,
    PatentQualityMetric,
    SenatorTradingCard,
    SentimentType,
    TechnicalIndicator,
    TechnologyBreakdown,
    TopTrader,
    WeeklySentimentData,
)
from ezana_scoring.utils.models import Priority

from conftest import make_trades


@pytest.fixture
def calculator():
    return CardMetricsCalculator()


class TestTradingCards:

    def test_congress_metrics(self, calculator, congress_card):
        card = calculator.calculate(congress_card)

        assert card.average_trade_size == pytest.approx(3000.0)
        assert card.largest_trade == 5000.0
        assert card.smallest_trade == 1000.0
        assert card.total_market_value == 9000.0

        # totals come from the latest month
        assert card.total_trades == 10
        assert card.total_volume == 240_000

        assert card.growth_rate == pytest.approx(20.0)
        assert card.trend == 'Strongly Increasing'
        assert card.compliance_score == pytest.approx(80.0)

    def test_input_card_untouched(self, calculator, congress_card):
        calculator.calculate(congress_card)
        assert congress_card.total_trades == 0
        assert congress_card.trend == ""

    def test_empty_card_gets_defaults(self, calculator):
        card = calculator.calculate(CongressTradingCard())

        assert card.average_trade_size == 0.0
        assert card.total_trades == 0
        assert card.compliance_score == 0.0
        assert card.growth_rate == 0.0
        assert card.trend == 'Stable'

    def test_chamber_returns_skip_zero(self, calculator, house_card):
        house_card.top_traders = [
            TopTrader(name="A", total_return=10.0),
            TopTrader(name="B", total_return=0.0),
            TopTrader(name="C", total_return=-5.0),
            TopTrader(name="D", total_return=20.0),
        ]
        card = calculator.calculate(house_card)

        assert card.average_return == pytest.approx(25.0 / 3)
        assert card.best_performing_trader == 20.0
        assert card.worst_performing_trader == -5.0
        assert card.trend == 'Stable'

    def test_party_average_trade_size(self, calculator, house_card):
        house_card.party_data = [
            PartyTradingData(party="Democrat", total_trades=4, total_volume=10_000),
            PartyTradingData(party="Independent", total_volume=500),
        ]
        card = calculator.calculate(house_card)

        assert card.party_data[0].average_trade_size == pytest.approx(2500.0)
        # no trades, nothing to divide by
        assert card.party_data[1].average_trade_size == 0.0

    def test_senator_uses_own_thresholds(self, calculator):
        # 7% growth is "Increasing" for the house (> 6) but "Stable" for senators (> 8)
        monthly = [
            MonthlyTradingData(month=date(2024, 6, 1), total_trades=5, total_volume=107_000),
            MonthlyTradingData(month=date(2024, 5, 1), total_trades=5, total_volume=100_000),
        ]

        assert calculator.calculate(HouseTradingCard(monthly_data=monthly)).trend == 'Increasing'
        assert calculator.calculate(SenatorTradingCard(monthly_data=monthly)).trend == 'Stable'

    def test_high_priority_conflicts_by_severity(self):
        card = CongressTradingCard(conflict_alerts=[
            ConflictAlert(trader_name="A", ticker="X", priority=Priority.HIGH, severity=3),
            ConflictAlert(trader_name="B", ticker="Y", priority=Priority.LOW, severity=9),
            ConflictAlert(trader_name="C", ticker="Z", priority=Priority.HIGH, severity=7),
        ])

        conflicts = high_priority_conflicts(card)
        assert [c.trader_name for c in conflicts] == ["C", "A"]


class TestGovernmentContracts:

    def test_value_and_performance(self, calculator, contracts_card):
        card = calculator.calculate(contracts_card)

        assert card.average_contract_value == pytest.approx(2_000_000)
        assert card.largest_contract == 3_000_000
        assert card.smallest_contract == 1_000_000
        assert card.total_awarded_value == 8_000_000

        assert card.completion_rate == pytest.approx(50.0)
        assert card.on_time_delivery_rate == pytest.approx(50.0)
        assert card.cost_savings_rate == pytest.approx(50.0)
        assert card.quality_rating == pytest.approx(3.5)
        assert card.compliance_rate == pytest.approx(50.0)

    def test_latest_month_by_date_not_position(self, calculator, contracts_card):
        card = calculator.calculate(contracts_card)

        assert card.total_contracts == 4
        assert card.total_value == 8_000_000
        # June 8M over May 6M
        assert card.growth_rate == pytest.approx(100 / 3)
        assert card.trend == 'Strongly Increasing'


class TestLobbying:

    def test_compliance_and_issue_share(self, calculator):
        card = calculator.calculate(LobbyingActivityCard(
            recent_reports=[
                LobbyingReport(report_number="R1", report_date=date(2024, 6, 1), total_spending=100.0),
                LobbyingReport(
                    report_number="R2",
                    report_date=date(2024, 6, 2),
                    total_spending=300.0,
                    is_compliant=False,
                    is_late=True,
                    is_complete=False,
                ),
            ],
            monthly_data=[
                MonthlyLobbyingData(month=date(2024, 5, 1), total_reports=5, total_spending=100.0),
                MonthlyLobbyingData(month=date(2024, 6, 1), total_reports=6, total_spending=110.0),
            ],
            issue_data=[
                IssueBreakdown(issue_name="Tax", total_spending=75.0),
                IssueBreakdown(issue_name="Energy", total_spending=25.0),
            ],
        ))

        assert card.average_spending == pytest.approx(200.0)
        assert card.highest_spending == 300.0
        assert card.lowest_spending == 100.0
        assert card.total_disbursements == 400.0
        assert card.compliance_rate == pytest.approx(50.0)
        assert card.late_reports == 1
        assert card.incomplete_reports == 1
        assert [i.percentage_of_total for i in card.issue_data] == [pytest.approx(75.0), pytest.approx(25.0)]

        assert card.total_reports == 6
        # exactly 10% is not above the "Increasing" threshold
        assert card.growth_rate == pytest.approx(10.0)
        assert card.trend == 'Stable'


class TestPatents:

    def test_patent_metrics(self, calculator):
        card = calculator.calculate(PatentMomentumCard(
            monthly_data=[
                MonthlyPatentData(month=date(2024, 5, 1), total_patents=100),
                MonthlyPatentData(month=date(2024, 6, 1), total_patents=130, active_patents=90, pending_patents=40),
            ],
            top_companies=[
                PatentCompany(company_name="A", patent_count=50),
                PatentCompany(company_name="B", patent_count=20),
                PatentCompany(company_name="C", patent_count=5),
            ],
            quality_metrics=[
                PatentQualityMetric(quality_score=80, citation_rate=2, litigation_rate=0.1),
                PatentQualityMetric(quality_score=60, citation_rate=4, litigation_rate=0.3),
            ],
            technology_data=[
                TechnologyBreakdown(technology="AI", patent_count=3),
                TechnologyBreakdown(technology="Bio", patent_count=1),
            ],
            unique_companies=13,
        ))

        assert card.total_patents == 130
        assert card.active_patents == 90
        assert card.pending_patents == 40
        assert card.average_patents_per_company == pytest.approx(10.0)
        assert card.average_patents_per_inventor == 0.0
        assert card.highest_patent_count == 50
        assert card.lowest_patent_count == 5
        assert card.average_patent_quality == pytest.approx(70.0)
        assert card.citation_rate == pytest.approx(3.0)
        assert card.litigation_rate == pytest.approx(0.2)
        assert card.technology_data[0].percentage_of_total == pytest.approx(75.0)
        assert card.growth_rate == pytest.approx(30.0)
        assert card.trend == 'Explosive Growth'


class TestMarketSentiment:

    def test_sentiment_metrics(self, calculator):
        card = calculator.calculate(MarketSentimentCard(
            market_indicators=[
                MarketIndicator(name="VIX", sentiment=SentimentType.BULLISH),
                MarketIndicator(name="Breadth", sentiment=SentimentType.BULLISH),
                MarketIndicator(name="Put/Call", sentiment=SentimentType.BEARISH),
                MarketIndicator(name="Flows", sentiment=SentimentType.NEUTRAL),
            ],
            daily_data=[
                DailySentimentData(day=date(2024, 6, 15), sentiment_score=7.0),
                DailySentimentData(day=date(2024, 6, 14), sentiment_score=5.0),
            ],
            weekly_data=[
                WeeklySentimentData(week_start=date(2024, 6, 3), average_sentiment=5.0),
                WeeklySentimentData(week_start=date(2024, 6, 10), average_sentiment=6.0),
            ],
            technical_indicators=[
                TechnicalIndicator(name="ATR", indicator_type=IndicatorType.VOLATILITY, value=20.0),
                TechnicalIndicator(name="StdDev", indicator_type=IndicatorType.VOLATILITY, value=30.0),
                TechnicalIndicator(name="RSI", indicator_type=IndicatorType.MOMENTUM, value=99.0),
            ],
            risk_factors=[
                MarketRiskFactor(name="Rates", severity=3.0),
                MarketRiskFactor(name="Geopolitics", severity=5.0),
            ],
        ))

        assert card.total_indicators == 4
        assert card.bullish_indicators == 2
        assert card.bullish_percentage == pytest.approx(50.0)
        assert card.bearish_percentage == pytest.approx(25.0)
        assert card.neutral_percentage == pytest.approx(25.0)

        assert card.sentiment_score == 7.0
        assert card.overall_sentiment == 'Very Bullish'
        assert card.previous_sentiment_score == 5.0
        assert card.sentiment_change == pytest.approx(2.0)

        assert card.risk_level == pytest.approx(4.0)
        assert card.risk_category == 'Moderate'
        assert card.market_volatility == pytest.approx(25.0)

        assert card.weekly_change == pytest.approx(20.0)
        assert card.sentiment_trend == 'Strongly Improving'

    def test_single_day_has_no_change(self, calculator):
        card = calculator.calculate(MarketSentimentCard(
            daily_data=[DailySentimentData(day=date(2024, 6, 15), sentiment_score=-3.0)]
        ))

        assert card.overall_sentiment == 'Slightly Bearish'
        assert card.sentiment_change == 0.0
        assert card.sentiment_trend == 'Stable'


class TestCardLookups:

    def test_top_months_by_volume(self, congress_card):
        months = top_months(congress_card)
        assert [m.total_volume for m in months] == [240_000, 200_000]

    def test_top_months_by_contract_value(self, contracts_card):
        months = top_months(contracts_card, count=2)
        assert [m.month for m in months] == [date(2024, 6, 1), date(2024, 5, 1)]

    def test_top_months_by_spending_and_patents(self):
        lobbying = LobbyingActivityCard(monthly_data=[
            MonthlyLobbyingData(month=date(2024, 5, 1), total_spending=300.0),
            MonthlyLobbyingData(month=date(2024, 6, 1), total_spending=100.0),
        ])
        patents = PatentMomentumCard(monthly_data=[
            MonthlyPatentData(month=date(2024, 5, 1), total_patents=10),
            MonthlyPatentData(month=date(2024, 6, 1), total_patents=40),
        ])

        assert top_months(lobbying, count=1)[0].month == date(2024, 5, 1)
        assert top_months(patents, count=1)[0].month == date(2024, 6, 1)

    def test_top_months_needs_monthly_history(self):
        with pytest.raises(TypeError):
            top_months(MarketSentimentCard())

    def test_top_days(self):
        card = MarketSentimentCard(daily_data=[
            DailySentimentData(day=date(2024, 6, d), sentiment_score=score)
            for d, score in [(10, 1.0), (11, 6.0), (12, -2.0), (13, 4.0), (14, 3.0), (15, 5.0)]
        ])

        days = top_days(card)
        assert [d.sentiment_score for d in days] == [6.0, 5.0, 4.0, 3.0, 1.0]

    def test_top_traders(self, house_card):
        house_card.top_traders = [
            TopTrader(name="A", total_volume=500.0, total_return=2.0),
            TopTrader(name="B", total_volume=900.0, total_return=-1.0),
            TopTrader(name="C", total_volume=100.0, total_return=8.0),
        ]

        assert [t.name for t in top_traders_by_return(house_card)] == ["C", "A", "B"]
        assert [t.name for t in top_traders_by_volume(house_card, count=2)] == ["B", "A"]

    def test_party_ranking_and_performance(self, house_card):
        house_card.party_data = [
            PartyTradingData(party="Republican", total_volume=40_000, average_return=3.5),
            PartyTradingData(party="Democrat", total_volume=60_000, average_return=4.25),
        ]

        assert [p.party for p in party_ranking(house_card)] == ["Democrat", "Republican"]
        assert party_performance(house_card, "democrat") == 4.25
        assert party_performance(house_card, "Independent") == 0.0

    def test_high_value_trades_default_per_chamber(self):
        trades = make_trades([50_000.0, 49_999.0, 120_000.0, 100_000.0])

        house = HouseTradingCard(recent_trades=trades)
        senate = SenatorTradingCard(recent_trades=trades)
        congress = CongressTradingCard(recent_trades=trades)

        assert [t.trade_value for t in high_value_trades(house)] == [120_000.0, 100_000.0, 50_000.0]
        assert [t.trade_value for t in high_value_trades(congress)] == [120_000.0, 100_000.0, 50_000.0]
        assert [t.trade_value for t in high_value_trades(senate)] == [120_000.0, 100_000.0]
        assert [t.trade_value for t in high_value_trades(house, threshold=110_000)] == [120_000.0]

    def test_high_value_contracts(self, contracts_card):
        contracts = high_value_contracts(contracts_card)
        assert [c.contract_value for c in contracts] == [3_000_000, 2_000_000, 2_000_000, 1_000_000]

        assert [c.contract_number for c in high_value_contracts(contracts_card, threshold=2_500_000)] == ["C-2"]

    def test_high_spending_reports(self):
        card = LobbyingActivityCard(recent_reports=[
            LobbyingReport(report_number="R1", report_date=date(2024, 6, 1), total_spending=99_999.0),
            LobbyingReport(report_number="R2", report_date=date(2024, 6, 2), total_spending=100_000.0),
            LobbyingReport(report_number="R3", report_date=date(2024, 6, 3), total_spending=250_000.0),
        ])

        assert [r.report_number for r in high_spending_reports(card)] == ["R3", "R2"]

    def test_high_priority_compliance_alerts(self):
        card = LobbyingActivityCard(compliance_alerts=[
            ComplianceAlert(company_name="A", priority=Priority.HIGH, severity=4),
            ComplianceAlert(company_name="B", priority=Priority.MEDIUM, severity=9),
            ComplianceAlert(company_name="C", priority=Priority.HIGH, severity=8),
        ])

        assert [a.company_name for a in high_priority_compliance_alerts(card)] == ["C", "A"]

    def test_high_quality_patents(self):
        card = PatentMomentumCard(quality_metrics=[
            PatentQualityMetric(quality_score=7.9),
            PatentQualityMetric(quality_score=9.5),
            PatentQualityMetric(quality_score=8.0),
        ])

        assert [q.quality_score for q in high_quality_patents(card)] == [9.5, 8.0]

    def test_high_risk_factors(self):
        card = MarketSentimentCard(risk_factors=[
            MarketRiskFactor(name="Rates", severity=6.0),
            MarketRiskFactor(name="Earnings", severity=5.9),
            MarketRiskFactor(name="Geopolitics", severity=8.0),
        ])

        assert [r.name for r in high_risk_factors(card)] == ["Geopolitics", "Rates"]
        assert high_risk_factors(card, threshold=9.0) == []

    def test_bullish_and_bearish_indicators(self):
        card = MarketSentimentCard(market_indicators=[
            MarketIndicator(name="VIX", sentiment=SentimentType.BULLISH, strength=3.0),
            MarketIndicator(name="Put/Call", sentiment=SentimentType.BEARISH, strength=5.0),
            MarketIndicator(name="Breadth", sentiment=SentimentType.BULLISH, strength=7.0),
            MarketIndicator(name="Flows", sentiment=SentimentType.NEUTRAL, strength=9.0),
        ])

        assert [i.name for i in bullish_indicators(card)] == ["Breadth", "VIX"]
        assert [i.name for i in bearish_indicators(card)] == ["Put/Call"]


def test_rejects_non_cards(calculator):
    with pytest.raises(TypeError):
        calculator.calculate(TopTrader(name="not a card"))
