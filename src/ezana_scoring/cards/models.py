"""
Public officials metric cards.

Each card holds raw record collections (filled by a data feed) plus derived
summary fields. Derived fields default to 0 / "" and are populated by
CardMetricsCalculator; nothing here computes on its own.
"""

from enum import Enum
from pydantic import BaseModel, Field
from typing import ClassVar, List
from datetime import date, datetime

from ezana_scoring.utils.models import Priority


class TradeType(str, Enum):
    BUY = "Buy"
    SELL = "Sell"
    OPTION = "Option"
    SHORT = "Short"


class ContractStatus(str, Enum):
    AWARDED = "Awarded"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    TERMINATED = "Terminated"
    SUSPENDED = "Suspended"


class SentimentType(str, Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"


class IndicatorType(str, Enum):
    VOLATILITY = "Volatility"
    MOMENTUM = "Momentum"
    TREND = "Trend"
    VOLUME = "Volume"


# Trading

class MonthlyTradingData(BaseModel):
    month: date
    total_trades: int = 0
    total_volume: float = 0.0
    active_traders: int = 0


class Trade(BaseModel):
    trade_date: date
    trader_name: str
    ticker: str
    company_name: str = ""
    trade_type: TradeType = TradeType.BUY
    trade_value: float
    shares: int = 0
    price_per_share: float = 0.0


class TopTrader(BaseModel):
    name: str
    party: str = ""
    state: str = ""
    total_trades: int = 0
    total_volume: float = 0.0
    total_return: float = 0.0


class PartyTradingData(BaseModel):
    party: str
    total_traders: int = 0
    total_trades: int = 0
    total_volume: float = 0.0
    average_return: float = 0.0

    # Derived
    average_trade_size: float = 0.0


class ConflictAlert(BaseModel):
    trader_name: str
    ticker: str
    description: str = ""
    priority: Priority = Priority.MEDIUM
    severity: float = 0.0
    alert_date: datetime = Field(default_factory=datetime.now)


class TradingCard(BaseModel):
    card_type: ClassVar[str] = ""
    display_name: ClassVar[str] = ""

    last_updated: datetime = Field(default_factory=datetime.now)
    recent_trades: List[Trade] = []
    monthly_data: List[MonthlyTradingData] = []
    conflict_alerts: List[ConflictAlert] = []
    potential_conflicts: int = 0

    # Derived
    total_trades: int = 0
    total_volume: float = 0.0
    average_trade_size: float = 0.0
    largest_trade: float = 0.0
    smallest_trade: float = 0.0
    total_market_value: float = 0.0
    growth_rate: float = 0.0
    trend: str = ""


class CongressTradingCard(TradingCard):
    """Historical congressional trading"""
    card_type: ClassVar[str] = "congress"
    display_name: ClassVar[str] = "Congress Trading"

    compliance_score: float = 0.0


class ChamberTradingCard(TradingCard):
    """Trading by one chamber, with returns of its top traders"""
    top_traders: List[TopTrader] = []
    party_data: List[PartyTradingData] = []

    # Derived, over traders with a non-zero return
    average_return: float = 0.0
    best_performing_trader: float = 0.0
    worst_performing_trader: float = 0.0


class HouseTradingCard(ChamberTradingCard):
    card_type: ClassVar[str] = "house"
    display_name: ClassVar[str] = "House Trading"


class SenatorTradingCard(ChamberTradingCard):
    card_type: ClassVar[str] = "senator"
    display_name: ClassVar[str] = "Senator Trading"


# Government contracts

class MonthlyContractData(BaseModel):
    month: date
    total_contracts: int = 0
    total_value: float = 0.0


class Contract(BaseModel):
    contract_number: str
    contractor_name: str = ""
    agency_name: str = ""
    award_date: date
    contract_value: float
    status: ContractStatus = ContractStatus.AWARDED
    is_on_time: bool = False
    cost_savings: float = 0.0
    quality_score: float = 0.0


class GovernmentContractsCard(BaseModel):
    card_type: ClassVar[str] = "contracts"
    display_name: ClassVar[str] = "Government Contracts"

    last_updated: datetime = Field(default_factory=datetime.now)
    recent_contracts: List[Contract] = []
    monthly_data: List[MonthlyContractData] = []

    # Derived
    total_contracts: int = 0
    total_value: float = 0.0
    average_contract_value: float = 0.0
    largest_contract: float = 0.0
    smallest_contract: float = 0.0
    total_awarded_value: float = 0.0
    completion_rate: float = 0.0
    on_time_delivery_rate: float = 0.0
    cost_savings_rate: float = 0.0
    quality_rating: float = 0.0
    compliance_rate: float = 0.0
    growth_rate: float = 0.0
    trend: str = ""


# Lobbying

class MonthlyLobbyingData(BaseModel):
    month: date
    total_reports: int = 0
    total_spending: float = 0.0


class LobbyingReport(BaseModel):
    report_number: str
    company_name: str = ""
    lobbying_firm: str = ""
    issue: str = ""
    report_date: date
    total_spending: float
    is_compliant: bool = True
    is_late: bool = False
    is_complete: bool = True


class IssueBreakdown(BaseModel):
    issue_name: str
    total_spending: float = 0.0
    percentage_of_total: float = 0.0


class ComplianceAlert(BaseModel):
    company_name: str
    lobbying_firm: str = ""
    issue: str = ""
    description: str = ""
    priority: Priority = Priority.MEDIUM
    severity: float = 0.0
    alert_date: datetime = Field(default_factory=datetime.now)


class LobbyingActivityCard(BaseModel):
    card_type: ClassVar[str] = "lobbying"
    display_name: ClassVar[str] = "Lobbying Activity"

    last_updated: datetime = Field(default_factory=datetime.now)
    recent_reports: List[LobbyingReport] = []
    monthly_data: List[MonthlyLobbyingData] = []
    issue_data: List[IssueBreakdown] = []
    compliance_alerts: List[ComplianceAlert] = []

    # Derived
    total_reports: int = 0
    total_spending: float = 0.0
    average_spending: float = 0.0
    highest_spending: float = 0.0
    lowest_spending: float = 0.0
    total_disbursements: float = 0.0
    compliance_rate: float = 0.0
    late_reports: int = 0
    incomplete_reports: int = 0
    growth_rate: float = 0.0
    trend: str = ""


# Patents

class MonthlyPatentData(BaseModel):
    month: date
    total_patents: int = 0
    active_patents: int = 0
    pending_patents: int = 0


class Patent(BaseModel):
    patent_number: str
    title: str = ""
    company_name: str = ""
    filing_date: date


class PatentCompany(BaseModel):
    company_name: str
    patent_count: int = 0


class PatentQualityMetric(BaseModel):
    quality_score: float = 0.0
    citation_rate: float = 0.0
    litigation_rate: float = 0.0


class TechnologyBreakdown(BaseModel):
    technology: str
    patent_count: int = 0
    percentage_of_total: float = 0.0


class PatentMomentumCard(BaseModel):
    card_type: ClassVar[str] = "patents"
    display_name: ClassVar[str] = "Patent Momentum"

    last_updated: datetime = Field(default_factory=datetime.now)
    recent_patents: List[Patent] = []
    monthly_data: List[MonthlyPatentData] = []
    top_companies: List[PatentCompany] = []
    quality_metrics: List[PatentQualityMetric] = []
    technology_data: List[TechnologyBreakdown] = []
    unique_companies: int = 0
    unique_inventors: int = 0

    # Derived
    total_patents: int = 0
    active_patents: int = 0
    pending_patents: int = 0
    average_patents_per_company: float = 0.0
    average_patents_per_inventor: float = 0.0
    highest_patent_count: int = 0
    lowest_patent_count: int = 0
    average_patent_quality: float = 0.0
    citation_rate: float = 0.0
    litigation_rate: float = 0.0
    growth_rate: float = 0.0
    trend: str = ""


# Market sentiment

class MarketIndicator(BaseModel):
    name: str
    sentiment: SentimentType = SentimentType.NEUTRAL
    strength: float = 0.0


class DailySentimentData(BaseModel):
    day: date
    sentiment_score: float = 0.0


class WeeklySentimentData(BaseModel):
    week_start: date
    average_sentiment: float = 0.0


class TechnicalIndicator(BaseModel):
    name: str
    indicator_type: IndicatorType
    value: float = 0.0


class MarketRiskFactor(BaseModel):
    name: str
    severity: float = 0.0


class MarketSentimentCard(BaseModel):
    card_type: ClassVar[str] = "sentiment"
    display_name: ClassVar[str] = "Market Sentiment"

    last_updated: datetime = Field(default_factory=datetime.now)
    market_indicators: List[MarketIndicator] = []
    daily_data: List[DailySentimentData] = []
    weekly_data: List[WeeklySentimentData] = []
    technical_indicators: List[TechnicalIndicator] = []
    risk_factors: List[MarketRiskFactor] = []

    # Derived
    total_indicators: int = 0
    bullish_indicators: int = 0
    bearish_indicators: int = 0
    neutral_indicators: int = 0
    bullish_percentage: float = 0.0
    bearish_percentage: float = 0.0
    neutral_percentage: float = 0.0
    sentiment_score: float = 0.0
    overall_sentiment: str = ""
    previous_sentiment_score: float = 0.0
    sentiment_change: float = 0.0
    risk_level: float = 0.0
    risk_category: str = ""
    market_volatility: float = 0.0
    weekly_change: float = 0.0
    sentiment_trend: str = ""
