"""
Data models using Pydantic for validation.

Scores are validated into [0, 100] so a bad calculation fails loudly at construction
instead of leaking a 130/100 into the dashboard.
"""

from enum import Enum
from pydantic import BaseModel, Field, computed_field
from typing import Optional, Dict, List
from datetime import datetime

from ezana_scoring.utils.config import CATEGORY_WEIGHTS


FactorSet = Dict[str, float]


class Priority(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class CompositeScore(BaseModel):
    """
    The four GRPV sub-scores.

    `overall` is derived from the sub-scores on every access, it is never stored
    on its own.
    """
    growth: float = Field(0.0, ge=0, le=100)
    risk: float = Field(0.0, ge=0, le=100)
    profitability: float = Field(0.0, ge=0, le=100)
    valuation: float = Field(0.0, ge=0, le=100)

    @computed_field
    @property
    def overall(self) -> float:
        return sum(
            getattr(self, category) * weight
            for category, weight in CATEGORY_WEIGHTS.items()
        )

    def as_dict(self) -> Dict[str, float]:
        """Sub-scores keyed by category name"""
        return {
            'growth': self.growth,
            'risk': self.risk,
            'profitability': self.profitability,
            'valuation': self.valuation
        }


class FactorSnapshot(BaseModel):
    """Raw factor sets for one symbol, as handed over by a factor source"""
    symbol: str
    company_name: str = ""
    growth: FactorSet = {}
    risk: FactorSet = {}
    profitability: FactorSet = {}
    valuation: FactorSet = {}
    fetched_at: datetime = Field(default_factory=datetime.now)


class GRPVResult(BaseModel):
    """Complete GRPV output for a (symbol, requester) pair"""
    symbol: str
    requester: str
    company_name: str = ""

    growth_factors: FactorSet = {}
    risk_factors: FactorSet = {}
    profitability_factors: FactorSet = {}
    valuation_factors: FactorSet = {}

    score: CompositeScore

    # Explanation
    rating: str = ""
    recommendation: str = ""
    recommendation_reason: str = ""
    analysis: Dict[str, str] = {}
    summary: str = ""

    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Insight(BaseModel):
    category: str
    title: str
    description: str
    priority: Priority
    generated_at: datetime = Field(default_factory=datetime.now)


class Alert(BaseModel):
    category: str
    title: str
    description: str
    priority: Priority
    generated_at: datetime = Field(default_factory=datetime.now)


class CorrelationResult(BaseModel):
    source1: str
    source2: str
    coefficient: float = Field(..., ge=-1, le=1)
    strength: str
    description: str = ""
