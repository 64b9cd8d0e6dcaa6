"""
Allocation recommendations from a user's investment preferences.

The stock sleeve is split by risk tolerance, the other sleeves map to one
fund each (alternatives split 50/50 unless the user wants ESG).
"""

import logging
from pydantic import BaseModel, Field
from typing import List, Optional

logger = logging.getLogger(__name__)


class InvestmentPreferences(BaseModel):
    risk_tolerance: int = Field(5, ge=1, le=10)  # 1 = most conservative
    stock_allocation: float = Field(60, ge=0, le=100)
    bond_allocation: float = Field(30, ge=0, le=100)
    cash_allocation: float = Field(10, ge=0, le=100)
    alternative_allocation: float = Field(0, ge=0, le=100)
    esg_focus: bool = False


class AllocationRecommendation(BaseModel):
    asset_type: str
    name: str
    allocation: float
    risk: str


# (min risk tolerance, [(fund, share of stock sleeve, risk)])
STOCK_SPLITS = [
    (7, [("Growth Stock ETF", 0.6, "High"), ("Small Cap ETF", 0.4, "High")]),
    (4, [("Total Market ETF", 0.7, "Medium"), ("Dividend ETF", 0.3, "Medium-Low")]),
    (1, [("Large Cap Value ETF", 0.8, "Medium-Low"), ("Dividend Aristocrats ETF", 0.2, "Low")])
]

DEFAULT_RECOMMENDATIONS = [
    AllocationRecommendation(asset_type="ETF", name="Total Market Index Fund", allocation=60, risk="Medium"),
    AllocationRecommendation(asset_type="Bond", name="Total Bond Market Fund", allocation=30, risk="Low"),
    AllocationRecommendation(asset_type="Cash", name="High-Yield Savings", allocation=10, risk="Very Low")
]


def recommend_allocation(
    preferences: Optional[InvestmentPreferences]
) -> List[AllocationRecommendation]:
    """
    Returns:
        Recommendations whose allocations add up to the preference totals,
        or the default 60/30/10 split when there are no preferences
    """
    if preferences is None:
        logger.info("No investment preferences, using default allocation")
        return [r.model_copy() for r in DEFAULT_RECOMMENDATIONS]

    recommendations = []

    if preferences.stock_allocation > 0:
        for min_tolerance, funds in STOCK_SPLITS:
            if preferences.risk_tolerance >= min_tolerance:
                for name, fraction, risk in funds:
                    recommendations.append(AllocationRecommendation(
                        asset_type="Stock",
                        name=name,
                        allocation=preferences.stock_allocation * fraction,
                        risk=risk
                    ))
                break

    if preferences.bond_allocation > 0:
        recommendations.append(AllocationRecommendation(
            asset_type="Bond",
            name="Total Bond Market ETF",
            allocation=preferences.bond_allocation,
            risk="Low"
        ))

    if preferences.cash_allocation > 0:
        recommendations.append(AllocationRecommendation(
            asset_type="Cash",
            name="High-Yield Savings Account",
            allocation=preferences.cash_allocation,
            risk="Very Low"
        ))

    if preferences.alternative_allocation > 0:
        if preferences.esg_focus:
            recommendations.append(AllocationRecommendation(
                asset_type="Alternative",
                name="ESG ETF",
                allocation=preferences.alternative_allocation,
                risk="Medium"
            ))
        else:
            half = preferences.alternative_allocation * 0.5
            recommendations.append(AllocationRecommendation(
                asset_type="Alternative", name="REIT ETF", allocation=half, risk="Medium-High"
            ))
            recommendations.append(AllocationRecommendation(
                asset_type="Alternative", name="Commodity ETF", allocation=half, risk="High"
            ))

    return recommendations
