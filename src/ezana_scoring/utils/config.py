"""
configuration file for the GRPV scoring and public officials aggregation

This centralizes the category weights, factor family definitions and every threshold
the scorers and insight rules use. Change the model here, not in the main code.
"""

# GRPV category weights, must add up to 1
CATEGORY_WEIGHTS = {
    'growth': 0.25,
    'risk': 0.25,
    'profitability': 0.25,
    'valuation': 0.25
}

# growth: average growth rate mapped linearly from [-10%, +30%] onto [0, 100]
GROWTH_RANGE = {
    'floor': -0.10,
    'span': 0.40
}

RISK = {
    'min_factors': 2,
    'neutral_score': 50.0, # returned when there isn't enough data
    'debt_label': 'Debt/Equity',
    'beta_key': 'Beta',
    'default_debt_to_equity': 1.0,
    'default_beta': 1.0,
    'debt_multiplier': 50.0, # D/E of 2 or more = 100 risk points
    'beta_multiplier': 66.67, # beta of 1.5 or more = 100 risk points
    'beta_weight': 0.6,
    'debt_weight': 0.4
}

# profitability families
# 'multiplier' maps the raw fraction onto 0-100 (30% profit margin = 100 points)
PROFITABILITY_FAMILIES = {
    'profit_margin': {
        'label': 'Profit Margin',
        'multiplier': 333.33,
        'weight': 0.3
    },
    'operating_margin': {
        'label': 'Operating Margin',
        'multiplier': 250.0,
        'weight': 0.3
    },
    'dividend_yield': {
        'label': 'Dividend Yield',
        'multiplier': 2000.0,
        'weight': 0.2
    },
    'ebitda_to_sales': {
        'label': 'EBITDA/Sales',
        'multiplier': 200.0,
        'weight': 0.2
    }
}

# valuation families
# score = 100 - (avg - 'anchor') * 'slope', floored at 0. lower is better except EPS
# 'default' is used when the family has no entries
VALUATION_FAMILIES = {
    'pe': {
        'label': 'P/E',
        'default': 20.0,
        'anchor': 15.0,
        'slope': 2.5,
        'weight': 0.2,
        'lower_is_better': True
    },
    'peg': {
        'label': 'PEG',
        'default': 2.0,
        'anchor': 1.0,
        'slope': 50.0,
        'weight': 0.2,
        'lower_is_better': True
    },
    'pb': {
        'label': 'P/B',
        'default': 5.0,
        'anchor': 1.0,
        'slope': 10.0,
        'weight': 0.15,
        'lower_is_better': True
    },
    'ev_to_revenue': {
        'label': 'EV/Revenue',
        'default': 8.0,
        'anchor': 1.0,
        'slope': 6.67,
        'weight': 0.15,
        'lower_is_better': True
    },
    'eps': {
        'label': 'EPS',
        'default': 0.0,
        'anchor': -5.0, # EPS of -5 = 0, EPS of 15 = 100
        'slope': 5.0,
        'weight': 0.2,
        'lower_is_better': False
    },
    'market_cap_relative': {
        'label': 'Market Cap Relative',
        'exact_key': True,
        'default': 1.0,
        'anchor': 1.0,
        'slope': 50.0,
        'weight': 0.1,
        'lower_is_better': True
    }
}

RATING_BANDS = [
    (80, 'Excellent'),
    (65, 'Good'),
    (50, 'Average'),
    (35, 'Below Average'),
    (0, 'Poor')
]

RECOMMENDATION_BANDS = [
    (65, 'Buy'),
    (45, 'Hold'),
    (0, 'Sell')
]

CACHE = {
    'ttl_hours': 24,
    'db_path': 'data/grpv_scores.db'
}

# yahoo finance client
FETCH = {
    'requests_per_second': 2.0,
    'max_retries': 3,
    'reference_market_cap': 500e9 # "Market Cap Relative" = market cap / this
}

# trend thresholds per card type, checked with strict '>' from the top down
# each card keeps its own set
TREND_THRESHOLDS = {
    'congress': [
        (10, 'Strongly Increasing'),
        (5, 'Increasing'),
        (-5, 'Stable'),
        (-10, 'Decreasing')
    ],
    'house': [
        (12, 'Strongly Increasing'),
        (6, 'Increasing'),
        (-6, 'Stable'),
        (-12, 'Decreasing')
    ],
    'senator': [
        (15, 'Strongly Increasing'),
        (8, 'Increasing'),
        (-8, 'Stable'),
        (-15, 'Decreasing')
    ],
    'contracts': [
        (15, 'Strongly Increasing'),
        (8, 'Increasing'),
        (-8, 'Stable'),
        (-15, 'Decreasing')
    ],
    'lobbying': [
        (20, 'Strongly Increasing'),
        (10, 'Increasing'),
        (-10, 'Stable'),
        (-20, 'Decreasing')
    ],
    'patents': [
        (25, 'Explosive Growth'),
        (15, 'Strong Growth'),
        (5, 'Moderate Growth'),
        (-5, 'Stable'),
        (-15, 'Declining')
    ],
    'sentiment': [
        (15, 'Strongly Improving'),
        (8, 'Improving'),
        (-8, 'Stable'),
        (-15, 'Declining')
    ]
}

# label used when the rate falls through every threshold
TREND_FLOOR_LABELS = {
    'congress': 'Strongly Decreasing',
    'house': 'Strongly Decreasing',
    'senator': 'Strongly Decreasing',
    'contracts': 'Strongly Decreasing',
    'lobbying': 'Strongly Decreasing',
    'patents': 'Significantly Declining',
    'sentiment': 'Strongly Declining'
}

# days since update -> freshness score, inclusive upper bounds
FRESHNESS_STEPS = [
    (1, 100.0),
    (7, 80.0),
    (30, 60.0),
    (90, 40.0)
]
FRESHNESS_FLOOR = 20.0

HEALTH_BANDS = [
    (90, 'Excellent'),
    (80, 'Good'),
    (70, 'Fair'),
    (60, 'Poor')
]

CORRELATION_BANDS = [
    (0.8, 'Very Strong'),
    (0.6, 'Strong'),
    (0.4, 'Moderate'),
    (0.2, 'Weak')
]

# risk score -> label, inclusive upper bounds
RISK_LEVEL_BANDS = [
    (2.0, 'Low'),
    (4.0, 'Moderate'),
    (6.0, 'High'),
    (8.0, 'Very High')
]

SENTIMENT_LABEL_BANDS = [
    (8.0, 'Extremely Bullish'),
    (6.0, 'Very Bullish'),
    (4.0, 'Bullish'),
    (2.0, 'Slightly Bullish'),
    (-2.0, 'Neutral'),
    (-4.0, 'Slightly Bearish'),
    (-6.0, 'Bearish'),
    (-8.0, 'Very Bearish')
]

EXPECTED_CARD_COUNT = 7

# card lookups: default list sizes and "at or above" filter thresholds
CARD_QUERIES = {
    'top_months': 5,
    'top_days': 5,
    'top_traders': 10,
    'high_value_trade': {
        'congress': 50000,
        'house': 50000,
        'senator': 100000
    },
    'high_value_contract': 1000000,
    'high_spending_report': 100000,
    'high_risk_factor': 6.0,
    'high_quality_patent': 8.0
}

# field each card ranks its monthly history by
MONTHLY_RANKING_FIELDS = {
    'congress': 'total_volume',
    'house': 'total_volume',
    'senator': 'total_volume',
    'contracts': 'total_value',
    'lobbying': 'total_spending',
    'patents': 'total_patents'
}

THRESHOLDS = {
    'volume_dominance': 1.5,
    'low_compliance': 80,
    'patent_growth': 20,
    'bullish_sentiment': 6,
    'high_conflicts': 10,
    'low_data_quality': 70,
    'stale_updates': 60,
    'conflict_risk_weight': 0.1,
    'volatility_risk_weight': 0.05
}

# portfolio dashboard
PORTFOLIO_THRESHOLDS = {
    'pnl_baseline': 80,
    'pnl_multiplier': 2,
    'high_risk': 7,
    'critical_risk': 8,
    'rebalance_deviation': 5.0,
    'significant_loss': -5000
}

PORTFOLIO_HEALTH_BANDS = [
    (80, 'Excellent'),
    (60, 'Good'),
    (40, 'Fair'),
    (20, 'Poor')
]
