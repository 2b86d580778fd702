"""Credit scoring engine - category scorers, aggregation, and the scoring pipeline"""

import logging
import math
from typing import Sequence

from credit_scoring.domain.metrics import analyze_financials
from credit_scoring.domain.models import (
    BusinessProfile,
    CategoryBreakdown,
    CreditScoreResult,
    DerivedMetrics,
    FinancialPeriodRecord,
)
from credit_scoring.domain.rating import classify_score

logger = logging.getLogger(__name__)

CATEGORY_MAX = 200.0
CATEGORY_NAMES = ("debt", "liquidity", "profitability", "cash_flow", "growth")
MIN_SCORE = 0
MAX_SCORE = 1000


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def score_debt_to_equity(debt_to_equity: float) -> float:
    """
    Debt-to-equity component (0-100 points). Lower leverage is better.

    < 0.5 earns full marks; the curve falls to 75 at 1.0, 50 just under 2.0,
    25 at 2.0 and reaches 0 at 5.0.
    """
    x = debt_to_equity
    if x < 0.5:
        return 100.0
    elif x < 1.0:
        return 75 + ((1.0 - x) / 0.5) * 25
    elif x < 2.0:
        return 50 + ((2.0 - x) / 1.0) * 25
    elif x < 5.0:
        return 25 * (1 - (x - 2.0) / 3.0)
    else:
        return 0.0


def score_debt_service_coverage(dscr: float) -> float:
    """Debt service coverage component (0-100 points). 2.0x or better earns full marks."""
    x = dscr
    if x >= 2.0:
        return 100.0
    elif x >= 1.5:
        return 75 + ((x - 1.5) / 0.5) * 25
    elif x >= 1.25:
        return 50 + ((x - 1.25) / 0.25) * 25
    elif x >= 1.0:
        return 25 + ((x - 1.0) / 0.25) * 25
    else:
        return max(0.0, x * 25)


def score_debt(metrics: DerivedMetrics) -> float:
    """Debt category (0-200): D/E and DSCR, 100 points each"""
    score = score_debt_to_equity(metrics.debt_to_equity) + score_debt_service_coverage(
        metrics.debt_service_coverage_ratio
    )
    return _clamp(score, 0.0, CATEGORY_MAX)


def score_liquidity(metrics: DerivedMetrics) -> float:
    """
    Liquidity category (0-200) from the current ratio alone.

    The sweet spot is 2.0-3.0. Ratios above 4.0 decay slowly toward a floor of
    100 since idle current assets point to inefficient capital use.
    """
    x = metrics.current_ratio
    if 2.0 <= x <= 3.0:
        score = 200.0
    elif 1.5 <= x < 2.0:
        score = 150 + ((x - 1.5) / 0.5) * 50
    elif 3.0 < x <= 4.0:
        score = 150 + ((4.0 - x) / 1.0) * 50
    elif 1.0 <= x < 1.5:
        score = 100 + ((x - 1.0) / 0.5) * 50
    elif x < 1.0:
        score = x * 100
    else:
        score = max(100.0, 150 - (x - 4.0) * 10)

    return _clamp(score, 0.0, CATEGORY_MAX)


def _score_return_ratio(value: float, high: float, mid: float, low: float) -> float:
    """Shared 0-100 curve for percentage return ratios (margin, ROA)"""
    if value >= high:
        return 100.0
    elif value >= mid:
        return 75 + ((value - mid) / (high - mid)) * 25
    elif value >= low:
        return 50 + ((value - low) / (mid - low)) * 25
    elif value >= 0:
        return (value / low) * 50
    else:
        # Losses: small ones keep a little credit, -25% or worse earns nothing
        return max(0.0, 25 + value)


def score_net_profit_margin(net_profit_margin: float) -> float:
    return _score_return_ratio(net_profit_margin, high=20, mid=10, low=5)


def score_return_on_assets(return_on_assets: float) -> float:
    return _score_return_ratio(return_on_assets, high=15, mid=8, low=3)


def score_profitability(metrics: DerivedMetrics) -> float:
    """Profitability category (0-200): net profit margin and ROA, 100 points each"""
    score = score_net_profit_margin(metrics.net_profit_margin) + score_return_on_assets(
        metrics.return_on_assets
    )
    return _clamp(score, 0.0, CATEGORY_MAX)


def score_cash_flow(metrics: DerivedMetrics) -> float:
    """
    Cash flow category (0-200) from operating cash flow in currency units.

    Anything above 100k earns full marks. Negative cash flow starts at 50 and
    loses 50 points per 10k of burn.
    """
    x = metrics.operating_cash_flow
    if x > 100_000:
        score = 200.0
    elif x > 50_000:
        score = 175 + ((x - 50_000) / 50_000) * 25
    elif x > 25_000:
        score = 150 + ((x - 25_000) / 25_000) * 25
    elif x > 10_000:
        score = 125 + ((x - 10_000) / 15_000) * 25
    elif x > 0:
        score = 75 + (x / 10_000) * 50
    else:
        score = max(0.0, 50 + (x / 10_000) * 50)

    return _clamp(score, 0.0, CATEGORY_MAX)


def score_growth(metrics: DerivedMetrics) -> float:
    """Growth category (0-200) from revenue growth in percent"""
    x = metrics.revenue_growth
    if x >= 30:
        score = 200.0
    elif x >= 15:
        score = 150 + ((x - 15) / 15) * 50
    elif x >= 5:
        score = 100 + ((x - 5) / 10) * 50
    elif x >= 0:
        score = 75 + (x / 5) * 25
    elif x >= -10:
        score = 50 + ((x + 10) / 10) * 25
    else:
        score = max(0.0, 25 + ((x + 20) / 10) * 25)

    return _clamp(score, 0.0, CATEGORY_MAX)


def score_categories(metrics: DerivedMetrics) -> CategoryBreakdown:
    """Run the five category scorers. They are independent of each other."""
    return CategoryBreakdown(
        debt_score=score_debt(metrics),
        liquidity_score=score_liquidity(metrics),
        profitability_score=score_profitability(metrics),
        cash_flow_score=score_cash_flow(metrics),
        growth_score=score_growth(metrics),
    )


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive totals (Python's round() is banker's rounding)"""
    return int(math.floor(value + 0.5))


def aggregate_score(breakdown: CategoryBreakdown) -> int:
    """Sum the category scores, round, and clamp to 0-1000"""
    total = round_half_up(breakdown.total)
    return int(_clamp(total, MIN_SCORE, MAX_SCORE))


def calculate_credit_score(
    profile: BusinessProfile,
    history: Sequence[FinancialPeriodRecord],
) -> CreditScoreResult:
    """
    Main entry point: derive metrics, score each category, aggregate, and classify.

    Stateless and deterministic; identical inputs always give an identical result.

    Raises:
        ValidationError: If the history is empty or malformed. No partial result
            is produced.
    """
    metrics, assumptions = analyze_financials(profile, history)
    breakdown = score_categories(metrics)
    score = aggregate_score(breakdown)
    rating = classify_score(score)

    logger.debug(
        "Credit score calculated",
        extra={"score": score, "rating": rating.label, "periods": len(history)},
    )

    return CreditScoreResult(
        score=score,
        breakdown=breakdown,
        metrics=metrics,
        rating=rating,
        assumptions=assumptions,
    )
