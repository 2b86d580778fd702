"""Unit tests for category scorers, aggregation, and the scoring pipeline"""

import pytest
from credit_scoring.domain.exceptions import ValidationError
from credit_scoring.domain.models import BusinessProfile, CategoryBreakdown, DerivedMetrics
from credit_scoring.domain.scoring import (
    CATEGORY_MAX,
    CATEGORY_NAMES,
    MAX_SCORE,
    aggregate_score,
    calculate_credit_score,
    round_half_up,
    score_cash_flow,
    score_debt,
    score_debt_service_coverage,
    score_debt_to_equity,
    score_growth,
    score_liquidity,
    score_net_profit_margin,
    score_profitability,
    score_return_on_assets,
)


def make_metrics(**overrides) -> DerivedMetrics:
    values = dict(
        debt_to_equity=0.3,
        current_ratio=2.5,
        debt_service_coverage_ratio=2.5,
        net_profit_margin=25.0,
        return_on_assets=20.0,
        revenue_growth=35.0,
        operating_cash_flow=150_000.0,
    )
    values.update(overrides)
    return DerivedMetrics(**values)


def test_category_maxima_sum_to_max_score():
    assert CATEGORY_MAX * len(CATEGORY_NAMES) == MAX_SCORE == 1000


def test_perfect_metrics_hit_every_category_max():
    """Strongest possible metrics score 200 in every category"""
    metrics = make_metrics()

    assert score_debt(metrics) == 200
    assert score_liquidity(metrics) == 200
    assert score_profitability(metrics) == 200
    assert score_cash_flow(metrics) == 200
    assert score_growth(metrics) == 200


@pytest.mark.parametrize(
    "debt_to_equity, expected",
    [
        (0.2, 100),
        (0.5, 100),  # 75 + (0.5 / 0.5) * 25
        (0.75, 87.5),
        (1.0, 75),  # 50 + (1.0 / 1.0) * 25
        (1.5, 62.5),
        (2.0, 25),  # 25 * (1 - 0)
        (3.5, 12.5),
        (5.0, 0),
        (999, 0),
    ],
)
def test_debt_to_equity_curve(debt_to_equity, expected):
    assert score_debt_to_equity(debt_to_equity) == pytest.approx(expected)


@pytest.mark.parametrize(
    "dscr, expected",
    [
        (3.2, 100),
        (2.0, 100),
        (1.75, 87.5),
        (1.5, 75),
        (1.35, 60),
        (1.25, 50),
        (1.0, 25),
        (0.85, 21.25),
        (0.0, 0),
        (-2.0, 0),
    ],
)
def test_debt_service_coverage_curve(dscr, expected):
    assert score_debt_service_coverage(dscr) == pytest.approx(expected)


@pytest.mark.parametrize(
    "current_ratio, expected",
    [
        (0.0, 0),
        (0.63, 63),
        (1.0, 100),
        (1.25, 125),
        (1.5, 150),
        (1.75, 175),
        (2.0, 200),
        (3.0, 200),
        (3.5, 175),
        (4.0, 150),
        (6.0, 130),
        (10.0, 100),  # current ratio ceiling
        (50.0, 100),
    ],
)
def test_liquidity_curve(current_ratio, expected):
    assert score_liquidity(make_metrics(current_ratio=current_ratio)) == pytest.approx(expected)


def test_liquidity_negative_ratio_clamped_to_zero():
    assert score_liquidity(make_metrics(current_ratio=-0.5)) == 0


@pytest.mark.parametrize(
    "margin, expected",
    [
        (25, 100),
        (20, 100),
        (15, 87.5),
        (10, 75),
        (7.5, 62.5),
        (5, 50),
        (2.5, 25),
        (0, 0),
        (-3, 22),  # 25 + (-3)
        (-30, 0),
    ],
)
def test_net_profit_margin_curve(margin, expected):
    assert score_net_profit_margin(margin) == pytest.approx(expected)


@pytest.mark.parametrize(
    "roa, expected",
    [
        (15, 100),
        (11.5, 87.5),
        (8, 75),
        (5.5, 62.5),
        (3, 50),
        (1.5, 25),
        (0, 0),
        (-1, 24),
        (-40, 0),
    ],
)
def test_return_on_assets_curve(roa, expected):
    assert score_return_on_assets(roa) == pytest.approx(expected)


@pytest.mark.parametrize(
    "cash_flow, expected",
    [
        (250_000, 200),
        (100_000, 200),  # 175 + 25
        (75_000, 187.5),
        (50_000, 175),
        (25_000, 150),
        (10_000, 125),
        (5_000, 100),
        (0, 50),
        (-5_000, 25),
        (-10_000, 0),
        (-500_000, 0),
    ],
)
def test_cash_flow_curve(cash_flow, expected):
    assert score_cash_flow(make_metrics(operating_cash_flow=cash_flow)) == pytest.approx(expected)


@pytest.mark.parametrize(
    "growth, expected",
    [
        (45, 200),
        (30, 200),
        (22.5, 175),
        (15, 150),
        (10, 125),
        (6, 105),
        (5, 100),
        (0, 75),
        (-5, 62.5),
        (-10, 50),
        (-12, 45),
        (-20, 25),
        (-30, 0),
        (-80, 0),
    ],
)
def test_growth_curve(growth, expected):
    assert score_growth(make_metrics(revenue_growth=growth)) == pytest.approx(expected)


def test_debt_score_non_increasing_in_leverage():
    """More leverage never earns more points"""
    ratios = [i * 0.05 for i in range(0, 140)]
    scores = [score_debt_to_equity(x) for x in ratios]
    assert all(a >= b for a, b in zip(scores, scores[1:]))


@pytest.mark.parametrize(
    "scorer, start, stop, step",
    [
        (score_debt_service_coverage, -1.0, 4.0, 0.01),
        (lambda x: score_cash_flow(make_metrics(operating_cash_flow=x)), -30_000, 150_000, 250),
        (lambda x: score_growth(make_metrics(revenue_growth=x)), -40.0, 40.0, 0.1),
        (lambda x: score_liquidity(make_metrics(current_ratio=x)), 0.0, 2.0, 0.01),
        (score_net_profit_margin, 0.0, 30.0, 0.05),
        (score_return_on_assets, 0.0, 30.0, 0.05),
    ],
)
def test_scorers_non_decreasing(scorer, start, stop, step):
    """Improving the metric never lowers the score across the monotone part of each curve"""
    steps = int((stop - start) / step)
    values = [start + i * step for i in range(steps + 1)]
    scores = [scorer(x) for x in values]
    assert all(a <= b + 1e-9 for a, b in zip(scores, scores[1:]))


def test_category_scores_stay_within_bounds():
    extremes = [-1e9, -100, -1, 0, 0.5, 1, 2, 5, 100, 1e9]
    for x in extremes:
        metrics = make_metrics(
            debt_to_equity=x,
            current_ratio=x,
            debt_service_coverage_ratio=x,
            net_profit_margin=x,
            return_on_assets=x,
            revenue_growth=x,
            operating_cash_flow=x,
        )
        for scorer in (score_debt, score_liquidity, score_profitability, score_cash_flow, score_growth):
            assert 0 <= scorer(metrics) <= CATEGORY_MAX


def test_round_half_up():
    """Halves round up, unlike Python's banker's rounding"""
    assert round_half_up(602.5) == 603
    assert round_half_up(2.5) == 3
    assert round_half_up(602.49) == 602


def test_aggregate_score_rounds_sum():
    breakdown = CategoryBreakdown(51.5, 106.0, 125.0, 155.0, 115.0)
    assert aggregate_score(breakdown) == 553  # 552.5 rounds up


def test_aggregate_score_clamped():
    assert aggregate_score(CategoryBreakdown(200, 200, 200, 200, 200)) == 1000
    assert aggregate_score(CategoryBreakdown(0, 0, 0, 0, 0)) == 0


def test_calculate_credit_score_empty_history():
    """Empty history raises and produces no score"""
    with pytest.raises(ValidationError):
        calculate_credit_score(BusinessProfile(), [])


def test_scenario_strong_business(strong_profile, strong_history):
    """Low leverage, ample liquidity, ~27%/yr growth: Excellent"""
    result = calculate_credit_score(strong_profile, strong_history)

    # Growth: last quarter / first quarter = 1.02^9, about +19.5%
    assert result.metrics.revenue_growth == pytest.approx(19.509, abs=0.01)
    assert result.breakdown.debt_score == pytest.approx(200)
    assert result.breakdown.liquidity_score == pytest.approx(200)
    assert result.breakdown.profitability_score == pytest.approx(200)
    assert result.breakdown.cash_flow_score == pytest.approx(200)
    assert result.breakdown.growth_score == pytest.approx(165.03, abs=0.01)
    assert result.score == 965
    assert result.score >= 700
    assert result.rating.label in ("Very Good", "Excellent")
    assert result.rating.severity == "favorable"


def test_scenario_moderate_business(make_history):
    """Mid-range leverage, thin liquidity, modest growth: Good"""
    profile = BusinessProfile(
        debt_to_equity=1.94,
        current_ratio=1.06,
        debt_service_coverage=1.35,
        sales_growth=6.0,
        net_profit_margin=8.0,
        return_on_assets=5.1,
        operating_cash_flow=30_000,
    )
    history = make_history([30_000] * 12, [27_500] * 12)

    result = calculate_credit_score(profile, history)

    # debt 51.5 + 60, liquidity 106, profitability 65 + 60.5, cash flow 155, growth 105
    assert result.breakdown.debt_score == pytest.approx(111.5)
    assert result.breakdown.liquidity_score == pytest.approx(106)
    assert result.breakdown.profitability_score == pytest.approx(125.5)
    assert result.breakdown.cash_flow_score == pytest.approx(155)
    assert result.breakdown.growth_score == pytest.approx(105)
    assert result.score == 603
    assert 550 <= result.score < 700
    assert result.rating.label == "Good"
    assert result.rating.severity == "caution"


def test_scenario_weak_business(make_history):
    """Heavy leverage, illiquid, shrinking and loss-making: Very Poor"""
    profile = BusinessProfile(
        debt_to_equity=8.3,
        current_ratio=0.63,
        debt_service_coverage=0.85,
        sales_growth=-12.0,
        current_assets=200_000,
    )
    history = make_history([40_000] * 12, [45_000] * 12)

    result = calculate_credit_score(profile, history)

    # debt 0 + 21.25, liquidity 63, profitability 0 (no revenue, ROA -30%),
    # cash flow 0 (-60k), growth 45
    assert result.metrics.operating_cash_flow == pytest.approx(-60_000)
    assert result.metrics.return_on_assets == pytest.approx(-30)
    assert result.breakdown.debt_score == pytest.approx(21.25)
    assert result.breakdown.profitability_score == 0
    assert result.breakdown.cash_flow_score == 0
    assert result.breakdown.growth_score == pytest.approx(45)
    assert result.score == 129
    assert result.score < 450
    assert result.rating.label in ("Poor", "Very Poor")
    assert result.rating.severity == "risk"


def test_breakdown_sums_to_score(strong_profile, strong_history, make_history):
    """Summed and rounded breakdown equals the reported score"""
    weak = calculate_credit_score(
        BusinessProfile(current_ratio=0.4), make_history([1_000] * 6, [3_000] * 6)
    )
    strong = calculate_credit_score(strong_profile, strong_history)

    for result in (weak, strong):
        assert round_half_up(result.breakdown.total) == result.score


def test_calculate_credit_score_is_idempotent(strong_profile, strong_history):
    first = calculate_credit_score(strong_profile, strong_history)
    second = calculate_credit_score(strong_profile, strong_history)

    assert first == second
    assert first.to_dict() == second.to_dict()


def test_result_serializes_to_output_contract(strong_profile, strong_history):
    data = calculate_credit_score(strong_profile, strong_history).to_dict()

    assert set(data["breakdown"]) == {
        "debtScore",
        "liquidityScore",
        "profitabilityScore",
        "cashFlowScore",
        "growthScore",
    }
    assert set(data["metrics"]) == {
        "debtToEquity",
        "currentRatio",
        "debtServiceCoverageRatio",
        "netProfitMargin",
        "returnOnAssets",
        "revenueGrowth",
        "operatingCashFlow",
    }
    assert isinstance(data["score"], int)
    assert data["rating"] == "Excellent"
