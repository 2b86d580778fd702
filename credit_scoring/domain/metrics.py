"""Financial metrics calculator - derives standardized ratios from a business's history"""

import logging
from typing import List, Optional, Sequence, Tuple

from credit_scoring.domain.ingestion import validate_history
from credit_scoring.domain.models import BusinessProfile, DerivedMetrics, FinancialPeriodRecord

logger = logging.getLogger(__name__)

# Sentinel ceilings for degenerate denominators.
# D/E with zero or negative equity is treated as maximal leverage.
DEBT_TO_EQUITY_CEILING = 999.0
# No current liabilities: nothing falls due, most favorable liquidity.
CURRENT_RATIO_CEILING = 10.0
# No debt or no EBITDA on file: treated as fully covered.
DEBT_SERVICE_COVERAGE_DEFAULT = 10.0

# Annual debt service assumed as a share of total debt
ANNUAL_DEBT_SERVICE_RATE = 0.10

# Growth fallback compares the first and last quarter of the history
GROWTH_WINDOW_MONTHS = 3
MIN_GROWTH_HISTORY_MONTHS = 6

# Assumption flags attached to a result when a fallback replaced real data
DEBT_TO_EQUITY_CEILING_USED = "debt_to_equity_ceiling"
CURRENT_RATIO_CEILING_USED = "current_ratio_ceiling"
DSCR_DEFAULT_USED = "dscr_default"
GROWTH_REDERIVED = "growth_rederived"
GROWTH_INSUFFICIENT_HISTORY = "growth_insufficient_history"
NET_MARGIN_NO_REVENUE = "net_margin_no_revenue"
RETURN_ON_ASSETS_NO_ASSETS = "return_on_assets_no_assets"
OPERATING_CASH_FLOW_PROXY = "operating_cash_flow_proxy"


def _first_present(*values: Optional[float]) -> Optional[float]:
    for value in values:
        if value is not None:
            return value
    return None


def _net_total(records: Sequence[FinancialPeriodRecord]) -> float:
    return sum(r.earnings for r in records) - sum(r.losses for r in records)


def calculate_revenue_growth(history: Sequence[FinancialPeriodRecord]) -> Optional[float]:
    """
    Percentage change from the first quarter's net revenue to the last quarter's.

    Returns None when the history is shorter than six months. A non-positive
    first quarter yields 0.0 since there is no base to grow from.
    """
    if len(history) < MIN_GROWTH_HISTORY_MONTHS:
        return None

    first_quarter = _net_total(history[:GROWTH_WINDOW_MONTHS])
    last_quarter = _net_total(history[-GROWTH_WINDOW_MONTHS:])

    if first_quarter <= 0:
        return 0.0

    return (last_quarter - first_quarter) / first_quarter * 100


def analyze_financials(
    profile: BusinessProfile,
    history: Sequence[FinancialPeriodRecord],
) -> Tuple[DerivedMetrics, Tuple[str, ...]]:
    """
    Derive the seven scoring metrics plus the assumption flags raised on the way.

    Every metric prefers the explicit value on the profile and otherwise derives
    it from the history and balance-sheet aggregates. Degenerate denominators are
    replaced by the sentinel constants above instead of raising.

    Raises:
        ValidationError: If the history is empty or a record is malformed
    """
    validate_history(history)
    assumptions: List[str] = []

    # Revenue = earnings - losses; net income is not separated from revenue
    total_revenue = _net_total(history)
    total_net_income = total_revenue

    # Balance sheet: explicit aggregates first, then the latest period on file
    latest = history[-1]
    current_assets = _first_present(profile.current_assets, profile.assets, latest.assets)
    current_liabilities = _first_present(
        profile.current_liabilities, profile.liabilities, latest.liabilities
    )
    # Working capital stands in for equity only when no equity figure exists at all
    total_equity = _first_present(
        profile.equity, latest.equity, current_assets - current_liabilities
    )

    # Debt-to-equity (lower is better)
    if profile.debt_to_equity is not None:
        debt_to_equity = profile.debt_to_equity
    elif total_equity > 0:
        debt_to_equity = current_liabilities / total_equity
    else:
        debt_to_equity = DEBT_TO_EQUITY_CEILING
        assumptions.append(DEBT_TO_EQUITY_CEILING_USED)

    # Current ratio (higher is better up to ~3.0)
    if profile.current_ratio is not None:
        current_ratio = profile.current_ratio
    elif current_liabilities > 0:
        current_ratio = current_assets / current_liabilities
    else:
        current_ratio = CURRENT_RATIO_CEILING
        assumptions.append(CURRENT_RATIO_CEILING_USED)

    # Debt service coverage
    total_debt = profile.total_debt or 0.0
    ebitda = profile.ebitda or 0.0
    if profile.debt_service_coverage is not None:
        debt_service_coverage = profile.debt_service_coverage
    elif total_debt > 0 and ebitda > 0:
        debt_service_coverage = ebitda / (total_debt * ANNUAL_DEBT_SERVICE_RATE)
    else:
        debt_service_coverage = DEBT_SERVICE_COVERAGE_DEFAULT
        assumptions.append(DSCR_DEFAULT_USED)

    if profile.net_profit_margin is not None:
        net_profit_margin = profile.net_profit_margin
    elif total_revenue > 0:
        net_profit_margin = total_net_income / total_revenue * 100
    else:
        net_profit_margin = 0.0
        assumptions.append(NET_MARGIN_NO_REVENUE)

    if profile.return_on_assets is not None:
        return_on_assets = profile.return_on_assets
    elif current_assets > 0:
        return_on_assets = total_net_income / current_assets * 100
    else:
        return_on_assets = 0.0
        assumptions.append(RETURN_ON_ASSETS_NO_ASSETS)

    # An explicit 0% cannot be told apart from "not supplied", so it is re-derived
    if profile.sales_growth:
        revenue_growth = profile.sales_growth
    else:
        derived_growth = calculate_revenue_growth(history)
        if derived_growth is None:
            revenue_growth = 0.0
            assumptions.append(GROWTH_INSUFFICIENT_HISTORY)
        else:
            revenue_growth = derived_growth
            if profile.sales_growth is not None:
                logger.warning(
                    "Explicit sales_growth of 0 replaced by growth derived from history",
                    extra={"derived_growth": derived_growth},
                )
                assumptions.append(GROWTH_REDERIVED)

    if profile.operating_cash_flow is not None:
        operating_cash_flow = profile.operating_cash_flow
    else:
        operating_cash_flow = total_net_income
        assumptions.append(OPERATING_CASH_FLOW_PROXY)

    metrics = DerivedMetrics(
        debt_to_equity=debt_to_equity,
        current_ratio=current_ratio,
        debt_service_coverage_ratio=debt_service_coverage,
        net_profit_margin=net_profit_margin,
        return_on_assets=return_on_assets,
        revenue_growth=revenue_growth,
        operating_cash_flow=operating_cash_flow,
    )

    if assumptions:
        logger.debug("Metric fallbacks applied", extra={"assumptions": assumptions})

    return metrics, tuple(assumptions)


def calculate_metrics(
    profile: BusinessProfile,
    history: Sequence[FinancialPeriodRecord],
) -> DerivedMetrics:
    """Derive scoring metrics, discarding the assumption flags"""
    metrics, _ = analyze_financials(profile, history)
    return metrics
