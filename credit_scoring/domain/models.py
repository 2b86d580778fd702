"""Domain models - immutable dataclasses for the credit scoring pipeline"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class BusinessProfile:
    """Static business attributes plus optional pre-computed financial aggregates"""

    industry: Optional[str] = None
    founded: Optional[str] = None
    employees: Optional[int] = None

    # Pre-computed ratios (None = not supplied)
    debt_service_coverage: Optional[float] = None
    current_ratio: Optional[float] = None
    debt_to_equity: Optional[float] = None
    net_profit_margin: Optional[float] = None
    return_on_assets: Optional[float] = None
    sales_growth: Optional[float] = None
    operating_cash_flow: Optional[float] = None

    # Balance sheet / debt aggregates
    total_debt: Optional[float] = None
    ebitda: Optional[float] = None
    assets: Optional[float] = None
    liabilities: Optional[float] = None
    equity: Optional[float] = None
    current_assets: Optional[float] = None
    current_liabilities: Optional[float] = None


@dataclass(frozen=True)
class FinancialPeriodRecord:
    """One month of financial data"""

    month: str
    year: int
    earnings: float
    losses: float
    assets: float
    liabilities: float
    equity: float

    @property
    def net(self) -> float:
        """Earnings net of losses for the period"""
        return self.earnings - self.losses


@dataclass(frozen=True)
class DerivedMetrics:
    """Standardized financial metrics fed into the category scorers"""

    debt_to_equity: float
    current_ratio: float
    debt_service_coverage_ratio: float
    net_profit_margin: float
    return_on_assets: float
    revenue_growth: float
    operating_cash_flow: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "debtToEquity": self.debt_to_equity,
            "currentRatio": self.current_ratio,
            "debtServiceCoverageRatio": self.debt_service_coverage_ratio,
            "netProfitMargin": self.net_profit_margin,
            "returnOnAssets": self.return_on_assets,
            "revenueGrowth": self.revenue_growth,
            "operatingCashFlow": self.operating_cash_flow,
        }


@dataclass(frozen=True)
class CategoryBreakdown:
    """Per-category contributions to the total score (each 0-200)"""

    debt_score: float
    liquidity_score: float
    profitability_score: float
    cash_flow_score: float
    growth_score: float

    @property
    def total(self) -> float:
        return (
            self.debt_score
            + self.liquidity_score
            + self.profitability_score
            + self.cash_flow_score
            + self.growth_score
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            "debtScore": self.debt_score,
            "liquidityScore": self.liquidity_score,
            "profitabilityScore": self.profitability_score,
            "cashFlowScore": self.cash_flow_score,
            "growthScore": self.growth_score,
        }


@dataclass(frozen=True)
class CreditRating:
    """Rating label and coarse tiers for a final score"""

    label: str
    severity: str  # "favorable" | "caution" | "risk"
    risk_level: str  # "low" | "medium" | "high"


@dataclass(frozen=True)
class CreditScoreResult:
    """Output of the scoring pipeline"""

    score: int
    breakdown: CategoryBreakdown
    metrics: DerivedMetrics
    rating: CreditRating
    assumptions: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the camelCase output record consumed by the dashboard"""
        return {
            "score": self.score,
            "breakdown": self.breakdown.to_dict(),
            "metrics": self.metrics.to_dict(),
            "rating": self.rating.label,
            "severity": self.rating.severity,
            "riskLevel": self.rating.risk_level,
            "assumptions": list(self.assumptions),
        }
