"""Pydantic schemas for API request/response validation"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, FiniteFloat
from pydantic.alias_generators import to_camel

from credit_scoring.domain.models import BusinessProfile, CreditScoreResult, FinancialPeriodRecord


class BusinessProfileSchema(BaseModel):
    """Business attributes and optional pre-computed aggregates"""

    model_config = ConfigDict(strict=True, extra="ignore")

    industry: Optional[str] = None
    founded: Optional[str] = None
    employees: Optional[int] = Field(default=None, ge=0)

    debt_service_coverage: Optional[FiniteFloat] = None
    current_ratio: Optional[FiniteFloat] = None
    debt_to_equity: Optional[FiniteFloat] = None
    net_profit_margin: Optional[FiniteFloat] = None
    return_on_assets: Optional[FiniteFloat] = None
    sales_growth: Optional[FiniteFloat] = None
    operating_cash_flow: Optional[FiniteFloat] = None
    total_debt: Optional[FiniteFloat] = None
    ebitda: Optional[FiniteFloat] = None
    assets: Optional[FiniteFloat] = None
    liabilities: Optional[FiniteFloat] = None
    equity: Optional[FiniteFloat] = None
    current_assets: Optional[FiniteFloat] = None
    current_liabilities: Optional[FiniteFloat] = None

    def to_domain(self) -> BusinessProfile:
        return BusinessProfile(**self.model_dump())


class FinancialRecordSchema(BaseModel):
    """One month of financial data; every field is required"""

    model_config = ConfigDict(strict=True)

    month: str = Field(..., min_length=1)
    year: int
    earnings: FiniteFloat
    losses: FiniteFloat
    assets: FiniteFloat
    liabilities: FiniteFloat
    equity: FiniteFloat

    def to_domain(self) -> FinancialPeriodRecord:
        return FinancialPeriodRecord(**self.model_dump())


class ScoreRequest(BaseModel):
    """Request body for POST /v1/score"""

    business_id: str = Field(..., min_length=1, description="Business identifier")
    profile: BusinessProfileSchema = Field(default_factory=BusinessProfileSchema)
    history: List[FinancialRecordSchema] = Field(
        ..., min_length=1, description="Monthly records, oldest first"
    )


class SeriesScoreRequest(BaseModel):
    """Request body for POST /v1/score/series (monthly series as stored upstream)"""

    business_id: str = Field(..., min_length=1, description="Business identifier")
    profile: BusinessProfileSchema = Field(default_factory=BusinessProfileSchema)
    revenue_data: Union[str, List[Dict[str, Any]]] = Field(
        ..., description='JSON list of {"month": "Jan 2025", "value": n}'
    )
    expense_data: Union[str, List[Dict[str, Any]]]
    assets: float
    liabilities: float
    equity: float


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BreakdownSchema(_CamelModel):
    debt_score: float
    liquidity_score: float
    profitability_score: float
    cash_flow_score: float
    growth_score: float


class MetricsSchema(_CamelModel):
    debt_to_equity: float
    current_ratio: float
    debt_service_coverage_ratio: float
    net_profit_margin: float
    return_on_assets: float
    revenue_growth: float
    operating_cash_flow: float


class ScoreResponse(_CamelModel):
    """Response for the scoring endpoints"""

    business_id: str
    score: int
    rating: str
    severity: str
    risk_level: str
    breakdown: BreakdownSchema
    metrics: MetricsSchema
    assumptions: List[str]
    cached: bool = False

    @classmethod
    def from_result(cls, business_id: str, result: CreditScoreResult, cached: bool = False) -> "ScoreResponse":
        breakdown = result.breakdown
        metrics = result.metrics
        return cls(
            business_id=business_id,
            score=result.score,
            rating=result.rating.label,
            severity=result.rating.severity,
            risk_level=result.rating.risk_level,
            breakdown=BreakdownSchema(
                debt_score=breakdown.debt_score,
                liquidity_score=breakdown.liquidity_score,
                profitability_score=breakdown.profitability_score,
                cash_flow_score=breakdown.cash_flow_score,
                growth_score=breakdown.growth_score,
            ),
            metrics=MetricsSchema(
                debt_to_equity=metrics.debt_to_equity,
                current_ratio=metrics.current_ratio,
                debt_service_coverage_ratio=metrics.debt_service_coverage_ratio,
                net_profit_margin=metrics.net_profit_margin,
                return_on_assets=metrics.return_on_assets,
                revenue_growth=metrics.revenue_growth,
                operating_cash_flow=metrics.operating_cash_flow,
            ),
            assumptions=list(result.assumptions),
            cached=cached,
        )


class CacheClearResponse(BaseModel):
    """Response for DELETE /v1/score/cache/{business_id}"""

    business_id: str
    cleared: int
