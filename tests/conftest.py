"""Pytest fixtures for testing"""

import pytest
from typing import Callable, List, Sequence
from fastapi.testclient import TestClient
from credit_scoring.api.main import create_app
from credit_scoring.api.dependencies import get_score_cache
from credit_scoring.domain.models import BusinessProfile, FinancialPeriodRecord
from credit_scoring.infrastructure.cache import InMemoryScoreCache

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

RecordFactory = Callable[..., List[FinancialPeriodRecord]]


@pytest.fixture
def make_history() -> RecordFactory:
    """Build a monthly history from per-month earnings and losses"""

    def _make(
        earnings: Sequence[float],
        losses: Sequence[float],
        assets: float = 500_000,
        liabilities: float = 200_000,
        equity: float = 300_000,
    ) -> List[FinancialPeriodRecord]:
        return [
            FinancialPeriodRecord(
                month=MONTHS[i % 12],
                year=2024 + i // 12,
                earnings=e,
                losses=l,
                assets=assets,
                liabilities=liabilities,
                equity=equity,
            )
            for i, (e, l) in enumerate(zip(earnings, losses))
        ]

    return _make


@pytest.fixture
def strong_history(make_history: RecordFactory) -> List[FinancialPeriodRecord]:
    """12 months growing 2% a month (~27%/yr) with costs at 65% of earnings"""
    earnings = [50_000 * 1.02**i for i in range(12)]
    losses = [e * 0.65 for e in earnings]
    return make_history(earnings, losses)


@pytest.fixture
def strong_profile() -> BusinessProfile:
    return BusinessProfile(
        industry="Manufacturing",
        founded="2012-04-01",
        employees=45,
        debt_to_equity=0.5,
        current_ratio=2.4,
        debt_service_coverage=3.2,
        current_assets=500_000,
    )


@pytest.fixture
def score_cache() -> InMemoryScoreCache:
    return InMemoryScoreCache(max_entries=16)


@pytest.fixture
def client(score_cache: InMemoryScoreCache) -> TestClient:
    """Create FastAPI test client with an isolated score cache"""
    app = create_app()
    app.dependency_overrides[get_score_cache] = lambda: score_cache
    return TestClient(app)


@pytest.fixture
def score_payload() -> dict:
    """Request body for POST /v1/score with a healthy twelve-month history"""
    return {
        "business_id": "biz_001",
        "profile": {
            "industry": "Retail",
            "debt_to_equity": 0.8,
            "current_ratio": 2.1,
            "total_debt": 150_000,
            "ebitda": 45_000,
            "current_assets": 320_000,
            "current_liabilities": 150_000,
        },
        "history": [
            {
                "month": MONTHS[i],
                "year": 2024,
                "earnings": 40_000 + i * 1_000,
                "losses": 28_000,
                "assets": 320_000,
                "liabilities": 150_000,
                "equity": 170_000,
            }
            for i in range(12)
        ],
    }
