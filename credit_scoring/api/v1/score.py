"""POST /v1/score - business credit score endpoints"""

import time
import logging
from typing import Callable, List, Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from credit_scoring.api.v1.schemas import (
    CacheClearResponse,
    ScoreRequest,
    ScoreResponse,
    SeriesScoreRequest,
)
from credit_scoring.api.dependencies import get_request_id, get_score_cache
from credit_scoring.domain.exceptions import ValidationError
from credit_scoring.domain.ingestion import build_history_from_series
from credit_scoring.domain.models import BusinessProfile, FinancialPeriodRecord
from credit_scoring.domain.scoring import calculate_credit_score
from credit_scoring.infrastructure.cache import (
    CREDIT_SCORE_TOPIC,
    ScoreCache,
    fingerprint,
    make_cache_key,
)
from credit_scoring.infrastructure.observability.logging import log_score
from credit_scoring.infrastructure.observability.metrics import (
    cache_hit_counter,
    record_score,
    validation_failure_counter,
)

router = APIRouter()


def _score_business(
    request_id: str,
    business_id: str,
    payload_digest: str,
    profile: BusinessProfile,
    load_history: Callable[[], List[FinancialPeriodRecord]],
    cache: Optional[ScoreCache],
) -> ScoreResponse:
    """
    Shared flow for the scoring endpoints.

    Flow:
    1. Serve from the injected cache when the same payload was scored before
    2. Build the typed history (may raise ValidationError)
    3. Run the scoring pipeline
    4. Cache, record metrics and logs
    """
    start_time = time.time()
    cache_key = make_cache_key(business_id, CREDIT_SCORE_TOPIC, payload_digest)

    try:
        cached = cache.get(cache_key) if cache is not None else None
        if cached is not None:
            cache_hit_counter.inc()
            duration_ms = (time.time() - start_time) * 1000
            log_score(request_id, business_id, cached.score, cached.rating.label, duration_ms, cached=True)
            return ScoreResponse.from_result(business_id, cached, cached=True)

        history = load_history()
        result = calculate_credit_score(profile, history)

        if cache is not None:
            cache.set(cache_key, result)

        duration_ms = (time.time() - start_time) * 1000
        record_score(result.score, result.rating.label)
        log_score(request_id, business_id, result.score, result.rating.label, duration_ms)

        return ScoreResponse.from_result(business_id, result)

    except ValidationError as e:
        validation_failure_counter.inc()
        logging.warning(f"Invalid financial data: {e}", extra={"request_id": request_id, "business_id": business_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id, "business_id": business_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/score", response_model=ScoreResponse)
def create_score(
    request_body: ScoreRequest,
    request: Request,
    cache: Optional[ScoreCache] = Depends(get_score_cache),
):
    """
    Score a business from its profile and monthly history.

    Returns:
        Score (0-1000), rating, per-category breakdown, and derived metrics
    """
    return _score_business(
        request_id=get_request_id(request),
        business_id=request_body.business_id,
        payload_digest=fingerprint(request_body.model_dump()),
        profile=request_body.profile.to_domain(),
        load_history=lambda: [record.to_domain() for record in request_body.history],
        cache=cache,
    )


@router.post("/score/series", response_model=ScoreResponse)
def create_score_from_series(
    request_body: SeriesScoreRequest,
    request: Request,
    cache: Optional[ScoreCache] = Depends(get_score_cache),
):
    """Score a business from monthly revenue/expense series as stored by the data layer"""
    return _score_business(
        request_id=get_request_id(request),
        business_id=request_body.business_id,
        payload_digest=fingerprint(request_body.model_dump()),
        profile=request_body.profile.to_domain(),
        load_history=lambda: build_history_from_series(
            request_body.revenue_data,
            request_body.expense_data,
            assets=request_body.assets,
            liabilities=request_body.liabilities,
            equity=request_body.equity,
        ),
        cache=cache,
    )


@router.delete("/score/cache/{business_id}", response_model=CacheClearResponse)
def clear_score_cache(
    business_id: str,
    cache: Optional[ScoreCache] = Depends(get_score_cache),
):
    """Evict every cached score for a business"""
    cleared = cache.clear(business_id) if cache is not None else 0
    return CacheClearResponse(business_id=business_id, cleared=cleared)
