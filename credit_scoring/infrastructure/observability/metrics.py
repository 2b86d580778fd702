"""Prometheus metrics for monitoring score distribution, validation failures, and cache use"""

from prometheus_client import Counter, Histogram

# Scoring metrics
score_counter = Counter(
    "credit_score_total",
    "Total credit scores computed",
    ["rating"],  # Excellent | Very Good | Good | Fair | Poor | Very Poor
)

score_histogram = Histogram(
    "credit_score_value",
    "Distribution of final credit scores",
    buckets=[250, 400, 550, 700, 850, 1000],
)

validation_failure_counter = Counter(
    "score_validation_failures_total",
    "Scoring requests rejected for malformed financial data",
)

# Cache metrics
cache_hit_counter = Counter(
    "score_cache_hits_total",
    "Scores served from the caller-side cache",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_score(score: int, rating: str) -> None:
    """Record a computed score for rating-mix and distribution monitoring"""
    score_counter.labels(rating=rating).inc()
    score_histogram.observe(score)
