"""Rating classification - maps a 0-1000 credit score to labels and risk tiers"""

from typing import List, Tuple

from credit_scoring.domain.models import CreditRating

# (minimum score, label), best first
RATING_BANDS: List[Tuple[int, str]] = [
    (850, "Excellent"),
    (700, "Very Good"),
    (550, "Good"),
    (400, "Fair"),
    (250, "Poor"),
    (0, "Very Poor"),
]

SEVERITY_FAVORABLE = "favorable"
SEVERITY_CAUTION = "caution"
SEVERITY_RISK = "risk"

RISK_LEVELS = {
    SEVERITY_FAVORABLE: "low",
    SEVERITY_CAUTION: "medium",
    SEVERITY_RISK: "high",
}


def get_rating(score: float) -> str:
    """
    Map a score to its rating label.

    Bands:
    - 850+:    Excellent
    - 700-849: Very Good
    - 550-699: Good
    - 400-549: Fair
    - 250-399: Poor
    - below:   Very Poor
    """
    for minimum, label in RATING_BANDS:
        if score >= minimum:
            return label
    return "Very Poor"


def get_severity(score: float) -> str:
    """Coarse tier used to color the score: favorable / caution / risk"""
    if score >= 700:
        return SEVERITY_FAVORABLE
    elif score >= 550:
        return SEVERITY_CAUTION
    else:
        return SEVERITY_RISK


def get_risk_level(score: float) -> str:
    """Business risk level (low / medium / high) implied by the severity tier"""
    return RISK_LEVELS[get_severity(score)]


def classify_score(score: float) -> CreditRating:
    severity = get_severity(score)
    return CreditRating(
        label=get_rating(score),
        severity=severity,
        risk_level=RISK_LEVELS[severity],
    )
