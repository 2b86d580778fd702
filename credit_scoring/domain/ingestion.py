"""Strict parsing of raw monthly financial data into FinancialPeriodRecord"""

import json
import math
import re
from typing import Any, Dict, List, Sequence, Union

from credit_scoring.domain.exceptions import ValidationError
from credit_scoring.domain.models import FinancialPeriodRecord

NUMERIC_FIELDS = ("earnings", "losses", "assets", "liabilities", "equity")

MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# "Jan 2025"
_MONTH_LABEL = re.compile(r"^([A-Z][a-z]{2}) (\d{4})$")

SeriesPayload = Union[str, Sequence[Dict[str, Any]]]


def _require_number(raw: Dict[str, Any], key: str, context: str) -> float:
    if key not in raw or raw[key] is None:
        raise ValidationError(f"{context}: missing required field '{key}'")

    value = raw[key]
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{context}: field '{key}' must be a number, got {type(value).__name__}")
    if not math.isfinite(value):
        raise ValidationError(f"{context}: field '{key}' must be finite")

    return float(value)


def parse_financial_record(raw: Dict[str, Any], index: int = 0) -> FinancialPeriodRecord:
    """
    Validate one raw monthly record.

    Every field is required. Missing or non-numeric values are rejected rather
    than defaulted to zero.

    Raises:
        ValidationError: If the record is not a mapping or a field is missing/invalid
    """
    context = f"record {index}"
    if not isinstance(raw, dict):
        raise ValidationError(f"{context}: expected an object, got {type(raw).__name__}")

    month = raw.get("month")
    if not isinstance(month, str) or not month.strip():
        raise ValidationError(f"{context}: missing required field 'month'")

    year = raw.get("year")
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValidationError(f"{context}: field 'year' must be an integer")

    values = {key: _require_number(raw, key, context) for key in NUMERIC_FIELDS}

    return FinancialPeriodRecord(month=month, year=year, **values)


def parse_financial_history(raw_records: Sequence[Dict[str, Any]]) -> List[FinancialPeriodRecord]:
    """
    Parse an ordered (oldest first) list of raw records into a FinancialHistory.

    Library-level entry point for callers holding decoded JSON. The HTTP layer
    validates the same fields through FinancialRecordSchema instead.

    Raises:
        ValidationError: If the list is empty or any record is malformed
    """
    if not raw_records:
        raise ValidationError("Financial history is empty")

    return [parse_financial_record(raw, index) for index, raw in enumerate(raw_records)]


def validate_history(history: Sequence[FinancialPeriodRecord]) -> None:
    """
    Check an already-typed history before scoring.

    Raises:
        ValidationError: If the history is empty or a record carries a non-numeric amount
    """
    if not history:
        raise ValidationError("Financial history is empty")

    for index, record in enumerate(history):
        context = f"record {index}"
        for key in NUMERIC_FIELDS:
            _require_number({key: getattr(record, key, None)}, key, context)


def _decode_series(payload: SeriesPayload, name: str) -> List[Dict[str, Any]]:
    if isinstance(payload, str):
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValidationError(f"{name}: invalid JSON ({e.msg})") from e

    if not isinstance(payload, list):
        raise ValidationError(f"{name}: expected a list of monthly entries")

    return payload


def parse_month_label(label: Any, context: str) -> tuple[str, int]:
    """Split a "Mon YYYY" label into (month abbreviation, year)"""
    match = _MONTH_LABEL.match(label) if isinstance(label, str) else None
    if not match or match.group(1) not in MONTH_ABBREVIATIONS:
        raise ValidationError(f"{context}: month label must look like 'Jan 2025', got {label!r}")

    return match.group(1), int(match.group(2))


def build_history_from_series(
    revenue_data: SeriesPayload,
    expense_data: SeriesPayload,
    assets: float,
    liabilities: float,
    equity: float,
) -> List[FinancialPeriodRecord]:
    """
    Zip monthly revenue and expense series into a FinancialHistory.

    Each series is a JSON string (or decoded list) of {"month": "Jan 2025", "value": n}
    entries in chronological order. Revenue becomes earnings, expense becomes losses,
    and the balance-sheet aggregates are copied onto every month.

    Raises:
        ValidationError: On undecodable payloads, bad labels, missing values,
            or series of different lengths
    """
    revenue = _decode_series(revenue_data, "revenue_data")
    expenses = _decode_series(expense_data, "expense_data")

    if not revenue:
        raise ValidationError("revenue_data is empty")
    if len(expenses) != len(revenue):
        raise ValidationError(
            f"expense_data has {len(expenses)} entries but revenue_data has {len(revenue)}"
        )

    balance = {
        "assets": _require_number({"assets": assets}, "assets", "balance sheet"),
        "liabilities": _require_number({"liabilities": liabilities}, "liabilities", "balance sheet"),
        "equity": _require_number({"equity": equity}, "equity", "balance sheet"),
    }

    history = []
    for index, (rev, exp) in enumerate(zip(revenue, expenses)):
        context = f"month {index}"
        if not isinstance(rev, dict) or not isinstance(exp, dict):
            raise ValidationError(f"{context}: expected objects with 'month' and 'value'")

        month, year = parse_month_label(rev.get("month"), f"revenue_data {context}")
        if exp.get("month") is not None and exp.get("month") != rev.get("month"):
            raise ValidationError(
                f"{context}: expense month {exp.get('month')!r} does not match revenue month {rev.get('month')!r}"
            )

        history.append(
            FinancialPeriodRecord(
                month=month,
                year=year,
                earnings=_require_number(rev, "value", f"revenue_data {context}"),
                losses=_require_number(exp, "value", f"expense_data {context}"),
                **balance,
            )
        )

    return history
