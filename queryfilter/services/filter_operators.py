from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation

# Several conditions may be packed into one phrase: "login:bob,id>=5".
PHRASE_DELIMITER = ","


class FilterOperator(enum.Enum):
    NE = "!="
    GTE = ">="
    LTE = "<="
    GT = ">"
    LT = "<"
    CONTAINS = "~"
    EQ = ":"
    EQ_ALT = "="

    @property
    def is_equality(self) -> bool:
        return self in (FilterOperator.EQ, FilterOperator.EQ_ALT)


# Two-character operators must be tried before their one-character prefixes,
# and equality last since ":"/"=" would otherwise shadow them.
OPERATOR_PRECEDENCE = (
    FilterOperator.NE,
    FilterOperator.GTE,
    FilterOperator.LTE,
    FilterOperator.GT,
    FilterOperator.LT,
    FilterOperator.CONTAINS,
    FilterOperator.EQ,
    FilterOperator.EQ_ALT,
)


@dataclass(frozen=True)
class ParsedFilter:
    param: str
    operator: FilterOperator
    value: str


def match_operator(text: str) -> FilterOperator | None:
    for operator in OPERATOR_PRECEDENCE:
        if text.startswith(operator.value):
            return operator
    return None


def parse_filter_phrase(phrase: str, param: str) -> ParsedFilter | None:
    """Find the condition on ``param`` inside a filter phrase.

    ``parse_filter_phrase("id>=5", "id")`` gives ``(GTE, "5")``. Returns None
    when no condition of the phrase targets ``param``.
    """
    if not phrase or not param:
        return None
    for segment in phrase.split(PHRASE_DELIMITER):
        segment = segment.strip()
        if not segment.startswith(param):
            continue
        rest = segment[len(param):]
        operator = match_operator(rest)
        if operator is None:
            continue
        return ParsedFilter(param=param, operator=operator, value=rest[len(operator.value):])
    return None


def _coerce_bool(text: str):
    lowered = text.strip().lower()
    if lowered in {"1", "true", "yes", "y", "on"}:
        return True
    if lowered in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(text)


def _coerce_number(text: str, python_type):
    normalized = text.strip()
    if not normalized:
        raise ValueError(text)
    if python_type is Decimal:
        try:
            return Decimal(normalized)
        except InvalidOperation:
            raise ValueError(text)
    return python_type(normalized)


def _coerce_date(text: str):
    text = text.strip()
    # Accept either YYYY-MM-DD or full ISO datetime and take its date part.
    if "T" in text or " " in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    return date.fromisoformat(text)


def _coerce_datetime(text: str):
    text = text.strip()
    if "T" not in text and " " not in text and len(text) == 10:
        parsed = datetime.combine(date.fromisoformat(text), datetime.min.time())
    else:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def column_python_type(attribute):
    try:
        return attribute.property.columns[0].type.python_type
    except Exception:
        return None


def coerce_filter_value(attribute, raw: str):
    """Convert a literal to the column's Python type; the raw string is kept if it does not convert."""
    python_type = column_python_type(attribute)
    if python_type is None or python_type is str:
        return raw
    try:
        if python_type is bool:
            return _coerce_bool(raw)
        if python_type in {int, float, Decimal}:
            return _coerce_number(raw, python_type)
        if python_type is datetime:
            return _coerce_datetime(raw)
        if python_type is date:
            return _coerce_date(raw)
        if python_type is uuid.UUID:
            return uuid.UUID(raw.strip())
    except (ValueError, TypeError):
        return raw
    return raw
