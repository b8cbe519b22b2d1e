"""Lenient scalar types for Intacct XML values.

Intacct sends numbers, flags and dates as text and often leaves them blank.
These annotated types parse that text for XMLModel fields without failing
on blanks: numbers fall back to zero, flags to False and dates to None.
"""

from datetime import date, datetime, timezone
from typing import Annotated, Any, Mapping, Optional

from pydantic import BeforeValidator, PlainSerializer

from intacct.core.xmlcodec import TEXT_KEY

TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})

DATE_LAYOUT = "%Y-%m-%d"
US_DATE_LAYOUT = "%m/%d/%Y"
US_DATETIME_LAYOUT = "%m/%d/%Y %H:%M:%S"


def _text(value: Any) -> Any:
    # attributed elements decode as {"@attr": ..., "": text}
    if isinstance(value, Mapping):
        return value.get(TEXT_KEY, "")
    return value


def parse_rfc3339(value: str) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp; anything else, including naive times, is None."""
    if not value or "T" not in value:
        return None
    if value.endswith("Z") or value.endswith("z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def parse_date(value: Any) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` or ``MM/DD/YYYY``; trailing time parts are ignored."""
    value = _text(value)
    if value is None or isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    text = text[:10]
    layout = US_DATE_LAYOUT if "/" in text else DATE_LAYOUT
    return datetime.strptime(text, layout).date()


def parse_datetime(value: Any) -> Optional[datetime]:
    """Parse RFC 3339, ``YYYY-MM-DD``, ``MM/DD/YYYY`` or ``MM/DD/YYYY HH:MM:SS``.

    Values without a zone are taken as UTC.
    """
    value = _text(value)
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.count("/") > 1:
        layout = US_DATE_LAYOUT if len(text) == 10 else US_DATETIME_LAYOUT
        return datetime.strptime(text, layout).replace(tzinfo=timezone.utc)
    if len(text) == 10:
        return datetime.strptime(text, DATE_LAYOUT).replace(tzinfo=timezone.utc)
    parsed = parse_rfc3339(text)
    if parsed is None:
        raise ValueError(f"invalid RFC 3339 timestamp: {text!r}")
    return parsed


def _lenient_int(value: Any) -> int:
    value = _text(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def _lenient_float(value: Any) -> float:
    value = _text(value)
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return 0.0


def _lenient_bool(value: Any) -> bool:
    value = _text(value)
    if isinstance(value, bool):
        return value
    return str(value).strip() in TRUE_VALUES


def _format_date(value: Optional[date]) -> Optional[str]:
    return value.strftime(DATE_LAYOUT) if value is not None else None


def _format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


IntacctInt = Annotated[int, BeforeValidator(_lenient_int)]
IntacctFloat = Annotated[float, BeforeValidator(_lenient_float)]
IntacctBool = Annotated[bool, BeforeValidator(_lenient_bool)]
IntacctDate = Annotated[
    Optional[date],
    BeforeValidator(parse_date),
    PlainSerializer(_format_date),
]
IntacctDatetime = Annotated[
    Optional[datetime],
    BeforeValidator(parse_datetime),
    PlainSerializer(_format_datetime),
]
