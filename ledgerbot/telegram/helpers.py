from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation

DAY_DISPLAY_FORMAT = "%d.%m.%Y"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def today_utc() -> date:
    return utcnow().date()


def parse_amount_token(raw: str) -> Decimal:
    try:
        value = Decimal(raw.replace(",", ""))
    except (InvalidOperation, ValueError) as exc:
        raise ValueError(f"Invalid amount '{raw}'.") from exc
    if not value.is_finite():
        raise ValueError(f"Invalid amount '{raw}'.")
    return value


def parse_day(value: str) -> date:
    try:
        return datetime.strptime(value, DAY_DISPLAY_FORMAT).date()
    except ValueError as exc:
        raise ValueError(f"Invalid date '{value}'. Dates must be in DD.MM.YYYY format.") from exc


def format_day(value: date) -> str:
    # strftime does not zero-pad years below 1000 on every platform.
    return f"{value.day:02d}.{value.month:02d}.{value.year:04d}"


def format_amount_for_display(amount: str | Decimal) -> str:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError):
        return str(amount)

    s = f"{value:f}"
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s
