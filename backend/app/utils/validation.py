from datetime import date, datetime, time, timezone

from fastapi import HTTPException, status


def parse_id(value: str, name: str = "id") -> int:
    """Parse a path id. Shopify ids are positive integers; anything else is a 400."""
    if not value or not (value.isascii() and value.isdigit()) or int(value) <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{name} must be a valid positive number",
        )
    return int(value)


def parse_date_param(value: str | None, name: str, *, end_of_day: bool = False) -> datetime:
    """Parse a ``YYYY-MM-DD`` (or full ISO-8601) query value into an aware datetime."""
    if not value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{name} is required",
        )
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {name} format. Use YYYY-MM-DD",
        )

    # A bare date covers the whole day when used as an upper bound.
    if end_of_day and len(value) == 10:
        parsed = datetime.combine(date.fromisoformat(value), time.max)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
