"""
Due Date Utilities

Best-effort conversion between natural-language due date phrases, stored UTC
timestamps and the user's local time. Every caller goes through
parse_due_date, so the parser can be swapped without touching the rest of
the pipeline. An unparseable phrase is a normal outcome (None), not an error.
"""

import logging
from datetime import datetime, timedelta, timezone as dt_timezone
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import dateparser

logger = logging.getLogger(__name__)

DEFAULT_TIMEZONE = "UTC"
FALLBACK_DUE_DELTA = timedelta(days=1)
DATETIME_INPUT_FORMAT = "%Y-%m-%dT%H:%M"


def get_zone(timezone_name: Optional[str]) -> ZoneInfo:
    """
    Resolve an IANA timezone name, falling back to UTC for unknown names.

    Args:
        timezone_name: IANA name such as "Europe/Berlin"

    Returns:
        ZoneInfo for the name, or UTC
    """
    try:
        return ZoneInfo(timezone_name or DEFAULT_TIMEZONE)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown timezone '{timezone_name}', using {DEFAULT_TIMEZONE}")
        return ZoneInfo(DEFAULT_TIMEZONE)


def parse_due_date(
    text: Optional[str],
    timezone_name: str = DEFAULT_TIMEZONE,
    reference: Optional[datetime] = None
) -> Optional[datetime]:
    """
    Parse a due date phrase into a naive UTC datetime.

    Relative phrases ("Friday", "tomorrow at 5pm") resolve against `reference`
    (default: now) in the user's timezone and prefer future dates.

    Args:
        text: Phrase such as "Friday afternoon" or "2026-06-20T17:00"
        timezone_name: IANA timezone the phrase is expressed in
        reference: Aware or naive-UTC "now" for relative phrases

    Returns:
        Naive UTC datetime, or None when the phrase cannot be parsed
    """
    if not text or not text.strip():
        return None

    zone = get_zone(timezone_name)
    settings = {
        "PREFER_DATES_FROM": "future",
        "TIMEZONE": zone.key,
        "TO_TIMEZONE": "UTC",
        "RETURN_AS_TIMEZONE_AWARE": True,
    }
    if reference is not None:
        if reference.tzinfo is None:
            reference = reference.replace(tzinfo=dt_timezone.utc)
        # dateparser expects the base date as naive local time
        settings["RELATIVE_BASE"] = reference.astimezone(zone).replace(tzinfo=None)

    try:
        parsed = dateparser.parse(text.strip(), settings=settings)
    except Exception as e:
        logger.warning(f"Date parser error for phrase of length {len(text)}: {type(e).__name__}")
        return None

    if parsed is None:
        return None

    return parsed.astimezone(dt_timezone.utc).replace(tzinfo=None)


def fallback_due_date(now: Optional[datetime] = None) -> datetime:
    """Default due date one day out, as naive UTC."""
    now = now or datetime.utcnow()
    return now + FALLBACK_DUE_DELTA


def resolve_due_date(
    text: Optional[str],
    timezone_name: str = DEFAULT_TIMEZONE,
    now: Optional[datetime] = None
) -> datetime:
    """
    Absolute due date for a phrase, or now + 1 day when it cannot be parsed.

    Args:
        text: Due date phrase as supplied by the model or the user
        timezone_name: IANA timezone of the user
        now: Naive UTC "now"; defaults to the current time

    Returns:
        Naive UTC datetime
    """
    parsed = parse_due_date(text, timezone_name, reference=now)
    if parsed is None:
        logger.info("Due date phrase not parseable, using fallback of now + 1 day")
        return fallback_due_date(now)
    return parsed


def local_to_utc(value: datetime, timezone_name: str = DEFAULT_TIMEZONE) -> datetime:
    """
    Convert a datetime to naive UTC.

    Naive values are taken to be local time in `timezone_name`; aware values
    are converted directly.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_zone(timezone_name))
    return value.astimezone(dt_timezone.utc).replace(tzinfo=None)


def utc_to_local(value: datetime, timezone_name: str = DEFAULT_TIMEZONE) -> str:
    """
    Render a stored naive UTC datetime as ISO-8601 in the user's timezone.

    Returns:
        e.g. "2026-06-20T19:00:00+02:00"
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt_timezone.utc)
    return value.astimezone(get_zone(timezone_name)).isoformat()


def to_datetime_input(
    text: Optional[str],
    timezone_name: str = DEFAULT_TIMEZONE,
    reference: Optional[datetime] = None
) -> str:
    """
    Convert a due date phrase to an HTML datetime-local value.

    The widget only understands "YYYY-MM-DDTHH:MM"; phrases it cannot
    represent become "" and are lost if the user saves the widget value.

    Returns:
        Local "YYYY-MM-DDTHH:MM" string, or "" when unparseable
    """
    parsed = parse_due_date(text, timezone_name, reference=reference)
    if parsed is None:
        return ""
    local = parsed.replace(tzinfo=dt_timezone.utc).astimezone(get_zone(timezone_name))
    return local.strftime(DATETIME_INPUT_FORMAT)
