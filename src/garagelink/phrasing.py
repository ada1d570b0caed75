"""Spoken and written phrasing for door durations and alerts."""

from __future__ import annotations

from datetime import UTC, datetime


def format_duration(minutes: int) -> str:
    """Render an open duration for speech.

    ``0`` or less renders nothing, under an hour renders ``"N minutes"``,
    otherwise ``"H hours and M minutes"``.
    """
    if minutes <= 0:
        return ""
    if minutes < 60:
        return f"{minutes} minutes"
    hours, mins = divmod(minutes, 60)
    return f"{hours} hours and {mins} minutes"


def open_duration_clause(minutes: int) -> str:
    """Trailing sentence appended to the status answer, or ``""``."""
    phrase = format_duration(minutes)
    if not phrase:
        return ""
    return f" It has been open for {phrase}."


def status_sentence(status: str, open_minutes: int = 0) -> str:
    """Answer to "what is the garage door status"."""
    clause = open_duration_clause(open_minutes) if status == "open" else ""
    return f"The garage door is currently {status}.{clause}"


def build_open_door_alert(duration_minutes: int, now: int | float | datetime) -> tuple[str, str]:
    """Subject and body of the door-left-open notification."""
    if isinstance(now, datetime):
        when = now if now.tzinfo is not None else now.replace(tzinfo=UTC)
    else:
        when = datetime.fromtimestamp(now, tz=UTC)
    subject = f"Garage Door Open Alert - {duration_minutes} mins"
    phrase = format_duration(duration_minutes) or f"{duration_minutes} minutes"
    body = (
        "GARAGE DOOR ALERT\n\n"
        f"Your garage door has been open for {phrase}.\n\n"
        f"Time: {when.strftime('%Y-%m-%d %H:%M:%S %Z')}"
    )
    return subject, body
