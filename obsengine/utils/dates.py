"""FHIR date/time parsing and a default display formatter."""

import re
from datetime import datetime, timezone

from obsengine.config import settings

# FHIR dateTime allows reduced precision: YYYY and YYYY-MM
_PARTIAL_DATE = re.compile(r"^(\d{4})(?:-(\d{2}))?$")


def parse_fhir_datetime(dt_str: str) -> datetime:
    """Parse a FHIR datetime string to a timezone-aware Python datetime.

    Handles common FHIR formats:
    - 2024-01-15T10:30:00Z
    - 2024-01-15T10:30:00+00:00
    - 2024-01-15T10:30:00.000+0530
    - 2024-01-15
    - 2024-01 and 2024 (first instant of the month / year)

    Naive values are treated as UTC so that mixed inputs stay comparable.

    Raises:
        ValueError: If the string is not a recognizable FHIR datetime.
    """
    cleaned = dt_str.strip()
    partial = _PARTIAL_DATE.match(cleaned)
    if partial:
        year, month = partial.groups()
        return datetime(int(year), int(month or 1), 1, tzinfo=timezone.utc)

    # Replace trailing Z with +00:00 for fromisoformat
    dt = datetime.fromisoformat(cleaned.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def format_fhir_datetime(iso: str) -> str:
    """Format a FHIR datetime for display. Returns original if unparseable.

    Suitable as the injected date formatter for ``format_encounter_title``
    when the caller has no locale-aware formatter of its own. The wall time
    of the recorded offset is kept.
    """
    if not iso:
        return ""
    try:
        dt = parse_fhir_datetime(iso)
    except (ValueError, TypeError, AttributeError):
        return iso
    return dt.strftime(settings.date_time_display_format)
