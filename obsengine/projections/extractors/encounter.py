"""Encounter-specific extractors for FHIR Encounter resources.

Pure functions that pull the display metadata attached to every observation
recorded during an encounter.
"""

from obsengine.config import settings
from obsengine.projections.base import FieldExtractor, ProjectionConfig
from obsengine.schemas.observations import EncounterDetails
from obsengine.utils.fhir_helpers import extract_first_coding, first_item, string_or_none

ENCOUNTER_RESOURCE_TYPE = "Encounter"


def extract_id(data: dict) -> str:
    """Extract FHIR id from an Encounter."""
    return string_or_none(data.get("id")) or ""


def extract_type(data: dict) -> str:
    """Extract encounter type from Encounter.type[0].coding[0].display.

    Args:
        data: FHIR Encounter JSON.

    Returns:
        Type display, or the configured unknown-type label.
    """
    display = string_or_none(extract_first_coding(first_item(data.get("type"))).get("display"))
    return display or settings.unknown_encounter_type


def extract_date(data: dict) -> str | None:
    """Extract encounter start from Encounter.period.start.

    Args:
        data: FHIR Encounter JSON.

    Returns:
        FHIR dateTime string or None.
    """
    period = data.get("period")
    if not isinstance(period, dict):
        return None
    return string_or_none(period.get("start")) or None


def extract_provider(data: dict) -> str | None:
    """Extract provider name from Encounter.participant[0].individual.display."""
    individual = first_item(data.get("participant")).get("individual")
    if isinstance(individual, dict):
        return string_or_none(individual.get("display"))
    return None


def extract_location(data: dict) -> str | None:
    """Extract location name from Encounter.location[0].location.display."""
    location = first_item(data.get("location")).get("location")
    if isinstance(location, dict):
        return string_or_none(location.get("display"))
    return None


ENCOUNTER_PROJECTION = ProjectionConfig(
    resource_type=ENCOUNTER_RESOURCE_TYPE,
    model_class=EncounterDetails,
    extractors=(
        FieldExtractor("id", extract_id),
        FieldExtractor("type", extract_type),
        FieldExtractor("date", extract_date),
        FieldExtractor("provider", extract_provider),
        FieldExtractor("location", extract_location),
    ),
)
