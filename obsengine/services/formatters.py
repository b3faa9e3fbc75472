"""Display formatting for extracted observations.

Pure functions that turn resolved observations into the header/value strings
and encounter titles shown by the rendering layer. Date formatting and
translation are owned by the calling application and passed in.
"""

from typing import Any, Callable

from obsengine.config import settings
from obsengine.schemas.observations import (
    EncounterDetails,
    ExtractedObservation,
    ObservationRowCell,
    QuantityValue,
    ReferenceBound,
)

DateFormatter = Callable[[str], str]
# (key, params=None) -> translated text
Translator = Callable[..., str]


def _format_scalar(value: Any) -> str:
    """Render a FHIR JSON scalar the way it appears on the wire."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_observation_value(observation: ExtractedObservation) -> str:
    """Format the observation's value, with its unit when it has one.

    Booleans are not phrased here; callers wanting "Positive"/"Negative"
    must branch on the BooleanValue variant themselves.

    Returns:
        "{value} {unit}", the bare value, or "" when there is no value.
    """
    value = observation.observation_value
    if value is None:
        return ""
    base = _format_scalar(value.value)
    unit = observation.unit
    return f"{base} {unit}" if unit else base


def _format_bound(bound: ReferenceBound, fallback_unit: str | None) -> str:
    unit = bound.unit or fallback_unit
    value = _format_scalar(bound.value)
    return f"{value} {unit}" if unit else value


def format_observation_header(observation: ExtractedObservation) -> str:
    """Format the row header: display name plus the normal range, if any.

    Each bound uses its own unit, falling back to the observation's unit.

    Examples:
        "Blood Glucose (70 mg/dL - 100 mg/dL)"
        "Hemoglobin (>12 g/dL)"
        "LDL (<100 mg/dL)"
    """
    display = observation.display
    value = observation.observation_value
    if not isinstance(value, QuantityValue) or value.reference_range is None:
        return display

    low = value.reference_range.low
    high = value.reference_range.high

    if low and high:
        return f"{display} ({_format_bound(low, value.unit)} - {_format_bound(high, value.unit)})"
    if low:
        return f"{display} (>{_format_bound(low, value.unit)})"
    if high:
        return f"{display} (<{_format_bound(high, value.unit)})"
    return display


def format_encounter_title(
    encounter_details: EncounterDetails | None,
    date_formatter: DateFormatter,
    translate: Translator | None = None,
) -> str:
    """Format the title of an encounter bucket.

    Args:
        encounter_details: Bucket encounter metadata.
        date_formatter: Application date/time formatter, applied to the
            encounter start and returned verbatim.
        translate: Optional translation function for the error marker.

    Returns:
        The formatted date, or the date-parse-error marker (translated when a
        translator is given) when the encounter has no date.
    """
    if encounter_details is None or not encounter_details.date:
        key = settings.date_parse_error_key
        return translate(key) if translate else key
    return date_formatter(encounter_details.date)


def transform_observation_to_row_cell(
    observation: ExtractedObservation,
    index: int,
    translate: Translator | None = None,
) -> ObservationRowCell:
    """Build the display row for one leaf observation.

    When a translator is given, the row also carries the "recorded by" info
    line, built from the configured key with the provider as its parameter.
    """
    value = observation.observation_value
    provider = observation.encounter.provider if observation.encounter else None
    info = translate(settings.recorded_by_key, {"provider": provider}) if translate else None
    return ObservationRowCell(
        index=index,
        header=format_observation_header(observation),
        value=format_observation_value(observation),
        provider=provider,
        info=info,
        is_abnormal=value.is_abnormal if value is not None else False,
    )
