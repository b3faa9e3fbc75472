"""Per-encounter bucketing and ordering of extracted observations."""

import logging
from datetime import datetime

from obsengine.schemas.observations import (
    EncounterDetails,
    ExtractedObservation,
    ExtractedObservationsResult,
    GroupedObservation,
    ObservationsByEncounter,
)
from obsengine.utils.dates import parse_fhir_datetime

logger = logging.getLogger(__name__)


def group_observations_by_encounter(
    result: ExtractedObservationsResult,
) -> list[ObservationsByEncounter]:
    """Bucket standalone and grouped observations by their encounter.

    Buckets are returned in first-seen order, standalone observations scanned
    before groups. Observations without resolved encounter metadata belong
    to no bucket and are left out of the output.

    Args:
        result: Output of ``extract_observations_from_bundle``.

    Returns:
        One ObservationsByEncounter per encounter id, unsorted.
    """
    standalone: dict[str, list[ExtractedObservation]] = {}
    grouped: dict[str, list[GroupedObservation]] = {}
    details: dict[str, EncounterDetails] = {}
    dropped = 0

    for obs in result.observations:
        if obs.encounter is None or not obs.encounter.id:
            dropped += 1
            continue
        encounter_id = obs.encounter.id
        standalone.setdefault(encounter_id, []).append(obs)
        grouped.setdefault(encounter_id, [])
        details.setdefault(encounter_id, obs.encounter)

    for group in result.grouped_observations:
        if group.encounter is None or not group.encounter.id:
            dropped += 1
            continue
        encounter_id = group.encounter.id
        standalone.setdefault(encounter_id, [])
        grouped.setdefault(encounter_id, []).append(group)
        details.setdefault(encounter_id, group.encounter)

    if dropped:
        logger.debug("Dropped %d observations with no resolvable encounter", dropped)

    return [
        ObservationsByEncounter(
            encounter_id=encounter_id,
            encounter_details=details[encounter_id],
            observations=tuple(observations),
            grouped_observations=tuple(grouped[encounter_id]),
        )
        for encounter_id, observations in standalone.items()
    ]


def _encounter_datetime(bucket: ObservationsByEncounter) -> datetime | None:
    date = bucket.encounter_details.date if bucket.encounter_details else None
    if not date:
        return None
    try:
        return parse_fhir_datetime(date)
    except (ValueError, TypeError):
        logger.debug("Unparseable encounter date %r on %s", date, bucket.encounter_id)
        return None


def sort_observations_by_encounter_date(
    buckets: list[ObservationsByEncounter],
) -> list[ObservationsByEncounter]:
    """Order encounter buckets newest first.

    Buckets with a date always precede buckets without one (an unparseable
    date counts as missing). Undated buckets, and buckets with equal dates,
    keep their input order.

    Args:
        buckets: Encounter buckets, e.g. from ``group_observations_by_encounter``.

    Returns:
        A new, sorted list; the input is not modified.
    """
    dated: list[tuple[datetime, ObservationsByEncounter]] = []
    undated: list[ObservationsByEncounter] = []
    for bucket in buckets:
        dt = _encounter_datetime(bucket)
        if dt is None:
            undated.append(bucket)
        else:
            dated.append((dt, bucket))

    dated.sort(key=lambda pair: pair[0], reverse=True)
    return [bucket for _, bucket in dated] + undated
