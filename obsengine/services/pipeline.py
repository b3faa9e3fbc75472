"""End-to-end observations-by-encounter pipeline.

index -> extract/partition -> group by encounter -> sort newest first.
"""

from typing import Any, Iterable, Mapping

from obsengine.schemas.observations import ObservationsByEncounter
from obsengine.services.bundle_indexer import index_bundle
from obsengine.services.encounter_grouping import (
    group_observations_by_encounter,
    sort_observations_by_encounter_date,
)
from obsengine.services.observation_extractor import extract_observations_from_bundle


def build_observations_by_encounter(
    bundle: Mapping[str, Any] | Iterable[Any] | None,
) -> list[ObservationsByEncounter]:
    """Build the sorted per-encounter observation view of a bundle.

    Pure: the same bundle always yields an equal result, and the bundle is
    never modified.

    Args:
        bundle: FHIR Bundle JSON with Observation and Encounter entries, or
            its entry list.

    Returns:
        Encounter buckets, most recent encounter first.
    """
    extracted = extract_observations_from_bundle(index_bundle(bundle))
    return sort_observations_by_encounter_date(group_observations_by_encounter(extracted))
