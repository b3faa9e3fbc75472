"""Observation extraction and group partitioning.

Turns indexed FHIR Observations into ExtractedObservation models, resolving
encounter metadata and hasMember children through the bundle's lookup tables,
then partitions the top-level observations into standalone leaves and
panel groups.
"""

import logging
from typing import Any, Iterable, Mapping

from obsengine.projections.extractors.encounter import ENCOUNTER_PROJECTION
from obsengine.schemas.observations import (
    EncounterDetails,
    ExtractedObservation,
    ExtractedObservationsResult,
    GroupedObservation,
)
from obsengine.services.bundle_indexer import BundleIndex, index_bundle
from obsengine.services.value_resolver import resolve_observation_value
from obsengine.utils.fhir_helpers import (
    extract_code_display,
    extract_encounter_fhir_id,
    extract_reference_ids,
    string_or_none,
)

logger = logging.getLogger(__name__)


def extract_encounter_details(
    encounter_id: str | None,
    encounters: Mapping[str, dict[str, Any]],
) -> EncounterDetails | None:
    """Project the referenced Encounter, or None if it is not in the bundle."""
    if not encounter_id:
        return None
    encounter = encounters.get(encounter_id)
    if encounter is None:
        return None
    return ENCOUNTER_PROJECTION.project(encounter)


def _extract_members(
    observation: dict[str, Any],
    index: BundleIndex,
    visited: frozenset[str],
) -> tuple[ExtractedObservation, ...]:
    members: list[ExtractedObservation] = []
    for member_id in extract_reference_ids(observation.get("hasMember")):
        if member_id in visited:
            logger.warning(
                "Circular hasMember reference %s -> %s; not descending further",
                observation.get("id"),
                member_id,
            )
            continue
        member = index.observations.get(member_id)
        if member is None:
            continue
        members.append(_extract(member, index, visited))
    return tuple(members)


def _extract(
    observation: dict[str, Any],
    index: BundleIndex,
    visited: frozenset[str],
) -> ExtractedObservation:
    obs_id = string_or_none(observation.get("id")) or ""
    members = _extract_members(observation, index, visited | {obs_id})

    return ExtractedObservation(
        id=obs_id,
        display=extract_code_display(observation),
        observation_value=resolve_observation_value(observation),
        effective_date_time=string_or_none(observation.get("effectiveDateTime")),
        issued=string_or_none(observation.get("issued")),
        encounter=extract_encounter_details(
            extract_encounter_fhir_id(observation), index.encounters
        ),
        members=members or None,
    )


def extract_observation(
    observation: str | dict[str, Any],
    index: BundleIndex,
) -> ExtractedObservation | None:
    """Extract one observation and, recursively, its hasMember children.

    Member references that are not in the bundle are skipped. A member that
    is already on the current resolution path (a hasMember cycle) is not
    descended into again, so extraction always terminates and no observation
    appears twice along one path.

    Args:
        observation: Observation FHIR id, or the raw Observation JSON.
        index: Lookup tables from ``index_bundle``.

    Returns:
        ExtractedObservation, or None if the id is not in the index.
    """
    if isinstance(observation, str):
        resource = index.observations.get(observation)
        if resource is None:
            return None
        observation = resource
    return _extract(observation, index, frozenset())


def extract_observations_from_bundle(
    bundle: BundleIndex | Mapping[str, Any] | Iterable[Any] | None,
) -> ExtractedObservationsResult:
    """Extract all top-level observations and split off panel groups.

    Observations referenced by another observation's hasMember are never
    emitted at the top level; they only appear as children of their panel.
    A panel whose members all fail to resolve degrades to a standalone
    observation.

    Args:
        bundle: A BundleIndex, or a FHIR Bundle / entry list to index.

    Returns:
        ExtractedObservationsResult with standalone and grouped observations,
        each in bundle order.
    """
    index = bundle if isinstance(bundle, BundleIndex) else index_bundle(bundle)

    observations: list[ExtractedObservation] = []
    grouped_observations: list[GroupedObservation] = []

    for obs_id, resource in index.observations.items():
        if obs_id in index.child_ids:
            continue

        extracted = _extract(resource, index, frozenset())
        if extracted.members:
            grouped_observations.append(
                GroupedObservation(**dict(extracted), children=extracted.members)
            )
        else:
            observations.append(extracted)

    logger.debug(
        "Extracted %d standalone observations and %d groups",
        len(observations),
        len(grouped_observations),
    )
    return ExtractedObservationsResult(
        observations=tuple(observations),
        grouped_observations=tuple(grouped_observations),
    )
