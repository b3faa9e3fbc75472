"""Bundle indexing.

Partitions a flat FHIR bundle into id-keyed lookup tables before any
observation is resolved, so that resolution never depends on entry order (an
Observation may precede the Encounter it references, and a child Observation
may precede its panel).
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from obsengine.utils.fhir_helpers import extract_reference_ids

logger = logging.getLogger(__name__)

OBSERVATION = "Observation"
ENCOUNTER = "Encounter"


@dataclass(frozen=True)
class BundleIndex:
    """Read-only lookup tables built from one bundle.

    Attributes:
        encounters: Encounter FHIR id -> raw Encounter JSON.
        observations: Observation FHIR id -> raw Observation JSON, in bundle order.
        child_ids: Every id referenced from any Observation.hasMember.
    """

    encounters: Mapping[str, dict[str, Any]] = field(default_factory=dict)
    observations: Mapping[str, dict[str, Any]] = field(default_factory=dict)
    child_ids: frozenset[str] = frozenset()


def _bundle_entries(bundle: Mapping[str, Any] | Iterable[Any] | None) -> list[Any]:
    """Return the entry list of a Bundle dict, or the entries given directly."""
    if bundle is None:
        return []
    if isinstance(bundle, Mapping):
        entries = bundle.get("entry")
        return entries if isinstance(entries, list) else []
    return list(bundle)


def index_bundle(bundle: Mapping[str, Any] | Iterable[Any] | None) -> BundleIndex:
    """Build the encounter/observation lookup tables for a bundle.

    Entries without a resource or without an id are skipped, as are resource
    types other than Observation and Encounter. A repeated id keeps its last
    resource.

    Args:
        bundle: FHIR Bundle JSON (``{"entry": [...]}``) or its entry list.

    Returns:
        BundleIndex with both maps and the set of hasMember child ids.
    """
    encounters: dict[str, dict[str, Any]] = {}
    observations: dict[str, dict[str, Any]] = {}
    child_ids: set[str] = set()

    for entry in _bundle_entries(bundle):
        if not isinstance(entry, Mapping):
            continue
        resource = entry.get("resource")
        if not isinstance(resource, dict):
            continue
        resource_id = resource.get("id")
        if not resource_id or not isinstance(resource_id, str):
            continue

        resource_type = resource.get("resourceType")
        if resource_type == ENCOUNTER:
            encounters[resource_id] = resource
        elif resource_type == OBSERVATION:
            observations[resource_id] = resource
            child_ids.update(extract_reference_ids(resource.get("hasMember")))

    logger.debug(
        "Indexed bundle: %d observations, %d encounters, %d member references",
        len(observations),
        len(encounters),
        len(child_ids),
    )
    return BundleIndex(
        encounters=MappingProxyType(encounters),
        observations=MappingProxyType(observations),
        child_ids=frozenset(child_ids),
    )
