"""Observation extraction, grouping, and formatting engine.

Turns a FHIR bundle of Observation and Encounter resources into display-ready
observation rows bucketed by encounter, newest encounter first.
"""

from obsengine.services.bundle_indexer import BundleIndex, index_bundle
from obsengine.services.encounter_grouping import (
    group_observations_by_encounter,
    sort_observations_by_encounter_date,
)
from obsengine.services.formatters import (
    format_encounter_title,
    format_observation_header,
    format_observation_value,
    transform_observation_to_row_cell,
)
from obsengine.services.observation_extractor import (
    extract_observation,
    extract_observations_from_bundle,
)
from obsengine.services.pipeline import build_observations_by_encounter
from obsengine.services.value_resolver import resolve_observation_value

__version__ = "0.1.0"

__all__ = [
    "BundleIndex",
    "build_observations_by_encounter",
    "extract_observation",
    "extract_observations_from_bundle",
    "format_encounter_title",
    "format_observation_header",
    "format_observation_value",
    "group_observations_by_encounter",
    "index_bundle",
    "resolve_observation_value",
    "sort_observations_by_encounter_date",
    "transform_observation_to_row_cell",
]
