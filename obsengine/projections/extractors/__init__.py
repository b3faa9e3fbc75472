"""FHIR field extractors.

Extractors are pure functions that pull specific fields from FHIR JSON
for display projections.
"""

from obsengine.projections.extractors.encounter import ENCOUNTER_PROJECTION

__all__ = ["ENCOUNTER_PROJECTION"]
