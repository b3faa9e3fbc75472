"""FHIR projection system.

Projections extract display fields from FHIR JSON into typed models while
keeping the canonical FHIR data as the source of truth.
"""

from obsengine.projections.base import FieldExtractor, ProjectionConfig

__all__ = [
    "FieldExtractor",
    "ProjectionConfig",
]
