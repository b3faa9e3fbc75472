"""Projection configuration.

The projection system maps FHIR resource types to display models, extracting
specific fields from the raw FHIR JSON while keeping that JSON as the source
of truth for everything else.
"""

from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel


@dataclass(frozen=True)
class FieldExtractor:
    """Maps a FHIR field to a model attribute.

    Args:
        target_field: Name of the attribute on the projected model.
        extractor: Function that extracts the value from FHIR JSON.
    """

    target_field: str
    extractor: Callable[[dict], Any]


@dataclass(frozen=True)
class ProjectionConfig:
    """Configuration for a resource type's projection.

    Defines how to extract fields from FHIR JSON into a display model.
    Configs are immutable and built once at import time.
    """

    resource_type: str
    model_class: type[BaseModel]
    extractors: tuple[FieldExtractor, ...] = ()

    def extract(self, fhir_data: dict) -> dict:
        """Extract all projection fields from FHIR data.

        Args:
            fhir_data: Raw FHIR resource JSON.

        Returns:
            Dictionary mapping field names to extracted values.
        """
        return {e.target_field: e.extractor(fhir_data) for e in self.extractors}

    def project(self, fhir_data: dict) -> BaseModel:
        """Extract all projection fields and build the display model."""
        return self.model_class(**self.extract(fhir_data))

