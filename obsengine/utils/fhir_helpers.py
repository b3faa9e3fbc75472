"""Shared FHIR resource parsing utilities.

Consolidates the FHIR JSON access patterns used across the extraction
services. All functions are pure and handle missing/malformed data gracefully.
"""

from typing import Any


def extract_reference_id(reference: str | dict[str, Any] | None) -> str | None:
    """Extract FHIR ID from a reference.

    Accepts either a bare reference string or a FHIR Reference object with a
    ``reference`` key. Handles both formats:
    - "urn:uuid:abc-123" -> "abc-123"
    - "Observation/abc-123" -> "abc-123"

    Args:
        reference: FHIR reference string or Reference object

    Returns:
        Extracted ID or None if reference is empty/None
    """
    if isinstance(reference, dict):
        reference = reference.get("reference")
    if not reference or not isinstance(reference, str):
        return None

    if reference.startswith("urn:uuid:"):
        return reference[9:] or None  # len("urn:uuid:")
    elif "/" in reference:
        return reference.split("/")[-1] or None
    return reference


def extract_reference_ids(refs: Any) -> list[str]:
    """Extract list of FHIR IDs from reference objects.

    Args:
        refs: List of FHIR reference objects with 'reference' keys

    Returns:
        List of extracted IDs (None values filtered out)
    """
    if not isinstance(refs, list):
        return []
    ids = [extract_reference_id(ref) for ref in refs]
    return [id_ for id_ in ids if id_ is not None]


def string_or_none(value: Any) -> str | None:
    """Return value if it is a string, else None."""
    return value if isinstance(value, str) else None


def first_item(items: Any) -> dict[str, Any]:
    """Return the first element of a FHIR array if it is an object, else {}."""
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return {}


def extract_first_coding(codeable_concept: dict[str, Any] | None) -> dict[str, Any]:
    """Extract first coding from a FHIR CodeableConcept.

    Args:
        codeable_concept: FHIR CodeableConcept structure

    Returns:
        First coding dict or empty dict if none
    """
    if not isinstance(codeable_concept, dict):
        return {}
    return first_item(codeable_concept.get("coding"))


def has_coding(codeable_concept: dict[str, Any] | None, system: str, code: str) -> bool:
    """Check whether a CodeableConcept carries a coding with this system and code."""
    if not isinstance(codeable_concept, dict):
        return False
    codings = codeable_concept.get("coding")
    if not isinstance(codings, list):
        return False
    return any(
        isinstance(coding, dict)
        and coding.get("system") == system
        and coding.get("code") == code
        for coding in codings
    )


def extract_code_display(resource: dict[str, Any]) -> str:
    """Extract the human-readable name of a resource's ``code``.

    Observations carry free text in ``code.text`` that is preferred over the
    terminology display:
    - code.text
    - code.coding[0].display (fallback)

    Args:
        resource: FHIR resource with a code field

    Returns:
        Display string, or "" if neither is present
    """
    code = resource.get("code")
    if not isinstance(code, dict):
        return ""
    text = string_or_none(code.get("text"))
    if text is not None:
        return text
    return string_or_none(extract_first_coding(code).get("display")) or ""


def extract_encounter_fhir_id(resource: dict[str, Any]) -> str | None:
    """Extract encounter FHIR ID from resource.encounter.reference.

    Args:
        resource: FHIR resource with optional encounter reference

    Returns:
        Encounter FHIR ID or None
    """
    return extract_reference_id(resource.get("encounter"))
