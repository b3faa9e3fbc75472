"""Pytest configuration and shared FHIR test data.

This module provides:
- Builders for FHIR Observation / Encounter JSON and bundles
- Fixtures for common bundles (vitals, panels, multiple encounters)
"""

from typing import Any

import pytest

INTERPRETATION_SYSTEM = "http://terminology.hl7.org/CodeSystem/v3-ObservationInterpretation"
REFERENCE_RANGE_SYSTEM = "http://terminology.hl7.org/CodeSystem/referencerange-meaning"


# =============================================================================
# FHIR Builders
# =============================================================================


def make_encounter(
    encounter_id: str,
    *,
    start: str | None = "2026-01-20T10:00:00Z",
    type_display: str | None = "Consultation",
    provider: str | None = "Dr. Smith",
    location: str | None = "OPD-1",
) -> dict[str, Any]:
    """Build a FHIR Encounter resource."""
    encounter: dict[str, Any] = {"resourceType": "Encounter", "id": encounter_id}
    if type_display is not None:
        encounter["type"] = [{"coding": [{"display": type_display}]}]
    if start is not None:
        encounter["period"] = {"start": start}
    if provider is not None:
        encounter["participant"] = [{"individual": {"display": provider}}]
    if location is not None:
        encounter["location"] = [{"location": {"display": location}}]
    return encounter


def make_observation(
    obs_id: str,
    display: str = "Systolic blood pressure",
    *,
    encounter_id: str | None = "enc-1",
    members: list[str] | None = None,
    **fields: Any,
) -> dict[str, Any]:
    """Build a FHIR Observation resource.

    Extra keyword arguments are copied verbatim (valueQuantity, interpretation,
    referenceRange, ...).
    """
    obs: dict[str, Any] = {
        "resourceType": "Observation",
        "id": obs_id,
        "status": "final",
        "code": {"text": display},
    }
    if encounter_id is not None:
        obs["encounter"] = {"reference": f"Encounter/{encounter_id}"}
    if members is not None:
        obs["hasMember"] = [{"reference": f"Observation/{m}"} for m in members]
    obs.update(fields)
    return obs


def quantity(value: Any, unit: str | None = None) -> dict[str, Any]:
    """Build a FHIR Quantity."""
    q: dict[str, Any] = {"value": value}
    if unit is not None:
        q["unit"] = unit
    return q


def reference_range(
    meaning: str,
    low: dict[str, Any] | None = None,
    high: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a FHIR Observation.referenceRange classified by meaning code."""
    rr: dict[str, Any] = {
        "type": {"coding": [{"system": REFERENCE_RANGE_SYSTEM, "code": meaning}]},
    }
    if low is not None:
        rr["low"] = low
    if high is not None:
        rr["high"] = high
    return rr


def interpretation(code: str, system: str = INTERPRETATION_SYSTEM) -> list[dict[str, Any]]:
    """Build a FHIR Observation.interpretation list with a single coding."""
    return [{"coding": [{"system": system, "code": code}]}]


def make_bundle(*resources: dict[str, Any]) -> dict[str, Any]:
    """Wrap resources in a FHIR searchset Bundle."""
    return {
        "resourceType": "Bundle",
        "type": "searchset",
        "entry": [{"resource": r} for r in resources],
    }


# =============================================================================
# Bundle Fixtures
# =============================================================================


@pytest.fixture
def vitals_bundle() -> dict[str, Any]:
    """One encounter with two standalone quantity observations."""
    return make_bundle(
        make_encounter("enc-1"),
        make_observation(
            "obs-1",
            "Systolic blood pressure",
            valueQuantity=quantity(120, "mmHg"),
        ),
        make_observation(
            "obs-2",
            "Pulse",
            valueQuantity=quantity(72, "beats/min"),
        ),
    )


@pytest.fixture
def panel_bundle() -> dict[str, Any]:
    """A blood pressure panel whose members appear before the panel itself."""
    return make_bundle(
        make_observation("sys", "Systolic", valueQuantity=quantity(120, "mmHg")),
        make_observation("dia", "Diastolic", valueQuantity=quantity(80, "mmHg")),
        make_observation("bp", "Blood Pressure", members=["sys", "dia"]),
        make_observation("temp", "Temperature", valueQuantity=quantity(98.6, "F")),
        make_encounter("enc-1"),
    )


@pytest.fixture
def multi_encounter_bundle() -> dict[str, Any]:
    """Three encounters dated 2026-01-20, missing, and 2026-01-19."""
    return make_bundle(
        make_encounter("enc-new", start="2026-01-20T09:00:00Z"),
        make_encounter("enc-undated", start=None),
        make_encounter("enc-old", start="2026-01-19T09:00:00Z"),
        make_observation("obs-undated", "Notes", encounter_id="enc-undated", valueString="n/a"),
        make_observation("obs-old", "Pulse", encounter_id="enc-old", valueQuantity=quantity(70)),
        make_observation("obs-new", "Pulse", encounter_id="enc-new", valueQuantity=quantity(80)),
    )
