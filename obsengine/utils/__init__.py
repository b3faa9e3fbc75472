"""Pure helpers for FHIR JSON access and date handling."""
