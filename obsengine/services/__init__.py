"""Observation extraction, grouping, and formatting services."""
