"""Shared types for Sleeper data models."""

from typing import Dict

from pydantic import JsonValue

# Provider-defined maps (settings, scoring, metadata); schema varies by sport.
JsonMap = Dict[str, JsonValue]
