"""Pydantic models for resolver configuration."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

import json
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ResolverSettings(BaseModel):
    """Tuning knobs of an AnnotationResolver."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    marker_attribute: str = Field(
        default="__markers__",
        min_length=1,
        description="Module attribute holding the markers of a namespace",
    )
    probe_past_first_hit: bool = Field(
        default=True,
        description="Keep loading and caching ancestors beyond the closest marked one",
    )
    thread_safe: bool = Field(default=False, description="Serialize resolve() calls with a lock")


# ---------------------------------------------------------------------------
# helpers


def coerce_settings(value: Any) -> ResolverSettings:
    """Normalize supported inputs into a ResolverSettings instance."""
    if value is None:
        return ResolverSettings()
    if isinstance(value, ResolverSettings):
        return value
    payload: Mapping[str, Any]
    if isinstance(value, Mapping):
        payload = value
    elif isinstance(value, (str, bytes)):
        payload = _load_text_payload(value)
    elif isinstance(value, Path):
        payload = _load_text_payload(value.read_text())
    else:
        raise TypeError("Unsupported value for resolver settings")
    try:
        return ResolverSettings.model_validate(payload)
    except ValidationError as exc:
        raise ValueError("Invalid resolver settings") from exc


def _load_text_payload(raw: str | bytes) -> dict[str, Any]:
    """Interpret raw text as YAML first, falling back to JSON."""
    text = raw.decode() if isinstance(raw, bytes) else raw
    try:
        return yaml.safe_load(text) or {}
    except yaml.YAMLError:
        return json.loads(text)


__all__ = [
    "ResolverSettings",
    "coerce_settings",
]
