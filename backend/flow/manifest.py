"""Declarative edge parser for the per-version flow manifest.

Expected shape (YAML)::

    title: Onboarding          # optional
    flows:
      index.html:
        - target: login.html
          label: Sign In
        - target: signup.html  # label is optional

Unknown top-level or per-edge keys are rejected.  An *absent* manifest is
not handled here: callers pass ``None`` straight to the graph builder.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from backend.errors import ValidationError
from backend.flow.models import FlowDef, FlowEdge


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

def _scalar_to_str(value: Any) -> Any:
    """YAML scalars such as ``2024`` or ``true`` stand for their text."""
    if value is None or isinstance(value, (str, dict, list)):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class _ManifestEdge(BaseModel):
    model_config = ConfigDict(extra="forbid")

    target: str
    label: Optional[str] = ""

    @field_validator("target", "label", mode="before")
    @classmethod
    def _coerce_scalars(cls, value: Any) -> Any:
        return _scalar_to_str(value)

    @field_validator("target")
    @classmethod
    def _target_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("empty target")
        return value


class _Manifest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    flows: Dict[str, List[_ManifestEdge]] = Field(default_factory=dict)

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, value: Any) -> Any:
        return _scalar_to_str(value)

    @field_validator("flows", mode="before")
    @classmethod
    def _null_means_empty(cls, value: Any) -> Any:
        # ``flows:`` and ``index.html:`` with nothing under them have no edges.
        if value is None:
            return {}
        if isinstance(value, dict):
            return {
                _scalar_to_str(page): [] if edges is None else edges
                for page, edges in value.items()
            }
        return value


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _describe(exc: PydanticValidationError) -> str:
    """Collapse pydantic's error list into one readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "manifest"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_manifest(data: Union[bytes, str]) -> FlowDef:
    """Parse and validate raw manifest content.

    Raises:
        ValidationError: On invalid YAML, an empty or non-mapping document,
            unknown keys, or an edge without a target.
    """
    try:
        raw = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        raise ValidationError(f"invalid flow manifest: {exc}") from exc

    if raw is None:
        raise ValidationError("invalid flow manifest: document is empty")
    if not isinstance(raw, dict):
        raise ValidationError("invalid flow manifest: top level must be a mapping")

    try:
        parsed = _Manifest.model_validate(raw)
    except PydanticValidationError as exc:
        raise ValidationError(f"invalid flow manifest: {_describe(exc)}") from exc

    return FlowDef(
        title=parsed.title,
        flows={
            source: [FlowEdge(target=e.target, label=e.label or "") for e in edges]
            for source, edges in parsed.flows.items()
        },
    )
