"""Tool result envelopes.

Every successful ``tools/call`` answers with the same envelope shape::

    {
        "tool": "GetConfig",
        "status": "ok",              # ok | warning | error
        "summary": "...",
        "meta": {"version": ..., "generated_at": ..., "duration_ms": ..., "tool": ...},
        "data": {...},
        "findings": [...],           # only when non-empty
        "errors": [...],             # only when non-empty
    }

Tools may build the envelope themselves with :func:`success`,
:func:`warning` or :func:`error`, or return any plain value and let
:func:`normalize_result` wrap it.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Literal

ENVELOPE_VERSION = "1.0.0"

STATUS_OK = "ok"
STATUS_WARNING = "warning"
STATUS_ERROR = "error"

Status = Literal["ok", "warning", "error"]


def utc_timestamp() -> str:
    """Get current UTC timestamp in ISO 8601 format."""
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def build_envelope(
    status: Status,
    tool: str,
    summary: str,
    data: dict[str, Any] | None = None,
    meta: dict[str, Any] | None = None,
    findings: list[dict[str, Any]] | None = None,
    errors: list[Any] | None = None,
) -> dict[str, Any]:
    """Build a canonical result envelope.

    Args:
        status: One of ok, warning, error.
        tool: Name of the tool producing the result.
        summary: One-line human-readable summary.
        data: Structured payload.
        meta: Extra metadata merged over the defaults.
        findings: Findings, see :func:`finding`.
        errors: Error entries.

    Returns:
        Envelope dictionary.
    """
    result: dict[str, Any] = {
        "tool": tool,
        "status": status,
        "summary": summary,
        "meta": {"version": ENVELOPE_VERSION, "generated_at": utc_timestamp(), **(meta or {})},
        "data": data or {},
    }
    if findings:
        result["findings"] = findings
    if errors:
        result["errors"] = errors
    return result


def success(
    tool: str, summary: str, data: dict[str, Any] | None = None, **kwargs: Any
) -> dict[str, Any]:
    return build_envelope(STATUS_OK, tool, summary, data, **kwargs)


def warning(
    tool: str, summary: str, data: dict[str, Any] | None = None, **kwargs: Any
) -> dict[str, Any]:
    return build_envelope(STATUS_WARNING, tool, summary, data, **kwargs)


def error(
    tool: str, summary: str, data: dict[str, Any] | None = None, **kwargs: Any
) -> dict[str, Any]:
    return build_envelope(STATUS_ERROR, tool, summary, data, **kwargs)


def finding(
    severity: str,
    code: str,
    message: str,
    evidence: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build a single finding entry for an envelope's ``findings`` list."""
    return {
        "severity": severity,
        "code": code,
        "message": message,
        "evidence": evidence or {},
    }


@dataclass(frozen=True)
class CanonicalEnvelope:
    """A tool result that is already a full envelope."""

    envelope: Mapping[str, Any]


@dataclass(frozen=True)
class RawValue:
    """Any other tool result; gets wrapped in a fresh envelope."""

    value: Any


def classify_result(raw: Any) -> CanonicalEnvelope | RawValue:
    """Decide how a tool result is normalized.

    A mapping with ``tool``, ``status`` and a mapping ``meta`` is treated as a
    canonical envelope; everything else is a raw value.
    """
    if (
        isinstance(raw, Mapping)
        and "tool" in raw
        and "status" in raw
        and isinstance(raw.get("meta"), Mapping)
    ):
        return CanonicalEnvelope(raw)
    return RawValue(raw)


def normalize_result(tool_name: str, raw: Any, duration_ms: float) -> dict[str, Any]:
    """Wrap any tool return value into the canonical envelope.

    Canonical envelopes pass through with ``meta.duration_ms`` and
    ``meta.tool`` stamped by the server. Other values are wrapped: text
    becomes the summary, a mapping becomes ``data``, anything else is boxed
    under ``data.value``. Wrapped results carry ``meta.auto_normalized``.

    Args:
        tool_name: Name the tool was called under.
        raw: Value returned by the tool.
        duration_ms: Measured execution time.

    Returns:
        Envelope dictionary.
    """
    duration_ms = round(duration_ms, 3)
    variant = classify_result(raw)

    if isinstance(variant, CanonicalEnvelope):
        envelope = dict(variant.envelope)
        envelope["meta"] = {
            **variant.envelope["meta"],
            "duration_ms": duration_ms,
            "tool": tool_name,
        }
        return envelope

    value = variant.value
    if isinstance(value, str):
        summary, data = value, {}
    elif value is None:
        summary, data = f"{tool_name} completed", {}
    elif isinstance(value, Mapping):
        summary, data = f"{tool_name} completed", dict(value)
    else:
        summary, data = f"{tool_name} completed", {"value": value}

    return {
        "tool": tool_name,
        "status": STATUS_OK,
        "summary": summary,
        "meta": {
            "version": ENVELOPE_VERSION,
            "generated_at": utc_timestamp(),
            "duration_ms": duration_ms,
            "tool": tool_name,
            "auto_normalized": True,
        },
        "data": data,
    }


def render_envelope(envelope: dict[str, Any]) -> str:
    """Pretty-print an envelope for a text content block.

    Envelopes that cannot be represented as JSON are replaced by a minimal
    diagnostic envelope so the caller still gets a response.
    """
    try:
        return json.dumps(envelope, indent=2, allow_nan=False)
    except (TypeError, ValueError) as e:
        meta = envelope.get("meta")
        tool = str(envelope.get("tool", "unknown"))
        diagnostic = {
            "tool": tool,
            "status": STATUS_ERROR,
            "summary": f"Tool output could not be encoded: {e}",
            "meta": {
                "version": ENVELOPE_VERSION,
                "generated_at": utc_timestamp(),
                "duration_ms": meta.get("duration_ms") if isinstance(meta, Mapping) else None,
                "tool": tool,
                "encoding_error": True,
            },
            "data": {},
        }
        return json.dumps(diagnostic, indent=2, default=str)
