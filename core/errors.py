#!/usr/bin/env python3
"""Unified error model for PanicPoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class PanicPointError(Exception):
    """Base typed exception with stable error code and metadata."""

    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


ARCHIVE_PHASES = ("open", "entry_write", "finalize")


class ArchiveError(PanicPointError):
    """Archive output failed; ``phase`` names the step that broke."""

    def __init__(self, phase: str, message: str, *, code: str = "ARCHIVE_ERROR", **details: Any) -> None:
        if phase not in ARCHIVE_PHASES:
            raise ValueError(f"unknown archive phase: {phase}")
        super().__init__(code=code, message=message, details={"phase": phase, **details})
        self.phase = phase


class PathEncodingError(ArchiveError):
    """Part path cannot be used as an archive entry name."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__("entry_write", message, code="PATH_ENCODING_ERROR", **details)


class OutlineError(PanicPointError):
    """Outline collection was cancelled or the outline is malformed."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(code="OUTLINE_ERROR", message=message, details=details)


class ConfigError(PanicPointError):
    """Configuration file could not be read."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(code="CONFIG_ERROR", message=message, details=details)


class TelemetryError(PanicPointError):
    """Run events could not be recorded."""

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(code="TELEMETRY_ERROR", message=message, details=details)
