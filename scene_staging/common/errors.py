"""Error types raised by the staging kernel.

Every error carries a machine-readable ``code`` and a ``details`` dict so callers
can render the canonical envelope:

{
  "error": {
    "code": "string",
    "message": "string",
    "details": {}
  }
}
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, Optional


class StageError(Exception):
    """Base staging error."""

    code = "stage.error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": dict(self.details),
            }
        }


class DecodeError(StageError):
    """Raised when encoded text cannot be turned into a stage."""

    code = "stage.decode_error"


class UnsupportedVersionError(StageError):
    """Raised when the encoded schema version is not one we accept."""

    code = "stage.unsupported_version"

    def __init__(self, version: int, supported: Iterable[int]) -> None:
        self.version = version
        self.supported = tuple(sorted(supported))
        super().__init__(
            f"Stage schema version {version} is not supported (accepted: {list(self.supported)})",
            details={"version": version, "supported": list(self.supported)},
        )


class ReferenceResolutionError(StageError):
    """Raised when an external reference cannot be resolved to a live capability."""

    code = "stage.reference_unresolved"

    def __init__(self, reference: Optional[str], message: Optional[str] = None) -> None:
        self.reference = reference
        super().__init__(
            message or f"Could not resolve reference {reference!r}",
            details={"reference": reference},
        )


class StageNotFound(StageError):
    """Raised when a registered stage is missing."""

    code = "stage.not_found"
