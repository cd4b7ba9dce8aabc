"""Runtime configuration helpers for the staging kernel."""
from __future__ import annotations

import os
from typing import Any, Dict, FrozenSet, Optional

from scene_staging.stage_kernel.schemas import CURRENT_VERSION

DEFAULT_JSON_INDENT = 4


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def get_json_indent() -> int:
    raw = _get_env("STAGE_JSON_INDENT")
    if not raw:
        return DEFAULT_JSON_INDENT
    try:
        indent = int(raw)
    except ValueError:
        raise ValueError(f"STAGE_JSON_INDENT must be an integer, got {raw!r}")
    if indent < 0:
        raise ValueError("STAGE_JSON_INDENT must be >= 0")
    return indent


def get_decode_timeout() -> Optional[float]:
    """Seconds allowed for reference resolution during a decode; None disables the limit."""
    raw = _get_env("STAGE_DECODE_TIMEOUT_SECONDS")
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"STAGE_DECODE_TIMEOUT_SECONDS must be a number, got {raw!r}")
    if timeout <= 0:
        raise ValueError("STAGE_DECODE_TIMEOUT_SECONDS must be positive")
    return timeout


def get_compatible_versions() -> FrozenSet[int]:
    """Schema versions the decoder accepts. Anything else fails fast."""
    raw = _get_env("STAGE_COMPATIBLE_VERSIONS")
    if not raw:
        return frozenset({CURRENT_VERSION})
    versions = set()
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            versions.add(int(part))
        except ValueError:
            raise ValueError(f"STAGE_COMPATIBLE_VERSIONS entries must be integers, got {part!r}")
    if not versions:
        raise ValueError("STAGE_COMPATIBLE_VERSIONS must list at least one version")
    return frozenset(versions)


def config_snapshot() -> Dict[str, Any]:
    return {
        "json_indent": get_json_indent(),
        "decode_timeout": get_decode_timeout(),
        "compatible_versions": sorted(get_compatible_versions()),
    }
