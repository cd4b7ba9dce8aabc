"""Stage identifier generation."""
from __future__ import annotations

import uuid


def new_stage_id() -> str:
    return str(uuid.uuid4())
