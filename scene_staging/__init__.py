"""Scene staging kernel: versioned stage graphs of props and components."""
from scene_staging.common.errors import (
    DecodeError,
    ReferenceResolutionError,
    StageError,
    StageNotFound,
    UnsupportedVersionError,
)
from scene_staging.stage_kernel.conversion import StageConverter, from_json, from_json_async, to_json
from scene_staging.stage_kernel.events import PropAddedChannel
from scene_staging.stage_kernel.models import Component, Prop
from scene_staging.stage_kernel.schemas import CURRENT_VERSION, ROOT_PARENT_ID
from scene_staging.stage_kernel.service import StageService
from scene_staging.stage_kernel.stage import Stage

__all__ = [
    "CURRENT_VERSION",
    "ROOT_PARENT_ID",
    "Component",
    "DecodeError",
    "Prop",
    "PropAddedChannel",
    "ReferenceResolutionError",
    "Stage",
    "StageConverter",
    "StageError",
    "StageNotFound",
    "StageService",
    "UnsupportedVersionError",
    "from_json",
    "from_json_async",
    "to_json",
]
