"""In-memory references database.

Maps stored asset paths to live assets so a decoded stage can bind its
components. Doubles as the ReferenceResolver handed to StageConverter.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional

from scene_staging.common.errors import ReferenceResolutionError
from scene_staging.stage_kernel.schemas import ComponentRecord

logger = logging.getLogger(__name__)

# Path recorded for an entry whose asset is missing or has no known location.
NULL_PATH = "null"


@dataclass
class AssetReference:
    path: str
    asset: Any = None


class ReferencesDatabase:
    def __init__(self) -> None:
        self._references: List[AssetReference] = []

    @property
    def references(self) -> List[AssetReference]:
        return list(self._references)

    def add(self, asset: Any, path: str) -> AssetReference:
        reference = AssetReference(path=path, asset=asset)
        self._references.append(reference)
        return reference

    def get_asset(self, path: Optional[str]) -> Any:
        if not path or path == NULL_PATH:
            return None
        for reference in self._references:
            if reference.path == path:
                return reference.asset
        return None

    def get_path(self, asset: Any) -> Optional[str]:
        if asset is None:
            return None
        for reference in self._references:
            if reference.asset is asset:
                return reference.path
        return None

    def refresh_paths(self, path_of: Callable[[Any], Optional[str]]) -> None:
        """Re-derive every entry's path from its asset."""
        for reference in self._references:
            path = path_of(reference.asset) if reference.asset is not None else None
            reference.path = path or NULL_PATH
        logger.debug("Refreshed %d reference paths", len(self._references))

    async def resolve(self, component: ComponentRecord) -> Any:
        asset = self.get_asset(component.reference)
        if asset is None:
            raise ReferenceResolutionError(
                component.reference,
                f"No asset registered for {component.reference!r} ({component.typeIdentifier})",
            )
        return asset

    def __len__(self) -> int:
        return len(self._references)
