"""Contracts the staging kernel expects from the host engine.

The kernel never imports host types. A host hands over opaque handles and
answers these questions about them.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Optional, Protocol

from scene_staging.stage_kernel.schemas import ComponentRecord

if TYPE_CHECKING:
    from scene_staging.stage_kernel.models import Component


class SceneHost(Protocol):
    def resolve(self, handle: Any) -> Optional[str]:
        """Stable identity for a live handle, or None if the handle is dead/invalid."""
        ...

    def lookup(self, identity: str) -> Any:
        """Live handle for a stable identity, or None."""
        ...

    def name_of(self, handle: Any) -> str:
        ...

    def enumerate_components(self, handle: Any) -> Iterable["Component"]:
        ...


class ReferenceResolver(Protocol):
    async def resolve(self, component: ComponentRecord) -> Any:
        """Return the live capability for a component reference.

        Raise ReferenceResolutionError (or return None) when it cannot be resolved.
        """
        ...
