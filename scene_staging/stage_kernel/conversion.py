"""Conversion between stages and their JSON encoding."""
from __future__ import annotations

import asyncio
import copy
import json
import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from pydantic import ValidationError

from scene_staging.common.errors import DecodeError, ReferenceResolutionError, StageError, UnsupportedVersionError
from scene_staging.config import runtime_config
from scene_staging.stage_kernel.events import PropAddedCallback
from scene_staging.stage_kernel.host import ReferenceResolver, SceneHost
from scene_staging.stage_kernel.models import Prop
from scene_staging.stage_kernel.schemas import StageDocument
from scene_staging.stage_kernel.stage import Stage

logger = logging.getLogger(__name__)


class StageConverter:
    """Encodes stages to JSON and decodes them back.

    Encoding is synchronous and pure. Decoding may have to resolve external
    references through the resolver, which happens in one awaited step before
    the stage is assembled, so a failed or cancelled decode never hands out a
    partially bound stage.
    """

    def __init__(
        self,
        resolver: Optional[ReferenceResolver] = None,
        host: Optional[SceneHost] = None,
        compatible_versions: Optional[Iterable[int]] = None,
        indent: Optional[int] = None,
        timeout: Optional[float] = None,
        on_prop_added: Optional[PropAddedCallback] = None,
    ) -> None:
        self._resolver = resolver
        self._host = host
        self._compatible_versions: FrozenSet[int] = (
            frozenset(compatible_versions)
            if compatible_versions is not None
            else runtime_config.get_compatible_versions()
        )
        self._indent = indent if indent is not None else runtime_config.get_json_indent()
        self._timeout = timeout if timeout is not None else runtime_config.get_decode_timeout()
        self._on_prop_added = on_prop_added

    @property
    def compatible_versions(self) -> FrozenSet[int]:
        return self._compatible_versions

    @property
    def host(self) -> Optional[SceneHost]:
        return self._host

    @property
    def on_prop_added(self) -> Optional[PropAddedCallback]:
        return self._on_prop_added

    def with_prop_added(self, on_prop_added: Optional[PropAddedCallback]) -> "StageConverter":
        """Copy of this converter whose decoded stages report to `on_prop_added`."""
        converter = copy.copy(self)
        converter._on_prop_added = on_prop_added
        return converter

    # --- encode ---

    def to_document(self, stage: Stage) -> StageDocument:
        return StageDocument(
            version=stage.version,
            id=stage.id,
            displayName=stage.display_name,
            props=[prop.to_record() for prop in stage.props],
        )

    def encode(self, stage: Stage, pretty_print: bool = True) -> str:
        document = self.to_document(stage)
        return document.model_dump_json(
            indent=self._indent if pretty_print else None,
        )

    # --- decode ---

    def parse(self, text: str) -> StageDocument:
        """Validate encoded text into a document without resolving anything."""
        try:
            raw = json.loads(text)
        except (TypeError, ValueError) as exc:
            raise DecodeError(f"Stage JSON is malformed: {exc}") from exc
        if not isinstance(raw, dict):
            raise DecodeError("Stage JSON must be an object")

        version = raw.get("version")
        if isinstance(version, bool) or not isinstance(version, int):
            raise DecodeError("Stage JSON is missing an integer 'version'", details={"version": version})
        if version not in self._compatible_versions:
            logger.warning("Rejecting stage %s with schema version %s", raw.get("id"), version)
            raise UnsupportedVersionError(version, self._compatible_versions)

        try:
            return StageDocument.model_validate(raw)
        except ValidationError as exc:
            raise DecodeError(
                "Stage JSON does not match the stage schema",
                details={"errors": exc.errors(include_url=False, include_context=False)},
            ) from exc

    async def _resolve_references(self, document: StageDocument) -> Dict[int, Any]:
        """Resolve every component reference, one at a time, keyed by record id()."""
        resolved: Dict[int, Any] = {}
        if self._resolver is None:
            return resolved
        for record in document.references():
            try:
                capability = await self._resolver.resolve(record)
            except StageError:
                raise
            except Exception as exc:
                raise ReferenceResolutionError(record.reference, f"Resolver failed for {record.reference!r}: {exc}") from exc
            if capability is None:
                raise ReferenceResolutionError(record.reference)
            resolved[id(record)] = capability
        return resolved

    def from_document(self, document: StageDocument, capabilities: Optional[Dict[int, Any]] = None) -> Stage:
        """Assemble a stage from a validated document. Props are rebound through the host."""
        capabilities = capabilities or {}
        props: List[Prop] = []
        for record in document.props:
            bound_object = None
            if record.reference is not None and self._host is not None:
                bound_object = self._host.lookup(record.reference)
            props.append(
                Prop.from_record(
                    record,
                    bound_object=bound_object,
                    capabilities=[capabilities.get(id(c)) for c in record.components],
                )
            )
        return Stage(
            document.displayName,
            document.id,
            version=document.version,
            props=props,
            host=self._host,
            on_prop_added=self._on_prop_added,
        )

    async def decode_async(self, text: str) -> Stage:
        document = self.parse(text)
        references = document.references()
        if references and self._resolver is None:
            logger.debug("Stage %s has %d references but no resolver; leaving them unbound", document.id, len(references))

        resolution = self._resolve_references(document)
        if self._timeout is not None:
            try:
                capabilities = await asyncio.wait_for(resolution, self._timeout)
            except asyncio.TimeoutError as exc:
                raise ReferenceResolutionError(
                    None, f"Reference resolution timed out after {self._timeout}s"
                ) from exc
        else:
            capabilities = await resolution

        stage = self.from_document(document, capabilities)
        logger.debug("Decoded stage %s (%d props, %d resolved references)", stage.id, len(stage), len(capabilities))
        return stage

    def decode(self, text: str) -> Stage:
        """Blocking decode. Must not be called from inside a running event loop."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.decode_async(text))
        raise StageError("decode() cannot block inside a running event loop; await decode_async() instead")


_default_converter: Optional[StageConverter] = None


def get_default_converter() -> StageConverter:
    global _default_converter
    if _default_converter is None:
        _default_converter = StageConverter()
    return _default_converter


def set_default_converter(converter: Optional[StageConverter]) -> None:
    global _default_converter
    _default_converter = converter


def to_json(stage: Stage, pretty_print: bool = True) -> str:
    return get_default_converter().encode(stage, pretty_print)


def from_json(text: str) -> Stage:
    return get_default_converter().decode(text)


async def from_json_async(text: str) -> Stage:
    return await get_default_converter().decode_async(text)
