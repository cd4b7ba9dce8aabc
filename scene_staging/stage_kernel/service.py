"""Stage Service: composes stages and owns their prop-added channel."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from scene_staging.common.errors import StageNotFound
from scene_staging.stage_kernel.conversion import StageConverter
from scene_staging.stage_kernel.events import PropAddedChannel
from scene_staging.stage_kernel.host import ReferenceResolver, SceneHost
from scene_staging.stage_kernel.stage import Stage

logger = logging.getLogger(__name__)


class StageService:
    def __init__(
        self,
        host: Optional[SceneHost] = None,
        resolver: Optional[ReferenceResolver] = None,
        converter: Optional[StageConverter] = None,
    ) -> None:
        """A supplied `converter` brings its own host and resolver; passing
        `host` or `resolver` alongside it is an error. Either way, stages the
        service decodes publish to `prop_added`.
        """
        if converter is not None and (host is not None or resolver is not None):
            raise ValueError("pass host and resolver to the converter, not to StageService")
        self.prop_added = PropAddedChannel()
        if converter is None:
            converter = StageConverter(resolver=resolver, host=host)
        self._host = converter.host
        self._converter = converter.with_prop_added(self.prop_added.publish)
        self._stages: Dict[str, Stage] = {}

    def _register(self, stage: Stage) -> Stage:
        if stage.id in self._stages:
            logger.info("Replacing registered stage %s", stage.id)
        else:
            logger.info("Registered stage %s (%s)", stage.id, stage.display_name)
        self._stages[stage.id] = stage
        return stage

    def create_stage(self, display_name: str, stage_id: Optional[str] = None) -> Stage:
        stage = Stage(
            display_name,
            stage_id,
            host=self._host,
            on_prop_added=self.prop_added.publish,
        )
        return self._register(stage)

    def list_stages(self) -> List[Stage]:
        return list(self._stages.values())

    def find_stage(self, text: Optional[str]) -> Optional[Stage]:
        """First registered stage whose display name or id matches `text`."""
        for stage in self._stages.values():
            if stage.is_match(text):
                return stage
        return None

    def load_stage(self, text: str) -> Stage:
        return self._register(self._converter.decode(text))

    async def load_stage_async(self, text: str) -> Stage:
        stage = await self._converter.decode_async(text)
        return self._register(stage)

    def export_stage(self, text: str, pretty_print: bool = True) -> str:
        stage = self.find_stage(text)
        if stage is None:
            raise StageNotFound(f"Stage {text!r} not found", details={"query": text})
        return self._converter.encode(stage, pretty_print)
