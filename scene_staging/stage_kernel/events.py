"""Prop-added notifications.

A channel is owned by whoever composes stages (see StageService) and handed to
each stage as its `on_prop_added` callable, so unrelated stages never share
subscribers.
"""
from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any, Callable, List, Tuple

if TYPE_CHECKING:
    from scene_staging.stage_kernel.models import Prop
    from scene_staging.stage_kernel.stage import Stage

PropAddedCallback = Callable[["Stage", "Prop"], Any]


class PropAddedChannel:
    def __init__(self) -> None:
        self._subscribers: List[Tuple[str, PropAddedCallback]] = []

    def subscribe(self, callback: PropAddedCallback) -> str:
        sub_id = uuid.uuid4().hex
        self._subscribers.append((sub_id, callback))
        return sub_id

    def unsubscribe(self, sub_id: str) -> None:
        self._subscribers = [(sid, cb) for sid, cb in self._subscribers if sid != sub_id]

    def publish(self, stage: "Stage", prop: "Prop") -> None:
        # Snapshot so a callback may unsubscribe itself mid-publish.
        for _, callback in list(self._subscribers):
            callback(stage, prop)

    def __call__(self, stage: "Stage", prop: "Prop") -> None:
        self.publish(stage, prop)

    def __len__(self) -> int:
        return len(self._subscribers)
