"""Stage: the owning container of props."""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from scene_staging.common.ids import new_stage_id
from scene_staging.stage_kernel.events import PropAddedCallback
from scene_staging.stage_kernel.hashing import combine, fold, stable_hash
from scene_staging.stage_kernel.host import SceneHost
from scene_staging.stage_kernel.models import Prop
from scene_staging.stage_kernel.schemas import CURRENT_VERSION, ROOT_PARENT_ID

_HASH_SEED = 578067217
_HASH_FACTOR = -1521134295


class Stage:
    """An ordered, versioned collection of props.

    Props live in a single owned list. Two derived caches sit on top of it, an
    id -> Prop index and a read-only tuple view. Both are built lazily and both
    are dropped on any structural mutation.

    Equality is hash equality: two stages are equal when their content hashes
    match. Use `structurally_equals` for a field-by-field comparison.
    """

    def __init__(
        self,
        display_name: str,
        stage_id: Optional[str] = None,
        *,
        version: int = CURRENT_VERSION,
        props: Optional[Iterable[Prop]] = None,
        host: Optional[SceneHost] = None,
        on_prop_added: Optional[PropAddedCallback] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self._version = version
        self._id = stage_id if stage_id is not None else (id_factory or new_stage_id)()
        self._display_name = display_name
        self._props: List[Prop] = list(props or [])
        self._host = host
        self._on_prop_added = on_prop_added
        self._id_to_prop: Optional[Dict[int, Prop]] = None
        self._props_view: Optional[Tuple[Prop, ...]] = None

    @property
    def version(self) -> int:
        return self._version

    @property
    def id(self) -> str:
        return self._id

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def host(self) -> Optional[SceneHost]:
        return self._host

    @property
    def on_prop_added(self) -> Optional[PropAddedCallback]:
        return self._on_prop_added

    @property
    def props(self) -> Tuple[Prop, ...]:
        if self._props_view is None:
            self._props_view = tuple(self._props)
        return self._props_view

    def __len__(self) -> int:
        return len(self._props)

    def __iter__(self):
        return iter(self.props)

    # --- mutation ---

    def _invalidate(self) -> None:
        self._id_to_prop = None
        self._props_view = None

    def _index(self) -> Dict[int, Prop]:
        """id -> Prop, built on first use. Later props win on duplicate ids."""
        if self._id_to_prop is None:
            self._id_to_prop = {}
            for prop in self._props:
                self._id_to_prop[prop.id] = prop
        return self._id_to_prop

    def append(self, prop: Prop) -> Prop:
        self._props.append(prop)
        self._props_view = None
        self._index()[prop.id] = prop

        if self._on_prop_added is not None:
            self._on_prop_added(self, prop)
        return prop

    def add_prop(
        self,
        prop_id: Optional[int] = None,
        parent_id: int = ROOT_PARENT_ID,
        name: str = "",
    ) -> Prop:
        """Append a bare prop. The id defaults to the current prop count."""
        if prop_id is None:
            prop_id = len(self._props)
        return self.append(Prop(prop_id, parent_id, name=name))

    def add_scene_object(
        self,
        handle: Any,
        parent_id: int = ROOT_PARENT_ID,
        prop_id: Optional[int] = None,
    ) -> Optional[Prop]:
        """Capture a live scene object as a prop.

        Returns None, without adding anything, for a missing/invalid handle or
        when the stage has no host.
        """
        if handle is None or self._host is None:
            return None
        if prop_id is None:
            prop_id = len(self._props)
        prop = Prop.from_scene_object(handle, self._host, prop_id, parent_id)
        if prop is None:
            return None
        return self.append(prop)

    def remove_prop(self, prop: Prop) -> bool:
        for position, existing in enumerate(self._props):
            if existing is prop:
                del self._props[position]
                self._invalidate()
                return True
        return False

    def replace_prop(self, position: int, prop: Prop) -> Prop:
        """Swap the prop at `position` in place. Returns the prop that was replaced."""
        previous = self._props[position]
        self._props[position] = prop
        self._invalidate()
        return previous

    # --- lookup ---

    def get_prop(self, key: Any) -> Optional[Prop]:
        """Look up by id (int), by name (str) or by bound scene object (anything else)."""
        if isinstance(key, int) and not isinstance(key, bool):
            return self.get_prop_by_id(key)
        if isinstance(key, str):
            return self.get_prop_by_name(key)
        return self.get_prop_by_object(key)

    def get_prop_by_object(self, handle: Any) -> Optional[Prop]:
        if handle is None:
            return None
        for prop in reversed(self._props):
            if prop.bound_object is handle or prop.bound_object == handle:
                return prop
        return None

    def get_prop_by_id(self, prop_id: int) -> Optional[Prop]:
        return self._index().get(prop_id)

    def get_prop_by_name(self, name: str) -> Optional[Prop]:
        for prop in reversed(self._props):
            if prop.name == name:
                return prop
        return None

    def get_props_with_capability(self, kind: Any) -> List[Prop]:
        """Props owning a component assignable to `kind`, last-added first.

        `kind` is either a type (matched against the bound capability) or a
        type identifier string.
        """
        result: List[Prop] = []
        for prop in reversed(self._props):
            if any(component.is_assignable_to(kind) for component in prop):
                result.append(prop)
        return result

    def parent_of(self, prop: Prop) -> Optional[Prop]:
        if prop.is_root:
            return None
        return self.get_prop_by_id(prop.parent_id)

    def children_of(self, prop: Prop) -> List[Prop]:
        return [child for child in self._props if not child.is_root and child.parent_id == prop.id]

    def is_match(self, text: Optional[str]) -> bool:
        """True if `text` names this stage (exact) or is its id (case-insensitive)."""
        if not text:
            return False
        return text == self._display_name or text.casefold() == self._id.casefold()

    # --- conversion ---

    def to_json(self, pretty_print: bool = True) -> str:
        from scene_staging.stage_kernel.conversion import to_json  # local import to avoid circular

        return to_json(self, pretty_print)

    @classmethod
    def from_json(cls, text: str) -> "Stage":
        from scene_staging.stage_kernel.conversion import from_json

        return from_json(text)

    @classmethod
    async def from_json_async(cls, text: str) -> "Stage":
        from scene_staging.stage_kernel.conversion import from_json_async

        return await from_json_async(text)

    def clone(self) -> "Stage":
        """Deep copy through the wire schema. Bound handles are carried over, not copied."""
        from scene_staging.stage_kernel.conversion import StageConverter

        converter = StageConverter(host=self._host, on_prop_added=self._on_prop_added)
        document = converter.to_document(self)
        copied = converter.from_document(document.model_copy(deep=True))
        for source, target in zip(self._props, copied._props):
            target.bind(source.bound_object)
            for source_component, target_component in zip(source, target):
                target_component.bind(source_component.bound_capability)
        return copied

    # --- identity ---

    def content_hash(self) -> int:
        seed = combine(_HASH_SEED, stable_hash(self._id), _HASH_FACTOR)
        seed = combine(seed, stable_hash(self._display_name), _HASH_FACTOR)
        return fold(seed, (prop.content_hash() for prop in self._props))

    def __hash__(self) -> int:
        return self.content_hash()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Stage):
            return NotImplemented
        return self.content_hash() == other.content_hash()

    def structurally_equals(self, other: "Stage") -> bool:
        return (
            self._version == other._version
            and self._id == other._id
            and self._display_name == other._display_name
            and self._props == other._props
        )

    def __repr__(self) -> str:
        return f"Stage(id={self._id!r}, display_name={self._display_name!r}, props={len(self._props)})"
