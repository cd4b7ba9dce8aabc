"""Prop and Component data holders."""
from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Iterable, Iterator, List, Optional, Tuple

from scene_staging.stage_kernel.hashing import combine, fold, stable_hash
from scene_staging.stage_kernel.schemas import ROOT_PARENT_ID, ComponentRecord, PropRecord

if TYPE_CHECKING:
    from scene_staging.stage_kernel.host import SceneHost


class Component:
    """A typed payload attached to a prop.

    `bound_capability` is the live object on the host side. It is never persisted.
    """

    def __init__(
        self,
        type_identifier: str,
        serialized_fields: Any = None,
        reference: Optional[str] = None,
        bound_capability: Any = None,
    ) -> None:
        self._type_identifier = type_identifier
        self.serialized_fields = {} if serialized_fields is None else serialized_fields
        self._reference = reference
        self._bound_capability = bound_capability

    @property
    def type_identifier(self) -> str:
        return self._type_identifier

    @property
    def reference(self) -> Optional[str]:
        return self._reference

    @property
    def bound_capability(self) -> Any:
        return self._bound_capability

    @property
    def capability_type(self) -> Optional[type]:
        if self._bound_capability is None:
            return None
        return type(self._bound_capability)

    def bind(self, capability: Any) -> None:
        self._bound_capability = capability

    def is_assignable_to(self, kind: Any) -> bool:
        if isinstance(kind, str):
            return self._type_identifier == kind
        capability_type = self.capability_type
        if capability_type is None or not isinstance(kind, type):
            return False
        return issubclass(capability_type, kind)

    def to_record(self) -> ComponentRecord:
        return ComponentRecord(
            typeIdentifier=self._type_identifier,
            serializedFields=copy.deepcopy(self.serialized_fields),
            reference=self._reference,
        )

    @classmethod
    def from_record(cls, record: ComponentRecord, bound_capability: Any = None) -> "Component":
        return cls(
            record.typeIdentifier,
            copy.deepcopy(record.serializedFields),
            reference=record.reference,
            bound_capability=bound_capability,
        )

    def _key(self) -> Tuple[Any, ...]:
        return (self._type_identifier, self.serialized_fields, self._reference)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Component):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return self.content_hash()

    def content_hash(self) -> int:
        seed = stable_hash(self._type_identifier)
        seed = combine(seed, stable_hash(self.serialized_fields))
        return combine(seed, stable_hash(self._reference))

    def __repr__(self) -> str:
        return f"Component(type_identifier={self._type_identifier!r}, reference={self._reference!r})"


class Prop:
    """A node in the stage graph.

    Identity is the integer id. The parent is an id reference (ROOT_PARENT_ID for
    roots) resolved through the owning stage, never a pointer.
    """

    def __init__(
        self,
        prop_id: int,
        parent_id: int = ROOT_PARENT_ID,
        name: str = "",
        components: Optional[Iterable[Component]] = None,
        reference: Optional[str] = None,
        bound_object: Any = None,
    ) -> None:
        self._id = prop_id
        self._parent_id = parent_id
        self.name = name
        self._components: List[Component] = list(components or [])
        self._reference = reference
        self._bound_object = bound_object

    @classmethod
    def from_scene_object(
        cls,
        handle: Any,
        host: "SceneHost",
        prop_id: int,
        parent_id: int = ROOT_PARENT_ID,
    ) -> Optional["Prop"]:
        """Capture a prop from a live handle. Returns None for a dead handle."""
        if handle is None:
            return None
        identity = host.resolve(handle)
        if identity is None:
            return None
        return cls(
            prop_id,
            parent_id,
            name=host.name_of(handle),
            components=host.enumerate_components(handle),
            reference=identity,
            bound_object=handle,
        )

    @property
    def id(self) -> int:
        return self._id

    @property
    def parent_id(self) -> int:
        return self._parent_id

    @property
    def is_root(self) -> bool:
        return self._parent_id == ROOT_PARENT_ID

    @property
    def reference(self) -> Optional[str]:
        return self._reference

    @property
    def bound_object(self) -> Any:
        return self._bound_object

    def bind(self, handle: Any) -> None:
        self._bound_object = handle

    @property
    def components(self) -> Tuple[Component, ...]:
        return tuple(self._components)

    def add_component(self, component: Component) -> Component:
        self._components.append(component)
        return component

    def __len__(self) -> int:
        return len(self._components)

    def __getitem__(self, index: int) -> Component:
        return self._components[index]

    def __iter__(self) -> Iterator[Component]:
        return iter(self._components)

    def to_record(self) -> PropRecord:
        return PropRecord(
            id=self._id,
            parentId=self._parent_id,
            name=self.name,
            components=[c.to_record() for c in self._components],
            reference=self._reference,
        )

    @classmethod
    def from_record(
        cls,
        record: PropRecord,
        bound_object: Any = None,
        capabilities: Optional[List[Any]] = None,
    ) -> "Prop":
        capabilities = capabilities or [None] * len(record.components)
        components = [
            Component.from_record(c, bound_capability=cap)
            for c, cap in zip(record.components, capabilities)
        ]
        return cls(
            record.id,
            record.parentId,
            name=record.name,
            components=components,
            reference=record.reference,
            bound_object=bound_object,
        )

    def _key(self) -> Tuple[Any, ...]:
        return (self._id, self._parent_id, self.name, self._reference, self._components)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Prop):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return self.content_hash()

    def content_hash(self) -> int:
        seed = stable_hash(self._id)
        seed = combine(seed, stable_hash(self._parent_id))
        seed = combine(seed, stable_hash(self.name))
        seed = combine(seed, stable_hash(self._reference))
        return fold(seed, (c.content_hash() for c in self._components))

    def __repr__(self) -> str:
        return f"Prop(id={self._id}, parent_id={self._parent_id}, name={self.name!r}, components={len(self._components)})"
