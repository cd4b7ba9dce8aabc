"""Stage wire schemas (the encoded form)."""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

CURRENT_VERSION = 2
ROOT_PARENT_ID = -1


class WireModel(BaseModel):
    # Non-finite floats are written as Infinity/-Infinity/NaN instead of null.
    model_config = ConfigDict(ser_json_inf_nan="constants")


class ComponentRecord(WireModel):
    """A component as it appears in the encoded stage."""
    typeIdentifier: str
    serializedFields: Any = Field(default_factory=dict)
    reference: Optional[str] = None  # path/identifier resolved on decode


class PropRecord(WireModel):
    id: int
    parentId: int = ROOT_PARENT_ID
    name: str = ""
    components: List[ComponentRecord] = Field(default_factory=list)
    reference: Optional[str] = None  # identity of the bound scene object


class StageDocument(WireModel):
    """Top-level envelope. Order of `props` is the authoritative stage order."""
    version: int = Field(ge=0, le=0xFFFF)
    id: str
    displayName: str
    props: List[PropRecord] = Field(default_factory=list)

    def references(self) -> List[ComponentRecord]:
        """Component records that declare an external reference, in document order."""
        return [
            component
            for prop in self.props
            for component in prop.components
            if component.reference is not None
        ]
