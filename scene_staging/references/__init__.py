"""Asset reference lookup for stage decoding."""
from .database import AssetReference, ReferencesDatabase, NULL_PATH

__all__ = ["AssetReference", "ReferencesDatabase", "NULL_PATH"]
