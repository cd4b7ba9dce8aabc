"""References database tests."""
import pytest

from scene_staging.common.errors import ReferenceResolutionError
from scene_staging.references.database import NULL_PATH, ReferencesDatabase
from scene_staging.stage_kernel.schemas import ComponentRecord


@pytest.fixture
def anyio_backend():
    return "asyncio"


def test_add_and_lookup():
    db = ReferencesDatabase()
    stone, oak = object(), object()
    db.add(stone, "mat/stone")
    db.add(oak, "mat/oak")

    assert len(db) == 2
    assert db.get_asset("mat/oak") is oak
    assert db.get_path(stone) == "mat/stone"
    assert db.get_asset("mat/glass") is None
    assert db.get_path(object()) is None
    assert db.get_asset(None) is None


def test_refresh_paths_assigns_null_for_missing():
    db = ReferencesDatabase()
    known, unknown = object(), object()
    db.add(known, "old/known")
    db.add(unknown, "old/unknown")
    db.add(None, "old/empty")

    db.refresh_paths(lambda asset: "new/known" if asset is known else None)

    assert [r.path for r in db.references] == ["new/known", NULL_PATH, NULL_PATH]
    assert db.get_asset("new/known") is known
    # The null path never resolves to an asset
    assert db.get_asset(NULL_PATH) is None


@pytest.mark.anyio
async def test_resolve_component_record():
    db = ReferencesDatabase()
    asset = object()
    db.add(asset, "assets/lamp.prefab")

    record = ComponentRecord(typeIdentifier="Light", reference="assets/lamp.prefab")
    assert await db.resolve(record) is asset

    with pytest.raises(ReferenceResolutionError) as exc:
        await db.resolve(ComponentRecord(typeIdentifier="Light", reference="assets/missing"))
    assert exc.value.reference == "assets/missing"
