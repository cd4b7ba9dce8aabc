"""StageService composition tests."""
import pytest

from scene_staging.common.errors import StageNotFound, UnsupportedVersionError
from scene_staging.references.database import ReferencesDatabase
from scene_staging.stage_kernel.conversion import StageConverter
from scene_staging.stage_kernel.models import Component
from scene_staging.stage_kernel.service import StageService


def test_create_and_find_stage():
    service = StageService()
    castle = service.create_stage("Castle", "ABC-1")
    service.create_stage("Harbor")

    assert service.find_stage("Castle") is castle
    assert service.find_stage("abc-1") is castle
    assert service.find_stage("castle") is None
    assert service.find_stage("") is None
    assert len(service.list_stages()) == 2


def test_service_channel_sees_all_its_stages():
    service = StageService()
    seen = []
    service.prop_added.subscribe(lambda stage, prop: seen.append((stage.display_name, prop.id)))

    service.create_stage("A").add_prop()
    service.create_stage("B").add_prop()

    other = StageService()
    other.create_stage("C").add_prop()

    assert seen == [("A", 0), ("B", 0)]


def test_export_and_load_round_trip():
    service = StageService()
    stage = service.create_stage("Castle", "ABC-1")
    stage.add_prop(name="Keep").add_component(Component("Light", {"intensity": 1.0}))
    text = service.export_stage("Castle")

    other = StageService()
    seen = []
    other.prop_added.subscribe(lambda s, p: seen.append(p.id))
    loaded = other.load_stage(text)

    assert loaded == stage
    assert other.find_stage("ABC-1") is loaded
    assert seen == []
    # Loaded stages are wired to the loading service's channel
    loaded.add_prop()
    assert seen == [1]


def test_supplied_converter_reports_to_service_channel(host):
    outside = []
    converter = StageConverter(host=host, on_prop_added=lambda s, p: outside.append(p.id))
    service = StageService(converter=converter)
    seen = []
    service.prop_added.subscribe(lambda s, p: seen.append(p.id))

    loaded = service.load_stage('{"version": 2, "id": "x", "displayName": "Yard", "props": []}')
    loaded.add_prop()
    assert seen == [0]
    assert outside == []
    assert loaded.host is host
    # The caller's converter keeps its own callback
    assert converter.decode('{"version": 2, "id": "y", "displayName": "Yard", "props": []}').on_prop_added is not None


def test_converter_excludes_host_and_resolver(host):
    with pytest.raises(ValueError):
        StageService(host=host, converter=StageConverter())


def test_export_missing_stage():
    with pytest.raises(StageNotFound) as exc:
        StageService().export_stage("nowhere")
    assert exc.value.to_dict()["error"]["details"] == {"query": "nowhere"}


def test_load_rejects_unknown_version():
    service = StageService()
    with pytest.raises(UnsupportedVersionError):
        service.load_stage('{"version": 9, "id": "x", "displayName": "y", "props": []}')
    assert service.list_stages() == []


@pytest.mark.anyio
async def test_load_stage_async_with_references_database(host, fakes):
    lamp = fakes.Light(4.0)
    references = ReferencesDatabase()
    references.add(lamp, "assets/lamp.prefab")

    service = StageService(host=host, resolver=references)
    stage = service.create_stage("Castle")
    stage.add_prop(name="Lamp").add_component(Component("Light", {"intensity": 4.0}, reference="assets/lamp.prefab"))

    loaded = await service.load_stage_async(service.export_stage(stage.id))
    assert loaded.get_prop("Lamp")[0].bound_capability is lamp
    assert loaded.get_props_with_capability(fakes.Light) == [loaded.get_prop("Lamp")]
