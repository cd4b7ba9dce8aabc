"""Fixtures for stage kernel tests: a minimal fake scene host."""
from types import SimpleNamespace

import pytest

from scene_staging.stage_kernel.models import Component


class Renderer:
    def __init__(self, material: str = "default", asset_path=None):
        self.material = material
        self.asset_path = asset_path

    def fields(self):
        return {"material": self.material}


class MeshRenderer(Renderer):
    pass


class Light:
    def __init__(self, intensity: float = 1.0):
        self.intensity = intensity
        self.asset_path = None

    def fields(self):
        return {"intensity": self.intensity}


class FakeSceneObject:
    def __init__(self, uid: str, name: str, capabilities=()):
        self.uid = uid
        self.name = name
        self.capabilities = list(capabilities)
        self.alive = True


class FakeHost:
    def __init__(self):
        self.objects = {}

    def spawn(self, name, capabilities=()):
        obj = FakeSceneObject(f"obj-{len(self.objects)}", name, capabilities)
        self.objects[obj.uid] = obj
        return obj

    def resolve(self, handle):
        if not handle.alive:
            return None
        return handle.uid

    def lookup(self, identity):
        return self.objects.get(identity)

    def name_of(self, handle):
        return handle.name

    def enumerate_components(self, handle):
        return [
            Component(
                type(cap).__name__,
                cap.fields(),
                reference=cap.asset_path,
                bound_capability=cap,
            )
            for cap in handle.capabilities
        ]


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def fakes():
    return SimpleNamespace(Renderer=Renderer, MeshRenderer=MeshRenderer, Light=Light)


@pytest.fixture
def anyio_backend():
    return "asyncio"
