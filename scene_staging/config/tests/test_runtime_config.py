"""Runtime config tests."""
import pytest

from scene_staging.config import runtime_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("STAGE_JSON_INDENT", "STAGE_DECODE_TIMEOUT_SECONDS", "STAGE_COMPATIBLE_VERSIONS"):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert runtime_config.config_snapshot() == {
        "json_indent": 4,
        "decode_timeout": None,
        "compatible_versions": [2],
    }


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("STAGE_JSON_INDENT", "2")
    monkeypatch.setenv("STAGE_DECODE_TIMEOUT_SECONDS", "1.5")
    monkeypatch.setenv("STAGE_COMPATIBLE_VERSIONS", "2,1,")
    assert runtime_config.get_json_indent() == 2
    assert runtime_config.get_decode_timeout() == 1.5
    assert runtime_config.get_compatible_versions() == frozenset({1, 2})


@pytest.mark.parametrize(
    "name,value",
    [
        ("STAGE_JSON_INDENT", "wide"),
        ("STAGE_JSON_INDENT", "-1"),
        ("STAGE_DECODE_TIMEOUT_SECONDS", "soon"),
        ("STAGE_DECODE_TIMEOUT_SECONDS", "0"),
        ("STAGE_COMPATIBLE_VERSIONS", "two"),
        ("STAGE_COMPATIBLE_VERSIONS", ","),
    ],
)
def test_invalid_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError):
        runtime_config.config_snapshot()
