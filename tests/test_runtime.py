from pathlib import Path

import pytest

from pyessence import runtime
from pyessence.runtime import (
    RuntimeConfig,
    dev_mode_enabled,
    get_global_config,
    get_runtime_config,
    set_global_config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in (runtime.DEV_ENV, runtime.PACKAGE_NAME_ENV, runtime.SRC_DIR_ENV):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(runtime, "_global_config", None)


@pytest.mark.parametrize("value", ["1", "true", "TRUE", " yes ", "on"])
def test_dev_mode_enabled(monkeypatch, value):
    monkeypatch.setenv("ESSENCE_DEV", value)
    assert dev_mode_enabled()


@pytest.mark.parametrize("value", ["", "0", "false", "no", "off", "dev"])
def test_dev_mode_disabled(monkeypatch, value):
    monkeypatch.setenv("ESSENCE_DEV", value)
    assert not dev_mode_enabled()


def test_dev_mode_unset():
    assert not dev_mode_enabled()


def test_defaults():
    config = get_runtime_config()
    assert config.package_name == "essence"
    assert config.src_dir == "static"
    assert config.out_dir == "."
    assert config.compact_json
    assert config.sort_entries
    assert config.exclude == ()
    assert not config.verbose


def test_environment_then_overrides(monkeypatch):
    monkeypatch.setenv("ESSENCE_PACKAGE_NAME", "fromenv")
    monkeypatch.setenv("ESSENCE_SRC_DIR", "/srv/static")
    config = get_runtime_config()
    assert config.package_name == "fromenv"
    assert config.src_dir == "/srv/static"

    config = get_runtime_config(package_name="explicit", exclude=["*.map"])
    assert config.package_name == "explicit"
    assert config.exclude == ("*.map",)


def test_expands_user():
    config = RuntimeConfig(src_dir="~/static")
    assert config.src_dir == str(Path.home() / "static")


def test_global_config():
    assert get_global_config().package_name == "essence"
    set_global_config(RuntimeConfig(package_name="other"))
    assert get_global_config().package_name == "other"
