"""
Tests for flowtest.config
"""
import json
from pathlib import Path

import pytest

from flowtest.config import (
    load_config,
    save_config,
    generate_config_example,
    get_default_config,
    get_config_path,
    DEFAULT_REPOSITORY_URL,
)
from flowtest.exit_codes import ConfigError


@pytest.fixture
def home(fs, monkeypatch):
    monkeypatch.setenv("HOME", "/home/user")
    for name in ("FLOWTEST_CONFIG", "FLOWTEST_REPO", "FLOWTEST_WORKSPACE"):
        monkeypatch.delenv(name, raising=False)
    fs.create_dir("/home/user")
    return Path("/home/user")


def test_get_default_config():
    config = get_default_config()
    assert config["general"]["repository_url"] == DEFAULT_REPOSITORY_URL
    assert config["general"]["trunk"] == "master"
    assert config["general"]["remote"] == "origin"
    assert config["git"]["script_name"] == "flowtest.py"
    assert config["logging"]["level"] == "INFO"


def test_load_config_no_file(home):
    assert load_config() == get_default_config()


def test_load_config_merges_rc_file(home, fs):
    fs.create_file(home / ".flowtestrc", contents=json.dumps({
        "general": {"repository_url": "git@example.com:me/flowtest.git"},
        "logging": {"level": "DEBUG"},
    }))
    config = load_config()
    assert config["general"]["repository_url"] == "git@example.com:me/flowtest.git"
    # Untouched keys keep their defaults
    assert config["general"]["trunk"] == "master"
    assert config["logging"]["level"] == "DEBUG"
    assert config["logging"]["format"] == "%(message)s"


def test_config_env_var_overrides_location(home, fs, monkeypatch):
    fs.create_file("/etc/flowtest.json", contents=json.dumps({"general": {"workspace": "/srv/flow"}}))
    monkeypatch.setenv("FLOWTEST_CONFIG", "/etc/flowtest.json")
    assert get_config_path() == Path("/etc/flowtest.json")
    assert load_config()["general"]["workspace"] == "/srv/flow"


def test_environment_overrides(home, monkeypatch):
    monkeypatch.setenv("FLOWTEST_REPO", "/tmp/remote.git")
    monkeypatch.setenv("FLOWTEST_WORKSPACE", "/tmp/work")
    config = load_config()
    assert config["general"]["repository_url"] == "/tmp/remote.git"
    assert config["general"]["workspace"] == "/tmp/work"


def test_load_config_invalid_json(home, fs):
    fs.create_file(home / ".flowtestrc", contents="{not json")
    with pytest.raises(ConfigError):
        load_config()


def test_load_config_not_an_object(home, fs):
    fs.create_file(home / ".flowtestrc", contents="[1, 2]")
    with pytest.raises(ConfigError):
        load_config()


def test_save_config_round_trip(home):
    example = generate_config_example()
    path = save_config(example)
    assert path == home / ".flowtestrc"
    assert load_config()["git"]["author_name"] == "Your Name"
