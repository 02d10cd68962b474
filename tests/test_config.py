import json

import pytest

from bsubio.config import DEFAULT_BASE_URL, Settings, get_settings, load_user_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("BSUBIO_API_KEY", "BSUBIO_BASE_URL", "BSUBIO_POLL_INTERVAL"):
        monkeypatch.delenv(name, raising=False)


def write_config(tmp_path, **values):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(values))
    return path


def test_defaults(tmp_path):
    settings = get_settings(tmp_path / "missing.json")

    assert settings.api_key == ""
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.poll_interval == 2.0


def test_missing_user_config_is_empty(tmp_path):
    assert load_user_config(tmp_path / "missing.json") == {}


def test_user_config_values(tmp_path):
    path = write_config(tmp_path, api_key="file-key", base_url="http://localhost:9986", extra="x")

    assert load_user_config(path) == {"api_key": "file-key", "base_url": "http://localhost:9986"}

    settings = get_settings(path)
    assert settings.api_key == "file-key"
    assert settings.base_url == "http://localhost:9986"


def test_environment_overrides_user_config(tmp_path, monkeypatch):
    path = write_config(tmp_path, api_key="file-key")
    monkeypatch.setenv("BSUBIO_API_KEY", "env-key")
    monkeypatch.setenv("BSUBIO_POLL_INTERVAL", "0.5")

    settings = get_settings(path)

    assert settings.api_key == "env-key"
    assert settings.poll_interval == 0.5


def test_invalid_user_config_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")

    with pytest.raises(ValueError):
        load_user_config(path)


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("BSUBIO_BASE_URL", "https://staging.bsub.io")

    assert Settings().base_url == "https://staging.bsub.io"
