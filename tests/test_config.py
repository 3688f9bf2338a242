"""
Tests for settings loading from defaults, YAML and environment.
"""

import pytest
import yaml

from ojtlog.infra import config
from ojtlog.infra.config import Settings


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Empty working directory without config/ or .env"""
    monkeypatch.chdir(tmp_path)
    for name in ("OJTLOG_PAGE_SIZE", "OJTLOG_DEFAULT_REQUIRED_HOURS", "OJTLOG_DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    return tmp_path


def _write_yaml(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


def test_defaults(workdir):
    settings = Settings(config_dir=workdir / "cfg", data_dir=workdir / "data")

    assert settings.default_required_hours == 500
    assert settings.page_size == 10
    assert settings.identity_header == "X-User-Id"


def test_environment_prefix(workdir, monkeypatch):
    monkeypatch.setenv("OJTLOG_PAGE_SIZE", "25")
    settings = Settings(config_dir=workdir / "cfg", data_dir=workdir / "data")
    assert settings.page_size == 25


def test_workspace_yaml(workdir):
    _write_yaml(workdir / "config" / "settings.yaml", {"page_size": 5, "export_basename": "Logs"})

    settings = Settings(config_dir=workdir / "cfg", data_dir=workdir / "data")

    assert settings.page_size == 5
    assert settings.export_basename == "Logs"


def test_user_config_dir_yaml(workdir):
    _write_yaml(workdir / "cfg" / "settings.yaml", {"default_required_hours": 486})
    settings = Settings(config_dir=workdir / "cfg", data_dir=workdir / "data")
    assert settings.default_required_hours == 486


def test_environment_beats_yaml(workdir, monkeypatch):
    _write_yaml(workdir / "config" / "settings.yaml", {"page_size": 5})
    monkeypatch.setenv("OJTLOG_PAGE_SIZE", "25")

    settings = Settings(config_dir=workdir / "cfg", data_dir=workdir / "data")

    assert settings.page_size == 25


def test_yaml_overlay_through_global_settings(workdir, monkeypatch):
    """The process-wide settings load cleanly when a YAML file is present."""
    monkeypatch.setenv("OJTLOG_CONFIG_DIR", str(workdir / "cfg"))
    monkeypatch.setenv("OJTLOG_DATA_DIR", str(workdir / "data"))
    _write_yaml(workdir / "config" / "settings.yaml", {"page_size": 5, "default_required_hours": 486})
    monkeypatch.setattr(config, "_settings", None)

    settings = config.reload_settings()

    assert settings.page_size == 5
    assert settings.default_required_hours == 486
    assert config.get_settings() is settings


def test_invalid_yaml_value_rejected(workdir):
    _write_yaml(workdir / "config" / "settings.yaml", {"page_size": 0})
    with pytest.raises(ValueError):
        Settings(config_dir=workdir / "cfg", data_dir=workdir / "data")


def test_default_db_url_in_data_dir(workdir):
    settings = Settings(config_dir=workdir / "cfg", data_dir=workdir / "data")

    url = settings.get_db_url()

    assert url.startswith("sqlite+aiosqlite:///")
    assert url.endswith("ojtlog.db")
    assert (workdir / "data").is_dir()


def test_explicit_db_url(workdir):
    settings = Settings(config_dir=workdir / "cfg", database_url="sqlite+aiosqlite:///:memory:")
    assert settings.get_db_url() == "sqlite+aiosqlite:///:memory:"
