"""Unit tests for the YAML configuration loader."""

import logging

import pytest

from acl_pivot.exceptions import ConfigurationError
from acl_pivot.utils.config import ConfigLoader


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "gcp:\n"
        "  project_id: from-config\n"
        "logging:\n"
        "  level: DEBUG\n"
        "groups:\n"
        "  projectReaders:\n"
        "    - alice@x\n"
    )
    return str(path)


def test_loads_sections(config_file) -> None:
    loader = ConfigLoader(config_file)
    assert loader.get_gcp_config() == {"project_id": "from-config"}
    assert loader.get_logging_config() == {"level": "DEBUG"}
    assert loader.get_group_config() == {"projectReaders": ["alice@x"]}


def test_missing_explicit_config_is_an_error(tmp_path) -> None:
    with pytest.raises(ConfigurationError, match="not found"):
        ConfigLoader(str(tmp_path / "missing.yaml"))


def test_invalid_yaml_is_an_error(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("gcp: [unclosed\n")
    with pytest.raises(ConfigurationError):
        ConfigLoader(str(path))


def test_empty_config_file(tmp_path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("")
    loader = ConfigLoader(str(path))
    assert loader.get_config() == {}
    assert loader.get_group_config() == {}


def test_project_id_prefers_command_line(config_file, monkeypatch) -> None:
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "from-env")
    assert ConfigLoader(config_file).resolve_project_id("from-cli") == "from-cli"


def test_project_id_falls_back_to_environment(config_file, monkeypatch) -> None:
    monkeypatch.setenv("GOOGLE_CLOUD_PROJECT", "from-env")
    assert ConfigLoader(config_file).resolve_project_id(None) == "from-env"


def test_project_id_falls_back_to_config(config_file, monkeypatch) -> None:
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    assert ConfigLoader(config_file).resolve_project_id(None) == "from-config"


def test_missing_project_id_is_an_error(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("GOOGLE_CLOUD_PROJECT", raising=False)
    path = tmp_path / "config.yaml"
    path.write_text("gcp: {}\n")
    with pytest.raises(ConfigurationError, match="--project_id"):
        ConfigLoader(str(path)).resolve_project_id(None)


def test_setup_logging_uses_configured_level(config_file) -> None:
    ConfigLoader(config_file).setup_logging()
    assert logging.getLogger().level == logging.DEBUG

    ConfigLoader(config_file).setup_logging("WARNING")
    assert logging.getLogger().level == logging.WARNING
