"""
Unit Tests for Configuration Management.

Tests YAML loading, schema validation and database URL resolution.
"""

from pathlib import Path

import pytest

from leaflet.core import config as config_module
from leaflet.core.config import (
    AppConfig,
    _load_validated,
    find_project_root,
    get_database_url,
    load_yaml_config,
    validate_project_root,
)
from leaflet.core.config_schema import ApplicationSchema, DatabaseSchema
from leaflet.core.exceptions import ConfigurationError


@pytest.fixture
def project_dir(tmp_path, monkeypatch) -> Path:
    """Temporary project root with an empty config/settings directory."""
    (tmp_path / ".project_root").touch()
    (tmp_path / "config" / "settings").mkdir(parents=True)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _write_setting(project_dir: Path, filename: str, text: str) -> None:
    (project_dir / "config" / "settings" / filename).write_text(text)


class TestProjectRoot:
    """Tests for project root discovery."""

    def test_found_from_subdirectory(self, project_dir, monkeypatch):
        nested = project_dir / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)

        assert find_project_root() == project_dir

    def test_missing_marker_raises(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()

    def test_validate_exits_when_missing(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit):
            validate_project_root()


class TestYamlLoading:
    """Tests for loading and validating YAML files."""

    def test_project_settings_are_valid(self):
        """The shipped config/settings files pass their schemas."""
        config = AppConfig()

        assert config.application.name == "Leaflet Notes"
        assert config.database.url.startswith("sqlite+aiosqlite:///")
        assert config.logging.handlers.file.path == "logs/system.jsonl"

    def test_missing_file_raises(self, project_dir):
        with pytest.raises(FileNotFoundError):
            load_yaml_config("application.yaml")

    def test_empty_file_loads_as_empty_dict(self, project_dir):
        _write_setting(project_dir, "database.yaml", "")

        assert load_yaml_config("database.yaml") == {}

    def test_unknown_key_names_the_file(self, project_dir):
        _write_setting(
            project_dir,
            "database.yaml",
            "url: sqlite+aiosqlite:///x.db\necho: false\nbusy_timeout: 1\npool_size: 5\n",
        )

        with pytest.raises(ConfigurationError, match="database.yaml") as exc_info:
            _load_validated(DatabaseSchema, "database.yaml")

        assert exc_info.value.code == "SYS_CONFIG_ERROR"

    def test_missing_key_is_rejected(self, project_dir):
        _write_setting(project_dir, "application.yaml", "name: Leaflet\n")

        with pytest.raises(ConfigurationError):
            _load_validated(ApplicationSchema, "application.yaml")


class TestDatabaseUrl:
    """Tests for record store URL resolution."""

    @pytest.fixture(autouse=True)
    def _clear_config_cache(self):
        config_module.get_app_config.cache_clear()
        yield
        config_module.get_app_config.cache_clear()

    def _use_url(self, project_dir: Path, url: str) -> None:
        _write_setting(project_dir, "application.yaml", (
            "name: Leaflet\nversion: '1'\ndescription: d\nenvironment: test\ndebug: false\n"
            "remote:\n  enabled: false\n  timeout: 1\n"
        ))
        _write_setting(project_dir, "database.yaml", f"url: '{url}'\necho: false\nbusy_timeout: 1\n")
        _write_setting(project_dir, "logging.yaml", (
            "level: INFO\nformat: json\nhandlers:\n  console:\n    enabled: true\n"
            "  file:\n    enabled: false\n    path: logs/x.jsonl\n    max_bytes: 1\n    backup_count: 1\n"
        ))

    def test_relative_sqlite_path_resolves_against_root(self, project_dir):
        self._use_url(project_dir, "sqlite+aiosqlite:///data/notes.db")

        assert get_database_url() == f"sqlite+aiosqlite:///{project_dir / 'data' / 'notes.db'}"

    def test_memory_url_is_unchanged(self, project_dir):
        self._use_url(project_dir, "sqlite+aiosqlite:///:memory:")

        assert get_database_url() == "sqlite+aiosqlite:///:memory:"

    def test_absolute_path_is_unchanged(self, project_dir):
        absolute = project_dir / "elsewhere.db"
        self._use_url(project_dir, f"sqlite+aiosqlite:///{absolute}")

        assert get_database_url() == f"sqlite+aiosqlite:///{absolute}"
