"""
Unit Tests for dependency wiring.
"""

from unittest.mock import MagicMock, patch

from leaflet.caching.notes import NotesCache
from leaflet.core.config_schema import RemoteSchema
from leaflet.core.dependencies import build_notes_repository, build_remote_source
from leaflet.remote.notes import NotesRemoteSource
from leaflet.stores.note import NoteStore


def _app_config(remote: RemoteSchema) -> MagicMock:
    config = MagicMock()
    config.application.remote = remote
    return config


class TestBuildRemoteSource:

    def test_disabled_remote_is_unconfigured(self):
        remote = RemoteSchema(enabled=False, base_url="https://notes.example.com", timeout=1)

        with patch("leaflet.core.config.get_app_config", return_value=_app_config(remote)):
            source = build_remote_source()

        assert source.is_configured is False

    def test_enabled_remote_uses_url_and_token(self):
        remote = RemoteSchema(enabled=True, base_url="https://notes.example.com", timeout=1)
        settings = MagicMock(remote_api_token="secret")

        with (
            patch("leaflet.core.config.get_app_config", return_value=_app_config(remote)),
            patch("leaflet.core.config.get_settings", return_value=settings),
        ):
            source = build_remote_source()

        assert source.base_url == "https://notes.example.com"
        assert source.is_configured is True


class TestBuildNotesRepository:

    def test_uses_supplied_collaborators(self):
        cache = NotesCache()
        remote = NotesRemoteSource()

        repository = build_notes_repository(
            session_factory=MagicMock(), cache=cache, remote=remote
        )

        assert isinstance(repository.store, NoteStore)
        assert repository.cache is cache
        assert repository.remote is remote

    def test_defaults_to_new_cache(self):
        first = build_notes_repository(session_factory=MagicMock(), remote=NotesRemoteSource())
        second = build_notes_repository(session_factory=MagicMock(), remote=NotesRemoteSource())

        assert first.cache is not second.cache
