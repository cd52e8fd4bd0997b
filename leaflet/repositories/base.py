"""
Base Repository.

Base class for repositories: the entry points callers use to read and
write domain objects. Repositories compose a store with other
collaborators (caches, remote sources) and implement the policies that
tie them together; they never issue queries themselves.

Usage:
    from leaflet.repositories.base import BaseRepository

    class NotesRepository(BaseRepository):
        def __init__(self, store: NoteStore, cache: NotesCache) -> None:
            super().__init__()
            self.store = store
            self.cache = cache

        async def fetch_note(self, note_id: str) -> Note | None:
            self._log_debug("Fetching note", note_id=note_id)
            return await self.store.fetch_by_id(note_id)
"""

from typing import Any

from leaflet.core.logging import get_logger


class BaseRepository:
    """
    Base class for all repositories.

    Provides:
    - Logging context
    - Structured logging helpers tagged with the repository name

    Subclasses should:
    - Call super().__init__() in their __init__
    - Receive their collaborators through the constructor
    """

    def __init__(self) -> None:
        self._logger = get_logger(self.__class__.__module__)

    def _log_operation(
        self,
        operation: str,
        **context: Any,
    ) -> None:
        """
        Log a repository operation with context.

        Args:
            operation: Description of the operation
            **context: Additional context to include in log
        """
        self._logger.info(
            operation,
            extra={"repository": self.__class__.__name__, **context},
        )

    def _log_debug(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log debug information.

        Args:
            message: Debug message
            **context: Additional context to include in log
        """
        self._logger.debug(
            message,
            extra={"repository": self.__class__.__name__, **context},
        )

    def _log_warning(
        self,
        message: str,
        **context: Any,
    ) -> None:
        """
        Log a recovered failure.

        Args:
            message: Warning message
            **context: Additional context to include in log
        """
        self._logger.warning(
            message,
            extra={"repository": self.__class__.__name__, **context},
        )
