from rehearsal.config.settings import Settings
from rehearsal.history.base import BaseHistoryRepository
from rehearsal.history.memory_repository import InMemoryHistoryRepository
from rehearsal.history.postgres_repository import PostgresHistoryRepository


class HistoryRepositoryFactory:
    """Creates the configured history backend.

    The postgres backend needs ``init_pool`` to have been awaited first.
    """

    _BACKENDS: dict[str, type[BaseHistoryRepository]] = {
        "memory": InMemoryHistoryRepository,
        "postgres": PostgresHistoryRepository,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseHistoryRepository:
        backend = settings.history_backend.lower()
        repository_class = cls._BACKENDS.get(backend)
        if repository_class is None:
            raise ValueError(
                f"Unknown history backend '{backend}'. Choose from: {list(cls._BACKENDS)}"
            )
        return repository_class()
