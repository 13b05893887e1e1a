from abc import ABC, abstractmethod

from rehearsal.session.models import InterviewRecord


class BaseHistoryRepository(ABC):
    """Append-only store of interview records."""

    @abstractmethod
    async def append(self, record: InterviewRecord) -> None:
        """Store *record*. Records are never updated or deleted.

        Raises:
            PersistenceFailure: if the record could not be stored.
        """

    @abstractmethod
    async def list_recent(self, limit: int) -> list[InterviewRecord]:
        """Return up to *limit* records, newest first by timestamp."""
