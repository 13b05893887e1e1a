from rehearsal.history.base import BaseHistoryRepository
from rehearsal.session.models import InterviewRecord


class InMemoryHistoryRepository(BaseHistoryRepository):
    """Keeps records for the lifetime of the process."""

    def __init__(self) -> None:
        self._records: list[InterviewRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    async def append(self, record: InterviewRecord) -> None:
        self._records.append(record)

    async def list_recent(self, limit: int) -> list[InterviewRecord]:
        if limit <= 0:
            return []
        # On equal timestamps the later append wins.
        newest_first = sorted(
            reversed(self._records),
            key=lambda record: record.timestamp,
            reverse=True,
        )
        return newest_first[:limit]
