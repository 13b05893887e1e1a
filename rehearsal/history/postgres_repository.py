import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from rehearsal.database.connection import get_connection
from rehearsal.history.base import BaseHistoryRepository
from rehearsal.history.exceptions import PersistenceFailure
from rehearsal.history.serializer import RecordSerializer
from rehearsal.logging.logger import Log
from rehearsal.session.models import InterviewRecord

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS interview_history (
    id BIGSERIAL PRIMARY KEY,
    role TEXT NOT NULL,
    question TEXT NOT NULL,
    raw_answer TEXT NOT NULL,
    anonymized_answer TEXT NOT NULL,
    entity_map JSONB NOT NULL,
    input_type TEXT NOT NULL,
    anonymization_applied BOOLEAN NOT NULL,
    feedback JSONB,
    created_at TIMESTAMPTZ NOT NULL
)
"""


class PostgresHistoryRepository(BaseHistoryRepository):
    """Database operations for the interview_history table."""

    def __init__(self, serializer: RecordSerializer | None = None) -> None:
        self._serializer = serializer or RecordSerializer()

    async def ensure_schema(self) -> None:
        """Create the history table if it does not exist yet."""
        async with get_connection() as conn:
            await conn.execute(SCHEMA_SQL)
            await conn.commit()

    async def append(self, record: InterviewRecord) -> None:
        feedback = self._serializer.feedback_payload(record.feedback)
        try:
            async with get_connection() as conn:
                await conn.execute(
                    """
                    INSERT INTO interview_history
                    (role, question, raw_answer, anonymized_answer, entity_map,
                     input_type, anonymization_applied, feedback, created_at)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (
                        record.role,
                        record.question,
                        record.raw_answer,
                        record.anonymized_answer,
                        Jsonb(self._serializer.entity_map_payload(record.entity_map)),
                        record.input_type.value,
                        record.anonymization_applied,
                        Jsonb(feedback) if feedback is not None else None,
                        record.timestamp,
                    ),
                )
                await conn.commit()
        except psycopg.Error as exc:
            raise PersistenceFailure(f"Could not store interview record: {exc}") from exc
        Log.info(f"Persisted interview record ({len(record.entity_map)} entities)")

    async def list_recent(self, limit: int) -> list[InterviewRecord]:
        if limit <= 0:
            return []
        try:
            async with get_connection() as conn:
                async with conn.cursor(row_factory=dict_row) as cur:
                    await cur.execute(
                        """
                        SELECT role, question, raw_answer, anonymized_answer, entity_map,
                               input_type, anonymization_applied, feedback, created_at
                        FROM interview_history
                        ORDER BY created_at DESC, id DESC
                        LIMIT %s
                        """,
                        (limit,),
                    )
                    rows = await cur.fetchall()
        except psycopg.Error as exc:
            raise PersistenceFailure(f"Could not read interview history: {exc}") from exc
        return [self._serializer.from_row(row) for row in rows]
