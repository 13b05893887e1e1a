from typing import Any

from rehearsal.anonymization.models import EntityType, MappingEntry
from rehearsal.feedback.models import Feedback
from rehearsal.session.models import InputType, InterviewRecord


class RecordSerializer:
    """Converts interview records to and from JSON-serializable structures."""

    def entity_map_payload(
        self, entries: tuple[MappingEntry, ...] | list[MappingEntry]
    ) -> dict[str, list[dict[str, str]]]:
        """Transform mapping entries into a JSONB-ready dict.

        Returns:
            Dict with 'entities' key containing list of entry dicts.
        """
        return {"entities": [self._entry_to_dict(e) for e in entries]}

    def feedback_payload(self, feedback: Feedback | None) -> dict[str, str] | None:
        if feedback is None:
            return None
        return {
            "clarity": feedback.clarity,
            "relevance": feedback.relevance,
            "speech_pace": feedback.speech_pace,
        }

    def to_dict(self, record: InterviewRecord) -> dict[str, Any]:
        return {
            "question": record.question,
            "raw_answer": record.raw_answer,
            "anonymized_answer": record.anonymized_answer,
            "entity_map": self.entity_map_payload(record.entity_map)["entities"],
            "role": record.role,
            "input_type": record.input_type.value,
            "timestamp": record.timestamp.isoformat(),
            "anonymization_applied": record.anonymization_applied,
            "feedback": self.feedback_payload(record.feedback),
        }

    def from_row(self, row: dict[str, Any]) -> InterviewRecord:
        """Rebuild a record from a ``dict_row`` of the history table."""
        entity_payload = row.get("entity_map") or {}
        feedback_payload = row.get("feedback")
        return InterviewRecord(
            question=row["question"],
            raw_answer=row["raw_answer"],
            anonymized_answer=row["anonymized_answer"],
            entity_map=tuple(
                self._entry_from_dict(item) for item in entity_payload.get("entities", [])
            ),
            role=row["role"],
            input_type=InputType(row["input_type"]),
            timestamp=row["created_at"],
            anonymization_applied=row["anonymization_applied"],
            feedback=Feedback(**feedback_payload) if feedback_payload else None,
        )

    def _entry_to_dict(self, entry: MappingEntry) -> dict[str, str]:
        return {
            "type": entry.type.value,
            "original": entry.original,
            "identifier": entry.identifier,
        }

    def _entry_from_dict(self, item: dict[str, str]) -> MappingEntry:
        return MappingEntry(
            original=item["original"],
            identifier=item["identifier"],
            type=EntityType.from_label(item["type"]),
        )
