from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import pytest

from rehearsal.anonymization.models import EntityType, MappingEntry
from rehearsal.feedback.models import Feedback
from rehearsal.session.models import InputType, InterviewRecord

BASE_TIME = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture()
def make_record() -> Callable[..., InterviewRecord]:
    """Build an InterviewRecord; *minutes* offsets the timestamp from a fixed base."""

    def _make(
        question: str = "Tell me about yourself.",
        minutes: int = 0,
        feedback: Feedback | None = None,
        anonymization_applied: bool = True,
    ) -> InterviewRecord:
        return InterviewRecord(
            question=question,
            raw_answer="I am Anna from Oslo.",
            anonymized_answer="I am N001 from L001.",
            entity_map=(
                MappingEntry(original="Anna", identifier="N001", type=EntityType.NAME),
                MappingEntry(original="Oslo", identifier="L001", type=EntityType.LOCATION),
            ),
            role="Software Engineer",
            input_type=InputType.TEXT,
            timestamp=BASE_TIME + timedelta(minutes=minutes),
            anonymization_applied=anonymization_applied,
            feedback=feedback,
        )

    return _make
