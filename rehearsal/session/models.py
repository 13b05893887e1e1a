from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from rehearsal.anonymization.models import MappingEntry
from rehearsal.feedback.models import Feedback


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    AWAITING_QUESTION = "awaiting_question"
    AWAITING_ANSWER = "awaiting_answer"
    ANALYZING = "analyzing"


class InputType(str, Enum):
    VOICE = "voice"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class InterviewRecord:
    """One answered question. Never mutated after creation."""

    question: str
    raw_answer: str
    anonymized_answer: str
    entity_map: tuple[MappingEntry, ...]
    role: str
    input_type: InputType
    timestamp: datetime
    anonymization_applied: bool = True
    feedback: Feedback | None = None


@dataclass(slots=True)
class AnswerOutcome:
    """What a submitted answer produced, as shown to the candidate."""

    record: InterviewRecord
    persisted: bool = True
    warnings: list[str] = field(default_factory=list)
    next_question: str | None = None
    question_error: str = ""
