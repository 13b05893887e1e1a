from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from rehearsal.anonymization.models import AnonymizationResult
from rehearsal.feedback.models import Feedback
from rehearsal.session.models import InputType, InterviewRecord


@dataclass(slots=True)
class AnswerContext:
    question: str
    raw_answer: str
    role: str
    input_type: InputType
    anonymization_result: AnonymizationResult | None = None
    anonymization_applied: bool = True
    feedback: Feedback | None = None
    record: InterviewRecord | None = None
    persisted: bool = False
    warnings: list[str] = field(default_factory=list)


class AnswerStep(ABC):
    @abstractmethod
    async def run(self, context: AnswerContext) -> AnswerContext:
        raise NotImplementedError
