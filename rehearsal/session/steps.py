from collections.abc import Callable
from datetime import datetime

from rehearsal.anonymization.exceptions import AnonymizationError, ClassificationUnavailable
from rehearsal.anonymization.models import AnonymizationResult
from rehearsal.anonymization.pipeline import AnonymizationPipeline
from rehearsal.feedback.base import BaseFeedbackGenerator
from rehearsal.feedback.exceptions import FeedbackUnavailable
from rehearsal.history.base import BaseHistoryRepository
from rehearsal.history.exceptions import PersistenceFailure
from rehearsal.logging.logger import Log
from rehearsal.session.models import InterviewRecord
from rehearsal.session.pipeline import AnswerContext, AnswerStep

ANONYMIZATION_SKIPPED_WARNING = (
    "Anonymization did not run. Your answer was kept as typed and may contain personal details."
)
FEEDBACK_UNAVAILABLE_WARNING = "Feedback is not available for this answer."
NOT_SAVED_WARNING = "Your answer could not be saved to history."


class AnonymizeAnswerStep(AnswerStep):
    """Strips PII from the answer, degrading to the raw text on failure."""

    def __init__(self, anonymizer: AnonymizationPipeline) -> None:
        self._anonymizer = anonymizer

    async def run(self, context: AnswerContext) -> AnswerContext:
        try:
            context.anonymization_result = await self._anonymizer.anonymize(context.raw_answer)
        except ClassificationUnavailable as exc:
            self._degrade(context, f"classifier unavailable: {exc}")
        except AnonymizationError as exc:
            self._degrade(context, str(exc))
        return context

    @staticmethod
    def _degrade(context: AnswerContext, reason: str) -> None:
        context.anonymization_result = AnonymizationResult(
            anonymized_text=context.raw_answer,
            entity_map=[],
        )
        context.anonymization_applied = False
        context.warnings.append(ANONYMIZATION_SKIPPED_WARNING)
        Log.warning(f"Answer kept unanonymized, {reason}")


class FeedbackStep(AnswerStep):
    """Coaches the candidate on the anonymized answer, when enabled."""

    def __init__(self, generator: BaseFeedbackGenerator | None) -> None:
        self._generator = generator

    async def run(self, context: AnswerContext) -> AnswerContext:
        if self._generator is None:
            return context
        # Raw text never leaves the process.
        if not context.anonymization_applied or context.anonymization_result is None:
            Log.info("Feedback skipped for unanonymized answer")
            return context
        try:
            context.feedback = await self._generator.generate(
                question=context.question,
                answer=context.anonymization_result.anonymized_text,
                role=context.role,
                input_type=context.input_type.value,
            )
        except FeedbackUnavailable as exc:
            context.warnings.append(FEEDBACK_UNAVAILABLE_WARNING)
            Log.warning(str(exc))
        return context


class BuildRecordStep(AnswerStep):
    def __init__(self, clock: Callable[[], datetime]) -> None:
        self._clock = clock

    async def run(self, context: AnswerContext) -> AnswerContext:
        if context.anonymization_result is None:
            raise ValueError("AnswerContext.anonymization_result must be set before build")
        context.record = InterviewRecord(
            question=context.question,
            raw_answer=context.raw_answer,
            anonymized_answer=context.anonymization_result.anonymized_text,
            entity_map=tuple(context.anonymization_result.entity_map),
            role=context.role,
            input_type=context.input_type,
            timestamp=self._clock(),
            anonymization_applied=context.anonymization_applied,
            feedback=context.feedback,
        )
        return context


class PersistRecordStep(AnswerStep):
    """Hands the record to history. A failed write is a warning only."""

    def __init__(self, repository: BaseHistoryRepository) -> None:
        self._repository = repository

    async def run(self, context: AnswerContext) -> AnswerContext:
        if context.record is None:
            raise ValueError("AnswerContext.record must be set before persist")
        try:
            await self._repository.append(context.record)
        except PersistenceFailure as exc:
            context.persisted = False
            context.warnings.append(NOT_SAVED_WARNING)
            Log.warning(f"Interview record not persisted: {exc}")
            return context
        context.persisted = True
        return context
