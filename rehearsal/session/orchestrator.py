"""Session orchestrator: question cycle and per-answer anonymization.

States: NOT_STARTED -> AWAITING_QUESTION -> AWAITING_ANSWER -> ANALYZING ->
AWAITING_QUESTION -> ...

An answer is always turned into a record, even when anonymization or
persistence fails; those paths surface as warnings on the outcome.
"""

import asyncio
import uuid
from collections.abc import Callable
from datetime import datetime, timezone

from rehearsal.anonymization.pipeline import AnonymizationPipeline
from rehearsal.capture.base import BaseCaptureEngine
from rehearsal.capture.exceptions import CaptureDeviceDenied, CaptureError
from rehearsal.capture.session import CaptureSession
from rehearsal.classification.factory import AnonymizerFactory
from rehearsal.config.settings import Settings
from rehearsal.feedback.base import BaseFeedbackGenerator
from rehearsal.feedback.factory import FeedbackGeneratorFactory
from rehearsal.history.base import BaseHistoryRepository
from rehearsal.history.factory import HistoryRepositoryFactory
from rehearsal.logging.logger import Log
from rehearsal.questions.base import BaseQuestionSupply
from rehearsal.questions.exceptions import QuestionUnavailable
from rehearsal.questions.factory import QuestionSupplyFactory
from rehearsal.session.exceptions import (
    AnswerInFlight,
    EmptyAnswer,
    InvalidTransition,
    VoiceModeUnavailable,
)
from rehearsal.session.models import AnswerOutcome, InputType, InterviewRecord, SessionState
from rehearsal.session.pipeline import AnswerContext, AnswerStep
from rehearsal.session.steps import (
    AnonymizeAnswerStep,
    BuildRecordStep,
    FeedbackStep,
    PersistRecordStep,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionOrchestrator:
    """Drives one candidate's rehearsal session."""

    def __init__(
        self,
        anonymizer: AnonymizationPipeline,
        question_supply: BaseQuestionSupply,
        history: BaseHistoryRepository,
        feedback: BaseFeedbackGenerator | None = None,
        capture_engine: BaseCaptureEngine | None = None,
        clock: Callable[[], datetime] = _utcnow,
        session_id: str | None = None,
        history_page_size: int = 20,
    ) -> None:
        self._question_supply = question_supply
        self._history = history
        self._history_page_size = history_page_size
        self._session_id = session_id or uuid.uuid4().hex[:8]
        self._capture = CaptureSession(capture_engine, on_error=self._on_capture_error)
        self._steps: list[AnswerStep] = [
            AnonymizeAnswerStep(anonymizer),
            FeedbackStep(feedback),
            BuildRecordStep(clock),
            PersistRecordStep(history),
        ]

        self._state = SessionState.NOT_STARTED
        self._role = ""
        self._input_type = InputType.TEXT
        self._asked: list[str] = []
        self._current_question: str | None = None
        self._voice_enabled = True
        self._question_task: asyncio.Future[str] | None = None

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def role(self) -> str:
        return self._role

    @property
    def input_type(self) -> InputType:
        return self._input_type

    @property
    def current_question(self) -> str | None:
        return self._current_question

    @property
    def asked_questions(self) -> list[str]:
        return list(self._asked)

    @property
    def voice_enabled(self) -> bool:
        return self._voice_enabled

    @property
    def capture(self) -> CaptureSession:
        """Capture state machine; engine events are delivered to it directly."""
        return self._capture

    # ------------------------------------------------------------------
    # Question cycle
    # ------------------------------------------------------------------

    async def start_session(self, role: str, input_type: InputType = InputType.TEXT) -> str:
        """Begin (or restart) rehearsal for *role* and serve the first question.

        The asked-question list survives a restart with the same role.

        Raises:
            QuestionUnavailable: the session stays in AWAITING_QUESTION.
        """
        with Log.session_scope(self._session_id):
            if self._state is SessionState.ANALYZING:
                raise AnswerInFlight("Cannot restart while an answer is being analyzed")
            self._require_no_pending_question()
            if input_type is InputType.VOICE and not self._voice_enabled:
                raise VoiceModeUnavailable("Voice input was denied earlier in this session")

            role = role.strip()
            if not role:
                raise ValueError("Role must not be empty")
            if role != self._role:
                self._asked = []
            self._role = role
            self._input_type = input_type
            self._capture.cancel()
            Log.info(f"Session started ({input_type.value} input)")
            return await self._request_question()

    async def next_question(self) -> str:
        """Skip the current question, or retry after a failed request."""
        with Log.session_scope(self._session_id):
            if self._state not in (SessionState.AWAITING_ANSWER, SessionState.AWAITING_QUESTION):
                raise InvalidTransition(f"Cannot request a question while {self._state.value}")
            self._require_no_pending_question()
            self._capture.cancel()
            return await self._request_question()

    async def _request_question(self) -> str:
        self._state = SessionState.AWAITING_QUESTION
        self._current_question = None
        self._question_task = asyncio.ensure_future(
            self._question_supply.next_question(self._role, list(self._asked))
        )
        try:
            question = await self._question_task
        except QuestionUnavailable as exc:
            Log.warning(f"Question unavailable: {exc}")
            raise
        finally:
            self._question_task = None

        self._asked.append(question)
        self._current_question = question
        self._state = SessionState.AWAITING_ANSWER
        Log.info(f"Question served ({len(self._asked)} asked for this role)")
        return question

    def _require_no_pending_question(self) -> None:
        if self._question_task is not None and not self._question_task.done():
            raise InvalidTransition("A question request is already pending")

    # ------------------------------------------------------------------
    # Answers
    # ------------------------------------------------------------------

    async def submit_answer(self, raw_text: str) -> AnswerOutcome:
        """Anonymize, record and persist an answer, then fetch the next question.

        Typed text goes through the same finalize step as a recording, so
        surrounding whitespace is stripped before anything is stored.

        Raises:
            AnswerInFlight: another answer is still being analyzed.
            InvalidTransition: no question is awaiting an answer.
            EmptyAnswer: *raw_text* is blank.
        """
        with Log.session_scope(self._session_id):
            self._require_answerable()
            if self._capture.is_recording:
                raise InvalidTransition("Stop the recording before submitting a typed answer")
            if not raw_text.strip():
                raise EmptyAnswer("Answer is empty")
            answer = self._capture.submit_text(raw_text)
            return await self._analyze(answer, self._input_type)

    def _require_answerable(self) -> None:
        if self._state is SessionState.ANALYZING:
            raise AnswerInFlight("An answer is already being analyzed")
        if self._state is not SessionState.AWAITING_ANSWER or self._current_question is None:
            raise InvalidTransition(f"Cannot submit an answer while {self._state.value}")

    async def _analyze(self, answer: str, input_type: InputType) -> AnswerOutcome:
        question = self._current_question
        if question is None:
            raise InvalidTransition("No question is awaiting an answer")
        self._state = SessionState.ANALYZING
        context = AnswerContext(
            question=question,
            raw_answer=answer,
            role=self._role,
            input_type=input_type,
        )
        try:
            for step in self._steps:
                context = await step.run(context)
        except BaseException:
            self._state = SessionState.AWAITING_ANSWER
            raise

        if context.record is None:
            raise ValueError("Answer steps finished without building a record")
        outcome = AnswerOutcome(
            record=context.record,
            persisted=context.persisted,
            warnings=list(context.warnings),
        )
        Log.info(
            f"Answer analyzed: {len(context.record.entity_map)} entities, "
            f"anonymized={context.record.anonymization_applied}, "
            f"persisted={context.persisted}"
        )

        try:
            outcome.next_question = await self._request_question()
        except QuestionUnavailable as exc:
            outcome.question_error = str(exc)
        return outcome

    # ------------------------------------------------------------------
    # Voice capture
    # ------------------------------------------------------------------

    def start_recording(self) -> None:
        """Start capturing a spoken answer for the current question.

        Raises:
            VoiceModeUnavailable: voice was denied earlier in this session.
            CaptureDeviceDenied: the engine refused the device; voice mode
                is disabled for the rest of the session.
        """
        with Log.session_scope(self._session_id):
            if self._state is not SessionState.AWAITING_ANSWER:
                raise InvalidTransition(f"Cannot record while {self._state.value}")
            if not self._voice_enabled:
                raise VoiceModeUnavailable("Voice input was denied earlier in this session")
            try:
                self._capture.start()
            except CaptureDeviceDenied as exc:
                self._disable_voice(exc)
                raise

    async def finish_recording(self) -> AnswerOutcome:
        """Stop capture and submit the finalized transcript as the answer.

        Raises:
            EmptyAnswer: nothing final was recognized.
        """
        with Log.session_scope(self._session_id):
            self._require_answerable()
            input_type = self._input_type
            answer = self._capture.stop()
            if not answer:
                raise EmptyAnswer("Nothing was recognized in the recording")
            return await self._analyze(answer, input_type)

    def _on_capture_error(self, error: CaptureError) -> None:
        if isinstance(error, CaptureDeviceDenied):
            self._disable_voice(error)

    def _disable_voice(self, error: CaptureDeviceDenied) -> None:
        self._voice_enabled = False
        self._input_type = InputType.TEXT
        Log.warning(f"Voice input disabled for this session ({error.kind or 'denied'})")

    # ------------------------------------------------------------------
    # Lifecycle and history
    # ------------------------------------------------------------------

    def teardown(self) -> None:
        """Stop capture and drop a pending question request.

        An answer already being analyzed is allowed to finish.
        """
        with Log.session_scope(self._session_id):
            self._capture.cancel()
            if self._question_task is not None and not self._question_task.done():
                self._question_task.cancel()
            Log.info("Session torn down")

    async def history(self, limit: int | None = None) -> list[InterviewRecord]:
        """Stored records, newest first."""
        return await self._history.list_recent(limit or self._history_page_size)


def build_orchestrator(
    settings: Settings,
    capture_engine: BaseCaptureEngine | None = None,
) -> SessionOrchestrator:
    """Build a SessionOrchestrator with all configured adapters."""
    return SessionOrchestrator(
        anonymizer=AnonymizerFactory.create(settings),
        question_supply=QuestionSupplyFactory.create(settings),
        history=HistoryRepositoryFactory.create(settings),
        feedback=FeedbackGeneratorFactory.create(settings),
        capture_engine=capture_engine,
        history_page_size=settings.history_page_size,
    )
