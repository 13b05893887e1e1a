from rehearsal.feedback.base import BaseFeedbackGenerator
from rehearsal.feedback.exceptions import FeedbackUnavailable
from rehearsal.feedback.models import Feedback
from rehearsal.feedback.validator import validate_feedback
from rehearsal.llm.exceptions import LLMError
from rehearsal.llm.structured_prompt import StructuredPrompt
from rehearsal.logging.logger import Log


class LLMFeedbackGenerator(BaseFeedbackGenerator):
    """Asks a chat model to coach the candidate on an anonymized answer."""

    def __init__(self, prompt: StructuredPrompt) -> None:
        self._prompt = prompt

    async def generate(
        self,
        question: str,
        answer: str,
        role: str,
        input_type: str,
    ) -> Feedback:
        try:
            parsed = await self._prompt.run(
                role=role,
                input_type=input_type,
                question=question,
                answer=answer,
            )
            feedback = validate_feedback(parsed)
        except LLMError as exc:
            raise FeedbackUnavailable(f"Feedback generation failed: {exc}") from exc
        Log.debug("Answer feedback generated")
        return feedback
