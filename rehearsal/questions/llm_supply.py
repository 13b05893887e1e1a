from rehearsal.llm.exceptions import LLMError
from rehearsal.llm.structured_prompt import StructuredPrompt
from rehearsal.logging.logger import Log
from rehearsal.questions.base import BaseQuestionSupply
from rehearsal.questions.exceptions import QuestionUnavailable


class LLMQuestionSupply(BaseQuestionSupply):
    """Generates a fresh question for the role with a chat model."""

    def __init__(
        self,
        prompt: StructuredPrompt,
        role_descriptions: dict[str, str] | None = None,
    ) -> None:
        self._prompt = prompt
        self._role_descriptions = {
            role.strip().lower(): text for role, text in (role_descriptions or {}).items()
        }

    async def next_question(self, role: str, excluded: list[str]) -> str:
        asked = "\n".join(f"- {q}" for q in excluded) or "(none yet)"
        description = self._role_descriptions.get(role.strip().lower(), "Not provided.")
        try:
            parsed = await self._prompt.run(
                role=role,
                description=description,
                asked_questions=asked,
            )
        except LLMError as exc:
            raise QuestionUnavailable(f"Question generation failed: {exc}") from exc

        question = parsed.get("question")
        if not isinstance(question, str) or not question.strip():
            raise QuestionUnavailable("Model returned no question")
        question = question.strip()
        if question in excluded:
            raise QuestionUnavailable("Model repeated a question that was already asked")
        Log.debug(f"Generated question for role '{role}'")
        return question
