from typing import ClassVar

from rehearsal.questions.base import BaseQuestionSupply
from rehearsal.questions.exceptions import QuestionUnavailable


class StaticQuestionSupply(BaseQuestionSupply):
    """Serves questions from fixed per-role banks, in bank order."""

    GENERAL_QUESTIONS: ClassVar[list[str]] = [
        "Tell me about yourself.",
        "Why do you want to work with our company?",
        "What are your strengths and weaknesses?",
        "Where do you see yourself in the next 5 years?",
        "Can you describe a challenge you faced at work or school and how you handled it?",
    ]

    ROLE_QUESTIONS: ClassVar[dict[str, list[str]]] = {
        "software engineer": [
            "Walk me through a system you designed. What trade-offs did you make?",
            "Tell me about a production bug you tracked down. How did you find it?",
            "How do you decide when code is ready to be reviewed?",
        ],
        "product manager": [
            "How do you decide what goes into the next release?",
            "Tell me about a time you said no to a stakeholder.",
            "Which metric would you use to judge a new onboarding flow, and why?",
        ],
        "data analyst": [
            "Describe an analysis that changed a decision.",
            "How do you check that a dataset is fit for purpose?",
            "Tell me about a time your findings were challenged.",
        ],
    }

    def __init__(self, banks: dict[str, list[str]] | None = None) -> None:
        source = banks if banks is not None else self.ROLE_QUESTIONS
        self._banks = {role.strip().lower(): list(qs) for role, qs in source.items()}

    async def next_question(self, role: str, excluded: list[str]) -> str:
        asked = set(excluded)
        for question in self._questions_for(role):
            if question not in asked:
                return question
        raise QuestionUnavailable(f"No unasked questions left for role '{role}'")

    def _questions_for(self, role: str) -> list[str]:
        return self._banks.get(role.strip().lower(), []) + self.GENERAL_QUESTIONS
