from abc import ABC, abstractmethod


class BaseQuestionSupply(ABC):
    """Contract for all question supply adapters."""

    @abstractmethod
    async def next_question(self, role: str, excluded: list[str]) -> str:
        """Return a question for *role* that is not in *excluded*.

        Raises:
            QuestionUnavailable: on any failure, including an exhausted bank.
        """
