from abc import ABC, abstractmethod

from rehearsal.feedback.models import Feedback


class BaseFeedbackGenerator(ABC):
    """Contract for all answer feedback adapters."""

    @abstractmethod
    async def generate(
        self,
        question: str,
        answer: str,
        role: str,
        input_type: str,
    ) -> Feedback:
        """Return feedback for an anonymized *answer*.

        Raises:
            FeedbackUnavailable: on any failure.
        """
