from abc import ABC, abstractmethod

from rehearsal.anonymization.models import Span


class BaseEntityClassifier(ABC):
    """Contract for all entity classification adapters."""

    @abstractmethod
    async def classify(self, text: str) -> list[Span]:
        """Return candidate PII spans over *text*.

        Candidates may overlap or touch; the resolver sorts that out.

        Args:
            text: Finalized answer transcript.

        Returns:
            Candidate spans with offsets into *text*. An empty list means the
            classifier ran and found nothing.

        Raises:
            ClassificationUnavailable: when the classifier cannot answer.
        """
