"""Entity classifier backed by a hosted language model.

The model only names the entities; offsets are computed here by locating
every occurrence of each reported value in the transcript, so a
hallucinated value that does not occur verbatim simply yields no span.
"""

from rehearsal.anonymization.base import BaseEntityClassifier
from rehearsal.anonymization.exceptions import ClassificationUnavailable
from rehearsal.anonymization.models import EntityType, Span
from rehearsal.classification.validator import validate_entities
from rehearsal.llm.exceptions import LLMError
from rehearsal.llm.structured_prompt import StructuredPrompt
from rehearsal.logging.logger import Log


class LLMEntityClassifier(BaseEntityClassifier):
    """Asks a chat model for PII values and turns them into spans."""

    def __init__(self, prompt: StructuredPrompt) -> None:
        self._prompt = prompt

    async def classify(self, text: str) -> list[Span]:
        try:
            parsed = await self._prompt.run(transcript=text)
            entities = validate_entities(parsed)
        except LLMError as exc:
            raise ClassificationUnavailable(f"LLM classifier unavailable: {exc}") from exc

        spans: list[Span] = []
        for value, entity_type in entities:
            found = _locate(text, value, entity_type)
            if not found:
                Log.debug(f"{entity_type.value} entity reported by model not found verbatim")
            spans.extend(found)
        Log.info(f"LLM classifier reported {len(entities)} entities, {len(spans)} spans")
        return spans


def _locate(text: str, value: str, entity_type: EntityType) -> list[Span]:
    """Every occurrence of *value* that is not glued inside a larger word."""
    spans: list[Span] = []
    start = text.find(value)
    while start != -1:
        end = start + len(value)
        glued_before = start > 0 and text[start - 1].isalnum() and value[0].isalnum()
        glued_after = end < len(text) and text[end].isalnum() and value[-1].isalnum()
        if not (glued_before or glued_after):
            spans.append(Span(start=start, end=end, text=value, type=entity_type))
            start = text.find(value, end)
        else:
            start = text.find(value, start + 1)
    return spans
