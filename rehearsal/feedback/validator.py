from typing import Any

from rehearsal.feedback.models import Feedback
from rehearsal.llm.exceptions import LLMResponseError

_FIELDS = ("clarity", "relevance", "speech_pace")
_MAX_FIELD_LENGTH = 2000


def validate_feedback(data: dict[str, Any]) -> Feedback:
    """Build a Feedback from a parsed model reply.

    Raises:
        LLMResponseError: if a field is missing, not a string or blank.
    """
    values: dict[str, str] = {}
    for name in _FIELDS:
        value = data.get(name)
        if not isinstance(value, str):
            raise LLMResponseError(f"'{name}' must be a string")
        value = value.strip()
        if not value:
            raise LLMResponseError(f"'{name}' must not be empty")
        values[name] = value[:_MAX_FIELD_LENGTH]
    return Feedback(**values)
