"""Validates the entity list returned by an LLM classifier."""

from typing import Any

from rehearsal.anonymization.models import EntityType
from rehearsal.llm.exceptions import LLMResponseError

_MAX_ENTITIES = 200


def validate_entities(data: dict[str, Any]) -> list[tuple[str, EntityType]]:
    """Return ``(text, type)`` pairs from a parsed classifier reply.

    Raises:
        LLMResponseError: if the reply does not follow the schema.
    """
    raw = data.get("entities")
    if not isinstance(raw, list):
        raise LLMResponseError("'entities' must be a list")
    if len(raw) > _MAX_ENTITIES:
        raise LLMResponseError(f"Too many entities: {len(raw)} (max {_MAX_ENTITIES})")

    entities: list[tuple[str, EntityType]] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise LLMResponseError(f"Entity at index {i} must be an object")
        text = item.get("text")
        if not isinstance(text, str):
            raise LLMResponseError(f"Entity at index {i}: 'text' must be a string")
        label = item.get("type")
        if not isinstance(label, str):
            raise LLMResponseError(f"Entity at index {i}: 'type' must be a string")
        try:
            entity_type = EntityType.from_label(label)
        except ValueError as exc:
            raise LLMResponseError(f"Entity at index {i}: {exc}") from exc
        if text.strip():
            entities.append((text, entity_type))
    return entities
