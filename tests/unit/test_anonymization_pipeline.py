import pytest

from rehearsal.anonymization.base import BaseEntityClassifier
from rehearsal.anonymization.exceptions import AnonymizationError, ClassificationUnavailable
from rehearsal.anonymization.models import EntityType, MappingEntry, Span
from rehearsal.anonymization.pipeline import AnonymizationPipeline
from rehearsal.anonymization.resolver import EntitySpanResolver
from rehearsal.anonymization.rewriter import restore


class _ValueClassifier(BaseEntityClassifier):
    """Reports every occurrence of the configured values."""

    def __init__(self, values: list[tuple[str, EntityType]]) -> None:
        self._values = values
        self.calls = 0

    async def classify(self, text: str) -> list[Span]:
        self.calls += 1
        spans: list[Span] = []
        for value, entity_type in self._values:
            start = text.find(value)
            while start != -1:
                end = start + len(value)
                spans.append(Span(start=start, end=end, text=value, type=entity_type))
                start = text.find(value, start + 1)
        return spans


class _FailingClassifier(BaseEntityClassifier):
    async def classify(self, text: str) -> list[Span]:
        raise ClassificationUnavailable("classifier offline")


def _pipeline(classifier: BaseEntityClassifier) -> AnonymizationPipeline:
    return AnonymizationPipeline(EntitySpanResolver(classifier))


class TestAnonymize:
    @pytest.mark.asyncio
    async def test_email_and_phone(self) -> None:
        classifier = _ValueClassifier(
            [("john@x.com", EntityType.EMAIL), ("555-1234", EntityType.PHONE)]
        )
        result = await _pipeline(classifier).anonymize("Email john@x.com, call 555-1234")
        assert result.anonymized_text == "Email E001, call P001"
        assert result.entity_map == [
            MappingEntry(original="john@x.com", identifier="E001", type=EntityType.EMAIL),
            MappingEntry(original="555-1234", identifier="P001", type=EntityType.PHONE),
        ]

    @pytest.mark.asyncio
    async def test_pii_free_text_is_unchanged(self) -> None:
        result = await _pipeline(_ValueClassifier([])).anonymize("I enjoy solving problems.")
        assert result.anonymized_text == "I enjoy solving problems."
        assert result.entity_map == []

    @pytest.mark.asyncio
    async def test_repeated_value_one_entry(self) -> None:
        classifier = _ValueClassifier([("Anna", EntityType.NAME)])
        result = await _pipeline(classifier).anonymize("Anna said Anna would call Anna.")
        assert result.anonymized_text == "N001 said N001 would call N001."
        assert len(result.entity_map) == 1

    @pytest.mark.asyncio
    async def test_entity_map_in_first_seen_order(self) -> None:
        classifier = _ValueClassifier([("Oslo", EntityType.LOCATION), ("Anna", EntityType.NAME)])
        result = await _pipeline(classifier).anonymize("Anna moved to Oslo")
        assert [e.identifier for e in result.entity_map] == ["N001", "L001"]

    @pytest.mark.asyncio
    async def test_round_trip(self) -> None:
        text = "Hi, I'm Anna, 34, from Oslo. Reach me at anna@x.io."
        classifier = _ValueClassifier(
            [
                ("Anna", EntityType.NAME),
                ("34", EntityType.AGE),
                ("Oslo", EntityType.LOCATION),
                ("anna@x.io", EntityType.EMAIL),
            ]
        )
        result = await _pipeline(classifier).anonymize(text)
        assert "Anna" not in result.anonymized_text
        assert restore(result.anonymized_text, result.replacements) == text

    @pytest.mark.asyncio
    async def test_round_trip_keeps_identifier_shaped_text(self) -> None:
        text = "Use code E001 or mail john@x.com"
        classifier = _ValueClassifier([("john@x.com", EntityType.EMAIL)])
        result = await _pipeline(classifier).anonymize(text)
        assert result.anonymized_text == "Use code E001 or mail E001"
        assert restore(result.anonymized_text, result.replacements) == text

    @pytest.mark.asyncio
    async def test_each_call_gets_a_fresh_table(self) -> None:
        classifier = _ValueClassifier([("Anna", EntityType.NAME), ("Bob", EntityType.NAME)])
        pipeline = _pipeline(classifier)
        first = await pipeline.anonymize("Bob")
        second = await pipeline.anonymize("Anna")
        assert first.anonymized_text == "N001"
        assert second.anonymized_text == "N001"
        assert second.entity_map[0].original == "Anna"

    @pytest.mark.asyncio
    async def test_blank_text_skips_classifier(self) -> None:
        classifier = _ValueClassifier([("Anna", EntityType.NAME)])
        result = await _pipeline(classifier).anonymize("   ")
        assert result.anonymized_text == "   "
        assert result.entity_map == []
        assert classifier.calls == 0


class TestAnonymizeErrors:
    @pytest.mark.asyncio
    async def test_classifier_unavailable_propagates(self) -> None:
        with pytest.raises(ClassificationUnavailable):
            await _pipeline(_FailingClassifier()).anonymize("Anna")

    @pytest.mark.asyncio
    async def test_unexpected_error_is_wrapped(self) -> None:
        class _BrokenAllocator:
            def allocate(self, *args: object) -> str:
                raise RuntimeError("disk full")

        classifier = _ValueClassifier([("Anna", EntityType.NAME)])
        pipeline = AnonymizationPipeline(
            EntitySpanResolver(classifier),
            allocator=_BrokenAllocator(),  # type: ignore[arg-type]
        )
        with pytest.raises(AnonymizationError, match="disk full"):
            await pipeline.anonymize("Anna")
