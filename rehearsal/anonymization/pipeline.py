"""Anonymization pipeline: resolve -> allocate -> rewrite.

Every call owns a fresh MappingTable, so identifiers restart at 1 per
transcript and nothing leaks between answers.
"""

from rehearsal.anonymization.allocator import IdentifierAllocator
from rehearsal.anonymization.exceptions import AnonymizationError
from rehearsal.anonymization.mapping_table import MappingTable
from rehearsal.anonymization.models import AnonymizationResult
from rehearsal.anonymization.resolver import EntitySpanResolver
from rehearsal.anonymization.rewriter import rewrite_with_positions
from rehearsal.logging.logger import Log


class AnonymizationPipeline:
    """Composes span resolution, identifier allocation and rewriting."""

    def __init__(
        self,
        resolver: EntitySpanResolver,
        allocator: IdentifierAllocator | None = None,
    ) -> None:
        self._resolver = resolver
        self._allocator = allocator or IdentifierAllocator()

    async def anonymize(self, text: str) -> AnonymizationResult:
        """Replace PII in *text* with typed identifiers.

        Raises:
            ClassificationUnavailable: the classifier could not run; the
                caller decides how to degrade.
            AnonymizationError: any other failure.
        """
        if not text.strip():
            return AnonymizationResult(anonymized_text=text, entity_map=[])

        spans = await self._resolver.resolve(text)
        try:
            table = MappingTable()
            for span in spans:
                self._allocator.allocate(span.type, span.text, table)
            anonymized_text, replacements = rewrite_with_positions(text, spans, table)
        except AnonymizationError:
            raise
        except Exception as exc:
            raise AnonymizationError(f"Anonymization failed: {exc}") from exc

        entity_map = table.entries()
        Log.info(
            f"Anonymized answer: {len(spans)} spans, {len(entity_map)} distinct entities"
        )
        return AnonymizationResult(
            anonymized_text=anonymized_text,
            entity_map=entity_map,
            replacements=replacements,
        )
