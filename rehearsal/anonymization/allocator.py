from typing import ClassVar

from rehearsal.anonymization.mapping_table import MappingTable
from rehearsal.anonymization.models import EntityType, MappingEntry


class IdentifierAllocator:
    """Mints stable, per-type identifiers such as N001 or AGE002."""

    WIDTH: ClassVar[int] = 3

    def allocate(self, entity_type: EntityType, original: str, table: MappingTable) -> str:
        """Return the identifier for *original*, minting one on first sight.

        Lookup is exact and case-sensitive, so repeated mentions of the same
        value share one identifier within a table.
        """
        existing = table.lookup(original)
        if existing is not None:
            return existing.identifier

        sequence = table.next_sequence(entity_type)
        identifier = f"{entity_type.prefix}{sequence:0{self.WIDTH}d}"
        table.add(MappingEntry(original=original, identifier=identifier, type=entity_type))
        return identifier
