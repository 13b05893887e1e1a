from rehearsal.anonymization.exceptions import MappingConflictError
from rehearsal.anonymization.models import EntityType, MappingEntry


class MappingTable:
    """Bidirectional original <-> identifier store for one anonymization call.

    Entries keep first-seen order. A fresh table is created per call and is
    never shared, so identifiers restart at 1 for every transcript.
    """

    def __init__(self) -> None:
        self._by_original: dict[str, MappingEntry] = {}
        self._by_identifier: dict[str, MappingEntry] = {}
        self._counters: dict[EntityType, int] = {}

    def __len__(self) -> int:
        return len(self._by_original)

    def lookup(self, original: str) -> MappingEntry | None:
        return self._by_original.get(original)

    def identifier_for(self, original: str) -> str:
        entry = self._by_original.get(original)
        if entry is None:
            raise KeyError(original)
        return entry.identifier

    def original_for(self, identifier: str) -> str:
        entry = self._by_identifier.get(identifier)
        if entry is None:
            raise KeyError(identifier)
        return entry.original

    def next_sequence(self, entity_type: EntityType) -> int:
        """Advance and return the per-type counter (first call returns 1)."""
        value = self._counters.get(entity_type, 0) + 1
        self._counters[entity_type] = value
        return value

    def add(self, entry: MappingEntry) -> None:
        if entry.original in self._by_original:
            raise MappingConflictError(
                f"Original already mapped to {self._by_original[entry.original].identifier}"
            )
        if entry.identifier in self._by_identifier:
            raise MappingConflictError(f"Identifier {entry.identifier} already in use")
        self._by_original[entry.original] = entry
        self._by_identifier[entry.identifier] = entry

    def entries(self) -> list[MappingEntry]:
        return list(self._by_original.values())
