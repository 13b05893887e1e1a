from dataclasses import dataclass, field
from enum import Enum


class EntityType(str, Enum):
    """PII categories the classifier may report."""

    NAME = "Name"
    AGE = "Age"
    DATE_OF_BIRTH = "DateOfBirth"
    PHONE = "Phone"
    EMAIL = "Email"
    LOCATION = "Location"
    ORGANIZATION = "Organization"

    @property
    def prefix(self) -> str:
        return _PREFIXES[self]

    @classmethod
    def from_label(cls, label: str) -> "EntityType":
        """Resolve a category label, accepting both value and member name."""
        normalized = label.strip()
        for member in cls:
            if normalized in (member.value, member.name):
                return member
        raise ValueError(f"Unknown entity type: {label!r}")


_PREFIXES: dict[EntityType, str] = {
    EntityType.NAME: "N",
    EntityType.AGE: "AGE",
    EntityType.DATE_OF_BIRTH: "DOB",
    EntityType.PHONE: "P",
    EntityType.EMAIL: "E",
    EntityType.LOCATION: "L",
    EntityType.ORGANIZATION: "O",
}


@dataclass(frozen=True)
class Span:
    """Half-open character range [start, end) flagged as PII."""

    start: int
    end: int
    text: str
    type: EntityType

    @property
    def length(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Span") -> bool:
        return self.start < other.end and other.start < self.end

    def is_valid_for(self, source: str) -> bool:
        """True when the span lies inside *source* and matches its substring."""
        return (
            0 <= self.start < self.end <= len(source)
            and source[self.start:self.end] == self.text
        )


@dataclass(frozen=True)
class MappingEntry:
    """Single original -> identifier replacement record."""

    original: str
    identifier: str  # e.g. "N001", "AGE002"
    type: EntityType


@dataclass(frozen=True)
class Replacement:
    """Where one identifier was written into the anonymized text."""

    start: int
    end: int
    entry: MappingEntry


@dataclass
class AnonymizationResult:
    """Output of one anonymization call.

    *replacements* locate every identifier in *anonymized_text*, so text that
    already contained identifier-shaped tokens can still be restored exactly.
    """

    anonymized_text: str
    entity_map: list[MappingEntry] = field(default_factory=list)
    replacements: list[Replacement] = field(default_factory=list)
