from rehearsal.anonymization.exceptions import AnonymizationError
from rehearsal.anonymization.mapping_table import MappingTable
from rehearsal.anonymization.models import Replacement, Span


def rewrite(text: str, spans: list[Span], table: MappingTable) -> str:
    """Replace each span of *text* with its identifier from *table*.

    Characters outside the spans are copied verbatim. *spans* must be
    non-overlapping; they are applied in ascending start order.

    Raises:
        AnonymizationError: if spans overlap or a span has no table entry.
    """
    anonymized_text, _ = rewrite_with_positions(text, spans, table)
    return anonymized_text


def rewrite_with_positions(
    text: str, spans: list[Span], table: MappingTable
) -> tuple[str, list[Replacement]]:
    """Same as :func:`rewrite`, also returning where each identifier landed."""
    parts: list[str] = []
    replacements: list[Replacement] = []
    cursor = 0
    offset = 0
    for span in sorted(spans, key=lambda s: s.start):
        if span.start < cursor:
            raise AnonymizationError(
                f"Span [{span.start}, {span.end}) overlaps a previous replacement"
            )
        entry = table.lookup(span.text)
        if entry is None:
            raise AnonymizationError(
                f"No identifier allocated for {span.type.value} span at {span.start}"
            )
        parts.append(text[cursor:span.start])
        offset += span.start - cursor
        parts.append(entry.identifier)
        replacements.append(
            Replacement(start=offset, end=offset + len(entry.identifier), entry=entry)
        )
        offset += len(entry.identifier)
        cursor = span.end
    parts.append(text[cursor:])
    return "".join(parts), replacements


def restore(anonymized_text: str, replacements: list[Replacement]) -> str:
    """Put the original values back at the recorded identifier positions.

    Only the recorded positions are touched, so identifier-shaped text the
    candidate typed themselves ("code E001") comes back unchanged.

    Raises:
        AnonymizationError: if a position does not hold its identifier.
    """
    parts: list[str] = []
    cursor = 0
    for replacement in sorted(replacements, key=lambda r: r.start):
        identifier = replacement.entry.identifier
        if (
            replacement.start < cursor
            or anonymized_text[replacement.start:replacement.end] != identifier
        ):
            raise AnonymizationError(
                f"Text at [{replacement.start}, {replacement.end}) is not {identifier}"
            )
        parts.append(anonymized_text[cursor:replacement.start])
        parts.append(replacement.entry.original)
        cursor = replacement.end
    parts.append(anonymized_text[cursor:])
    return "".join(parts)
