"""ICU folding of transcripts to Latin-ASCII-lowercase with offset mapping.

Folding happens character by character so every folded character can be
traced back to the transcript index that produced it. Offsets always refer
to the transcript exactly as received; it is not re-normalized first.
"""

import unicodedata
from typing import ClassVar

import icu  # type: ignore[import-untyped]


class Transliterator:
    """Thin wrapper over an ICU ``Any-Latin; Latin-ASCII; Lower`` transform."""

    _ICU_TRANSFORM: ClassVar[str] = "Any-Latin; Latin-ASCII; Lower"

    def __init__(self) -> None:
        self._transliterator: icu.Transliterator = icu.Transliterator.createInstance(
            self._ICU_TRANSFORM
        )

    def fold(self, text: str) -> str:
        """Fold a short term (gazetteer entry) as a whole string."""
        return self._transliterator.transliterate(unicodedata.normalize("NFC", text))

    def fold_with_mapping(self, text: str) -> tuple[str, list[int]]:
        """Fold *text* and return ``(folded, folded_to_orig)``.

        ``folded_to_orig[j]`` is the index in *text* that produced folded
        character ``j``.
        """
        parts: list[str] = []
        folded_to_orig: list[int] = []

        for orig_idx, ch in enumerate(text):
            t = self._transliterator.transliterate(ch)
            parts.append(t)
            folded_to_orig.extend([orig_idx] * len(t))

        return "".join(parts), folded_to_orig
