"""Turns raw classifier candidates into a clean, ordered span list.

Resolution flow:
1. Ask the classifier for candidates (bounded by a timeout).
2. Drop candidates whose offsets do not match the transcript.
3. Resolve overlaps: longer span wins, then earlier start; losers are
   dropped whole, never trimmed.
4. Merge touching spans of the same type (split first/last names).
5. Return spans sorted by start.
"""

import asyncio

from rehearsal.anonymization.base import BaseEntityClassifier
from rehearsal.anonymization.exceptions import ClassificationUnavailable
from rehearsal.anonymization.models import Span
from rehearsal.logging.logger import Log


class EntitySpanResolver:
    """Finds non-overlapping PII spans via an entity classifier."""

    def __init__(
        self,
        classifier: BaseEntityClassifier,
        timeout_seconds: float | None = None,
    ) -> None:
        self._classifier = classifier
        self._timeout_seconds = timeout_seconds

    async def resolve(self, text: str) -> list[Span]:
        candidates = await self._classify(text)
        valid = self._discard_invalid(text, candidates)
        kept = self._resolve_overlaps(valid)
        merged = self._merge_adjacent(text, kept)
        Log.debug(
            f"Resolved {len(candidates)} candidates into {len(merged)} spans"
        )
        return merged

    async def _classify(self, text: str) -> list[Span]:
        try:
            return await asyncio.wait_for(
                self._classifier.classify(text),
                timeout=self._timeout_seconds,
            )
        except ClassificationUnavailable:
            raise
        except asyncio.TimeoutError as exc:
            raise ClassificationUnavailable(
                f"Classifier timed out after {self._timeout_seconds}s"
            ) from exc
        except Exception as exc:
            raise ClassificationUnavailable(f"Classifier failed: {exc}") from exc

    @staticmethod
    def _discard_invalid(text: str, candidates: list[Span]) -> list[Span]:
        valid: list[Span] = []
        for span in candidates:
            if span.is_valid_for(text):
                valid.append(span)
            else:
                Log.warning(
                    f"Discarding {span.type.value} candidate at "
                    f"[{span.start}, {span.end}): offsets do not match transcript"
                )
        return valid

    @staticmethod
    def _resolve_overlaps(spans: list[Span]) -> list[Span]:
        """Greedy selection by priority: longest first, earliest start on ties."""
        ranked = sorted(set(spans), key=lambda s: (-s.length, s.start, s.end, s.type.value))
        kept: list[Span] = []
        for span in ranked:
            if any(span.overlaps(other) for other in kept):
                continue
            kept.append(span)
        kept.sort(key=lambda s: s.start)
        return kept

    @staticmethod
    def _merge_adjacent(text: str, spans: list[Span]) -> list[Span]:
        merged: list[Span] = []
        for span in spans:
            if merged and merged[-1].type == span.type and merged[-1].end == span.start:
                previous = merged[-1]
                merged[-1] = Span(
                    start=previous.start,
                    end=span.end,
                    text=text[previous.start:span.end],
                    type=span.type,
                )
            else:
                merged.append(span)
        return merged
