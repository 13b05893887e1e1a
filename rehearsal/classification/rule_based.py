"""Deterministic, offline entity classifier.

Detection flow:
1. Regex rules over the transcript: emails, phones, ages, dates of birth,
   self-introduced names, employers and places of residence.
2. Gazetteer matching (names, locations, organizations) over an
   ICU-folded copy of the transcript, mapped back to transcript offsets,
   so "José" matches the gazetteer entry "jose".

Candidates may overlap; the span resolver picks the winners.
"""

import re
from typing import ClassVar

from rehearsal.anonymization.base import BaseEntityClassifier
from rehearsal.anonymization.models import EntityType, Span
from rehearsal.classification.transliteration import Transliterator

_MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|"
    r"Aug(?:ust)?|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
_DATE = (
    r"(?:\d{4}-\d{1,2}-\d{1,2}"
    r"|\d{1,2}[/.\-]\d{1,2}[/.\-]\d{2,4}"
    rf"|{_MONTHS}\.?\s+\d{{1,2}}(?:st|nd|rd|th)?,?\s+\d{{4}}"
    rf"|\d{{1,2}}(?:st|nd|rd|th)?\s+(?:of\s+)?{_MONTHS},?\s+\d{{4}})"
)
_CAPITALIZED = r"(?!I\b|I')[A-Z][\w'\-]*"
_LEADING_STOPWORD = r"(?!(?:At|In|On|For|With|The|And|But|From|To|Then|So|We|My|Our)\b)"


class RuleBasedClassifier(BaseEntityClassifier):
    """Regex + gazetteer classifier. No network, no model, same input -> same output."""

    _EMAIL_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"[\w.\-+]+@[\w.\-]+\.\w{2,}",
    )
    _PHONE_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"(?<!\w)"
        r"\+?\(?\d[\d\s\-().]{5,18}\d"
        r"(?!\w)",
    )
    _DATE_SHAPED_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"\d{4}-\d{1,2}-\d{1,2}|\d{1,2}[.\-]\d{1,2}[.\-]\d{2,4}|\d{4}\s*-\s*\d{4}"
    )
    _AGE_RES: ClassVar[list[re.Pattern[str]]] = [
        re.compile(r"\b(\d{1,3})[\s-]*(?:years?|yrs?)[\s-]*old\b", re.IGNORECASE),
        re.compile(r"\b(?:aged?|age of)\s*:?\s*(\d{1,3})\b", re.IGNORECASE),
    ]
    _DOB_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"(?:\bborn\s+(?:on\s+)?|\bdate\s+of\s+birth\s*(?:is\s*|:\s*)?"
        r"|\bDOB\s*:?\s*|\bbirthday\s+is\s+)"
        rf"({_DATE})",
        re.IGNORECASE,
    )
    _INTRO_NAME_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"(?i:\bmy name is|\bmy name's|\bcall me|\bi am called)\s+"
        rf"({_CAPITALIZED}(?:\s+{_CAPITALIZED}){{0,2}})"
    )
    _EMPLOYER_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"(?i:\bwork(?:ed|ing|s)?\s+(?:at|for)|\bemployed\s+(?:at|by)|\bintern(?:ed)?\s+at)\s+"
        rf"({_CAPITALIZED}(?:\s+(?:&\s+)?{_CAPITALIZED}){{0,3}})"
    )
    _ORG_SUFFIX_RE: ClassVar[re.Pattern[str]] = re.compile(
        rf"\b{_LEADING_STOPWORD}{_CAPITALIZED}(?:\s+{_CAPITALIZED}){{0,2}}\s+"
        r"(?:Inc|Corp|Corporation|Ltd|LLC|GmbH|Group|Bank|University|College)\b"
    )
    _RESIDENCE_RE: ClassVar[re.Pattern[str]] = re.compile(
        r"(?i:\blive\s+in|\bliving\s+in|\bbased\s+in|\bmoved\s+to|\bgrew\s+up\s+in|\bborn\s+in)\s+"
        rf"({_CAPITALIZED}(?:\s+{_CAPITALIZED}){{0,2}})"
    )

    _MIN_PHONE_DIGITS: ClassVar[int] = 7

    def __init__(
        self,
        gazetteer: dict[EntityType, list[str]] | None = None,
        transliterator: Transliterator | None = None,
    ) -> None:
        self._transliterator = transliterator or Transliterator()
        self._gazetteer: dict[EntityType, set[str]] = {}
        for entity_type, terms in (gazetteer or {}).items():
            folded = {self._transliterator.fold(t).strip() for t in terms}
            self._gazetteer[entity_type] = {t for t in folded if t}

    async def classify(self, text: str) -> list[Span]:
        spans: list[Span] = []
        spans.extend(self._detect_regex(text))
        spans.extend(self._detect_gazetteer(text))
        return spans

    # ------------------------------------------------------------------
    # Regex rules
    # ------------------------------------------------------------------

    def _detect_regex(self, text: str) -> list[Span]:
        spans: list[Span] = []
        for m in self._EMAIL_RE.finditer(text):
            spans.append(_span(text, m.start(), m.end(), EntityType.EMAIL))

        for m in self._PHONE_RE.finditer(text):
            value = m.group(0)
            digits = sum(ch.isdigit() for ch in value)
            if digits < self._MIN_PHONE_DIGITS or self._DATE_SHAPED_RE.fullmatch(value):
                continue
            spans.append(_span(text, m.start(), m.end(), EntityType.PHONE))

        for pattern in self._AGE_RES:
            for m in pattern.finditer(text):
                spans.append(_span(text, m.start(1), m.end(1), EntityType.AGE))

        grouped_rules = (
            (self._DOB_RE, EntityType.DATE_OF_BIRTH),
            (self._INTRO_NAME_RE, EntityType.NAME),
            (self._EMPLOYER_RE, EntityType.ORGANIZATION),
            (self._RESIDENCE_RE, EntityType.LOCATION),
        )
        for pattern, entity_type in grouped_rules:
            for m in pattern.finditer(text):
                spans.append(_span(text, m.start(1), m.end(1), entity_type))

        for m in self._ORG_SUFFIX_RE.finditer(text):
            spans.append(_span(text, m.start(), m.end(), EntityType.ORGANIZATION))
        return spans

    # ------------------------------------------------------------------
    # Gazetteer
    # ------------------------------------------------------------------

    def _detect_gazetteer(self, text: str) -> list[Span]:
        if not self._gazetteer:
            return []

        folded, folded_to_orig = self._transliterator.fold_with_mapping(text)
        spans: list[Span] = []
        for entity_type, terms in self._gazetteer.items():
            for term in terms:
                for f_start, f_end in _find_whole_words(folded, term):
                    orig_start = folded_to_orig[f_start]
                    orig_end = folded_to_orig[f_end - 1] + 1
                    spans.append(_span(text, orig_start, orig_end, entity_type))
        return spans


def _find_whole_words(haystack: str, needle: str) -> list[tuple[int, int]]:
    """Every occurrence of *needle* not embedded in a larger word."""
    matches: list[tuple[int, int]] = []
    start = 0
    while True:
        idx = haystack.find(needle, start)
        if idx == -1:
            break
        end = idx + len(needle)
        before_ok = idx == 0 or not haystack[idx - 1].isalnum()
        after_ok = end == len(haystack) or not haystack[end].isalnum()
        if before_ok and after_ok:
            matches.append((idx, end))
        start = idx + 1
    return matches


def _span(text: str, start: int, end: int, entity_type: EntityType) -> Span:
    return Span(start=start, end=end, text=text[start:end], type=entity_type)
