"""
app/validators/categorical_matcher.py

Matches free-text categorical values against a curated reference list.

Strategy order: exact case-insensitive match, then containment in either
direction, then the minimum Levenshtein distance within a bound. Containment
and distance are computed on case- and accent-folded text.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from rapidfuzz.distance import Levenshtein

from app.domain.budget import Confidence

DEFAULT_MAX_DISTANCE = 3


class MatchStrategy(str, Enum):
    EXACT = "exact"
    CONTAINMENT = "containment"
    EDIT_DISTANCE = "edit_distance"


@dataclass(frozen=True)
class CategoryMatch:
    """
    Closest reference value for one input.
    """

    value: str
    strategy: MatchStrategy
    distance: int

    @property
    def is_exact(self) -> bool:
        return self.strategy is MatchStrategy.EXACT

    @property
    def confidence(self) -> Confidence:
        if self.distance <= 1:
            return Confidence.HIGH
        return Confidence.MEDIUM


def fold(text: str) -> str:
    """
    Lower-case, strip accents and collapse whitespace.
    """

    decomposed = unicodedata.normalize("NFKD", text.strip().casefold())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return " ".join(stripped.split())


class CategoricalMatcher:
    """
    Resolves a raw value to the closest entry of a reference list.
    """

    def __init__(
        self,
        references: Sequence[str],
        *,
        max_distance: int = DEFAULT_MAX_DISTANCE,
    ) -> None:
        self._references = tuple(references)
        self._folded = tuple(fold(reference) for reference in self._references)
        self._max_distance = max(0, max_distance)

    @property
    def references(self) -> tuple[str, ...]:
        return self._references

    def match(self, raw_value: str) -> CategoryMatch | None:
        """
        Return the best match for ``raw_value`` or None when nothing is close.
        """

        value = raw_value.strip()
        if not value:
            return None

        lowered = value.lower()
        for reference in self._references:
            if reference.lower() == lowered:
                return CategoryMatch(value=reference, strategy=MatchStrategy.EXACT, distance=0)

        folded = fold(value)

        containment = self._best_containment(folded)
        if containment is not None:
            return containment

        best: CategoryMatch | None = None
        for reference, folded_reference in zip(self._references, self._folded):
            distance = Levenshtein.distance(folded, folded_reference)
            if distance > self._max_distance:
                continue
            if best is None or distance < best.distance:
                best = CategoryMatch(
                    value=reference,
                    strategy=MatchStrategy.EDIT_DISTANCE,
                    distance=distance,
                )
        return best

    def _best_containment(self, folded: str) -> CategoryMatch | None:
        best: CategoryMatch | None = None
        for reference, folded_reference in zip(self._references, self._folded):
            if folded_reference not in folded and folded not in folded_reference:
                continue
            distance = Levenshtein.distance(folded, folded_reference)
            if best is None or distance < best.distance:
                best = CategoryMatch(
                    value=reference,
                    strategy=MatchStrategy.CONTAINMENT,
                    distance=distance,
                )
        return best
