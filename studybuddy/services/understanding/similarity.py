"""
Fuzzy keyword matching.

SimilarityMatcher scores a token against candidate keywords using a
normalized Levenshtein similarity, (longest - distance) / longest, and
accepts the best candidate that clears a fixed threshold. The normalizer
and extractor depend only on best_match(), so the scoring strategy can
be replaced without touching lexicon content.

Usage:
    matcher = SimilarityMatcher(threshold=0.8)
    matcher.best_match("nots", ["notes", "note"])   # ("notes", 0.8)
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from rapidfuzz.distance import Levenshtein

from studybuddy.config.understanding import understanding_settings


@dataclass(frozen=True)
class SimilarityMatcher:
    """
    Edit-distance matcher with an acceptance threshold.

    Attributes:
        threshold: Minimum similarity (0-1) for a candidate to be accepted
        min_length: Tokens shorter than this never match
        anchor_first_letter: Only consider candidates sharing the token's first letter
    """

    threshold: float = 0.8
    min_length: int = 4
    anchor_first_letter: bool = True

    def score(self, token: str, candidate: str) -> float:
        """Normalized Levenshtein similarity in [0, 1]."""
        longest = max(len(token), len(candidate))
        if longest == 0:
            return 1.0
        distance = Levenshtein.distance(token, candidate)
        return (longest - distance) / longest

    def best_match(
        self,
        token: str,
        candidates: Iterable[str],
    ) -> Optional[tuple[str, float]]:
        """
        Find the highest-scoring candidate at or above the threshold.

        Ties keep the earliest candidate, so callers control precedence
        through candidate order.

        Args:
            token: Word to match
            candidates: Keywords in precedence order

        Returns:
            (candidate, score) or None when nothing clears the threshold
        """
        if len(token) < self.min_length:
            return None

        best: Optional[tuple[str, float]] = None
        for candidate in candidates:
            if candidate == token:
                return candidate, 1.0
            if self.anchor_first_letter and candidate[:1] != token[:1]:
                continue
            # Length alone can rule a candidate out
            longest = max(len(token), len(candidate))
            if (longest - abs(len(token) - len(candidate))) / longest < self.threshold:
                continue
            candidate_score = self.score(token, candidate)
            if candidate_score >= self.threshold and (
                best is None or candidate_score > best[1]
            ):
                best = (candidate, candidate_score)
        return best


def create_matcher() -> SimilarityMatcher:
    """Create a matcher configured from UNDERSTANDING_* settings."""
    return SimilarityMatcher(
        threshold=understanding_settings.SIMILARITY_THRESHOLD,
        min_length=understanding_settings.MIN_FUZZY_TOKEN_LENGTH,
        anchor_first_letter=understanding_settings.ANCHOR_FIRST_LETTER,
    )
