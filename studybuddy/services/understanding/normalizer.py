"""
Request Normalizer

Cleans raw request text and repairs typos against the keyword lexicon.
Every repair is recorded as a Correction so callers can show the user
what was changed.

Correction rules (applied left to right over the token stream):
- NUMBER_SPLIT: digits glued to a word are split ("10flashcards")
- LETTER_RUN: stretched letters collapse ("flashhhh" -> "flashcards")
- MULTI_TOKEN: a word broken by a stray space is rejoined ("block cain" -> "blockchain")
- FUZZY_TOKEN: a single misspelled word is matched by edit distance ("nots" -> "notes")
- REDUNDANCY: adjacent words naming the same target merge ("flashcards card" -> "flashcards")

Inside a topic (after "about", "of", "for", ...) words are only repaired
towards domain nouns, so "notes for car" keeps "car".

The normalizer never raises and is idempotent: normalizing its own
output yields the same text and no corrections.

Usage:
    from studybuddy.services.understanding import Normalizer

    normalized = Normalizer().normalize("40 flashhhh card of block cain")
    normalized.corrected_text   # "40 flashcards of blockchain"
"""

import logging
import re
import unicodedata
from typing import Optional

from studybuddy.config.lexicon import Lexicon, get_lexicon
from studybuddy.config.understanding import understanding_settings
from studybuddy.enums.request import CorrectionRule
from studybuddy.models.request import Correction, NormalizedText
from studybuddy.services.understanding.similarity import (
    SimilarityMatcher,
    create_matcher,
)
from studybuddy.services.understanding.tokens import (
    is_boundary,
    is_numeric,
    is_word,
    render,
    split_word,
)

logger = logging.getLogger(__name__)

_THOUSANDS_RE = re.compile(r"(?<=\d),(?=\d{3}\b)")
_APOSTROPHE_RE = re.compile(r"['`]")
_SEPARATOR_RE = re.compile(r"[-/_]")
# "node.js" -> "node js"; a dot between letters is not a sentence end
_INNER_DOT_RE = re.compile(r"(?<=[a-z])\.(?=[a-z])")
_NOISE_RE = re.compile(r"[^a-z0-9\s.,;!?]")


class Normalizer:
    """
    Lexicon-driven typo corrector.

    Attributes:
        lexicon: Keyword tables to correct against
        matcher: Fuzzy matcher used for single- and multi-token repairs
        max_letter_run: Longest run of one letter treated as intentional
        window_size: Maximum number of adjacent unknown words to rejoin
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        matcher: Optional[SimilarityMatcher] = None,
        max_letter_run: Optional[int] = None,
        window_size: Optional[int] = None,
    ):
        self.lexicon = lexicon or get_lexicon()
        self.matcher = matcher or create_matcher()
        self.max_letter_run = max_letter_run or understanding_settings.MAX_LETTER_RUN
        self.window_size = window_size or understanding_settings.WINDOW_SIZE

        self._letter_run_re = re.compile(r"([a-z])\1{%d,}" % self.max_letter_run)
        self._candidates = self.lexicon.correction_candidates
        self._topic_candidates = self.lexicon.domain_nouns

    def normalize(self, text: str) -> NormalizedText:
        """
        Clean and typo-correct one request.

        Args:
            text: Raw user text

        Returns:
            NormalizedText with the corrected string and ordered corrections
        """
        corrections: list[Correction] = []

        tokens = self._split_numbers(self._clean(text), corrections)
        tokens = self._tidy_punctuation(tokens)
        tokens = self._correct_tokens(tokens, corrections)
        tokens = self._merge_redundant(tokens, corrections)

        corrected = render(tokens)
        if corrections:
            logger.debug(
                f"Normalized '{text}' -> '{corrected}' "
                f"({len(corrections)} corrections)"
            )
        return NormalizedText(corrected_text=corrected, corrections=corrections)

    # =========================================================================
    # Cleanup
    # =========================================================================

    def _clean(self, text: str) -> str:
        """Lower-case and strip noise; not recorded as corrections."""
        text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode()
        text = text.lower().replace("&", " and ")
        text = _THOUSANDS_RE.sub("", text)
        text = _APOSTROPHE_RE.sub("", text)
        text = _SEPARATOR_RE.sub(" ", text)
        text = _INNER_DOT_RE.sub(" ", text)
        text = _NOISE_RE.sub(" ", text)
        return text

    def _split_numbers(self, text: str, corrections: list[Correction]) -> list[str]:
        tokens: list[str] = []
        for word in text.split():
            pieces = split_word(word)
            content = [p for p in pieces if not is_boundary(p)]
            if len(content) > 1 and any(is_numeric(p) for p in content):
                corrections.append(
                    Correction(
                        original_span="".join(content),
                        replacement=" ".join(content),
                        rule_id=CorrectionRule.NUMBER_SPLIT,
                    )
                )
            tokens.extend(pieces)
        return tokens

    @staticmethod
    def _tidy_punctuation(tokens: list[str]) -> list[str]:
        """Drop leading, trailing and repeated boundary punctuation."""
        tidy: list[str] = []
        for token in tokens:
            if is_boundary(token) and (not tidy or is_boundary(tidy[-1])):
                continue
            tidy.append(token)
        while tidy and is_boundary(tidy[-1]):
            tidy.pop()
        return tidy

    # =========================================================================
    # Token corrections
    # =========================================================================

    def _is_unknown_word(self, token: str) -> bool:
        return is_word(token) and not self.lexicon.is_known(token)

    def _correct_tokens(
        self, tokens: list[str], corrections: list[Correction]
    ) -> list[str]:
        corrected: list[str] = []
        in_topic = False
        i = 0

        while i < len(tokens):
            token = tokens[i]

            if not self._is_unknown_word(token):
                corrected.append(token)
                in_topic = self._topic_state(token, in_topic)
                i += 1
                continue

            candidates = self._topic_candidates if in_topic else self._candidates
            replacement, rule, consumed = self._repair(tokens, i, candidates)

            if rule is not None:
                corrections.append(
                    Correction(
                        original_span=" ".join(tokens[i : i + consumed]),
                        replacement=replacement,
                        rule_id=rule,
                    )
                )
            corrected.append(replacement)
            in_topic = self._topic_state(replacement, in_topic)
            i += consumed

        return corrected

    def _topic_state(self, token: str, in_topic: bool) -> bool:
        """Topic spans open at a preposition and close at a boundary, conjunction or verb."""
        if token in self.lexicon.prepositions:
            return True
        if (
            is_boundary(token)
            or token in self.lexicon.conjunctions
            or token in self.lexicon.verbs
        ):
            return False
        return in_topic

    def _collapsed_forms(self, word: str) -> tuple[str, ...]:
        """The word itself, or its one- and two-letter collapses when it has a letter run."""
        if not self._letter_run_re.search(word):
            return (word,)
        return (
            self._letter_run_re.sub(r"\1", word),
            self._letter_run_re.sub(r"\1\1", word),
        )

    def _repair(
        self,
        tokens: list[str],
        i: int,
        candidates: tuple[str, ...],
    ) -> tuple[str, Optional[CorrectionRule], int]:
        """
        Repair the unknown word at tokens[i].

        Returns:
            (replacement, rule or None when unchanged, tokens consumed)
        """
        word = tokens[i]
        forms = self._collapsed_forms(word)
        stretched = len(forms) > 1

        if stretched:
            for form in forms:
                if self.lexicon.is_known(form):
                    return self.lexicon.canonical(form), CorrectionRule.LETTER_RUN, 1
            for form in forms:
                match = self.matcher.best_match(form, candidates)
                if match:
                    return self.lexicon.canonical(match[0]), CorrectionRule.LETTER_RUN, 1
            word = forms[-1]

        joined = self._repair_window(tokens, i, word, candidates)
        if joined is not None:
            return joined[0], CorrectionRule.MULTI_TOKEN, joined[1]

        if not stretched:
            match = self.matcher.best_match(word, candidates)
            if match:
                return self.lexicon.canonical(match[0]), CorrectionRule.FUZZY_TOKEN, 1
            return word, None, 1

        return word, CorrectionRule.LETTER_RUN, 1

    def _repair_window(
        self,
        tokens: list[str],
        i: int,
        first: str,
        candidates: tuple[str, ...],
    ) -> Optional[tuple[str, int]]:
        """
        Rejoin up to window_size adjacent unknown words into one lexicon word.

        Stretched following words are joined in their collapsed forms, which
        are the forms a second pass would see.
        """
        for size in range(self.window_size, 1, -1):
            following = tokens[i + 1 : i + size]
            if len(following) != size - 1:
                continue
            if not all(self._is_unknown_word(t) for t in following):
                continue

            following_forms = [self._collapsed_forms(t) for t in following]
            # A stretched word that collapses to a known word is repaired on its own
            if any(self.lexicon.is_known(f) for forms in following_forms for f in forms):
                continue

            for variant in (0, -1):
                joined = first + "".join(forms[variant] for forms in following_forms)
                if joined in candidates:
                    return self.lexicon.canonical(joined), size
                match = self.matcher.best_match(joined, candidates)
                if match:
                    return self.lexicon.canonical(match[0]), size
        return None

    # =========================================================================
    # Redundancy
    # =========================================================================

    def _merge_redundant(
        self, tokens: list[str], corrections: list[Correction]
    ) -> list[str]:
        merged: list[str] = []
        for token in tokens:
            target = self.lexicon.target_aliases.get(token)
            if (
                target is not None
                and merged
                and self.lexicon.target_aliases.get(merged[-1]) == target
            ):
                keyword = self.lexicon.target_keywords[target]
                corrections.append(
                    Correction(
                        original_span=f"{merged[-1]} {token}",
                        replacement=keyword,
                        rule_id=CorrectionRule.REDUNDANCY,
                    )
                )
                merged[-1] = keyword
                continue
            merged.append(token)
        return merged
