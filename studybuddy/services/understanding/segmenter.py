"""
Clause Segmenter

Splits normalized request text into independently classifiable clauses.

Split points:
- Boundary punctuation (. , ; ! ?)
- Conjunctions ("and", "then", "also", "plus"), except an "and" inside a
  quantity phrase such as "3 and 4" or "2 and a half", and a doubled
  conjunction inside a name ("c plus plus")
- A second action verb once the current clause already names a target
  ("delete all flashcards make one note on superman")

Text with no split points comes back as a single clause.
"""

import logging
from typing import Optional

from studybuddy.config.lexicon import Lexicon, get_lexicon
from studybuddy.models.request import Clause, NormalizedText
from studybuddy.services.understanding.tokens import (
    is_boundary,
    is_numeric,
    render,
    tokenize,
)

logger = logging.getLogger(__name__)

# How far past a verb to look for a target before treating it as a new action
_VERB_LOOKAHEAD = 3


class Segmenter:
    """Conjunction- and punctuation-based clause splitter."""

    def __init__(self, lexicon: Optional[Lexicon] = None):
        self.lexicon = lexicon or get_lexicon()

    def segment(self, normalized: NormalizedText) -> list[Clause]:
        """
        Split normalized text into clauses.

        Args:
            normalized: Normalizer output

        Returns:
            Non-empty, non-overlapping clauses in input order
        """
        tokens = tokenize(normalized.corrected_text)
        groups: list[list[str]] = []
        current: list[str] = []

        def flush() -> None:
            if current:
                groups.append(list(current))
                current.clear()

        for i, token in enumerate(tokens):
            if is_boundary(token):
                flush()
                continue

            if token in self.lexicon.conjunctions:
                in_quantity = token == "and" and self._inside_quantity(tokens, i)
                if in_quantity or self._repeated(tokens, i):
                    current.append(token)
                else:
                    flush()
                continue

            if token in self.lexicon.verbs and self._starts_new_action(current, tokens, i):
                flush()

            current.append(token)

        flush()

        clauses = [
            Clause(text=render(group), index=index) for index, group in enumerate(groups)
        ]
        logger.debug(f"Segmented into {len(clauses)} clause(s): {[c.text for c in clauses]}")
        return clauses

    def _is_quantity(self, token: str) -> bool:
        return is_numeric(token) or token in self.lexicon.number_words

    def _inside_quantity(self, tokens: list[str], i: int) -> bool:
        """True for the "and" in "3 and 4" or "2 and a half"."""
        if i == 0 or i + 1 >= len(tokens):
            return False
        if not self._is_quantity(tokens[i - 1]):
            return False

        following = tokens[i + 1]
        if self._is_quantity(following):
            return True
        return (
            following in ("a", "an")
            and i + 2 < len(tokens)
            and tokens[i + 2] in self.lexicon.fraction_words
        )

    @staticmethod
    def _repeated(tokens: list[str], i: int) -> bool:
        """True for a doubled conjunction that is part of a name ("c plus plus")."""
        token = tokens[i]
        return (i > 0 and tokens[i - 1] == token) or (
            i + 1 < len(tokens) and tokens[i + 1] == token
        )

    def _starts_new_action(self, current: list[str], tokens: list[str], i: int) -> bool:
        """
        Decide whether the verb at tokens[i] opens a new clause.

        Only splits when the running clause already has a target. Inside a
        topic ("notes on how to build a website") the verb must also be
        followed closely by a target or quantifier.
        """
        if not any(self.lexicon.resolve_target(t) for t in current):
            return False

        in_topic = any(t in self.lexicon.prepositions for t in current)
        if not in_topic:
            return True

        lookahead = tokens[i + 1 : i + 1 + _VERB_LOOKAHEAD]
        return any(
            self.lexicon.resolve_target(t) is not None
            or t in self.lexicon.quantifiers
            for t in lookahead
        )
