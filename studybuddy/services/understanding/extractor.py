"""
Action Extractor

Classifies a clause into a structured Action: verb, target domain,
topic and count.

Resolution policy:
- Verb: first create/delete/update keyword before the topic. A clause
  with a count and a target but no verb is an implicit CREATE
  ("10 flashcards of react"). A target-only clause inherits the previous
  clause's verb ("delete all notes and flashcards"). Otherwise CREATE.
- Target: target aliases and fun kinds before the topic. With no target,
  CREATE falls back to NOTES and DELETE/UPDATE widen to ALL.
- Count: first integer or number word before the topic; defaults to 1
  and is always 1 for DELETE/UPDATE.
- Topic: words after the first topic preposition, otherwise the words
  left after removing keywords. An empty CREATE topic becomes the
  configured default ("general").

A clause with neither a verb nor a target yields no action.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from studybuddy.config.lexicon import Lexicon, get_lexicon
from studybuddy.config.understanding import understanding_settings
from studybuddy.enums.request import ActionVerb, FunKind, TargetDomain
from studybuddy.models.request import Action, Clause
from studybuddy.services.understanding.similarity import (
    SimilarityMatcher,
    create_matcher,
)
from studybuddy.services.understanding.tokens import is_boundary, tokenize

logger = logging.getLogger(__name__)


@dataclass
class ClauseFeatures:
    """Keywords found in one clause, before defaults are applied."""

    verb: Optional[ActionVerb] = None
    targets: list[TargetDomain] = field(default_factory=list)
    fun_kind: Optional[FunKind] = None
    count: Optional[int] = None
    topic: Optional[str] = None


class ActionExtractor:
    """
    Rule-based clause classifier.

    Attributes:
        lexicon: Keyword tables
        matcher: Fuzzy matcher for target words the normalizer did not repair
        default_topic: Topic used for CREATE actions that name none
        default_count: Count used for CREATE actions that state none
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        matcher: Optional[SimilarityMatcher] = None,
        default_topic: Optional[str] = None,
        default_count: Optional[int] = None,
    ):
        self.lexicon = lexicon or get_lexicon()
        self.matcher = matcher or create_matcher()
        self.default_topic = default_topic or understanding_settings.DEFAULT_TOPIC
        self.default_count = default_count or understanding_settings.DEFAULT_CREATE_COUNT
        self._target_words = tuple(self.lexicon.target_aliases) + tuple(
            self.lexicon.fun_kinds
        )

    def extract(
        self,
        clause: Clause,
        previous_verb: Optional[ActionVerb] = None,
    ) -> Optional[Action]:
        """
        Classify one clause.

        Args:
            clause: Clause to classify
            previous_verb: Verb of the preceding clause, inherited by
                target-only clauses

        Returns:
            The action for the clause's first target, or None for a
            clause with no verb and no target
        """
        actions = self._extract_clause(clause, previous_verb)
        return actions[0] if actions else None

    def extract_all(self, clauses: list[Clause]) -> list[Action]:
        """
        Classify clauses in order, threading the verb from clause to clause.

        A clause naming several targets ("remove notes flashcards") yields
        one action per target.
        """
        actions: list[Action] = []
        previous_verb: Optional[ActionVerb] = None

        for clause in clauses:
            clause_actions = self._extract_clause(clause, previous_verb)
            if not clause_actions:
                logger.debug(f"No action in clause {clause.index}: '{clause.text}'")
                continue
            previous_verb = clause_actions[0].verb
            actions.extend(clause_actions)

        return actions

    # =========================================================================
    # Clause analysis
    # =========================================================================

    def _extract_clause(
        self,
        clause: Clause,
        previous_verb: Optional[ActionVerb],
    ) -> list[Action]:
        features = self.analyze(clause.text)

        if features.verb is None and not features.targets:
            return []

        verb = self._resolve_verb(features, previous_verb)
        targets = self._resolve_targets(verb, features)

        if verb == ActionVerb.CREATE:
            count = features.count or self.default_count
            topic = features.topic or self.default_topic
        else:
            count = 1
            topic = features.topic or None

        return [
            Action(
                verb=verb,
                target=target,
                topic=topic,
                count=count,
                fun_kind=(
                    features.fun_kind
                    if target == TargetDomain.FUN and verb == ActionVerb.CREATE
                    else None
                ),
            )
            for target in targets
        ]

    def analyze(self, text: str) -> ClauseFeatures:
        """Collect the keywords in a clause without applying defaults."""
        tokens = [t for t in tokenize(text) if not is_boundary(t)]
        topic_start = self._topic_start(tokens)
        head = tokens if topic_start is None else tokens[:topic_start]

        features = ClauseFeatures()
        leftovers: list[str] = []

        for token in head:
            verb = self.lexicon.verbs.get(token)
            if verb is not None:
                if features.verb is None:
                    features.verb = verb
                    implied = self.lexicon.implied_targets.get(token)
                    if implied is not None and implied not in features.targets:
                        features.targets.append(implied)
                continue

            target = self._resolve_target(token)
            if target is not None:
                if target not in features.targets:
                    features.targets.append(target)
                if token in self.lexicon.fun_kinds and features.fun_kind is None:
                    features.fun_kind = self.lexicon.fun_kinds[token]
                continue

            number = self.lexicon.parse_number(token)
            if number is not None:
                if features.count is None:
                    features.count = number
                continue

            if token in self.lexicon.quantifiers or self._is_filler(token):
                continue

            leftovers.append(token)

        if topic_start is not None:
            features.topic = self._clean_topic(tokens[topic_start + 1 :])
        if not features.topic:
            features.topic = self._clean_topic(leftovers)

        return features

    def _topic_start(self, tokens: list[str]) -> Optional[int]:
        """Index of the preposition that opens the topic, if any."""
        for i, token in enumerate(tokens):
            if token not in self.lexicon.prepositions:
                continue
            # "a couple of notes", "3 of the cards": "of" after a count is not a topic
            if (
                token == "of"
                and i > 0
                and self.lexicon.parse_number(tokens[i - 1]) is not None
            ):
                continue
            if i + 1 >= len(tokens):
                continue
            return i
        return None

    def _resolve_target(self, token: str) -> Optional[TargetDomain]:
        target = self.lexicon.resolve_target(token)
        if target is not None or self.lexicon.is_known(token):
            return target
        match = self.matcher.best_match(token, self._target_words)
        if match:
            return self.lexicon.resolve_target(match[0])
        return None

    def _is_filler(self, token: str) -> bool:
        return (
            token in self.lexicon.fillers
            or token in self.lexicon.articles
            or token in self.lexicon.prepositions
            or token in self.lexicon.conjunctions
        )

    def _is_padding(self, token: str) -> bool:
        return token in self.lexicon.articles or token in self.lexicon.fillers

    def _clean_topic(self, tokens: list[str]) -> Optional[str]:
        """Trim articles and fillers from both ends; None when nothing is left."""
        start, end = 0, len(tokens)
        while start < end and self._is_padding(tokens[start]):
            start += 1
        while end > start and self._is_padding(tokens[end - 1]):
            end -= 1
        topic = " ".join(tokens[start:end]).strip()
        return topic or None

    # =========================================================================
    # Defaults
    # =========================================================================

    @staticmethod
    def _resolve_verb(
        features: ClauseFeatures,
        previous_verb: Optional[ActionVerb],
    ) -> ActionVerb:
        if features.verb is not None:
            return features.verb
        if features.count is not None:
            return ActionVerb.CREATE
        if previous_verb is not None:
            return previous_verb
        return ActionVerb.CREATE

    @staticmethod
    def _resolve_targets(
        verb: ActionVerb,
        features: ClauseFeatures,
    ) -> list[TargetDomain]:
        if features.targets:
            return list(features.targets)
        if verb == ActionVerb.CREATE:
            return [TargetDomain.NOTES]
        return [TargetDomain.ALL]
