"""
Request understanding enums.

Defines the vocabulary shared by the normalizer, extractor, aggregator
and orchestrator: action verbs, target domains, fun content kinds,
correction rules and the per-request processing stages.
"""

from enum import Enum


class ActionVerb(str, Enum):
    """What an action does to its target domain."""

    CREATE = "create"
    DELETE = "delete"
    UPDATE = "update"


class TargetDomain(str, Enum):
    """
    Content domains an action can address.

    ALL is a wildcard meaning "every known domain". It is only valid for
    DELETE and UPDATE and is expanded by the plan aggregator.
    """

    NOTES = "notes"
    FLASHCARDS = "flashcards"
    SCHEDULE = "schedule"
    FUN = "fun"
    ALL = "all"


# Expansion order for TargetDomain.ALL
CONCRETE_DOMAINS: tuple[TargetDomain, ...] = (
    TargetDomain.NOTES,
    TargetDomain.FLASHCARDS,
    TargetDomain.SCHEDULE,
    TargetDomain.FUN,
)


class FunKind(str, Enum):
    """Kinds of light-hearted study content."""

    STORY = "story"
    QUIZ = "quiz"
    POEM = "poem"
    SONG = "song"
    RAP = "rap"
    RIDDLE = "riddle"
    GAME = "game"
    JOKE = "joke"


class CorrectionRule(str, Enum):
    """
    Normalizer rule that produced a correction.

    - NUMBER_SPLIT: "10flashcards" -> "10 flashcards"
    - LETTER_RUN: "flashhhh" -> "flashcards" (stretched letters collapsed)
    - FUZZY_TOKEN: "nots" -> "notes" (single-token edit distance)
    - MULTI_TOKEN: "block cain" -> "blockchain" (split word rejoined)
    - REDUNDANCY: "flashcards card" -> "flashcards" (duplicate target merged)
    """

    NUMBER_SPLIT = "number_split"
    LETTER_RUN = "letter_run"
    FUZZY_TOKEN = "fuzzy_token"
    MULTI_TOKEN = "multi_token"
    REDUNDANCY = "redundancy"


class RequestStage(str, Enum):
    """
    Processing stages of a single request.

    Stage transitions are strictly linear:
        RECEIVED → NORMALIZED → SEGMENTED → PLANNED → DISPATCHED → AGGREGATED
    """

    RECEIVED = "received"
    NORMALIZED = "normalized"
    SEGMENTED = "segmented"
    PLANNED = "planned"
    DISPATCHED = "dispatched"
    AGGREGATED = "aggregated"
