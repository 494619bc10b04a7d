"""
Result summary text.

Builds the one-line report for an orchestrated request, grouping actions
by outcome, verb and target:

    "Created 10 flashcards about react and 3 notes about car."
    "Deleted notes and flashcards."
    "Created 5 flashcards about css and could not create schedule items about exams."

Every target domain that appears in the plan is named, whether its
action succeeded or failed.
"""

from dataclasses import dataclass, field
from typing import Optional

from studybuddy.enums.request import ActionVerb, TargetDomain
from studybuddy.models.results import AgentResult

EMPTY_PLAN_SUMMARY = (
    "No actionable request detected. Try something like "
    '"make 5 flashcards about react" or "delete all notes".'
)

TARGET_NOUNS = {
    TargetDomain.NOTES: "notes",
    TargetDomain.FLASHCARDS: "flashcards",
    TargetDomain.SCHEDULE: "schedule items",
    TargetDomain.FUN: "fun content",
    TargetDomain.ALL: "all content",
}

PAST_TENSE = {
    ActionVerb.CREATE: "created",
    ActionVerb.DELETE: "deleted",
    ActionVerb.UPDATE: "updated",
}


@dataclass
class _Group:
    success: bool
    verb: ActionVerb
    target: TargetDomain
    noun: str
    total: Optional[int] = 0
    topics: list[str] = field(default_factory=list)


def _produced(result: AgentResult) -> Optional[int]:
    """Item count an action produced or removed; None when unknown."""
    action = result.action
    if not result.success:
        return action.count if action.verb == ActionVerb.CREATE else None
    if action.verb == ActionVerb.CREATE:
        return len(result.artifacts)
    if action.verb == ActionVerb.DELETE:
        removed = [getattr(a, "removed", None) for a in result.artifacts]
        if removed and all(r is not None for r in removed):
            return sum(removed)
    return None


def _noun(result: AgentResult) -> str:
    action = result.action
    if action.target == TargetDomain.FUN and action.fun_kind is not None:
        return f"fun {action.fun_kind.value}"
    return TARGET_NOUNS[action.target]


def _join(phrases: list[str]) -> str:
    if len(phrases) == 1:
        return phrases[0]
    return f"{', '.join(phrases[:-1])} and {phrases[-1]}"


def build_summary(results: list[AgentResult]) -> str:
    """
    Summarize per-action results in plan order.

    Args:
        results: One AgentResult per planned action

    Returns:
        Human-readable summary sentence
    """
    groups: dict[tuple, _Group] = {}

    for result in results:
        if result.action is None:
            continue
        action = result.action
        noun = _noun(result)
        key = (result.success, action.verb, action.target, noun)
        group = groups.get(key)
        if group is None:
            group = _Group(result.success, action.verb, action.target, noun)
            groups[key] = group

        produced = _produced(result)
        if produced is None or group.total is None:
            group.total = None
        else:
            group.total += produced
        if action.topic and action.topic not in group.topics:
            group.topics.append(action.topic)

    if not groups:
        return EMPTY_PLAN_SUMMARY

    # One clause per (outcome, verb): "deleted notes and flashcards"
    clauses: dict[tuple[bool, ActionVerb], list[str]] = {}
    for group in groups.values():
        count = f"{group.total} " if group.total else ""
        topics = f" about {_join(group.topics)}" if group.topics else ""
        clauses.setdefault((group.success, group.verb), []).append(
            f"{count}{group.noun}{topics}"
        )

    sentence = _join(
        [
            f"{PAST_TENSE[verb] if success else f'could not {verb.value}'} {_join(objects)}"
            for (success, verb), objects in clauses.items()
        ]
    )
    return sentence[0].upper() + sentence[1:] + "."
