"""
Plan Aggregator

Merges per-clause actions into one ordered, deduplicated TaskPlan.

Rules, applied in order:
1. DELETE/UPDATE with target ALL expand to one action per concrete
   domain (Notes, Flashcards, Schedule, Fun), limited to the domains in
   the conversation context when one is given.
2. CREATE actions with the same (target, topic, fun kind) merge into the
   first occurrence with their counts summed.
3. DELETE/UPDATE actions with the same verb and target merge into the
   first occurrence. An unscoped action (no topic) absorbs topical ones;
   two different topics stay separate.

Merged actions keep the position of their first occurrence, so the plan
preserves input order among distinct (verb, target) pairs.
"""

import logging
from typing import Iterable, Optional

from studybuddy.enums.request import CONCRETE_DOMAINS, ActionVerb, TargetDomain
from studybuddy.models.request import Action, TaskPlan

logger = logging.getLogger(__name__)


def _topic_key(topic: Optional[str]) -> Optional[str]:
    return topic.casefold() if topic else None


class PlanAggregator:
    """Deterministic action merger."""

    def aggregate(
        self,
        actions: list[Action],
        context_domains: Optional[Iterable[TargetDomain]] = None,
    ) -> TaskPlan:
        """
        Build a task plan from extracted actions.

        Args:
            actions: Actions in clause order
            context_domains: Domains present in the conversation; limits
                ALL expansion. None or empty means every domain.

        Returns:
            Ordered, deduplicated TaskPlan
        """
        expanded = self._expand_all(actions, context_domains)

        merged: list[Action] = []
        for action in expanded:
            index = self._find_mergeable(merged, action)
            if index is None:
                merged.append(action)
            else:
                merged[index] = self._merge(merged[index], action)

        if len(merged) != len(actions):
            logger.debug(f"Aggregated {len(actions)} action(s) into {len(merged)}")
        return TaskPlan(actions=merged)

    @staticmethod
    def _expand_all(
        actions: list[Action],
        context_domains: Optional[Iterable[TargetDomain]],
    ) -> list[Action]:
        context = set(context_domains or ())
        domains = [d for d in CONCRETE_DOMAINS if not context or d in context]

        expanded: list[Action] = []
        for action in actions:
            if action.target != TargetDomain.ALL:
                expanded.append(action)
                continue
            expanded.extend(
                action.model_copy(update={"target": domain}) for domain in domains
            )
        return expanded

    @staticmethod
    def _find_mergeable(merged: list[Action], action: Action) -> Optional[int]:
        for index, existing in enumerate(merged):
            if existing.verb != action.verb or existing.target != action.target:
                continue

            if action.verb == ActionVerb.CREATE:
                if (
                    _topic_key(existing.topic) == _topic_key(action.topic)
                    and existing.fun_kind == action.fun_kind
                ):
                    return index
                continue

            if (
                existing.topic is None
                or action.topic is None
                or _topic_key(existing.topic) == _topic_key(action.topic)
            ):
                return index
        return None

    @staticmethod
    def _merge(existing: Action, duplicate: Action) -> Action:
        if existing.verb == ActionVerb.CREATE:
            return existing.model_copy(
                update={"count": existing.count + duplicate.count}
            )
        if duplicate.topic is None:
            return existing.model_copy(update={"topic": None})
        return existing
