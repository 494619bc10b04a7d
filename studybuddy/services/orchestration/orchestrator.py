"""
Request Orchestrator

Single entry point that turns one line of user text into generated or
deleted study content.

Stages (each logged):
    RECEIVED → NORMALIZED → SEGMENTED → PLANNED → DISPATCHED → AGGREGATED

1. Normalize: typo-correct the text against the lexicon
2. Segment: split into clauses
3. Plan: extract one action per clause/target and aggregate into a TaskPlan
4. Dispatch: run every action through the agent registered for its
   (verb, target) capability
5. Aggregate: merge artifacts by domain and build the summary

The whole plan is built before any agent starts. Failures are isolated
per action: a missing agent or a failing collaborator becomes a failed
AgentResult and never cancels sibling actions. Results are always
reported in plan order, regardless of completion order.

Usage:
    from studybuddy.services.orchestration import create_orchestrator

    orchestrator = create_orchestrator(generator=my_generator, deletion_sink=my_store)
    result = await orchestrator.process_request("10 flashcards of react and 1 note for car")
    print(result.summary)
"""

import asyncio
import logging
from typing import Iterable, Optional, Union

from studybuddy.config.generation import generation_settings
from studybuddy.config.lexicon import Lexicon, get_lexicon
from studybuddy.config.understanding import understanding_settings
from studybuddy.enums.request import CONCRETE_DOMAINS, RequestStage, TargetDomain
from studybuddy.exceptions import AgentExecutionError, AgentUnavailableError, ServiceError
from studybuddy.models.request import Action, NormalizedText, RawRequest, TaskPlan
from studybuddy.models.results import AgentResult, OrchestratorResult
from studybuddy.services.generation.protocols import ContentGenerator, DeletionSink
from studybuddy.services.orchestration.agents import (
    BaseAgent,
    DeleteAgent,
    FlashcardsAgent,
    FunAgent,
    NotesAgent,
    RescheduleAgent,
    ScheduleAgent,
)
from studybuddy.services.orchestration.registry import AgentRegistry
from studybuddy.services.orchestration.summary import build_summary
from studybuddy.services.understanding.aggregator import PlanAggregator
from studybuddy.services.understanding.extractor import ActionExtractor
from studybuddy.services.understanding.normalizer import Normalizer
from studybuddy.services.understanding.segmenter import Segmenter
from studybuddy.services.understanding.similarity import create_matcher

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Understands requests and dispatches their actions to agents.

    Attributes:
        registry: Read-only capability -> agent table
        normalizer, segmenter, extractor, aggregator: Understanding stages
        concurrent: Run independent target lanes concurrently
    """

    def __init__(
        self,
        registry: AgentRegistry,
        lexicon: Optional[Lexicon] = None,
        normalizer: Optional[Normalizer] = None,
        segmenter: Optional[Segmenter] = None,
        extractor: Optional[ActionExtractor] = None,
        aggregator: Optional[PlanAggregator] = None,
        concurrent: Optional[bool] = None,
    ):
        lexicon = lexicon or get_lexicon()
        matcher = create_matcher()

        self.registry = registry
        self.normalizer = normalizer or Normalizer(lexicon=lexicon, matcher=matcher)
        self.segmenter = segmenter or Segmenter(lexicon=lexicon)
        self.extractor = extractor or ActionExtractor(lexicon=lexicon, matcher=matcher)
        self.aggregator = aggregator or PlanAggregator()
        self.concurrent = (
            generation_settings.CONCURRENT_DISPATCH if concurrent is None else concurrent
        )

    # =========================================================================
    # Entry points
    # =========================================================================

    def understand(
        self,
        text: str,
        context_domains: Optional[Iterable[TargetDomain]] = None,
    ) -> tuple[NormalizedText, TaskPlan]:
        """
        Run the synchronous understanding stages only.

        Args:
            text: Raw user text
            context_domains: Domains present in the conversation, limiting
                "delete all" expansion

        Returns:
            Tuple of (normalizer output, task plan)
        """
        normalized = self.normalizer.normalize(text)
        self._log_stage(RequestStage.NORMALIZED, f"'{normalized.corrected_text}'")

        clauses = self.segmenter.segment(normalized)
        self._log_stage(RequestStage.SEGMENTED, f"{len(clauses)} clause(s)")

        actions = self.extractor.extract_all(clauses)
        plan = self.aggregator.aggregate(actions, context_domains=context_domains)
        self._log_stage(
            RequestStage.PLANNED,
            f"[{', '.join(a.describe() for a in plan.actions)}]",
            level=logging.INFO,
        )
        return normalized, plan

    async def process_request(
        self,
        request: Union[RawRequest, str],
        context_domains: Optional[Iterable[TargetDomain]] = None,
    ) -> OrchestratorResult:
        """
        Understand a request, run its actions and merge the results.

        Never raises for classification misses or agent failures; those
        are reported through the summary and per_action entries.

        Args:
            request: RawRequest or plain text
            context_domains: Domains present in the conversation

        Returns:
            OrchestratorResult with summary, merged artifacts and per-action results
        """
        if isinstance(request, str):
            request = RawRequest(text=request)
        self._log_stage(RequestStage.RECEIVED, f"'{request.text}'")

        normalized, plan = self.understand(request.text, context_domains)

        if plan.is_empty:
            logger.info(f"No actionable request in '{request.text}'")
            return OrchestratorResult(
                summary=build_summary([]),
                plan=plan,
                normalized=normalized,
            )

        per_action = await self._dispatch(plan)
        self._log_stage(
            RequestStage.DISPATCHED,
            f"{sum(r.success for r in per_action)}/{len(per_action)} succeeded",
            level=logging.INFO,
        )

        result = OrchestratorResult(
            summary=build_summary(per_action),
            artifacts=self._merge_artifacts(per_action),
            per_action=per_action,
            plan=plan,
            normalized=normalized,
        )
        self._log_stage(RequestStage.AGGREGATED, result.summary)
        return result

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def _dispatch(self, plan: TaskPlan) -> list[AgentResult]:
        """Run every action; results are stored by plan index."""
        results: list[Optional[AgentResult]] = [None] * len(plan.actions)

        if not self.concurrent:
            for index, action in enumerate(plan.actions):
                results[index] = await self._run_action(action)
            return results

        # Actions on the same target run in order; different targets run concurrently
        lanes: dict[TargetDomain, list[int]] = {}
        for index, action in enumerate(plan.actions):
            lanes.setdefault(action.target, []).append(index)

        async def run_lane(indices: list[int]) -> None:
            for index in indices:
                results[index] = await self._run_action(plan.actions[index])

        await asyncio.gather(*(run_lane(indices) for indices in lanes.values()))
        return results

    async def _run_action(self, action: Action) -> AgentResult:
        agent: Optional[BaseAgent] = self.registry.get(action.verb, action.target)

        if agent is None:
            error = AgentUnavailableError(
                f"No agent can {action.verb.value} {action.target.value}",
                details={"verb": action.verb.value, "target": action.target.value},
            )
            logger.warning(error.message)
            return AgentResult.failure(error, action=action)

        try:
            result = await agent.run(action.topic, action.count, kind=action.fun_kind)
        except ServiceError as e:
            logger.error(f"Action {action.describe()} failed: {e}")
            return AgentResult.failure(e, action=action)
        except Exception as e:
            logger.error(f"Action {action.describe()} failed: {e}")
            return AgentResult.failure(AgentExecutionError(str(e)), action=action)

        logger.debug(f"Action {action.describe()} succeeded: {result.message}")
        return result.model_copy(update={"action": action})

    # =========================================================================
    # Aggregation
    # =========================================================================

    @staticmethod
    def _merge_artifacts(per_action: list[AgentResult]) -> dict[str, list]:
        merged: dict[str, list] = {}
        for result in per_action:
            for artifact in result.artifacts:
                merged.setdefault(artifact.domain, []).append(artifact)
        return merged

    @staticmethod
    def _log_stage(stage: RequestStage, detail: str, level: int = logging.DEBUG) -> None:
        logger.log(level, f"[{stage.value}] {detail}")


def create_orchestrator(
    generator: ContentGenerator,
    deletion_sink: Optional[DeletionSink] = None,
    lexicon: Optional[Lexicon] = None,
    concurrent: Optional[bool] = None,
) -> Orchestrator:
    """
    Build an orchestrator with the default agent set.

    Registers CREATE agents for every domain, DELETE agents for every
    domain when a deletion sink is given, and UPDATE for the schedule.

    Args:
        generator: Content generator collaborator
        deletion_sink: Storage collaborator for deletions (optional)
        lexicon: Keyword lexicon (defaults to the configured one)
        concurrent: Override GENERATION_CONCURRENT_DISPATCH

    Returns:
        Configured Orchestrator
    """
    agents: list[BaseAgent] = [
        NotesAgent(generator),
        FlashcardsAgent(generator),
        ScheduleAgent(generator),
        FunAgent(generator),
        RescheduleAgent(
            generator,
            sink=deletion_sink,
            default_topic=understanding_settings.DEFAULT_TOPIC,
        ),
    ]
    if deletion_sink is not None:
        agents.extend(DeleteAgent(domain, deletion_sink) for domain in CONCRETE_DOMAINS)

    return Orchestrator(
        registry=AgentRegistry(agents),
        lexicon=lexicon,
        concurrent=concurrent,
    )
