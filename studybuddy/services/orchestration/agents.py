"""
Content Agents

Every agent fulfils one or more (verb, target) capabilities through the
same interface:

    result = await agent.run(topic, count, kind=None)

Agents translate collaborator calls into AgentResults. When the
collaborator fails they raise AgentExecutionError carrying the
underlying message; the orchestrator records it as a failed result.

Capabilities:
- NotesAgent:       (CREATE, NOTES)
- FlashcardsAgent:  (CREATE, FLASHCARDS)
- ScheduleAgent:    (CREATE, SCHEDULE)
- FunAgent:         (CREATE, FUN)
- DeleteAgent:      (DELETE, <target>) - one instance per target
- RescheduleAgent:  (UPDATE, SCHEDULE)
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from studybuddy.enums.request import ActionVerb, FunKind, TargetDomain
from studybuddy.exceptions import AgentExecutionError, ServiceError
from studybuddy.models.results import (
    AgentResult,
    DeletionReceipt,
    FunContent,
    NoteDraft,
)
from studybuddy.services.generation.protocols import ContentGenerator, DeletionSink

Capability = tuple[ActionVerb, TargetDomain]


class BaseAgent(ABC):
    """Abstract base class for all agents."""

    def __init__(self) -> None:
        self.logger: logging.Logger = logging.getLogger(self.__class__.__name__)

    @property
    @abstractmethod
    def capabilities(self) -> frozenset[Capability]:
        """(verb, target) pairs this agent handles."""

    @abstractmethod
    async def run(
        self,
        topic: Optional[str],
        count: int,
        *,
        kind: Optional[FunKind] = None,
    ) -> AgentResult:
        """
        Fulfil one action.

        Args:
            topic: Action topic (None only for unscoped DELETE/UPDATE)
            count: Requested item count (meaningful for CREATE only)
            kind: Fun content kind, for the FUN target

        Returns:
            Successful AgentResult

        Raises:
            AgentExecutionError: If the collaborator call fails
        """

    def _execution_error(self, operation: str, topic: Optional[str], error: Exception):
        details = {"agent": self.__class__.__name__, "topic": topic}
        if isinstance(error, ServiceError):
            details["cause"] = error.error_code
        return AgentExecutionError(f"{operation} failed: {error}", details=details)


class GeneratorAgent(BaseAgent):
    """Base for agents that create content through a ContentGenerator."""

    domain: TargetDomain

    def __init__(self, generator: ContentGenerator) -> None:
        super().__init__()
        self.generator = generator

    @property
    def capabilities(self) -> frozenset[Capability]:
        return frozenset({(ActionVerb.CREATE, self.domain)})


# =============================================================================
# Create agents
# =============================================================================


class NotesAgent(GeneratorAgent):
    """Creates study notes, calling the generator until `count` notes exist."""

    domain = TargetDomain.NOTES

    async def run(self, topic, count, *, kind=None) -> AgentResult:
        notes: list[NoteDraft] = []
        try:
            # Each call yields at least one note; stop early if one comes back empty
            for _ in range(count):
                batch = await self.generator.generate_notes(topic)
                if not batch:
                    break
                notes.extend(batch)
                if len(notes) >= count:
                    break
        except Exception as e:
            raise self._execution_error("Note generation", topic, e) from e

        if not notes:
            raise AgentExecutionError(
                f"No notes generated for '{topic}'", details={"topic": topic}
            )

        notes = notes[:count]
        return AgentResult(
            success=True,
            artifacts=notes,
            message=f"Created {len(notes)} notes about {topic}",
        )


class FlashcardsAgent(GeneratorAgent):
    """Creates flashcards in a single generator call."""

    domain = TargetDomain.FLASHCARDS

    async def run(self, topic, count, *, kind=None) -> AgentResult:
        try:
            cards = await self.generator.generate_flashcards(topic, count)
        except Exception as e:
            raise self._execution_error("Flashcard generation", topic, e) from e

        if not cards:
            raise AgentExecutionError(
                f"No flashcards generated for '{topic}'", details={"topic": topic}
            )
        if len(cards) < count:
            self.logger.warning(
                f"Requested {count} flashcards about {topic}, got {len(cards)}"
            )
        return AgentResult(
            success=True,
            artifacts=cards,
            message=f"Created {len(cards)} flashcards about {topic}",
        )


class ScheduleAgent(GeneratorAgent):
    """Creates a study schedule for a topic."""

    domain = TargetDomain.SCHEDULE

    async def run(self, topic, count, *, kind=None) -> AgentResult:
        try:
            items = await self.generator.generate_schedule(topic)
        except Exception as e:
            raise self._execution_error("Schedule generation", topic, e) from e

        return AgentResult(
            success=True,
            artifacts=items,
            message=f"Created {len(items)} schedule items about {topic}",
        )


class FunAgent(GeneratorAgent):
    """Creates `count` pieces of fun content of one kind."""

    domain = TargetDomain.FUN

    async def run(self, topic, count, *, kind=None) -> AgentResult:
        kind = FunKind(kind) if kind else FunKind.STORY
        pieces: list[FunContent] = []
        try:
            for _ in range(count):
                text = await self.generator.generate_fun_content(topic, kind)
                pieces.append(FunContent(kind=kind, content=text, topic=topic))
        except Exception as e:
            raise self._execution_error(f"Fun {kind.value} generation", topic, e) from e

        return AgentResult(
            success=True,
            artifacts=pieces,
            message=f"Created {len(pieces)} fun {kind.value} about {topic}",
        )


# =============================================================================
# Delete / update agents
# =============================================================================


class DeleteAgent(BaseAgent):
    """Clears one target domain, or only one topic within it."""

    def __init__(self, target: TargetDomain, sink: DeletionSink) -> None:
        if target == TargetDomain.ALL:
            raise ValueError("DeleteAgent needs a concrete target; ALL is expanded upstream")
        super().__init__()
        self.target = target
        self.sink = sink

    @property
    def capabilities(self) -> frozenset[Capability]:
        return frozenset({(ActionVerb.DELETE, self.target)})

    async def run(self, topic, count, *, kind=None) -> AgentResult:
        try:
            if topic:
                removed = await self.sink.delete_topic(self.target, topic)
            else:
                removed = await self.sink.delete_all(self.target)
        except Exception as e:
            raise self._execution_error(f"Deleting {self.target.value}", topic, e) from e

        scope = f" about {topic}" if topic else ""
        return AgentResult(
            success=True,
            artifacts=[DeletionReceipt(target=self.target, topic=topic, removed=removed)],
            message=f"Deleted {self.target.value}{scope}",
        )


class RescheduleAgent(BaseAgent):
    """Replaces the schedule: plans it again, then clears the old items."""

    def __init__(
        self,
        generator: ContentGenerator,
        sink: Optional[DeletionSink] = None,
        default_topic: str = "general",
    ) -> None:
        super().__init__()
        self.generator = generator
        self.sink = sink
        self.default_topic = default_topic

    @property
    def capabilities(self) -> frozenset[Capability]:
        return frozenset({(ActionVerb.UPDATE, TargetDomain.SCHEDULE)})

    async def run(self, topic, count, *, kind=None) -> AgentResult:
        try:
            items = await self.generator.generate_schedule(topic or self.default_topic)
        except Exception as e:
            raise self._execution_error("Rescheduling", topic, e) from e

        if not items:
            raise AgentExecutionError(
                f"No schedule generated for '{topic or self.default_topic}'",
                details={"topic": topic},
            )

        # Existing items are only cleared once the replacement exists
        artifacts = []
        if self.sink is not None:
            try:
                if topic:
                    removed = await self.sink.delete_topic(TargetDomain.SCHEDULE, topic)
                else:
                    removed = await self.sink.delete_all(TargetDomain.SCHEDULE)
            except Exception as e:
                raise self._execution_error("Rescheduling", topic, e) from e
            artifacts.append(
                DeletionReceipt(target=TargetDomain.SCHEDULE, topic=topic, removed=removed)
            )

        artifacts.extend(items)
        return AgentResult(
            success=True,
            artifacts=artifacts,
            message=f"Updated schedule with {len(items)} items",
        )
