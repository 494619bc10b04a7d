"""
Unit tests for content agents and the capability registry.
"""

from unittest.mock import AsyncMock

import pytest

from studybuddy.enums.request import ActionVerb, FunKind, TargetDomain
from studybuddy.exceptions import AgentExecutionError, LLMError
from studybuddy.models.results import DeletionReceipt, FunContent
from studybuddy.services.orchestration.agents import (
    DeleteAgent,
    FlashcardsAgent,
    FunAgent,
    NotesAgent,
    RescheduleAgent,
    ScheduleAgent,
)
from studybuddy.services.orchestration.orchestrator import create_orchestrator
from studybuddy.services.orchestration.registry import AgentRegistry


class TestCreateAgents:
    """Tests for agents backed by the content generator."""

    @pytest.mark.asyncio
    async def test_notes_agent_calls_until_count(self, mock_generator):
        """One note per generator call; the agent repeats until it has enough."""
        result = await NotesAgent(mock_generator).run("css", 3)

        assert result.success
        assert len(result.artifacts) == 3
        assert mock_generator.generate_notes.await_count == 3

    @pytest.mark.asyncio
    async def test_notes_agent_stops_on_empty_batch(self, mock_generator):
        mock_generator.generate_notes = AsyncMock(return_value=[])

        with pytest.raises(AgentExecutionError):
            await NotesAgent(mock_generator).run("css", 2)

    @pytest.mark.asyncio
    async def test_flashcards_agent(self, mock_generator):
        result = await FlashcardsAgent(mock_generator).run("react", 4)

        assert len(result.artifacts) == 4
        assert result.artifacts[0].topic == "react"
        assert result.message == "Created 4 flashcards about react"

    @pytest.mark.asyncio
    async def test_flashcards_agent_empty_result_fails(self, mock_generator):
        """No cards is a failure, as with notes."""
        mock_generator.generate_flashcards = AsyncMock(return_value=[])

        with pytest.raises(AgentExecutionError, match="No flashcards"):
            await FlashcardsAgent(mock_generator).run("react", 5)

    @pytest.mark.asyncio
    async def test_collaborator_error_wrapped(self, mock_generator):
        mock_generator.generate_flashcards = AsyncMock(side_effect=LLMError("rate limited"))

        with pytest.raises(AgentExecutionError) as exc_info:
            await FlashcardsAgent(mock_generator).run("react", 4)

        assert "rate limited" in exc_info.value.message
        assert exc_info.value.details["cause"] == "llm_error"

    @pytest.mark.asyncio
    async def test_schedule_agent(self, mock_generator):
        result = await ScheduleAgent(mock_generator).run("exams", 1)

        assert len(result.artifacts) == 2
        assert all(a.domain == "schedule" for a in result.artifacts)

    @pytest.mark.asyncio
    async def test_fun_agent_kind_and_count(self, mock_generator):
        result = await FunAgent(mock_generator).run("python", 2, kind=FunKind.POEM)

        assert len(result.artifacts) == 2
        assert all(isinstance(a, FunContent) for a in result.artifacts)
        assert result.artifacts[0].kind == FunKind.POEM
        mock_generator.generate_fun_content.assert_awaited_with("python", FunKind.POEM)

    @pytest.mark.asyncio
    async def test_fun_agent_defaults_to_story(self, mock_generator):
        result = await FunAgent(mock_generator).run("python", 1)
        assert result.artifacts[0].kind == FunKind.STORY


class TestDeleteAgents:
    """Tests for deletion and rescheduling."""

    def test_delete_agent_rejects_all(self, mock_sink):
        with pytest.raises(ValueError):
            DeleteAgent(TargetDomain.ALL, mock_sink)

    @pytest.mark.asyncio
    async def test_delete_whole_domain(self, mock_sink):
        result = await DeleteAgent(TargetDomain.NOTES, mock_sink).run(None, 1)

        receipt = result.artifacts[0]
        assert isinstance(receipt, DeletionReceipt)
        assert receipt.target == TargetDomain.NOTES
        assert receipt.removed == 3
        mock_sink.delete_all.assert_awaited_once_with(TargetDomain.NOTES)
        mock_sink.delete_topic.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_delete_one_topic(self, mock_sink):
        result = await DeleteAgent(TargetDomain.FLASHCARDS, mock_sink).run("react", 1)

        assert result.artifacts[0].topic == "react"
        mock_sink.delete_topic.assert_awaited_once_with(TargetDomain.FLASHCARDS, "react")

    @pytest.mark.asyncio
    async def test_sink_failure_wrapped(self, mock_sink):
        mock_sink.delete_all = AsyncMock(side_effect=OSError("disk full"))

        with pytest.raises(AgentExecutionError):
            await DeleteAgent(TargetDomain.NOTES, mock_sink).run(None, 1)

    @pytest.mark.asyncio
    async def test_reschedule_without_sink(self, mock_generator):
        """Without a sink the schedule is only regenerated."""
        result = await RescheduleAgent(mock_generator, default_topic="general").run(None, 1)

        assert [a.domain for a in result.artifacts] == ["schedule", "schedule"]
        mock_generator.generate_schedule.assert_awaited_once_with("general")

    @pytest.mark.asyncio
    async def test_reschedule_regenerates_then_clears(self, mock_generator, mock_sink):
        result = await RescheduleAgent(mock_generator, sink=mock_sink).run(None, 1)

        assert result.artifacts[0].domain == "deletion"
        mock_sink.delete_all.assert_awaited_once_with(TargetDomain.SCHEDULE)
        assert len(result.artifacts) == 3

    @pytest.mark.asyncio
    async def test_reschedule_keeps_schedule_when_generation_fails(
        self, mock_generator, mock_sink
    ):
        """The old schedule is only cleared once a new one has been generated."""
        mock_generator.generate_schedule = AsyncMock(side_effect=RuntimeError("llm down"))

        with pytest.raises(AgentExecutionError, match="llm down"):
            await RescheduleAgent(mock_generator, sink=mock_sink).run("exams", 1)

        mock_sink.delete_topic.assert_not_awaited()
        mock_sink.delete_all.assert_not_awaited()


class TestAgentRegistry:
    """Tests for the capability table."""

    def test_lookup(self, mock_generator, mock_sink):
        registry = AgentRegistry(
            [NotesAgent(mock_generator), DeleteAgent(TargetDomain.NOTES, mock_sink)]
        )

        assert isinstance(registry.get(ActionVerb.CREATE, TargetDomain.NOTES), NotesAgent)
        assert registry.supports(ActionVerb.DELETE, TargetDomain.NOTES)
        assert registry.get(ActionVerb.UPDATE, TargetDomain.NOTES) is None
        assert len(registry) == 2

    def test_duplicate_capability_rejected(self, mock_generator):
        with pytest.raises(ValueError, match="Duplicate agent"):
            AgentRegistry([NotesAgent(mock_generator), NotesAgent(mock_generator)])

    def test_table_is_read_only(self, mock_generator):
        registry = AgentRegistry([NotesAgent(mock_generator)])

        with pytest.raises(TypeError):
            registry.capabilities[(ActionVerb.CREATE, TargetDomain.FUN)] = None

    def test_list_agents(self, mock_generator):
        registry = AgentRegistry([FunAgent(mock_generator)])

        assert registry.list_agents() == [
            {"verb": "create", "target": "fun", "agent": "FunAgent"}
        ]

    def test_default_agent_set(self, mock_generator, mock_sink, lexicon):
        """Deletes are only registered when a sink is available."""
        without_sink = create_orchestrator(mock_generator, lexicon=lexicon)
        with_sink = create_orchestrator(mock_generator, deletion_sink=mock_sink, lexicon=lexicon)

        assert len(without_sink.registry) == 5
        assert len(with_sink.registry) == 9
        assert with_sink.registry.supports(ActionVerb.UPDATE, TargetDomain.SCHEDULE)
        assert not with_sink.registry.supports(ActionVerb.UPDATE, TargetDomain.NOTES)
