"""
Unit tests for the LiteLLM-backed LLMClient.

acompletion is patched; retries are limited to one attempt.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from tenacity import stop_after_attempt

from studybuddy.config.generation import generation_settings
from studybuddy.enums.pipeline import PipelineName, PipelineOperation
from studybuddy.services.llm.client import LLMClient, build_messages

single_attempt = LLMClient.complete.retry_with(stop=stop_after_attempt(1))


@pytest.fixture
def client():
    return LLMClient()


class TestLLMClient:
    """Tests for model selection and usage records."""

    def test_model_per_operation(self, client):
        assert (
            client.get_model_for_operation(PipelineOperation.FLASHCARD_GENERATION)
            == generation_settings.MODEL_FLASHCARDS
        )
        assert (
            client.get_model_for_operation("SCHEDULE_GENERATION")
            == generation_settings.MODEL_SCHEDULE
        )

    @pytest.mark.asyncio
    async def test_json_response_parsed(self, client):
        response = MagicMock()
        response.choices[0].message.content = '{"cards": []}'
        response.usage.total_tokens = 12
        response._hidden_params = {"response_cost": 0.001}

        with patch(
            "studybuddy.services.llm.client.acompletion", AsyncMock(return_value=response)
        ):
            data, usage = await single_attempt(
                client,
                operation=PipelineOperation.FLASHCARD_GENERATION,
                messages=build_messages("Generate 3 flashcards about react"),
                json_mode=True,
            )

        assert data == {"cards": []}
        assert usage.cost_usd == 0.001
        assert client.failed_usages == []

    @pytest.mark.asyncio
    async def test_failed_call_recorded(self, client):
        """A provider error still leaves a usage record behind."""
        with patch(
            "studybuddy.services.llm.client.acompletion",
            AsyncMock(side_effect=RuntimeError("provider down")),
        ):
            with pytest.raises(RuntimeError, match="provider down"):
                await single_attempt(
                    client,
                    operation=PipelineOperation.NOTE_GENERATION,
                    messages=build_messages("Write notes about css"),
                    pipeline=PipelineName.REQUEST_ORCHESTRATION,
                )

        assert len(client.failed_usages) == 1
        usage = client.failed_usages[0]
        assert usage.success is False
        assert usage.error_message == "provider down"
        assert usage.operation == "NOTE_GENERATION"
        assert usage.pipeline == "REQUEST_ORCHESTRATION"
        assert usage.model == generation_settings.MODEL_NOTES
