"""
LLM-backed Content Generator

Implements the ContentGenerator protocol with JSON-mode completions
through the shared LLMClient. Each domain has its own prompt, model and
sampling settings (GENERATION_* environment variables).

Malformed model output raises LLMError; the calling agent turns that into
a failed AgentResult. Retries for transient provider errors and invalid
JSON happen inside LLMClient.complete.

Usage:
    from studybuddy.services.generation import LLMContentGenerator

    generator = LLMContentGenerator()
    cards = await generator.generate_flashcards("react hooks", count=10)
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from studybuddy.config.generation import GenerationSettings, generation_settings
from studybuddy.enums.pipeline import PipelineName, PipelineOperation
from studybuddy.enums.request import FunKind
from studybuddy.exceptions import LLMError
from studybuddy.models.llm_usage import LLMUsage
from studybuddy.models.results import CardDraft, NoteDraft, ScheduleItemDraft
from studybuddy.services.llm.client import LLMClient, build_messages, get_llm_client

logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are a patient study assistant that writes accurate, \
well-structured learning material for students. Always answer with valid JSON."""

NOTES_PROMPT = """Write study notes about: {topic}

Cover the core ideas a student needs, from fundamentals to common pitfalls.
Use short paragraphs and bullet lists in markdown.

Return JSON:
{{
    "notes": [
        {{
            "title": "Note title",
            "content": "Markdown body"
        }}
    ]
}}
"""

FLASHCARDS_PROMPT = """Generate {count} spaced repetition flashcards about: {topic}

Each card should have:
- A clear, specific question (front)
- A concise but self-contained answer (back)

Mix definition, comparison, application and example cards, and vary the
difficulty from basic to advanced.

Return JSON:
{{
    "cards": [
        {{
            "front": "Question text",
            "back": "Answer text",
            "tags": ["tag"]
        }}
    ]
}}
"""

SCHEDULE_PROMPT = """Plan a study schedule for learning: {topic}

Break the work into focused sessions spread over the coming days.
day_offset is the number of days from today (0 = today).

Return JSON:
{{
    "sessions": [
        {{
            "title": "Session title",
            "description": "What to study and how",
            "day_offset": 0,
            "duration_minutes": 45
        }}
    ]
}}
"""

FUN_PROMPT = """Write a short, light-hearted {kind} that helps a student \
remember key facts about: {topic}

Keep it accurate and under 300 words.

Return JSON:
{{
    "content": "The {kind} text"
}}
"""


class LLMContentGenerator:
    """
    ContentGenerator implementation backed by LiteLLM.

    Attributes:
        llm_client: Client used for completions
        config: Generation settings (models, temperatures, token limits)
        usages: LLMUsage records for every successful call, for cost reporting
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        config: Optional[GenerationSettings] = None,
    ):
        self.llm_client = llm_client or get_llm_client()
        self.config = config or generation_settings
        self.usages: list[LLMUsage] = []

    async def generate_notes(self, topic: str) -> list[NoteDraft]:
        data = await self._complete_json(
            operation=PipelineOperation.NOTE_GENERATION,
            prompt=NOTES_PROMPT.format(topic=topic),
            temperature=self.config.NOTES_TEMPERATURE,
            max_tokens=self.config.NOTES_MAX_TOKENS,
        )
        notes = self._build(NoteDraft, self._items(data, "notes", ("title", "content")), topic)
        return self._require(notes, "notes", topic)

    async def generate_flashcards(self, topic: str, count: int) -> list[CardDraft]:
        count = min(count, self.config.MAX_CARDS_PER_REQUEST)
        data = await self._complete_json(
            operation=PipelineOperation.FLASHCARD_GENERATION,
            prompt=FLASHCARDS_PROMPT.format(topic=topic, count=count),
            temperature=self.config.FLASHCARDS_TEMPERATURE,
            max_tokens=self.config.FLASHCARDS_MAX_TOKENS,
        )
        cards = self._build(CardDraft, self._items(data, "cards", ("front", "back")), topic)
        # Models sometimes overshoot the requested count
        return self._require(cards[:count], "flashcards", topic)

    async def generate_schedule(self, topic: str) -> list[ScheduleItemDraft]:
        data = await self._complete_json(
            operation=PipelineOperation.SCHEDULE_GENERATION,
            prompt=SCHEDULE_PROMPT.format(topic=topic),
            temperature=self.config.SCHEDULE_TEMPERATURE,
            max_tokens=self.config.SCHEDULE_MAX_TOKENS,
        )
        sessions = self._build(
            ScheduleItemDraft, self._items(data, "sessions", ("title",)), topic
        )
        return self._require(sessions, "schedule", topic)

    async def generate_fun_content(self, topic: str, kind: FunKind) -> str:
        data = await self._complete_json(
            operation=PipelineOperation.FUN_CONTENT_GENERATION,
            prompt=FUN_PROMPT.format(topic=topic, kind=FunKind(kind).value),
            temperature=self.config.FUN_TEMPERATURE,
            max_tokens=self.config.FUN_MAX_TOKENS,
        )
        content = data.get("content") if isinstance(data, dict) else None
        if not isinstance(content, str) or not content.strip():
            raise LLMError(
                f"Model returned no {FunKind(kind).value} for '{topic}'",
                details={"topic": topic},
            )
        return content.strip()

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _complete_json(
        self,
        operation: PipelineOperation,
        prompt: str,
        temperature: float,
        max_tokens: int,
    ) -> Any:
        try:
            data, usage = await self.llm_client.complete(
                operation=operation,
                messages=build_messages(prompt, system_prompt=SYSTEM_PROMPT),
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=True,
                pipeline=PipelineName.REQUEST_ORCHESTRATION,
            )
        except Exception as e:
            raise LLMError(
                f"{operation.value} failed: {e}",
                details={"operation": operation.value},
            ) from e

        self.usages.append(usage)
        return data

    @staticmethod
    def _items(data: Any, key: str, required: tuple[str, ...]) -> list[dict]:
        """Entries under `key` that carry every required field; others are skipped."""
        if not isinstance(data, dict) or not isinstance(data.get(key), list):
            raise LLMError(
                f"Model response has no '{key}' list",
                details={"keys": sorted(data) if isinstance(data, dict) else None},
            )

        items = []
        for entry in data[key]:
            if not isinstance(entry, dict):
                continue
            if not all(entry.get(name) for name in required):
                logger.debug(f"Skipping incomplete {key} entry: {entry}")
                continue
            # The topic comes from the request, not the model
            items.append({k: v for k, v in entry.items() if k not in ("topic", "domain")})
        return items

    @staticmethod
    def _build(model_cls, items: list[dict], topic: str) -> list:
        try:
            return [model_cls(topic=topic, **item) for item in items]
        except ValidationError as e:
            raise LLMError(
                f"Invalid {model_cls.__name__} for '{topic}': {e}",
                details={"topic": topic},
            ) from e

    @staticmethod
    def _require(items: list, label: str, topic: str) -> list:
        if not items:
            raise LLMError(
                f"Model returned no usable {label} for '{topic}'",
                details={"topic": topic},
            )
        logger.info(f"Generated {len(items)} {label} for topic: {topic}")
        return items
