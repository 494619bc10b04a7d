"""
Collaborator interfaces for content generation and deletion.

The orchestration core only calls through these protocols; concrete
implementations (the LLM generator, a storage layer, test doubles) are
supplied at construction time.
"""

from typing import Optional, Protocol, runtime_checkable

from studybuddy.enums.request import FunKind, TargetDomain
from studybuddy.models.results import CardDraft, NoteDraft, ScheduleItemDraft


@runtime_checkable
class ContentGenerator(Protocol):
    """Synthesizes study content for a topic."""

    async def generate_notes(self, topic: str) -> list[NoteDraft]: ...

    async def generate_flashcards(self, topic: str, count: int) -> list[CardDraft]: ...

    async def generate_schedule(self, topic: str) -> list[ScheduleItemDraft]: ...

    async def generate_fun_content(self, topic: str, kind: FunKind) -> str: ...


@runtime_checkable
class DeletionSink(Protocol):
    """
    Removes stored content.

    Both methods return the number of removed items, or None when the
    store does not report it.
    """

    async def delete_all(self, domain: TargetDomain) -> Optional[int]: ...

    async def delete_topic(self, domain: TargetDomain, topic: str) -> Optional[int]: ...
