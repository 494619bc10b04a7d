"""
Agent and orchestrator result models.

Agent payloads form a closed union discriminated on ``domain`` so callers
can match exhaustively instead of probing an open dict:

    for artifact in result.artifacts["flashcards"]:
        print(artifact.front, artifact.back)
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from studybuddy.enums.request import FunKind, TargetDomain
from studybuddy.exceptions import ServiceError
from studybuddy.models.base import ResultModel
from studybuddy.models.request import Action, NormalizedText, TaskPlan


# =============================================================================
# Artifacts
# =============================================================================


class NoteDraft(ResultModel):
    """A generated study note."""

    domain: Literal["notes"] = "notes"
    title: str
    content: str
    topic: Optional[str] = None


class CardDraft(ResultModel):
    """A generated flashcard."""

    domain: Literal["flashcards"] = "flashcards"
    front: str
    back: str
    topic: Optional[str] = None
    tags: list[str] = Field(default_factory=list)


class ScheduleItemDraft(ResultModel):
    """A generated study session, placed relative to today."""

    domain: Literal["schedule"] = "schedule"
    title: str
    description: str = ""
    day_offset: int = Field(0, ge=0)  # Days from today
    duration_minutes: int = Field(30, ge=1)
    topic: Optional[str] = None


class FunContent(ResultModel):
    """A story, quiz, poem or other light-hearted piece."""

    domain: Literal["fun"] = "fun"
    kind: FunKind
    content: str
    topic: Optional[str] = None


class DeletionReceipt(ResultModel):
    """Record of a deletion carried out by a DeletionSink."""

    domain: Literal["deletion"] = "deletion"
    target: TargetDomain
    topic: Optional[str] = None
    removed: Optional[int] = None  # None when the sink does not report counts


Artifact = Annotated[
    Union[NoteDraft, CardDraft, ScheduleItemDraft, FunContent, DeletionReceipt],
    Field(discriminator="domain"),
]


# =============================================================================
# Results
# =============================================================================


class AgentResult(ResultModel):
    """Outcome of running one action."""

    action: Optional[Action] = None
    success: bool
    artifacts: list[Artifact] = Field(default_factory=list)
    message: str = ""
    error: Optional[str] = None
    error_code: Optional[str] = None

    @classmethod
    def failure(
        cls,
        error: ServiceError,
        action: Optional[Action] = None,
    ) -> "AgentResult":
        """Build a failed result from a service error."""
        return cls(
            action=action,
            success=False,
            message=f"Failed to {action.describe()}" if action else "Failed",
            error=error.message,
            error_code=error.error_code,
        )


class OrchestratorResult(ResultModel):
    """
    Merged outcome of one request.

    Attributes:
        summary: Human-readable sentence naming every domain touched
        artifacts: Domain key -> artifacts, merged in plan order
        per_action: One AgentResult per planned action, in plan order
        plan: The plan that was dispatched
        normalized: Normalizer output the plan was built from
    """

    summary: str
    artifacts: dict[str, list[Artifact]] = Field(default_factory=dict)
    per_action: list[AgentResult] = Field(default_factory=list)
    plan: TaskPlan = Field(default_factory=TaskPlan)
    normalized: Optional[NormalizedText] = None

    @property
    def succeeded(self) -> list[AgentResult]:
        return [r for r in self.per_action if r.success]

    @property
    def failed(self) -> list[AgentResult]:
        return [r for r in self.per_action if not r.success]
