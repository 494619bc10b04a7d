"""
Request understanding models.

The transient values produced while turning one line of user text into a
plan: the raw request, normalizer corrections, clauses, actions and the
final task plan. None of these outlive a single process_request call.
"""

from typing import Optional

from pydantic import Field, model_validator

from studybuddy.enums.request import (
    ActionVerb,
    CorrectionRule,
    FunKind,
    TargetDomain,
)
from studybuddy.models.base import StrictModel


class RawRequest(StrictModel):
    """One user submission."""

    text: str


class Correction(StrictModel):
    """A single fix applied by the normalizer."""

    original_span: str
    replacement: str
    rule_id: CorrectionRule


class NormalizedText(StrictModel):
    """Corrected text plus the corrections that produced it, in application order."""

    corrected_text: str
    corrections: list[Correction] = Field(default_factory=list)


class Clause(StrictModel):
    """An independently classifiable fragment of a request."""

    text: str = Field(..., min_length=1)
    index: int = Field(0, ge=0)


class Action(StrictModel):
    """
    One structured instruction derived from a clause.

    Invariants:
        - count >= 1 (Delete/Update carry 1; the value has no meaning there)
        - target ALL only appears with DELETE or UPDATE
        - fun_kind is set exactly when target is FUN and the verb is CREATE
    """

    verb: ActionVerb
    target: TargetDomain
    topic: Optional[str] = None
    count: int = Field(1, ge=1)
    fun_kind: Optional[FunKind] = None

    @model_validator(mode="after")
    def check_target(self) -> "Action":
        if self.verb == ActionVerb.CREATE and self.target == TargetDomain.ALL:
            raise ValueError("CREATE actions need a concrete target, not ALL")
        if self.target != TargetDomain.FUN and self.fun_kind is not None:
            raise ValueError("fun_kind is only valid for the FUN target")
        if (
            self.target == TargetDomain.FUN
            and self.verb == ActionVerb.CREATE
            and self.fun_kind is None
        ):
            self.fun_kind = FunKind.STORY
        return self

    def describe(self) -> str:
        """Short label for logs, e.g. "create flashcards(react) x10"."""
        label = f"{self.verb.value} {self.target.value}"
        if self.topic:
            label += f"({self.topic})"
        if self.verb == ActionVerb.CREATE:
            label += f" x{self.count}"
        return label


class TaskPlan(StrictModel):
    """Ordered, deduplicated actions for one request."""

    actions: list[Action] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.actions

    def __len__(self) -> int:
        return len(self.actions)
