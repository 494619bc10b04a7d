"""
Unit tests for result summary text.
"""

from studybuddy.enums.request import ActionVerb, FunKind, TargetDomain
from studybuddy.exceptions import AgentExecutionError
from studybuddy.models.request import Action
from studybuddy.models.results import (
    AgentResult,
    CardDraft,
    DeletionReceipt,
    FunContent,
    NoteDraft,
)
from studybuddy.services.orchestration.summary import EMPTY_PLAN_SUMMARY, build_summary


def _cards(topic, n):
    return [CardDraft(front="q", back="a", topic=topic) for _ in range(n)]


class TestBuildSummary:
    """Tests for summary phrasing."""

    def test_no_results(self):
        assert build_summary([]) == EMPTY_PLAN_SUMMARY

    def test_creates_joined(self):
        results = [
            AgentResult(
                action=Action(verb=ActionVerb.CREATE, target=TargetDomain.FLASHCARDS, topic="react", count=10),
                success=True,
                artifacts=_cards("react", 10),
            ),
            AgentResult(
                action=Action(verb=ActionVerb.CREATE, target=TargetDomain.NOTES, topic="car", count=1),
                success=True,
                artifacts=[NoteDraft(title="Cars", content="...", topic="car")],
            ),
        ]

        assert build_summary(results) == "Created 10 flashcards about react and 1 notes about car."

    def test_deletes_without_counts(self):
        results = [
            AgentResult(
                action=Action(verb=ActionVerb.DELETE, target=target),
                success=True,
                artifacts=[DeletionReceipt(target=target)],
            )
            for target in (TargetDomain.NOTES, TargetDomain.FLASHCARDS)
        ]

        assert build_summary(results) == "Deleted notes and flashcards."

    def test_failure_named(self):
        action = Action(verb=ActionVerb.CREATE, target=TargetDomain.SCHEDULE, topic="exams")
        results = [
            AgentResult(
                action=Action(verb=ActionVerb.CREATE, target=TargetDomain.FLASHCARDS, topic="css", count=5),
                success=True,
                artifacts=_cards("css", 5),
            ),
            AgentResult.failure(AgentExecutionError("down"), action=action),
        ]

        summary = build_summary(results)

        assert summary.startswith("Created 5 flashcards about css")
        assert "could not create 1 schedule items about exams" in summary

    def test_fun_kind_in_noun(self):
        action = Action(
            verb=ActionVerb.CREATE,
            target=TargetDomain.FUN,
            topic="python",
            fun_kind=FunKind.QUIZ,
        )
        results = [
            AgentResult(
                action=action,
                success=True,
                artifacts=[FunContent(kind=FunKind.QUIZ, content="Q?", topic="python")],
            )
        ]

        assert build_summary(results) == "Created 1 fun quiz about python."

    def test_same_target_topics_grouped(self):
        results = [
            AgentResult(
                action=Action(verb=ActionVerb.CREATE, target=TargetDomain.FLASHCARDS, topic=topic, count=2),
                success=True,
                artifacts=_cards(topic, 2),
            )
            for topic in ("css", "html")
        ]

        assert build_summary(results) == "Created 4 flashcards about css and html."
