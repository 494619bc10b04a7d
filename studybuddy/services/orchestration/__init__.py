"""
Orchestration services: agents, capability registry and the request orchestrator.
"""

from studybuddy.services.orchestration.agents import (
    BaseAgent,
    DeleteAgent,
    FlashcardsAgent,
    FunAgent,
    GeneratorAgent,
    NotesAgent,
    RescheduleAgent,
    ScheduleAgent,
)
from studybuddy.services.orchestration.orchestrator import (
    Orchestrator,
    create_orchestrator,
)
from studybuddy.services.orchestration.registry import AgentRegistry
from studybuddy.services.orchestration.summary import EMPTY_PLAN_SUMMARY, build_summary

__all__ = [
    # Orchestrator
    "Orchestrator",
    "create_orchestrator",
    "AgentRegistry",
    # Agents
    "BaseAgent",
    "GeneratorAgent",
    "NotesAgent",
    "FlashcardsAgent",
    "ScheduleAgent",
    "FunAgent",
    "DeleteAgent",
    "RescheduleAgent",
    # Summary
    "build_summary",
    "EMPTY_PLAN_SUMMARY",
]
