"""
Data models for request understanding, orchestration and LLM usage.

Usage:
    from studybuddy.models import Action, TaskPlan, OrchestratorResult
"""

from studybuddy.models.llm_usage import (
    LLMUsage,
    create_error_usage,
    extract_usage_from_response,
)
from studybuddy.models.request import (
    Action,
    Clause,
    Correction,
    NormalizedText,
    RawRequest,
    TaskPlan,
)
from studybuddy.models.results import (
    AgentResult,
    Artifact,
    CardDraft,
    DeletionReceipt,
    FunContent,
    NoteDraft,
    OrchestratorResult,
    ScheduleItemDraft,
)

__all__ = [
    # Request understanding
    "RawRequest",
    "Correction",
    "NormalizedText",
    "Clause",
    "Action",
    "TaskPlan",
    # Artifacts
    "Artifact",
    "NoteDraft",
    "CardDraft",
    "ScheduleItemDraft",
    "FunContent",
    "DeletionReceipt",
    # Results
    "AgentResult",
    "OrchestratorResult",
    # LLM usage
    "LLMUsage",
    "extract_usage_from_response",
    "create_error_usage",
]
