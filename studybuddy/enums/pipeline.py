"""
Pipeline-related enums.

Defines enums for LLM cost attribution and per-operation model selection.
"""

from enum import Enum


class PipelineName(str, Enum):
    """
    Pipeline names for cost tracking and attribution.

    Used by LLMClient for cost attribution in usage records.
    """

    REQUEST_ORCHESTRATION = "REQUEST_ORCHESTRATION"


class PipelineOperation(str, Enum):
    """
    Operation types for LLM calls.

    Used for both:
    1. Model selection: LLMClient uses this to pick the right model for each task
    2. Cost tracking: Operations are logged for fine-grained cost analysis
    """

    NOTE_GENERATION = "NOTE_GENERATION"
    FLASHCARD_GENERATION = "FLASHCARD_GENERATION"
    SCHEDULE_GENERATION = "SCHEDULE_GENERATION"
    FUN_CONTENT_GENERATION = "FUN_CONTENT_GENERATION"
