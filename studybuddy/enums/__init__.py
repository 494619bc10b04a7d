"""
Centralized enum definitions for the package.

All enums are organized by domain:
- request.py: Action verbs, target domains, correction rules, request stages
- learning.py: Spaced repetition review grades
- pipeline.py: LLM pipeline names and operations

Usage:
    from studybuddy.enums import ActionVerb, TargetDomain, ReviewQuality

    # Or import from specific module
    from studybuddy.enums.request import CorrectionRule
"""

from studybuddy.enums.learning import PASSING_QUALITY, ReviewQuality
from studybuddy.enums.pipeline import PipelineName, PipelineOperation
from studybuddy.enums.request import (
    CONCRETE_DOMAINS,
    ActionVerb,
    CorrectionRule,
    FunKind,
    RequestStage,
    TargetDomain,
)

__all__ = [
    # Request understanding
    "ActionVerb",
    "CONCRETE_DOMAINS",
    "CorrectionRule",
    "FunKind",
    "RequestStage",
    "TargetDomain",
    # Learning
    "PASSING_QUALITY",
    "ReviewQuality",
    # Pipeline
    "PipelineName",
    "PipelineOperation",
]
