"""
Content generation: collaborator protocols and the LLM-backed generator.
"""

from studybuddy.services.generation.llm_generator import LLMContentGenerator
from studybuddy.services.generation.protocols import ContentGenerator, DeletionSink

__all__ = [
    "ContentGenerator",
    "DeletionSink",
    "LLMContentGenerator",
]
