"""LLM client package."""

from studybuddy.services.llm.client import (
    LLMClient,
    build_messages,
    get_llm_client,
    reset_llm_client,
)

__all__ = [
    "LLMClient",
    "build_messages",
    "get_llm_client",
    "reset_llm_client",
]
