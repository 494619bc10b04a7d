"""
Exception hierarchy for the study assistant core.

Every domain error derives from ServiceError and carries an error code
for categorization plus optional details for debugging.

Only InvalidQualityError is meant to reach callers: the orchestrator
converts agent-level errors into failed AgentResults instead of raising.

Usage:
    from studybuddy.exceptions import AgentExecutionError, ServiceError

    raise AgentExecutionError("Flashcard generation failed", details={"topic": "react"})
"""

from typing import Optional


class ServiceError(Exception):
    """
    Base exception for service errors.

    Provides consistent error handling with:
    - Error code for categorization
    - Optional details for debugging

    Example:
        raise ServiceError("Generator unreachable", error_code="generator_down")
    """

    error_code: str = "service_error"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}


class AgentUnavailableError(ServiceError):
    """
    No agent is registered for a (verb, target) capability.
    """

    error_code = "AGENT_UNAVAILABLE"


class AgentExecutionError(ServiceError):
    """
    An agent's content generation or deletion call failed.
    """

    error_code = "AGENT_EXECUTION_ERROR"


class LLMError(ServiceError):
    """
    LLM provider error.

    Raised when LLM API calls fail or return output that cannot be parsed.
    """

    error_code = "llm_error"


class InvalidQualityError(ServiceError, ValueError):
    """
    A review grade outside the supported scale was passed to the scheduler.

    This is a caller contract violation, so it propagates.
    """

    error_code = "invalid_quality"
