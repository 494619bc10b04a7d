"""
Base models for request understanding and orchestration data.

Usage:
    class Clause(StrictModel):
        text: str

    class AgentResult(ResultModel):
        success: bool
"""

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """
    Base model for values built inside the core (actions, clauses, corrections).

    Features:
        - extra="forbid": Unknown fields raise ValidationError
        - validate_default=True: Validates default values
        - str_strip_whitespace=True: Trims whitespace from strings
    """

    model_config = ConfigDict(
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )


class ResultModel(BaseModel):
    """
    Base model for results handed back to callers.

    Features:
        - extra="ignore": Collaborator payloads may carry extra keys
        - validate_default=True: Validates default values
        - from_attributes=True: Allows building from plain objects
    """

    model_config = ConfigDict(
        extra="ignore",
        validate_default=True,
        from_attributes=True,
    )
