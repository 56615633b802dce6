"""
Output models for API responses using Pydantic.
"""

from typing import Annotated

from pydantic import BaseModel, Field


class SuccessOutput(BaseModel):
    """Response body for operations that only report success."""

    success: Annotated[bool, Field(
        default=True,
        description='Whether the operation succeeded'
    )] = True


class MessageOutput(BaseModel):
    """Response body carrying an informational message."""

    message: Annotated[str, Field(
        description='Human readable outcome',
        examples=['Database initialization check complete.']
    )]


class ErrorOutput(BaseModel):
    """Response body for failed requests."""

    error: Annotated[str, Field(
        description='Error message',
        examples=['Parked order not found']
    )]
