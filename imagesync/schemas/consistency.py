"""
Schemas for the consistency check endpoint.
"""

from pydantic import BaseModel, Field

DEFAULT_SOURCE = "web-app"


class ConsistencyCheckRequest(BaseModel):
    """Optional body of a consistency check request."""

    source: str = Field(
        default=DEFAULT_SOURCE,
        min_length=1,
        max_length=255,
        description="Label describing what triggered the audit",
    )
