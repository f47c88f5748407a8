"""Error body returned for domain exceptions."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """4xx body: a message for people and a stable code for clients."""

    detail: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code, e.g. FORBIDDEN")
    issues: list[str] | None = Field(
        None, description="Individual problems found in a rejected snapshot file"
    )
