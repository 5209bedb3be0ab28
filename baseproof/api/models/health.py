"""Health check response models."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Always "ok" while the process serves requests.
        timestamp: ISO 8601 UTC time of the check.
    """

    status: str
    timestamp: str
