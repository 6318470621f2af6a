"""
Pydantic response models for the catalog API.

Catalog payloads themselves are returned as plain JSON (the cached
projections); these models cover the service's own envelopes.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class InvalidationResult(BaseModel):
    """One entry of the bulk invalidation summary."""

    type: Literal["keys", "pattern"] = Field(
        ..., description="Whether this entry covers explicit keys or a pattern"
    )
    count: Optional[int] = Field(
        None,
        ge=0,
        description="Keys requested (type=keys) or keys deleted (type=pattern)",
    )
    pattern: Optional[str] = Field(None, description="Pattern swept")


class CacheInvalidateResponse(BaseModel):
    """Response of the admin bulk invalidation endpoint."""

    success: bool = True
    results: List[InvalidationResult] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "results": [
                    {"type": "keys", "count": 2},
                    {"type": "pattern", "pattern": "bouquets:list*", "count": 5},
                ],
            }
        }
    )


class ErrorResponse(BaseModel):
    """Standardized error body."""

    error: str = Field(..., min_length=1, description="Human-readable error message")


class HealthCheckResponse(BaseModel):
    """
    Health check response.

    Used to verify the server is running and components are healthy.
    """

    status: str = Field(
        ...,
        description="Overall health status (healthy, degraded, unhealthy)",
    )
    version: str = Field(..., description="Server version")
    components: dict[str, str] = Field(
        ...,
        description="Health status of individual components",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "components": {"server": "healthy", "cache": "healthy"},
            }
        }
    )
