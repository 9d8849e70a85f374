"""Pydantic schemas for health check responses."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for the health check endpoint."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] | None = Field(
        default=None,
        description="Database (role and profile store) connectivity when check is performed",
    )
    auth_verify_mode: Literal["local", "remote"] = Field(
        description="How bearer tokens are verified: local JWT check or the platform auth service",
    )
