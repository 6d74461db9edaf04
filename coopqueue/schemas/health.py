"""Health check body for the vote queue service."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    environment: Literal["dev", "prod"]
    database: Literal["connected", "disconnected"]
    registration: Literal["open", "invite_only"] = Field(
        description="'invite_only' when REGISTRATION_KEY is set",
    )
    session_algorithm: str = Field(description="HMAC algorithm signing session tokens")
