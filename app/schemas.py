from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class ChatRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    message: StrictStr = Field(default="", description="User's chat message")


class ChatResponse(BaseModel):
    response: str
    response_time: str = Field(..., description="Upstream latency, e.g. '0.4821 seconds'")


class HealthResponse(BaseModel):
    status: str = "healthy"
    timestamp: str
    version: str


class ErrorResponse(BaseModel):
    error: str
