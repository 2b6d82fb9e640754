"""Pydantic request schemas for the agents API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class InvokeRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str = Field(min_length=1, max_length=20000)
    user_id: str = Field(min_length=1)
    session_id: str | None = None
    extra: dict[str, Any] = Field(default_factory=dict)
