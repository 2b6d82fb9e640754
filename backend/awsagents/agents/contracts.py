"""Shared data contracts between the orchestrator and AWS-backed agents."""

import copy
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


@dataclass(frozen=True)
class ChatMessage:
    """One prior turn of the conversation."""

    role: str
    content: str


@dataclass(frozen=True)
class AgentIdentity:
    """Name and description an encoder can branch on."""

    name: str
    description: str


@dataclass(frozen=True)
class AgentContext:
    """Read-only view of the request handed to encoders."""

    user_id: str
    session_id: str
    chat_history: tuple[ChatMessage, ...] = ()
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class AgentRequest:
    """Canonical request the orchestrator routes to an agent."""

    text: str
    user_id: str
    session_id: str
    chat_history: tuple[ChatMessage, ...] = ()
    extra: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "chat_history", tuple(self.chat_history))
        object.__setattr__(self, "extra", MappingProxyType(copy.deepcopy(dict(self.extra))))

    def context(self) -> AgentContext:
        """Build the encoder context; nested values in ``extra`` are copies, so edits never reach the request."""
        return AgentContext(
            user_id=self.user_id,
            session_id=self.session_id,
            chat_history=self.chat_history,
            extra=MappingProxyType(copy.deepcopy(dict(self.extra))),
        )


@dataclass
class AgentResponse:
    """Normalized agent output returned to the orchestrator."""

    text: str
    metadata: dict[str, Any] = field(default_factory=dict)
