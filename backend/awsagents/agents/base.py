"""Agent base class shared by the AWS-backed agents.

An agent encodes the request, validates the payload, hands it to the remote
service in a worker thread and decodes the raw response. Encode and decode
errors surface unchanged, service errors as AgentInvocationError. No retries.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..config import settings
from ..errors import AgentInvocationError, ConfigError
from ..utils import agent_id_from_name
from .codec import PAYLOAD_TYPES, Decoder, Encoder, PassthroughCodec, PayloadCodec, build_codec, validate_payload
from .contracts import AgentIdentity, AgentRequest, AgentResponse

log = logging.getLogger(__name__)


class AgentOptions(BaseModel):
    """Construction-time settings common to every agent."""

    model_config = ConfigDict(extra="forbid", protected_namespaces=())

    name: str = Field(min_length=1)
    description: str = ""
    region: str | None = None
    save_chat: bool = True

    @field_validator("region")
    @classmethod
    def normalize_region(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip().lower()
        return v or None


class Agent:
    """Base for agents that forward requests to one AWS service."""

    agent_type = "base"
    accepted_payload_types: tuple[type, ...] = PAYLOAD_TYPES

    def __init__(
        self,
        options: AgentOptions,
        *,
        encoder: Encoder | None = None,
        decoder: Decoder | None = None,
        codec: PayloadCodec | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.options = options
        self.id = agent_id_from_name(options.name)
        if not self.id:
            raise ConfigError(f"agent name {options.name!r} does not yield a usable id")
        self.name = options.name
        self.description = options.description
        self.save_chat = options.save_chat
        if codec is not None and (encoder is not None or decoder is not None):
            raise ConfigError("pass either codec or an encoder/decoder pair, not both")
        self.codec = codec or build_codec(encoder, decoder, default=self.default_codec())
        self.logger = logger or log

    @property
    def identity(self) -> AgentIdentity:
        return AgentIdentity(name=self.name, description=self.description)

    @property
    def region(self) -> str:
        return self.options.region or settings.aws_region

    def default_codec(self) -> PayloadCodec:
        return PassthroughCodec()

    def create_client(self, service_name: str) -> Any:
        return boto3.client(service_name, region_name=self.region)

    async def process_request(self, request: AgentRequest) -> AgentResponse:
        payload = self.codec.encode(self.identity, request.text, request.context())
        validate_payload(payload, accepted=self.accepted_payload_types)
        raw = await asyncio.to_thread(self._call_service, payload, request)
        return self.codec.decode(raw)

    def _call_service(self, payload: Any, request: AgentRequest) -> Mapping[str, Any]:
        try:
            return self._invoke(payload, request)
        except (ClientError, BotoCoreError) as exc:
            self.logger.error("agent %s: %s call failed: %s", self.id, self.agent_type, exc)
            raise AgentInvocationError(self.id, str(exc)) from exc

    def _invoke(self, payload: Any, request: AgentRequest) -> Mapping[str, Any]:
        """Perform the blocking service call and return its raw response."""
        raise NotImplementedError

    def describe(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "type": self.agent_type,
        }
