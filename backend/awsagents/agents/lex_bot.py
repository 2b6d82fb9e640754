"""Agent backed by an Amazon Lex V2 bot through the lexv2-runtime RecognizeText API."""

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import Field

from ..errors import DecodingError
from .base import Agent, AgentOptions
from .codec import Decoder, Encoder, PayloadCodec
from .contracts import AgentContext, AgentIdentity, AgentRequest, AgentResponse


class LexBotAgentOptions(AgentOptions):
    bot_id: str = Field(min_length=1)
    bot_alias_id: str = Field(min_length=1)
    locale_id: str = Field(min_length=1)


class LexMessagesCodec(PayloadCodec):
    """Sends the utterance as-is and joins the bot's message contents."""

    def encode(self, identity: AgentIdentity, text: str, context: AgentContext) -> Any:
        return text

    def decode(self, raw: Mapping[str, Any]) -> AgentResponse:
        messages = raw.get("messages") if isinstance(raw, Mapping) else None
        if not isinstance(messages, list):
            raise DecodingError("Lex response is missing the 'messages' list")
        parts = [m["content"] for m in messages if isinstance(m, Mapping) and isinstance(m.get("content"), str)]
        if not parts:
            raise DecodingError("Lex response carries no textual message content")

        intent = (raw.get("sessionState") or {}).get("intent") or {}
        return AgentResponse(
            text=" ".join(parts),
            metadata={
                "intent": intent.get("name"),
                "intent_state": intent.get("state"),
                "session_id": raw.get("sessionId"),
            },
        )


class LexBotAgent(Agent):
    """Forwards utterances to a Lex bot alias and returns its reply messages."""

    agent_type = "lex"
    accepted_payload_types = (str,)

    def __init__(
        self,
        options: LexBotAgentOptions,
        *,
        client: Any = None,
        encoder: Encoder | None = None,
        decoder: Decoder | None = None,
        codec: PayloadCodec | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(options, encoder=encoder, decoder=decoder, codec=codec, logger=logger)
        self.options: LexBotAgentOptions = options
        self.client = client or self.create_client("lexv2-runtime")

    def default_codec(self) -> PayloadCodec:
        return LexMessagesCodec()

    def _invoke(self, payload: Any, request: AgentRequest) -> Mapping[str, Any]:
        self.logger.debug("agent %s: recognize_text bot=%s session=%s", self.id, self.options.bot_id, request.session_id)
        return self.client.recognize_text(
            botId=self.options.bot_id,
            botAliasId=self.options.bot_alias_id,
            localeId=self.options.locale_id,
            sessionId=request.session_id,
            text=payload,
            sessionState={},
        )
