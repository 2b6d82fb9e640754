"""Agents adapting AWS managed services to the orchestrator's request/response shape."""

from .base import Agent, AgentOptions
from .bedrock_flows import BedrockFlowsAgent, BedrockFlowsAgentOptions
from .bedrock_inline import BedrockInlineAgent, BedrockInlineAgentOptions
from .codec import FunctionCodec, PassthroughCodec, PayloadCodec, build_codec, validate_payload
from .lex_bot import LexBotAgent, LexBotAgentOptions
from .contracts import AgentContext, AgentIdentity, AgentRequest, AgentResponse, ChatMessage

__all__ = [
    "Agent",
    "AgentContext",
    "AgentIdentity",
    "AgentOptions",
    "AgentRequest",
    "AgentResponse",
    "BedrockFlowsAgent",
    "BedrockFlowsAgentOptions",
    "BedrockInlineAgent",
    "BedrockInlineAgentOptions",
    "ChatMessage",
    "FunctionCodec",
    "LexBotAgent",
    "LexBotAgentOptions",
    "PassthroughCodec",
    "PayloadCodec",
    "build_codec",
    "validate_payload",
]
