"""Agent that assembles a Bedrock inline agent on demand.

A Converse call with the ``inline_agent_creation`` tool lets the model pick the
action groups and knowledge bases a request needs. When the tool is used, an
inline agent is created with exactly that selection and its streamed completion
becomes the answer; otherwise the model's own text is returned.
"""

import logging
import re
from collections.abc import Mapping
from typing import Any

from pydantic import Field

from .base import Agent, AgentOptions
from .codec import Decoder, Encoder, PayloadCodec
from .contracts import AgentRequest

INLINE_AGENT_TOOL_NAME = "inline_agent_creation"
_PLACEHOLDER = re.compile(r"\{(\w+)\}")

DEFAULT_SYSTEM_PROMPT = """You are a {name}.
{description}

You orchestrate specialized capabilities. For each user request decide which of
the action groups and knowledge bases below are needed, then call the
{tool_name} tool with your selection, a description instructing the new agent
how to solve the request, and the user's original request. If none of them are
needed, answer directly.

Available action groups:
{action_groups}

Available knowledge bases:
{knowledge_bases}"""


def _inline_agent_tool() -> dict[str, Any]:
    return {
        "toolSpec": {
            "name": INLINE_AGENT_TOOL_NAME,
            "description": "Create an inline agent with a list of action groups and knowledge bases.",
            "inputSchema": {
                "json": {
                    "type": "object",
                    "properties": {
                        "action_group_names": {
                            "type": "array",
                            "items": {"type": "string"},
                            "description": "Names of the action groups needed to solve the request.",
                        },
                        "knowledge_bases": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "knowledgeBaseId": {"type": "string"},
                                    "description": {"type": "string"},
                                },
                            },
                            "description": "Knowledge bases needed to solve the request.",
                        },
                        "description": {
                            "type": "string",
                            "description": "Instruction for the inline agent on how to solve the request.",
                        },
                        "user_request": {
                            "type": "string",
                            "description": "The initial user request.",
                        },
                    },
                    "required": ["action_group_names", "description", "user_request"],
                }
            },
        }
    }


class BedrockInlineAgentOptions(AgentOptions):
    model_id: str = "anthropic.claude-3-haiku-20240307-v1:0"
    foundation_model: str = "anthropic.claude-3-haiku-20240307-v1:0"
    inference_config: dict[str, Any] = Field(
        default_factory=lambda: {"maxTokens": 1000, "temperature": 0.0, "topP": 0.9}
    )
    action_groups: list[dict[str, Any]] = Field(default_factory=list)
    knowledge_bases: list[dict[str, Any]] = Field(default_factory=list)
    custom_system_prompt: str | None = None
    enable_trace: bool = False


class BedrockInlineAgent(Agent):
    """Routes a request through Converse tool-use into an inline Bedrock agent."""

    agent_type = "inline"
    accepted_payload_types = (str,)

    def __init__(
        self,
        options: BedrockInlineAgentOptions,
        *,
        client: Any = None,
        agent_client: Any = None,
        encoder: Encoder | None = None,
        decoder: Decoder | None = None,
        codec: PayloadCodec | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(options, encoder=encoder, decoder=decoder, codec=codec, logger=logger)
        self.options: BedrockInlineAgentOptions = options
        self.client = client or self.create_client("bedrock-runtime")
        self.agent_client = agent_client or self.create_client("bedrock-agent-runtime")
        self.tool_config = {"tools": [_inline_agent_tool()]}

    def system_prompt(self) -> str:
        template = self.options.custom_system_prompt or DEFAULT_SYSTEM_PROMPT
        action_groups = "\n".join(
            f"- {g.get('actionGroupName')}: {g.get('description', '')}" for g in self.options.action_groups
        )
        knowledge_bases = "\n".join(
            f"- {kb.get('knowledgeBaseId')}: {kb.get('description', '')}" for kb in self.options.knowledge_bases
        )
        values = {
            "name": self.name,
            "description": self.description,
            "tool_name": INLINE_AGENT_TOOL_NAME,
            "action_groups": action_groups or "(none)",
            "knowledge_bases": knowledge_bases or "(none)",
        }
        # Only known placeholders are substituted; other braces stay literal.
        return _PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), template)

    def _invoke(self, payload: Any, request: AgentRequest) -> Mapping[str, Any]:
        response = self.client.converse(
            modelId=self.options.model_id,
            messages=self._converse_messages(request, payload),
            system=[{"text": self.system_prompt()}],
            inferenceConfig=self.options.inference_config,
            toolConfig=self.tool_config,
        )
        content = response.get("output", {}).get("message", {}).get("content", [])

        for block in content:
            tool_use = block.get("toolUse")
            if tool_use and tool_use.get("name") == INLINE_AGENT_TOOL_NAME:
                return self._run_inline_agent(tool_use.get("input") or {}, request)

        texts = [block["text"] for block in content if "text" in block]
        raw: dict[str, Any] = {"source": "converse", "stop_reason": response.get("stopReason")}
        if texts:
            raw["text"] = "".join(texts)
        return raw

    def _converse_messages(self, request: AgentRequest, payload: str) -> list[dict[str, Any]]:
        """Converse needs non-blank turns starting with the user; stored history may violate both."""
        history = [m for m in request.chat_history if m.content.strip()]
        while history and history[0].role != "user":
            history.pop(0)
        messages = [{"role": m.role, "content": [{"text": m.content}]} for m in history]
        messages.append({"role": "user", "content": [{"text": payload}]})
        return messages

    def _select_action_groups(self, names: list[str]) -> list[dict[str, Any]]:
        selected = []
        for group in self.options.action_groups:
            if group.get("actionGroupName") in names:
                selected.append({k: v for k, v in group.items() if k != "description"})
        return selected

    def _select_knowledge_bases(self, requested: list[Any]) -> list[dict[str, Any]]:
        ids = {kb.get("knowledgeBaseId") for kb in requested if isinstance(kb, Mapping)}
        return [kb for kb in self.options.knowledge_bases if kb.get("knowledgeBaseId") in ids]

    def _run_inline_agent(self, tool_input: Mapping[str, Any], request: AgentRequest) -> dict[str, Any]:
        action_groups = self._select_action_groups(tool_input.get("action_group_names") or [])
        knowledge_bases = self._select_knowledge_bases(tool_input.get("knowledge_bases") or [])
        self.logger.info(
            "agent %s: creating inline agent with action_groups=%s knowledge_bases=%s",
            self.id,
            [g.get("actionGroupName") for g in action_groups],
            [kb.get("knowledgeBaseId") for kb in knowledge_bases],
        )
        response = self.agent_client.invoke_inline_agent(
            actionGroups=action_groups,
            knowledgeBases=knowledge_bases,
            enableTrace=self.options.enable_trace,
            endSession=False,
            foundationModel=self.options.foundation_model,
            inputText=tool_input.get("user_request") or request.text,
            instruction=tool_input.get("description", ""),
            sessionId=request.session_id,
        )

        chunks: list[bytes] = []
        for event in response.get("completion", []):
            if "chunk" in event and "bytes" in event["chunk"]:
                chunks.append(event["chunk"]["bytes"])
            if "trace" in event and self.options.enable_trace:
                self.logger.info("agent %s inline trace: %s", self.id, event["trace"])
        return {
            "text": b"".join(chunks).decode("utf-8"),
            "source": "inline_agent",
            "action_groups": [g.get("actionGroupName") for g in action_groups],
            "knowledge_bases": [kb.get("knowledgeBaseId") for kb in knowledge_bases],
        }
