"""Agent that runs an Amazon Bedrock Flow through bedrock-agent-runtime InvokeFlow.

The encoded payload becomes the flow input document, so a custom encoder may
send any JSON value the flow's input node declares (string, number, boolean,
object or array). The flow's output document is read back by the decoder.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import Field

from .base import Agent, AgentOptions
from .codec import Decoder, Encoder, PassthroughCodec, PayloadCodec
from .contracts import AgentRequest


class BedrockFlowsAgentOptions(AgentOptions):
    flow_identifier: str = Field(min_length=1)
    flow_alias_identifier: str = Field(min_length=1)
    enable_trace: bool = False
    input_node_name: str = "FlowInputNode"
    input_node_output_name: str = "document"


class BedrockFlowsAgent(Agent):
    """Invokes one flow alias per request and collects its output event."""

    agent_type = "flow"

    def __init__(
        self,
        options: BedrockFlowsAgentOptions,
        *,
        client: Any = None,
        encoder: Encoder | None = None,
        decoder: Decoder | None = None,
        codec: PayloadCodec | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        super().__init__(options, encoder=encoder, decoder=decoder, codec=codec, logger=logger)
        self.options: BedrockFlowsAgentOptions = options
        self.client = client or self.create_client("bedrock-agent-runtime")

    def default_codec(self) -> PayloadCodec:
        return PassthroughCodec(text_field="document")

    def _invoke(self, payload: Any, request: AgentRequest) -> Mapping[str, Any]:
        response = self.client.invoke_flow(
            flowIdentifier=self.options.flow_identifier,
            flowAliasIdentifier=self.options.flow_alias_identifier,
            inputs=[
                {
                    "content": {"document": payload},
                    "nodeName": self.options.input_node_name,
                    "nodeOutputName": self.options.input_node_output_name,
                }
            ],
            enableTrace=self.options.enable_trace,
        )
        return self._collect_stream(response.get("responseStream", []))

    def _collect_stream(self, stream: Any) -> dict[str, Any]:
        raw: dict[str, Any] = {}
        for event in stream:
            if "flowOutputEvent" in event:
                output = event["flowOutputEvent"]
                content = output.get("content") or {}
                if "document" in content:
                    raw["document"] = content["document"]
                if "nodeName" in output:
                    raw["nodeName"] = output["nodeName"]
            elif "flowCompletionEvent" in event:
                raw["completionReason"] = event["flowCompletionEvent"].get("completionReason")
            elif "flowTraceEvent" in event and self.options.enable_trace:
                self.logger.info("agent %s flow trace: %s", self.id, json.dumps(event["flowTraceEvent"], default=str))
        return raw
