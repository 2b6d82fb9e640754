"""Bedrock Flows agent tests: input document encoding and output stream collection."""

import asyncio
import logging

import pytest

from awsagents.agents import AgentRequest, AgentResponse, BedrockFlowsAgent, BedrockFlowsAgentOptions
from awsagents.errors import ConfigError, DecodingError, EncodingError


def _options(name="tech-flow-agent", **overrides):
    data = {
        "name": name,
        "description": "Answers tech questions",
        "flow_identifier": "FLOW1",
        "flow_alias_identifier": "ALIAS1",
        "region": " US-WEST-2 ",
    }
    data.update(overrides)
    return BedrockFlowsAgentOptions(**data)


def _stream(document):
    return {
        "responseStream": [
            {"flowTraceEvent": {"trace": {"nodeInputTrace": {"nodeName": "FlowInputNode"}}}},
            {"flowOutputEvent": {"nodeName": "FlowOutputNode", "content": {"document": document}}},
            {"flowCompletionEvent": {"completionReason": "SUCCESS"}},
        ]
    }


def _question_encoder(identity, text, context):
    if identity.name == "tech-flow-agent":
        return {"question": text}
    return text


def _answer_decoder(raw):
    document = raw["document"]
    return AgentResponse(text=document["answer"], metadata={"sources": document.get("sources", [])})


def test_default_codec_sends_text_and_reads_document(fake_client):
    client = fake_client(invoke_flow=_stream("Restart the router."))
    agent = BedrockFlowsAgent(_options(), client=client)

    response = asyncio.run(agent.process_request(AgentRequest(text="book a flight", user_id="u", session_id="s")))

    assert response.text == "Restart the router."
    assert response.metadata == {"nodeName": "FlowOutputNode", "completionReason": "SUCCESS"}
    _, kwargs = client.calls[0]
    assert kwargs == {
        "flowIdentifier": "FLOW1",
        "flowAliasIdentifier": "ALIAS1",
        "inputs": [{"content": {"document": "book a flight"}, "nodeName": "FlowInputNode", "nodeOutputName": "document"}],
        "enableTrace": False,
    }
    assert agent.region == "us-west-2"


def test_custom_codec_sends_object_for_tech_flow_agent(fake_client):
    client = fake_client(invoke_flow=_stream({"answer": "Check the cable.", "sources": ["kb-1"]}))
    agent = BedrockFlowsAgent(_options(), client=client, encoder=_question_encoder, decoder=_answer_decoder)

    response = asyncio.run(agent.process_request(AgentRequest(text="no internet", user_id="u", session_id="s")))

    assert client.calls[0][1]["inputs"][0]["content"]["document"] == {"question": "no internet"}
    assert response.text == "Check the cable."
    assert response.metadata == {"sources": ["kb-1"]}


def test_custom_encoder_passes_text_for_other_agents(fake_client):
    client = fake_client(invoke_flow=_stream({"answer": "ok"}))
    agent = BedrockFlowsAgent(
        _options(name="billing-flow-agent"), client=client, encoder=_question_encoder, decoder=_answer_decoder
    )
    asyncio.run(agent.process_request(AgentRequest(text="invoice", user_id="u", session_id="s")))
    assert client.calls[0][1]["inputs"][0]["content"]["document"] == "invoice"


def test_encoder_returning_function_raises_before_dispatch(fake_client):
    client = fake_client(invoke_flow=_stream("x"))
    agent = BedrockFlowsAgent(
        _options(), client=client, encoder=lambda identity, text, ctx: print, decoder=_answer_decoder
    )
    with pytest.raises(EncodingError):
        asyncio.run(agent.process_request(AgentRequest(text="hi", user_id="u", session_id="s")))
    assert client.calls == []


def test_stream_without_output_raises_decoding_error(fake_client):
    client = fake_client(invoke_flow={"responseStream": [{"flowCompletionEvent": {"completionReason": "SUCCESS"}}]})
    agent = BedrockFlowsAgent(_options(), client=client)
    with pytest.raises(DecodingError):
        asyncio.run(agent.process_request(AgentRequest(text="hi", user_id="u", session_id="s")))


def test_only_encoder_supplied_is_config_error(fake_client):
    with pytest.raises(ConfigError):
        BedrockFlowsAgent(_options(), client=fake_client(), encoder=_question_encoder)


def test_trace_events_logged_when_enabled(fake_client, caplog):
    client = fake_client(invoke_flow=_stream("done"))
    agent = BedrockFlowsAgent(_options(enable_trace=True), client=client, logger=logging.getLogger("flows-test"))
    with caplog.at_level(logging.INFO, logger="flows-test"):
        asyncio.run(agent.process_request(AgentRequest(text="hi", user_id="u", session_id="s")))
    assert client.calls[0][1]["enableTrace"] is True
    assert any("flow trace" in record.getMessage() for record in caplog.records)
