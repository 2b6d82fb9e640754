"""Agent registry and the JSON agents config file loader."""

import json
import logging
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .agents import (
    Agent,
    BedrockFlowsAgent,
    BedrockFlowsAgentOptions,
    BedrockInlineAgent,
    BedrockInlineAgentOptions,
    LexBotAgent,
    LexBotAgentOptions,
)
from .errors import AgentNotFoundError, ConfigError

logger = logging.getLogger(__name__)


class LexBotEntry(LexBotAgentOptions):
    type: Literal["lex"]


class BedrockFlowsEntry(BedrockFlowsAgentOptions):
    type: Literal["flow"]


class BedrockInlineEntry(BedrockInlineAgentOptions):
    type: Literal["inline"]


AgentEntry = Annotated[LexBotEntry | BedrockFlowsEntry | BedrockInlineEntry, Field(discriminator="type")]


class AgentsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    agents: list[AgentEntry] = Field(default_factory=list)


class AgentRegistry:
    """In-memory lookup of configured agents keyed by agent id."""

    def __init__(self) -> None:
        self._agents: dict[str, Agent] = {}

    def add(self, agent: Agent) -> None:
        if agent.id in self._agents:
            raise ConfigError(f"Duplicate agent id: {agent.id}")
        self._agents[agent.id] = agent

    def get(self, agent_id: str) -> Agent:
        agent = self._agents.get(agent_id)
        if agent is None:
            raise AgentNotFoundError(f"Agent {agent_id} not registered")
        return agent

    def agents(self) -> list[Agent]:
        return list(self._agents.values())

    def __len__(self) -> int:
        return len(self._agents)


def build_agent(entry: LexBotEntry | BedrockFlowsEntry | BedrockInlineEntry) -> Agent:
    data = entry.model_dump(exclude={"type"})
    if isinstance(entry, LexBotEntry):
        return LexBotAgent(LexBotAgentOptions(**data))
    if isinstance(entry, BedrockFlowsEntry):
        return BedrockFlowsAgent(BedrockFlowsAgentOptions(**data))
    return BedrockInlineAgent(BedrockInlineAgentOptions(**data))


def load_agents_config(config_path: str | Path) -> AgentsConfig:
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    try:
        return AgentsConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config schema in {path}: {e}") from e


def load_registry(config_path: str | Path) -> AgentRegistry:
    config = load_agents_config(config_path)
    registry = AgentRegistry()
    for entry in config.agents:
        registry.add(build_agent(entry))
    logger.info("Loaded %d agents from %s", len(registry), config_path)
    return registry
