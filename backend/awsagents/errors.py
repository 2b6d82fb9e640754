"""Exception types raised by agents, the codec layer and configuration."""


class AgentError(Exception):
    """Base class for every error surfaced by this package."""


class ConfigError(AgentError):
    """Raised when agent options or the agents config file are invalid."""


class EncodingError(AgentError):
    """Raised when an encoder produces a payload the destination cannot accept."""


class DecodingError(AgentError):
    """Raised when a service response lacks required fields or has the wrong shape."""


class AgentInvocationError(AgentError):
    """Raised when the AWS service call itself fails."""

    def __init__(self, agent_id: str, message: str) -> None:
        super().__init__(f"{agent_id}: {message}")
        self.agent_id = agent_id


class AgentNotFoundError(AgentError):
    """Raised when a registry lookup misses."""
