"""Shared pytest fixtures: reset chat storage and provide fake AWS clients."""

import pytest
from sqlmodel import SQLModel

from awsagents import models  # noqa: F401
from awsagents.db import engine


@pytest.fixture(autouse=True)
def reset_database():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    yield


class FakeClient:
    """Records boto3-style keyword calls and replays canned responses."""

    def __init__(self, **responses):
        self.responses = responses
        self.calls: list[tuple[str, dict]] = []

    def __getattr__(self, operation):
        if operation not in self.responses:
            raise AttributeError(operation)

        def call(**kwargs):
            self.calls.append((operation, kwargs))
            response = self.responses[operation]
            if isinstance(response, Exception):
                raise response
            return response(**kwargs) if callable(response) else response

        return call


@pytest.fixture
def fake_client():
    return FakeClient
