"""Shared test fixtures and configuration for relay tests."""
import itertools
import json
import random

import pytest
from fastapi.testclient import TestClient

from chatguard.core.config import Settings
from chatguard.core.state import ChatState
from chatguard.main import create_app


class FakeConnection:
    """In-memory stand-in for a transport session.

    Records every payload handed to `send` so tests can inspect what the
    broadcaster delivered.
    """

    def __init__(self, connection_id, open=True, fail_on_send=False):
        self.id = connection_id
        self.open = open
        self.fail_on_send = fail_on_send
        self.sent = []

    def is_open(self):
        return self.open

    def send(self, payload):
        if self.fail_on_send:
            raise ConnectionError("peer went away")
        self.sent.append(payload)

    def close(self):
        self.open = False

    def envelopes(self):
        return [json.loads(payload) for payload in self.sent]

    def __repr__(self):
        return f"FakeConnection({self.id!r})"


@pytest.fixture
def make_connection():
    counter = itertools.count(1)

    def factory(**kwargs):
        return FakeConnection(f"conn-{next(counter)}", **kwargs)

    return factory


@pytest.fixture
def chat_state():
    """Relay state with seeded randomness and predictable connection ids."""
    counter = itertools.count(1)
    return ChatState(
        Settings(),
        rng=random.Random(1234),
        id_factory=lambda: f"ws-{next(counter)}",
    )


@pytest.fixture
def registry(chat_state):
    return chat_state.registry


@pytest.fixture
def room_manager(chat_state):
    return chat_state.room_manager


@pytest.fixture
def router(chat_state):
    return chat_state.router


@pytest.fixture
def api_client(chat_state):
    """TestClient bound to a fresh app.

    Used as a context manager so every WebSocket session shares one event
    loop, which is what the relay assumes in production.
    """
    app = create_app(chat_state=chat_state)
    with TestClient(app) as client:
        yield client
