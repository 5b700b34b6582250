"""Pytest configuration and shared fixtures for screenflow tests."""

import pytest

from screenflow import DiagramBuilder, Parser, parse_screens


@pytest.fixture
def parser():
    """Fresh Parser instance."""
    return Parser()


@pytest.fixture
def login_input():
    """Two screens joined by an action, a condition and a plain transition."""
    return """
    [Login]
    // P: under 200ms
    // S: TLS only
    T Welcome back
    E Email
    E Password
    B Forgot password
    --
    A Sign in => Home
    ={locked out}=> Lockout
    => Help

    [Home]
    T Dashboard
    A Log out => Login
    """


@pytest.fixture
def linear_input():
    """Simple linear flow."""
    return """
    [A]
    => B
    [B]
    => C
    [C]
    """


@pytest.fixture
def cyclic_input():
    """Flow with a cycle."""
    return """
    [A]
    => B
    [B]
    => C
    [C]
    => A
    """


@pytest.fixture
def duplicate_input():
    """Two screens share a name."""
    return """
    [Start]
    => Shared
    [Shared]
    T first
    [Shared]
    T second
    """


@pytest.fixture
def login_graph(login_input):
    """Parsed login flow."""
    return parse_screens(login_input)


class RecordingBuilder(DiagramBuilder):
    """Builder that records every call in order."""

    def __init__(self):
        self.calls = []
        self.started_with = None

    async def start(self, graph):
        self.started_with = graph
        self.calls.append(("start",))

    async def place_screen(self, screen):
        handle = f"node-{len([c for c in self.calls if c[0] == 'place'])}"
        self.calls.append(("place", screen.name, handle))
        return handle

    async def connect(self, source, target, label):
        self.calls.append(("connect", source, target, label))

    async def finish(self):
        self.calls.append(("finish",))
        return "done"


@pytest.fixture
def recording_builder():
    """Builder recording place/connect calls."""
    return RecordingBuilder()
