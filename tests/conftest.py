"""Pytest configuration and shared fixtures."""

import pytest

from rocketbot.commands import CommandRegistry, register_builtin_commands
from rocketbot.context import ContextStore
from rocketbot.state import Bot, BotState

from helpers import FakeBackend, FakeChannel


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def bot(channel, backend):
    registry = CommandRegistry()
    register_builtin_commands(registry)
    state = BotState(admins=frozenset({"admin"}), contexts=ContextStore())
    return Bot(state=state, channel=channel, backend=backend, registry=registry)
