"""Tests for startup wiring and the serve loop."""

import pytest

from rocketbot.config import load_settings
from rocketbot.dispatcher import Dispatcher
from rocketbot.llm.ollama import OllamaClient
from rocketbot.main import build_bot, serve

from helpers import BOT_USER_ID, FakeChannel, make_message


@pytest.fixture
def settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OLLAMA_URL", "http://localhost:11434")
    monkeypatch.setenv("ROCKETCHAT_URL", "chat.example.org")
    monkeypatch.setenv("ROCKETCHAT_USER", "bot")
    monkeypatch.setenv("ROCKETCHAT_PASSWORD", "secret")
    monkeypatch.setenv("ADMIN_USERS", "admin")
    monkeypatch.setenv("DEFAULT_MODEL", "mistral:7b")
    return load_settings()


def test_build_bot(settings):
    bot = build_bot(settings, FakeChannel())
    assert isinstance(bot.backend, OllamaClient)
    assert bot.backend.base_url == "http://localhost:11434"
    assert bot.state.admins == frozenset({"admin"})
    assert bot.state.enabled
    assert bot.contexts.get("r1").model == "mistral:7b"
    assert "!status" in bot.registry
    assert "!model" in bot.registry


@pytest.mark.asyncio
async def test_serve_handles_every_message(bot, backend):
    channel = FakeChannel(inbound=[
        make_message("hello", room_id="r1"),
        make_message("hi", room_id="r2"),
        make_message("echo", room_id="r1", user_id=BOT_USER_ID),
        make_message("how are you?", room_id="r1"),
    ])
    bot.channel = channel

    await serve(bot, Dispatcher(bot))

    assert len(backend.calls) == 3
    assert len(channel.texts("r1")) == 2
    assert len(channel.texts("r2")) == 1
    history = bot.contexts.get("r1").messages
    assert [r.content for r in history if r.role == "user"] == ["hello", "how are you?"]
