"""Tests for the command registry and the admin gate."""

import pytest

from rocketbot.commands.registry import (
    ADMIN_ONLY_NOTICE,
    ADMIN_ONLY_SUFFIX,
    CommandRegistry,
    require_admin,
)

from helpers import make_message


class TestRegister:

    def test_key_has_prefix(self):
        registry = CommandRegistry()

        async def handler(bot, message, args):
            pass

        command = registry.register("ping", "Ping", handler)
        assert command.key == "!ping"
        assert registry.lookup("!ping") is command
        assert registry.lookup("ping") is None
        assert "!ping" in registry

    def test_open_command_is_not_wrapped(self):
        registry = CommandRegistry()

        async def handler(bot, message, args):
            pass

        command = registry.register("ping", "Ping", handler)
        assert command.handler is handler
        assert command.original is handler
        assert command.description == "Ping"

    def test_admin_command_is_wrapped_and_annotated(self):
        registry = CommandRegistry()

        async def do_secret(bot, message, args):
            pass

        command = registry.register("secret", "Secret stuff", do_secret, admin=True)
        assert command.handler is not do_secret
        assert command.original is do_secret
        assert command.handler.__name__ == "do_secret"
        assert command.description == "Secret stuff" + ADMIN_ONLY_SUFFIX
        assert command.admin is True

    def test_list_in_registration_order(self):
        registry = CommandRegistry()

        async def handler(bot, message, args):
            pass

        registry.register("b", "B", handler)
        registry.register("a", "A", handler, admin=True)
        assert registry.list() == [("!b", "B"), ("!a", "A" + ADMIN_ONLY_SUFFIX)]

    def test_reregister_overwrites(self):
        registry = CommandRegistry()

        async def first(bot, message, args):
            pass

        async def second(bot, message, args):
            pass

        registry.register("x", "First", first)
        registry.register("y", "Y", first)
        registry.register("x", "Second", second)
        assert registry.lookup("!x").original is second
        assert registry.list() == [("!x", "Second"), ("!y", "Y")]
        assert len(registry) == 2


class TestRequireAdmin:

    @pytest.mark.asyncio
    async def test_allowed_calls_through(self, bot):
        calls = []

        async def handler(bot, message, args):
            calls.append(args)

        guarded = require_admin(handler)
        await guarded(bot, make_message("!x", username="admin"), ["!x"])
        assert calls == [["!x"]]
        assert bot.channel.sent == []

    @pytest.mark.asyncio
    async def test_rejected_sends_notice(self, bot):
        calls = []

        async def handler(bot, message, args):
            calls.append(args)

        guarded = require_admin(handler)
        await guarded(bot, make_message("!x", username="mallory"), ["!x"])
        assert calls == []
        assert bot.channel.texts() == [ADMIN_ONLY_NOTICE]

    @pytest.mark.asyncio
    async def test_custom_predicate(self, bot):
        calls = []

        async def handler(bot, message, args):
            calls.append(message.username)

        guarded = require_admin(handler, lambda bot, message: message.username.startswith("ops-"))
        await guarded(bot, make_message("!x", username="ops-bob"), ["!x"])
        await guarded(bot, make_message("!x", username="admin"), ["!x"])
        assert calls == ["ops-bob"]
