"""Built-in commands."""

import logging

from .. import chat
from ..channels.base import IncomingMessage
from ..state import Bot
from .registry import CommandRegistry

logger = logging.getLogger("rocketbot.commands.builtin")

INVALID_ARGUMENTS = "Error: Invalid arguments !"


async def do_status(bot: Bot, message: IncomingMessage, args: list[str]):
    """Show status of the bot."""
    await bot.channel.set_typing(message.room_id, True)
    try:
        ctx = bot.contexts.get(message.room_id)
        state = "online" if bot.state.enabled else "offline"
        response = f"I'm {state} and I using _{ctx.model}_\n"
        response += f"My status is : {bot.state.status_message}\n"

        running = await bot.backend.running_models()
        if running:
            response += "Running models:\n"
            for m in running:
                response += f"- {m.name} ({m.size_gb:g}GB)\n"
        else:
            response += "No model are running.\n"
    finally:
        await bot.channel.set_typing(message.room_id, False)
    await bot.reply(message.room_id, response)


async def do_enable(bot: Bot, message: IncomingMessage, args: list[str]):
    """Put the bot online."""
    status_message = args[1] if len(args) > 1 else None
    bot.state.enable(status_message)
    await bot.channel.set_status("online", status_message)
    await bot.reply(message.room_id, "I'm online")


async def do_disable(bot: Bot, message: IncomingMessage, args: list[str]):
    """Put the bot offline and forget every conversation."""
    status_message = args[1] if len(args) > 1 else None
    bot.state.disable(status_message)
    await bot.channel.set_status("offline", status_message)
    await bot.reply(message.room_id, "I'm offline")


async def do_retry(bot: Bot, message: IncomingMessage, args: list[str]):
    await chat.retry(bot, message)


async def do_help(bot: Bot, message: IncomingMessage, args: list[str]):
    response = "Available commands:\n"
    for key, description in bot.registry.list():
        response += f"- `{key}`: {description}\n"
    await bot.reply(message.room_id, response)


async def do_clear(bot: Bot, message: IncomingMessage, args: list[str]):
    bot.contexts.get(message.room_id).clear()
    await bot.reply(message.room_id, "History cleared")


async def do_model(bot: Bot, message: IncomingMessage, args: list[str]):
    """List models, or switch this conversation to another one.

    The new name must be one the backend currently reports.
    """
    ctx = bot.contexts.get(message.room_id)

    if len(args) == 1:
        models = await bot.backend.list_models()
        response = "Available models are:\n"
        for name in models:
            response += f"- {name}\n"
        response += f"\ncurrent model: *{ctx.model}*\n"
        await bot.reply(message.room_id, response)
    elif len(args) == 2:
        name = args[1]
        if await bot.backend.has_model(name):
            ctx.set_model(name)
            logger.info(f"Room {message.room_id} switched to model {name}")
            await bot.reply(message.room_id, f"New model is _{name}_")
        else:
            await bot.reply(message.room_id, f"Unknown model _{name}_")
    else:
        await bot.reply(message.room_id, INVALID_ARGUMENTS)


def register_builtin_commands(registry: CommandRegistry):
    """Register the standard command set."""
    registry.register("status", "Show status of the bot", do_status)
    registry.register("enable", "Put the bot online", do_enable, admin=True, exclusive=True)
    registry.register("disable", "Put the bot offline", do_disable, admin=True, exclusive=True)
    registry.register("retry", "Ask to regenerate a new answer", do_retry)
    registry.register("help", "Print available command", do_help)
    registry.register("clear", "Clear history", do_clear)
    registry.register("model", "List or change the current model", do_model, admin=True)
