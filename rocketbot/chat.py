"""Chat turn — one request/response cycle with the inference backend."""

import base64
import logging

from .channels.base import Attachment, IncomingMessage
from .communication.errors import classify_error
from .context import ConversationContext, MessageRecord
from .state import Bot

logger = logging.getLogger("rocketbot.chat")

ACCEPTED_IMAGE_TYPES = frozenset({"image/png", "image/jpeg"})

OFFLINE_NOTICE = "I'm offline, this message is ignored"
IMAGES_NOTICE = "Some images found"
RETRY_HINT = "Use `!retry` to try again."


async def chat(bot: Bot, message: IncomingMessage):
    """Handle an ordinary (non-command) message."""
    if not bot.state.enabled:
        await bot.reply(message.room_id, OFFLINE_NOTICE)
        return

    ctx = bot.contexts.get(message.room_id)
    record = await build_user_record(bot, message)
    ctx.push(record)
    await run_turn(bot, ctx)


async def retry(bot: Bot, message: IncomingMessage):
    """Drop the last reply and ask the model again."""
    if not bot.state.enabled:
        await bot.reply(message.room_id, OFFLINE_NOTICE)
        return

    ctx = bot.contexts.get(message.room_id)
    if not ctx.messages:
        return

    # A failed turn leaves the user record last; nothing to drop then
    if ctx.messages[-1].role == "assistant":
        ctx.pop()
    await run_turn(bot, ctx)


async def build_user_record(bot: Bot, message: IncomingMessage) -> MessageRecord:
    """User record from the text plus any accepted image attachments."""
    record = MessageRecord(role="user", content=message.text)
    if not message.attachments:
        return record

    images: list[str] = []
    description = ""
    for attachment in message.attachments:
        if attachment.image_type not in ACCEPTED_IMAGE_TYPES:
            await bot.reply(message.room_id, f"Unknown attachments type: {attachment.image_type}")
            continue
        data = await _fetch_image(bot, message, attachment)
        if data is None:
            continue
        images.append(base64.b64encode(data).decode("utf-8"))
        description += "\n" + (attachment.description or "")

    if images:
        record.content += description
        record.images = images
    return record


async def _fetch_image(bot: Bot, message: IncomingMessage, attachment: Attachment):
    try:
        data = await bot.channel.fetch_attachment(attachment.image_url)
    except Exception as e:
        logger.error(f"Failed to fetch attachment {attachment.image_url}: {e}", exc_info=True)
        await bot.reply(message.room_id, f"Could not fetch attachment: {attachment.image_url}")
        return None
    logger.info(f"Attachment fetched: {len(data)} bytes ({attachment.image_type})")
    return data


async def run_turn(bot: Bot, ctx: ConversationContext):
    """Submit the history, record and deliver the reply.

    A backend failure is reported to the room and leaves the history
    ending with the user record, so `!retry` can pick it up.
    """
    room_id = ctx.room_id
    await bot.channel.set_typing(room_id, True)
    try:
        try:
            reply = await bot.backend.chat(ctx.model, ctx.messages)
        except Exception as e:
            logger.error(f"Chat request failed for room {room_id} (model={ctx.model}): {e}", exc_info=True)
            await bot.reply(room_id, f"{classify_error(e)} {RETRY_HINT}")
            return

        ctx.push(reply)
        await bot.reply(room_id, reply.content)
        if reply.images:
            await bot.reply(room_id, IMAGES_NOTICE)
    finally:
        await bot.channel.set_typing(room_id, False)
