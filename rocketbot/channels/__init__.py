"""Chat channels."""

from .base import Attachment, ChatChannel, IncomingMessage

__all__ = ["Attachment", "ChatChannel", "IncomingMessage"]
