"""Command system — registry and the built-in command set."""

from .builtin import register_builtin_commands
from .registry import Command, CommandRegistry, require_admin

__all__ = ["Command", "CommandRegistry", "register_builtin_commands", "require_admin"]
