"""Communication helpers shared by every channel."""

from .errors import classify_error

__all__ = ["classify_error"]
