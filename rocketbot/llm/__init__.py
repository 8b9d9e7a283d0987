"""Inference backend."""

from .ollama import LLMBadResponseError, LLMError, OllamaClient, RunningModel

__all__ = ["LLMBadResponseError", "LLMError", "OllamaClient", "RunningModel"]
