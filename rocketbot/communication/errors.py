"""Error classification for user-facing notices."""

import asyncio
import httpx

from ..llm.ollama import LLMBadResponseError, LLMError


def classify_error(e: Exception) -> str:
    """Classify any exception into a short message for the conversation."""
    # 1: Typed backend errors
    if isinstance(e, LLMBadResponseError):
        return "Unexpected response format from the model server. Please try again."
    if isinstance(e, LLMError):
        return "The model server failed to answer. Please try again."

    # 2: HTTP status errors
    if isinstance(e, httpx.HTTPStatusError):
        code = e.response.status_code
        if code == 404:
            return "Model not found on the model server. Check `!model`."
        if code == 400:
            return "The model server rejected the request. Try `!clear` to start fresh."
        if code in (401, 403):
            return "Authentication error. An admin may need to check the credentials."
        if 500 <= code < 600:
            return "The model server is having issues. Please try again later."
        return f"The model server returned HTTP {code}. Please try again later."

    # 3: Network / timeout errors
    if isinstance(e, (httpx.ConnectError, httpx.ConnectTimeout)):
        return "Cannot connect to the model server. Please try again later."
    if isinstance(e, (httpx.ReadTimeout, httpx.WriteTimeout, httpx.PoolTimeout)):
        return "Request timed out. Please try again."
    if isinstance(e, asyncio.TimeoutError):
        return "Request timed out. Please try again."
    if isinstance(e, httpx.TransportError):
        return "Network error while talking to the model server."

    # 4: Unexpected response shape
    if isinstance(e, (KeyError, IndexError, ValueError)):
        return "Unexpected response format. Please try again."

    # 5: Fallback, include type name
    type_name = type(e).__name__
    return f"Something went wrong ({type_name}). Check logs for details."
