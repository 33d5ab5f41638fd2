"""Errors raised by the chat pipeline.

Each error carries the HTTP status and the caller-facing message it maps to.
Upstream details go to the logs, never into ``message``.
"""

from __future__ import annotations


class RelayError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequestError(RelayError):
    status_code = 400
    default_message = "Invalid request format"


class EmptyMessageError(RelayError):
    status_code = 400
    default_message = "Message cannot be empty"


class MethodNotAllowedError(RelayError):
    status_code = 405
    default_message = "Method not allowed"


class NotConfiguredError(RelayError):
    default_message = "GROQ API key not configured"


class RequestPreparationError(RelayError):
    default_message = "Failed to prepare request"


class UpstreamCallError(RelayError):
    default_message = "Failed to call GROQ API"


class UpstreamResponseError(RelayError):
    """Non-2xx status, unparsable body or no choices; all look the same to callers."""

    default_message = "GROQ API returned an error"

    def __init__(self, status_code: int | None = None, body: str = "", reason: str = ""):
        super().__init__()
        self.upstream_status = status_code
        self.upstream_body = body
        self.reason = reason
