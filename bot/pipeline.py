from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from bot.errors import EmptyMessageError, NotConfiguredError
from bot.groq_client import GroqClient
from bot.prompt import compose_messages


logger = logging.getLogger("satbot")
audit_logger = logging.getLogger("satbot.audit")


def format_response_time(seconds: float) -> str:
    return f"{seconds:.4f} seconds"


@dataclass(frozen=True)
class ChatResult:
    response: str
    elapsed: float

    @property
    def response_time(self) -> str:
        return format_response_time(self.elapsed)


class ChatPipeline:
    """Validate a message, ground it in the static context and ask Groq.

    Any failure raises a ``RelayError`` and ends the request; nothing is retried.
    """

    def __init__(self, client: GroqClient, context: str, api_key: Optional[str]):
        self._client = client
        self._context = context
        self._api_key = api_key

    @property
    def context(self) -> str:
        return self._context

    async def run(self, message: str) -> ChatResult:
        if not message.strip():
            raise EmptyMessageError()

        if not self._api_key:
            logger.error("GROQ_API_KEY is not configured; rejecting chat request")
            raise NotConfiguredError()

        messages = compose_messages(self._context, message)
        completion = await self._client.complete(self._api_key, messages)
        return ChatResult(response=completion.text, elapsed=completion.elapsed)


def log_interaction(message: str, elapsed: float) -> None:
    try:
        audit_logger.info(
            "Chat interaction - Question: %s, Response Time: %s",
            message,
            format_response_time(elapsed),
        )
    except Exception:
        pass
