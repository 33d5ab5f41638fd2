"""Thin client for Groq's OpenAI-compatible chat completions endpoint.

One ``GroqClient`` is shared by all requests; it holds no per-request state.
Every call is bounded by ``UPSTREAM_TIMEOUT`` seconds end to end (connect,
send, headers and body read together) and by ``MAX_RESPONSE_BYTES`` of body.
Cancelling the awaiting task aborts the in-flight request.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx
from pydantic import BaseModel, ValidationError

from bot.errors import RequestPreparationError, UpstreamCallError, UpstreamResponseError


logger = logging.getLogger("satbot")

GROQ_API_URL = "https://api.groq.com/openai/v1/chat/completions"
GROQ_MODEL = "llama-3.1-8b-instant"
TEMPERATURE = 0.7
MAX_TOKENS = 500
UPSTREAM_TIMEOUT = 30.0
MAX_RESPONSE_BYTES = 10 * 1024 * 1024


class _Message(BaseModel):
    content: Optional[str] = None


class _Choice(BaseModel):
    message: _Message


class ChatCompletion(BaseModel):
    choices: List[_Choice] = []


@dataclass(frozen=True)
class Completion:
    text: str
    elapsed: float


class GroqClient:
    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        api_url: str = GROQ_API_URL,
        timeout: float = UPSTREAM_TIMEOUT,
        max_response_bytes: int = MAX_RESPONSE_BYTES,
    ):
        self._timeout = timeout
        self._max_response_bytes = max_response_bytes
        self._api_url = api_url
        self._client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    async def aclose(self) -> None:
        await self._client.aclose()

    def build_payload(self, messages: List[Dict[str, str]]) -> bytes:
        payload = {
            "messages": messages,
            "model": GROQ_MODEL,
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }
        try:
            return json.dumps(payload).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise RequestPreparationError() from exc

    async def complete(self, api_key: str, messages: List[Dict[str, str]]) -> Completion:
        body = self.build_payload(messages)
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }

        start = time.perf_counter()
        try:
            status_code, raw = await asyncio.wait_for(self._post(body, headers), self._timeout)
        except asyncio.TimeoutError as exc:
            logger.warning("GROQ API call exceeded %ss deadline", self._timeout)
            raise UpstreamCallError() from exc
        elapsed = time.perf_counter() - start

        text = raw.decode("utf-8", errors="replace")
        try:
            if not 200 <= status_code < 300:
                raise UpstreamResponseError(status_code, text, reason="non-2xx status")
            answer = self._first_choice(status_code, raw, text)
        except UpstreamResponseError as exc:
            logger.warning(
                "GROQ API error: status=%s reason=%s body=%s",
                exc.upstream_status,
                exc.reason,
                exc.upstream_body,
            )
            raise
        return Completion(text=answer, elapsed=elapsed)

    async def _post(self, body: bytes, headers: Dict[str, str]) -> tuple[int, bytes]:
        try:
            async with self._client.stream("POST", self._api_url, content=body, headers=headers) as resp:
                chunks: List[bytes] = []
                remaining = self._max_response_bytes
                async for chunk in resp.aiter_bytes():
                    if len(chunk) > remaining:
                        chunks.append(chunk[:remaining])
                        logger.warning(
                            "Upstream body exceeded %s bytes, truncating", self._max_response_bytes
                        )
                        break
                    chunks.append(chunk)
                    remaining -= len(chunk)
                return resp.status_code, b"".join(chunks)
        except httpx.HTTPError as exc:
            logger.warning("GROQ API call failed: %s", exc)
            raise UpstreamCallError() from exc

    @staticmethod
    def _first_choice(status_code: int, raw: bytes, text: str) -> str:
        try:
            completion = ChatCompletion.model_validate_json(raw)
        except ValidationError as exc:
            raise UpstreamResponseError(status_code, text, reason=f"unparsable body: {exc}") from exc
        if not completion.choices:
            raise UpstreamResponseError(status_code, text, reason="no choices")
        return completion.choices[0].message.content or ""
