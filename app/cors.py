"""Cross-origin access policy.

Origins are matched exactly against a fixed allow-list. An unknown origin gets
no ``Access-Control-Allow-Origin`` header at all, so browsers refuse the
cross-origin read. Preflight (``OPTIONS``) requests are answered here with a
204 and never reach the routes.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.responses import Response


ALLOWED_ORIGINS = (
    "https://saturnalia.in",
    "https://www.saturnalia.in",
    "https://chatbot.saturnalia.in",
    "http://localhost:3000",
)
ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
ALLOWED_HEADERS = ("Content-Type", "Authorization", "X-Requested-With")
MAX_AGE = 86400


class AccessPolicy:
    def __init__(self, allowed_origins: Iterable[str] = ALLOWED_ORIGINS):
        self._allowed_origins = frozenset(allowed_origins)

    def is_allowed(self, origin: Optional[str]) -> bool:
        return origin is not None and origin in self._allowed_origins

    def headers_for(self, origin: Optional[str]) -> Dict[str, str]:
        headers = {
            "Access-Control-Allow-Methods": ", ".join(ALLOWED_METHODS),
            "Access-Control-Allow-Headers": ", ".join(ALLOWED_HEADERS),
            "Access-Control-Max-Age": str(MAX_AGE),
            "Access-Control-Allow-Credentials": "true",
        }
        if self.is_allowed(origin):
            headers["Access-Control-Allow-Origin"] = origin
            headers["Vary"] = "Origin"
        return headers

    @staticmethod
    def is_preflight(method: str) -> bool:
        return method.upper() == "OPTIONS"


def install_access_policy(app: FastAPI, policy: AccessPolicy) -> None:
    @app.middleware("http")
    async def apply_access_policy(request: Request, call_next):
        headers = policy.headers_for(request.headers.get("origin"))
        if policy.is_preflight(request.method):
            return Response(status_code=204, headers=headers)

        response = await call_next(request)
        response.headers.update(headers)
        return response
