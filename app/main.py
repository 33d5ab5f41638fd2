from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import BackgroundTasks, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.cors import AccessPolicy, install_access_policy
from app.schemas import ChatRequest, ChatResponse, ErrorResponse, HealthResponse
from bot.context import load_context
from bot.errors import InvalidRequestError, MethodNotAllowedError, RelayError
from bot.groq_client import GroqClient
from bot.pipeline import ChatPipeline, log_interaction
from config.settings import Settings, get_settings


VERSION = "1.0.0"

logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s - %(message)s")
logging.getLogger("httpx").setLevel(logging.WARNING)
logger = logging.getLogger("satbot")


def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
        headers=headers,
    )


def get_pipeline(request: Request) -> ChatPipeline:
    return request.app.state.pipeline


def create_app(
    settings: Optional[Settings] = None,
    context: Optional[str] = None,
    groq_client: Optional[GroqClient] = None,
    access_policy: Optional[AccessPolicy] = None,
) -> FastAPI:
    if settings is None:
        settings = get_settings()
    logger.setLevel(settings.log_level)
    if context is None:
        context = load_context(settings.context_file)
    client = groq_client or GroqClient()
    policy = access_policy or AccessPolicy()

    logger.info("Config: key_set=%s context_chars=%s", bool(settings.groq_api_key), len(context))
    if not settings.groq_api_key:
        logger.warning("GROQ_API_KEY is not set; /chat will answer 500 until it is configured")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await client.aclose()

    app = FastAPI(title="SatBot Relay", version=VERSION, lifespan=lifespan)
    app.state.settings = settings
    app.state.pipeline = ChatPipeline(client=client, context=context, api_key=settings.groq_api_key)

    install_access_policy(app, policy)

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError):
        if exc.status_code < 500:
            logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.info("Invalid payload on %s: %s", request.url.path, exc.errors())
        return _error(InvalidRequestError.status_code, InvalidRequestError.default_message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 400:
            message = InvalidRequestError.default_message
        elif exc.status_code == 405:
            message = MethodNotAllowedError.default_message
        elif exc.status_code == 404:
            message = "Not found"
        else:
            message = str(exc.detail)
        return _error(exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        # Runs outside the access-policy middleware
        return _error(
            500,
            RelayError.default_message,
            headers=policy.headers_for(request.headers.get("origin")),
        )

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ"),
            version=VERSION,
        )

    @app.post("/chat", response_model=ChatResponse)
    async def chat(
        req: ChatRequest,
        background_tasks: BackgroundTasks,
        pipeline: ChatPipeline = Depends(get_pipeline),
    ) -> ChatResponse:
        result = await pipeline.run(req.message)
        background_tasks.add_task(log_interaction, req.message, result.elapsed)
        return ChatResponse(response=result.response, response_time=result.response_time)

    return app

