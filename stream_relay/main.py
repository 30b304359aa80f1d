import logging

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s: %(message)s")

_GREETING = "Hello World!"
_ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


# ── Health schema ─────────────────────────────────────────────────────────────

class HealthResponse(BaseModel):
    status: str
    service: str


# ── App factory ───────────────────────────────────────────────────────────────

def create_app() -> FastAPI:
    app = FastAPI(
        title="Stream Relay",
        version="1.0.0",
        description="Relays R2 upload notifications to Cloudflare Stream. "
        "The queue consumer does the work; this app only answers liveness checks.",
        docs_url=None,
        redoc_url=None,
    )

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="stream-relay")

    @app.api_route("/{path:path}", methods=_ANY_METHOD, include_in_schema=False)
    async def greeting(path: str) -> PlainTextResponse:
        return PlainTextResponse(_GREETING)

    return app


app = create_app()
