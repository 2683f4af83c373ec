"""FastAPI application entrypoint."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import HTTPException
from fastapi import Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import app.runtime as runtime
from app.api.errors import handle_http_exception
from app.api.routers.rooms import router as rooms_router
from app.ws.routers import router as ws_router


def startup() -> None:
    """Reset in-memory runtime state before handling traffic."""
    runtime.startup()


@asynccontextmanager
async def lifespan(_: FastAPI):
    startup()
    yield


app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=runtime.settings.cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def handle_http_exception_route(request: Request, exc: HTTPException) -> JSONResponse:
    """Adapter used by FastAPI exception handling."""
    return await handle_http_exception(request, exc)


app.include_router(rooms_router)
app.include_router(ws_router)


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=runtime.settings.bank_app_host, port=runtime.settings.bank_app_port)


__all__ = [
    "app",
    "run",
    "startup",
]
