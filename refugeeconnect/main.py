"""
FastAPI application bootstrap with: \n
- Lifespan-managed initialization (tables, default community groups, AI service) \n
- Error handlers rendering every failure as an ``{"error": ...}`` JSON body \n
- CORS configured for the frontend \n
- Static serving of uploaded information media under /uploads \n
- Real-time WebSocket channel (assistant queries and community relay) \n

Environment contract (from `settings`): \n
- INIT_MODE: if 'runtime', create tables and seed community groups during startup. \n
- FRONTEND_URL: allowed CORS origin. \n
- UPLOAD_DIR: directory served under /uploads. \n
"""

import os
import json
import logging
from collections import defaultdict
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, WebSocket, Cookie, WebSocketDisconnect
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError
from starlette.concurrency import run_in_threadpool
from starlette.exceptions import HTTPException as StarletteHTTPException

from refugeeconnect.api.fast_api import routers, check_query_message
from refugeeconnect.api.rate_limit import ai_limiter
from refugeeconnect.api.ai_service import AIService
from refugeeconnect.api.utils import user_from_token
from refugeeconnect.database.config.config import settings
from refugeeconnect.database.config.connection_engine import init_db
from refugeeconnect.database.core.funcs import seed_community_groups

logger = logging.getLogger("uvicorn")
"""Logger instance for capturing and emitting Uvicorn server logs."""


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    App lifespan manager.

    Notes
    ------------
    - On startup (before yielding):
        * If INIT_MODE == 'runtime': create missing tables and seed the
          default community groups.
        * Attach the shared `AIService` to `app.state` unless one was
          provided already (tests inject a stubbed service).
    - On shutdown (after yielding): nothing to release; the engine pool is
      disposed with the process.
    """
    if settings.INIT_MODE == "runtime":
        init_db()
        added = seed_community_groups()
        logger.info(f"Database ready ({added} community groups seeded).")
    else:
        logger.info(f"Skipping runtime init (INIT_MODE={settings.INIT_MODE}).")

    if getattr(app.state, "ai_service", None) is None:
        app.state.ai_service = AIService()

    try:
        yield
    finally:
        logger.info("App shutting down.")


# Instantiate the FastAPI app with lifespan handler
app = FastAPI(lifespan=lifespan, title="RefugeeConnect Uganda")
"""Instantiates the FastAPI application object."""


# -----------------------
# Error handlers
# -----------------------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    body = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    messages = [
        ".".join(str(part) for part in error["loc"] if part != "body") + f": {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Validation Error", "messages": messages})


@app.exception_handler(IntegrityError)
async def integrity_exception_handler(request: Request, exc: IntegrityError):
    logger.error(f"Integrity error on {request.url.path}: {exc.orig}")
    return JSONResponse(
        status_code=400,
        content={"error": "Duplicate Entry", "message": "A record with this information already exists"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


# -----------------------
# CORS configuration
# -----------------------
url = settings.FRONTEND_URL
"""The allowed frontend origin (URL) used for CORS configuration."""

app.add_middleware(
    CORSMiddleware,
    allow_origins=[url],      # Frontend origin
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------
# API routes
# -----------------------
for router in routers:
    app.include_router(router)

# -----------------------
# Uploaded media
# -----------------------
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")


@app.get("/health")
async def health():
    return {"status": "ok"}


# -----------------------
# Real-time channel
# -----------------------
community_sockets: dict[str, set[WebSocket]] = defaultdict(set)
"""Community id -> sockets that joined it (per process)."""


async def relay_community_message(sender: WebSocket, data: dict) -> None:
    """Forward `data` to every other socket joined to `data['communityId']`."""
    community_id = str(data.get("communityId"))
    for socket in list(community_sockets.get(community_id, ())):
        if socket is sender:
            continue
        try:
            await socket.send_json({"event": "new-message", "data": data})
        except Exception:
            logger.info(f"Dropping closed socket from community {community_id}")
            community_sockets[community_id].discard(socket)


def leave_all_communities(websocket: WebSocket) -> None:
    for community_id in list(community_sockets):
        community_sockets[community_id].discard(websocket)
        if not community_sockets[community_id]:
            del community_sockets[community_id]


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, token: str = Cookie(None)):
    """
    Real-time WebSocket endpoint.

    Auth
    ----
    - A valid `token` cookie identifies the user so assistant answers are
      recorded in their history; without one the socket is anonymous.

    Protocol
    --------
    Frames are JSON objects ``{"event": <name>, "data": <payload>}``.
    - ai-query {message, language} → ai-response <pipeline result>, or
      ai-error {message} when the message is blank or too long, the caller
      exceeded the AI rate limit, or the pipeline itself could not run.
    - join-community <communityId> → subscribes the socket to that community.
    - community-message {communityId, ...} → relayed as new-message to the
      other members of the community.
    """
    await websocket.accept()
    user = await run_in_threadpool(user_from_token, token) if token else None
    user_id = user["id"] if user else None
    logger.info(f"WebSocket connected ({user_id or 'anonymous'})")

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except ValueError:
                logger.info("Ignoring non-JSON WebSocket frame")
                continue
            event = frame.get("event") if isinstance(frame, dict) else None
            data = frame.get("data") if isinstance(frame, dict) else None

            if event == "ai-query":
                payload = data if isinstance(data, dict) else {}
                client_key = websocket.client.host if websocket.client else "anonymous"
                try:
                    message = check_query_message(payload.get("message", ""))
                except HTTPException as e:
                    await websocket.send_json({"event": "ai-error", "data": {"message": e.detail}})
                    continue
                if not ai_limiter.hit(client_key):
                    await websocket.send_json({"event": "ai-error", "data": {"message": ai_limiter.message}})
                    continue
                try:
                    result = await run_in_threadpool(
                        websocket.app.state.ai_service.process_query,
                        message,
                        payload.get("language") or "en",
                        user_id,
                    )
                    await websocket.send_json({"event": "ai-response", "data": jsonable_encoder(result)})
                except Exception as e:
                    logger.error(f"WebSocket AI error. Error Message: {e}")
                    await websocket.send_json(
                        {"event": "ai-error", "data": {"message": "Failed to process your request"}}
                    )
            elif event == "join-community":
                community_sockets[str(data)].add(websocket)
            elif event == "community-message" and isinstance(data, dict):
                await relay_community_message(websocket, data)
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected ({user_id or 'anonymous'})")
    finally:
        leave_all_communities(websocket)
