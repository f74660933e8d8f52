from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Dict, List

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .models import EventIn, EventsOut, utc_timestamp


logger = logging.getLogger(__name__)

MISSING_FIELDS = "Missing required fields: email and passwordHash"


class EventStore:
    """In-memory store of received events (fingerprints only, never passwords)."""

    def __init__(self) -> None:
        self._events: List[Dict[str, Any]] = []
        self._lock = threading.Lock()

    def add(self, event: Dict[str, Any]) -> Dict[str, Any]:
        stored = {**event, "timestamp": utc_timestamp(), "id": uuid.uuid4().hex[:9]}
        with self._lock:
            self._events.append(stored)
        return stored

    def all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._events)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"success": False, "error": message})


def create_app(store: EventStore | None = None) -> FastAPI:
    app = FastAPI(
        title="passwatch collection endpoint",
        version=__version__,
        description="Receives weak-password detection events. Only fingerprints are accepted, never raw passwords.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.state.store = store or EventStore()

    @app.exception_handler(StarletteHTTPException)
    async def not_found(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # unknown routes and unsupported methods both answer with a JSON 404
        if exc.status_code in (404, 405):
            return _error(404, "Not found")
        return _error(exc.status_code, str(exc.detail))

    @app.options("/{path:path}")
    def preflight(path: str) -> Response:
        return Response(status_code=200)

    @app.post("/events")
    async def receive_event(request: Request) -> JSONResponse:
        try:
            body = await request.json()
        except ValueError:
            logger.warning("invalid_json")
            return _error(400, "Invalid JSON")

        if not isinstance(body, dict) or not body.get("email") or not body.get("passwordHash"):
            logger.warning("missing_fields")
            return _error(400, MISSING_FIELDS)

        try:
            event = EventIn.model_validate(body)
        except ValidationError as exc:
            messages = [e["msg"] for e in exc.errors()]
            logger.warning("validation_error errors=%s", messages)
            return _error(400, "; ".join(messages))

        stored = request.app.state.store.add(event.model_dump(exclude_none=True))
        logger.info("event_received id=%s email=%s", stored["id"], stored["email"])
        return JSONResponse({"success": True, "eventId": stored["id"]})

    @app.get("/events")
    def list_events(request: Request) -> Dict[str, Any]:
        events = request.app.state.store.all()
        return EventsOut(events=events, count=len(events)).model_dump()

    @app.delete("/events")
    def clear_events(request: Request) -> Dict[str, Any]:
        request.app.state.store.clear()
        logger.info("events_cleared")
        return {"success": True, "message": "All events cleared"}

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok", "timestamp": utc_timestamp()}

    return app
