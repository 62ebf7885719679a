"""FastAPI frontend for the kidpoints ledger.

Every endpoint lives under ``/api`` and performs one whole-document
read-modify-write cycle through :class:`~kidpoints.service.PointsService`.
Serve it with ``uvicorn kidpoints.webapp:app`` or the ``kidpoints-server``
console script, which listens on the configured fixed port.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, StrictFloat, StrictInt, StrictStr

from ..exceptions import KidPointsError, LedgerShapeError, NotFoundError, StorageError, ValidationError
from ..ops import StructuredLogger
from ..service import PointsService
from ..storage import JsonFileLedgerStore, LedgerStore
from .config import (
    CORS_ORIGINS,
    DATA_FILE,
    HOST,
    LOG_FILE,
    PORT,
    SQLITE_FILE_NAME,
    STORE_BACKEND,
    STORE_BACKENDS,
)
from .persistence import SqlLedgerStore, make_engine

# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------
TaskId = Union[str, int]
PointsValue = Union[StrictInt, StrictFloat, StrictStr]


class RecordPointsIn(BaseModel):
    date: str
    taskId: TaskId
    points: PointsValue


class SettleIn(BaseModel):
    date: str
    usedPoints: PointsValue


class ChildNameIn(BaseModel):
    childName: str


class HistoryEntryIn(BaseModel):
    date: str
    task: TaskId
    type: str
    points: PointsValue


class ClearDayIn(BaseModel):
    date: str


# ---------------------------------------------------------------------------
# Service wiring
# ---------------------------------------------------------------------------
logger = StructuredLogger(path=Path(LOG_FILE) if LOG_FILE else None)
_service: Optional[PointsService] = None
_service_lock = threading.Lock()


def build_store(backend: str = STORE_BACKEND) -> LedgerStore:
    """Create the configured ledger store."""

    if backend == "json":
        return JsonFileLedgerStore(DATA_FILE)
    if backend == "sqlite":
        return SqlLedgerStore(make_engine(SQLITE_FILE_NAME))
    raise RuntimeError(f"Unknown KIDPOINTS_STORE {backend!r}; expected one of {', '.join(STORE_BACKENDS)}.")


def get_service() -> PointsService:
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = PointsService(build_store(), logger=logger)
    return _service


# ---------------------------------------------------------------------------
# FastAPI application setup
# ---------------------------------------------------------------------------
app = FastAPI(title="Kid Points")
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(CORS_ORIGINS),
    allow_methods=["*"],
    allow_headers=["*"],
)

_ERROR_STATUS = (
    (LedgerShapeError, 409, "ledger_shape_error"),
    (ValidationError, 400, "validation_error"),
    (NotFoundError, 404, "not_found"),
    (StorageError, 500, "storage_error"),
)


@app.exception_handler(KidPointsError)
async def handle_kidpoints_error(request: Request, exc: KidPointsError) -> JSONResponse:
    status_code, kind = 500, "internal_error"
    for error_type, code, name in _ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code, kind = code, name
            break
    logger.log("request.failed", path=request.url.path, error=kind, detail=str(exc))
    return JSONResponse(status_code=status_code, content={"error": kind, "detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = jsonable_encoder(exc.errors())
    logger.log("request.failed", path=request.url.path, error="validation_error", detail=errors)
    return JSONResponse(status_code=400, content={"error": "validation_error", "detail": errors})


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@app.get("/api/points")
def read_points(service: PointsService = Depends(get_service)) -> Dict[str, Any]:
    return service.get_points()


@app.post("/api/points")
def record_points(payload: RecordPointsIn, service: PointsService = Depends(get_service)) -> Dict[str, int]:
    total = service.record_points(payload.date, str(payload.taskId), payload.points)
    return {"totalPoints": total}


@app.post("/api/settle")
def settle_day(payload: SettleIn, service: PointsService = Depends(get_service)) -> Dict[str, int]:
    return {"totalPoints": service.settle_day(payload.date, payload.usedPoints)}


@app.get("/api/childName")
def read_child_name(service: PointsService = Depends(get_service)) -> Dict[str, str]:
    return {"childName": service.get_child_name()}


@app.post("/api/childName")
def update_child_name(payload: ChildNameIn, service: PointsService = Depends(get_service)) -> Dict[str, bool]:
    service.set_child_name(payload.childName)
    return {"success": True}


@app.get("/api/history")
def read_history(service: PointsService = Depends(get_service)) -> Dict[str, Any]:
    return service.get_history()


@app.get("/api/history/{date}")
def read_history_day(date: str, service: PointsService = Depends(get_service)) -> Any:
    return service.get_day(date)


@app.post("/api/history")
def add_history_entry(payload: HistoryEntryIn, service: PointsService = Depends(get_service)) -> Dict[str, Any]:
    return service.add_history_entry(payload.date, str(payload.task), payload.type, payload.points)


@app.post("/api/clearDay")
def clear_day(payload: ClearDayIn, service: PointsService = Depends(get_service)) -> Dict[str, bool]:
    service.clear_day(payload.date)
    return {"success": True}


def main() -> None:
    """Run the API with uvicorn on the configured host and port."""

    import uvicorn

    uvicorn.run(app, host=HOST, port=PORT)


__all__ = [
    "app",
    "build_store",
    "get_service",
    "logger",
    "main",
    "ChildNameIn",
    "ClearDayIn",
    "HistoryEntryIn",
    "RecordPointsIn",
    "SettleIn",
]
