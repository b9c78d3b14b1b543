from __future__ import annotations

import logging
import time
from typing import Iterator, Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from .config import Settings, get_settings
from .db import Board, init_db, make_engine, make_session_factory
from .errors import Issue, KebabError, ValidationError
from .schemas import BoardDetail, BoardIn, BoardOut, ColumnOut, ErrorEnvelope, Health, TaskOut
from .storage import BoardAggregate, BoardStore, ColumnWithTasks
from .utils import as_utc, now_utc
from .validation import parse_identifier

logger = logging.getLogger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorEnvelope},
    404: {"model": ErrorEnvelope},
    500: {"model": ErrorEnvelope},
}


# === Helpers ===


def board_out(board: Board) -> BoardOut:
    return BoardOut(
        id=board.id,
        title=board.title,
        createdAt=as_utc(board.created_at),
        updatedAt=as_utc(board.updated_at),
    )


def column_out(entry: ColumnWithTasks) -> ColumnOut:
    column = entry.column
    return ColumnOut(
        id=column.id,
        boardId=column.board_id,
        title=column.title,
        order=column.order,
        tasks=[
            TaskOut(
                id=task.id,
                columnId=task.column_id,
                title=task.title,
                order=task.order,
                description=task.description,
            )
            for task in entry.tasks
        ],
    )


def board_detail(aggregate: BoardAggregate) -> BoardDetail:
    summary = board_out(aggregate.board)
    return BoardDetail(**summary.model_dump(), columns=[column_out(c) for c in aggregate.columns])


def error_response(exc: KebabError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        body = {"error": [issue.as_dict() for issue in exc.issues]}
    else:
        body = {"error": exc.message}
    return JSONResponse(status_code=exc.status_code, content=body)


def request_issues(exc: RequestValidationError) -> list[Issue]:
    issues = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        issues.append(Issue(".".join(loc) or "body", err.get("msg", "is invalid")))
    return issues


# === Dependencies ===


def get_session(request: Request) -> Iterator[Session]:
    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_store(session: Session = Depends(get_session)) -> BoardStore:
    return BoardStore(session)


# === Application ===


def create_app(settings: Optional[Settings] = None, engine: Optional[Engine] = None) -> FastAPI:
    """Build the API around ``engine``, or one made from ``settings.DATABASE_URL``."""
    settings = settings or get_settings()
    if engine is None:
        engine = make_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    init_db(engine)

    app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.exception_handler(KebabError)
    async def handle_kebab_error(request: Request, exc: KebabError) -> JSONResponse:
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(ValidationError(request_issues(exc)))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # === Health ===

    @app.get("/health", response_model=Health)
    def health() -> Health:
        return Health(status="ok", timestamp=now_utc())

    # === Board endpoints ===

    @app.get("/api/boards", response_model=list[BoardOut], responses=ERROR_RESPONSES)
    def list_boards(store: BoardStore = Depends(get_store)):
        return [board_out(b) for b in store.list_boards()]

    @app.post("/api/boards", response_model=BoardOut, status_code=201, responses=ERROR_RESPONSES)
    def create_board(payload: BoardIn, store: BoardStore = Depends(get_store)):
        board = store.create_board(payload.title)
        return board_out(board)

    @app.get("/api/boards/{board_id}", response_model=BoardDetail, responses=ERROR_RESPONSES)
    def get_board(board_id: str, store: BoardStore = Depends(get_store)):
        aggregate = store.get_board_detail(parse_identifier(board_id))
        return board_detail(aggregate)

    @app.delete("/api/boards/{board_id}", status_code=204, responses=ERROR_RESPONSES)
    def delete_board(board_id: str, store: BoardStore = Depends(get_store)):
        store.delete_board(parse_identifier(board_id))
        return Response(status_code=204)

    return app
