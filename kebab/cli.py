from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

import uvicorn

from .config import Settings, get_settings
from .db import init_db, make_engine, make_session_factory
from .errors import StoreError
from .seed import seed
from .storage import BoardStore

logger = logging.getLogger("kebab")


def _open_store(settings: Settings) -> BoardStore:
    engine = make_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    init_db(engine)
    return BoardStore(make_session_factory(engine)())


def cmd_serve(args: argparse.Namespace, settings: Settings) -> int:
    uvicorn.run(
        "kebab.main:create_app",
        factory=True,
        host=args.host or settings.HOST,
        port=args.port or settings.PORT,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )
    return 0


def cmd_init_db(args: argparse.Namespace, settings: Settings) -> int:
    engine = make_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    init_db(engine)
    logger.info("tables ready at %s", engine.url.render_as_string(hide_password=True))
    return 0


def cmd_seed(args: argparse.Namespace, settings: Settings) -> int:
    store = _open_store(settings)
    try:
        seed(store)
    except StoreError as exc:
        logger.error("seeding failed: %s", exc.message)
        return 1
    finally:
        store.session.close()
    logger.info("seeding completed")
    return 0


def cmd_reset(args: argparse.Namespace, settings: Settings) -> int:
    store = _open_store(settings)
    try:
        removed = store.clear()
    except StoreError as exc:
        logger.error("failed to clear database: %s", exc.message)
        return 1
    finally:
        store.session.close()
    logger.info("database cleared, %d boards removed", removed)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kebab", description="Kanban board API")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP API")
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=cmd_serve)

    sub.add_parser("init-db", help="create database tables").set_defaults(func=cmd_init_db)
    sub.add_parser("seed", help="insert a sample board").set_defaults(func=cmd_seed)
    sub.add_parser("reset", help="delete every board").set_defaults(func=cmd_reset)
    return parser


def main(argv: Optional[Sequence[str]] = None, settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args, settings)
