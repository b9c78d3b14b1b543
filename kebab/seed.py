"""Sample data for a fresh database."""
from __future__ import annotations

import logging

from .db import Board
from .storage import BoardStore

logger = logging.getLogger(__name__)

SAMPLE_BOARD_TITLE = "My First Board"

SAMPLE_COLUMNS = ["To Do", "In Progress", "Done"]

# (column index, title, description)
SAMPLE_TASKS = [
    (0, "Setup project repository", "Initialize the project with all necessary configuration"),
    (0, "Design database schema", "Create tables for boards, columns, and tasks"),
    (1, "Implement backend API", "Build REST API endpoints with FastAPI"),
    (1, "Build frontend UI", "Create the board views for the kanban client"),
    (2, "Write documentation", "Document the project setup and architecture"),
]


def seed(store: BoardStore) -> Board:
    board = store.create_board(SAMPLE_BOARD_TITLE)
    logger.info("created board: %s", board.title)

    columns = [store.create_column(board.id, title, order) for order, title in enumerate(SAMPLE_COLUMNS)]
    logger.info("created columns: %s", ", ".join(c.title for c in columns))

    next_order = [0] * len(columns)
    for index, title, description in SAMPLE_TASKS:
        store.create_task(columns[index].id, title, next_order[index], description)
        next_order[index] += 1
    logger.info("created tasks: %d", len(SAMPLE_TASKS))
    return board
