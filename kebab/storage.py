from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .db import Board, ColumnModel, Task
from .errors import NotFoundError, StoreError
from .validation import require_title

logger = logging.getLogger(__name__)


@dataclass
class ColumnWithTasks:
    column: ColumnModel
    tasks: List[Task] = field(default_factory=list)


@dataclass
class BoardAggregate:
    board: Board
    columns: List[ColumnWithTasks] = field(default_factory=list)


class BoardStore:
    """Board, column and task operations over one SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _fail(self, message: str, rollback: bool = False) -> StoreError:
        logger.exception("%s", message)
        if rollback:
            self.session.rollback()
        return StoreError(message)

    def _commit(self, message: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail(message, rollback=True) from exc

    def _reload(self, instance, message: str) -> None:
        try:
            self.session.refresh(instance)
        except SQLAlchemyError as exc:
            raise self._fail(message, rollback=True) from exc

    # === Board operations ===
    def list_boards(self) -> List[Board]:
        stmt = select(Board).order_by(Board.created_at.asc(), Board.id.asc())
        try:
            return list(self.session.scalars(stmt))
        except SQLAlchemyError as exc:
            raise self._fail("Failed to fetch boards") from exc

    def get_board(self, board_id: str) -> Board:
        try:
            board = self.session.get(Board, board_id)
        except SQLAlchemyError as exc:
            raise self._fail("Failed to fetch board") from exc
        if board is None:
            raise NotFoundError("Board")
        return board

    def get_board_detail(self, board_id: str) -> BoardAggregate:
        board = self.get_board(board_id)
        try:
            columns = list(
                self.session.scalars(
                    select(ColumnModel)
                    .where(ColumnModel.board_id == board.id)
                    .order_by(ColumnModel.order.asc(), ColumnModel.created_at.asc(), ColumnModel.id.asc())
                )
            )
            by_column: Dict[str, ColumnWithTasks] = {c.id: ColumnWithTasks(c) for c in columns}
            if by_column:
                # One query for every column; rows arrive sorted so appending keeps each column's order.
                tasks = self.session.scalars(
                    select(Task)
                    .where(Task.column_id.in_(list(by_column)))
                    .order_by(Task.order.asc(), Task.created_at.asc(), Task.id.asc())
                )
                for task in tasks:
                    by_column[task.column_id].tasks.append(task)
        except SQLAlchemyError as exc:
            raise self._fail("Failed to fetch board") from exc
        return BoardAggregate(board=board, columns=[by_column[c.id] for c in columns])

    def create_board(self, title: str) -> Board:
        board = Board(title=require_title(title))
        self.session.add(board)
        self._commit("Failed to create board")
        self._reload(board, "Failed to create board")
        logger.info("created board %s", board.id)
        return board

    def delete_board(self, board_id: str) -> None:
        board = self.get_board(board_id)
        self.session.delete(board)
        self._commit("Failed to delete board")
        logger.info("deleted board %s", board_id)

    def clear(self) -> int:
        """Delete every board. Columns and tasks go with them."""
        try:
            result = self.session.execute(delete(Board))
        except SQLAlchemyError as exc:
            raise self._fail("Failed to clear boards", rollback=True) from exc
        self._commit("Failed to clear boards")
        return result.rowcount

    # === Column and task operations ===
    def create_column(self, board_id: str, title: str, order: int) -> ColumnModel:
        column = ColumnModel(board_id=board_id, title=require_title(title), order=order)
        self.session.add(column)
        self._commit("Failed to create column")
        self._reload(column, "Failed to create column")
        return column

    def create_task(
        self,
        column_id: str,
        title: str,
        order: int,
        description: Optional[str] = None,
    ) -> Task:
        task = Task(
            column_id=column_id,
            title=require_title(title),
            order=order,
            description=description,
        )
        self.session.add(task)
        self._commit("Failed to create task")
        self._reload(task, "Failed to create task")
        return task
