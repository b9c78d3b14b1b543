from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel


class Health(BaseModel):
    status: str = "ok"
    timestamp: datetime


class IssueOut(BaseModel):
    field: str
    issue: str


class ErrorEnvelope(BaseModel):
    error: Union[str, list[IssueOut]]


class BoardIn(BaseModel):
    # Constraints are checked by kebab.validation so every path reports issues the same way.
    title: Optional[Any] = None


class BoardOut(BaseModel):
    id: str
    title: str
    createdAt: datetime
    updatedAt: datetime


class TaskOut(BaseModel):
    id: str
    columnId: str
    title: str
    order: int
    description: Optional[str]


class ColumnOut(BaseModel):
    id: str
    boardId: str
    title: str
    order: int
    tasks: list[TaskOut]


class BoardDetail(BoardOut):
    columns: list[ColumnOut]
