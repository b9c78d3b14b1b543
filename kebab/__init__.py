"""Kanban board API: boards, their columns and tasks."""

__version__ = "1.0.0"
