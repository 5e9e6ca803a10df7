"""Kanban task board: projects, three fixed lanes, dense per-lane ordering."""

__version__ = "0.1.0"
