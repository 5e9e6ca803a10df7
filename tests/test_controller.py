"""Tests for drag-and-drop resolution."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from taskboard.client.cache import BoardState
from taskboard.client.controller import BoardController, MoveIntent
from taskboard.models import LaneTasks, ProjectWithTasks, TaskRead, TaskStatus

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _lane(status, *ids):
    return [
        TaskRead(id=t, title=t, status=status, project_id="p1", position=i, created_at=NOW, updated_at=NOW)
        for i, t in enumerate(ids)
    ]


@pytest.fixture
def controller():
    state = BoardState(MagicMock())
    state.selected_project = ProjectWithTasks(
        id="p1",
        name="Board",
        created_at=NOW,
        updated_at=NOW,
        tasks=LaneTasks(
            todo=_lane(TaskStatus.todo, "a", "b", "c"),
            in_progress=_lane(TaskStatus.in_progress, "x", "y"),
            done=[],
        ),
    )
    return BoardController(state)


def test_drop_on_other_lane_goes_to_top(controller):
    assert controller.resolve_drop("b", "done") == MoveIntent("b", TaskStatus.done, 0)
    assert controller.resolve_drop("b", "inProgress") == MoveIntent("b", TaskStatus.in_progress, 0)


def test_drop_on_own_lane_keeps_index(controller):
    assert controller.resolve_drop("c", "todo") == MoveIntent("c", TaskStatus.todo, 2)


def test_drop_on_task_in_other_lane_inserts_before_it(controller):
    assert controller.resolve_drop("a", "y") == MoveIntent("a", TaskStatus.in_progress, 1)


def test_drop_on_sibling_takes_its_index(controller):
    assert controller.resolve_drop("a", "c") == MoveIntent("a", TaskStatus.todo, 2)
    assert controller.resolve_drop("c", "a") == MoveIntent("c", TaskStatus.todo, 0)


def test_drop_on_itself_is_ignored(controller):
    assert controller.resolve_drop("b", "b") is None


def test_cancelled_or_unknown_drops_are_ignored(controller):
    assert controller.resolve_drop("a", None) is None
    assert controller.resolve_drop("ghost", "todo") is None
    assert controller.resolve_drop("a", "nowhere") is None


def test_no_selected_project():
    assert BoardController(BoardState(MagicMock())).resolve_drop("a", "todo") is None


@pytest.mark.asyncio
async def test_handle_drag_end_dispatches_move(controller):
    controller.state.move_task = AsyncMock(return_value="moved")

    assert await controller.handle_drag_end("a", "done") == "moved"
    controller.state.move_task.assert_awaited_once_with("a", TaskStatus.done, 0)


@pytest.mark.asyncio
async def test_handle_drag_end_without_target_does_nothing(controller):
    controller.state.move_task = AsyncMock()

    assert await controller.handle_drag_end("a", None) is None
    controller.state.move_task.assert_not_awaited()
