"""Turns a finished drag gesture into a move on the board."""

import logging
from dataclasses import dataclass
from typing import Optional

from taskboard.client.cache import BoardState
from taskboard.models import TaskRead, TaskStatus

logger = logging.getLogger(__name__)

LANE_IDS = {status.value: status for status in TaskStatus}


@dataclass(frozen=True)
class MoveIntent:
    task_id: str
    status: TaskStatus
    position: int


def _index_of(lane: list[TaskRead], task_id: str) -> int:
    for index, task in enumerate(lane):
        if task.id == task_id:
            return index
    return -1


class BoardController:
    def __init__(self, state: BoardState):
        self.state = state

    def resolve_drop(self, active_id: str, over_id: Optional[str]) -> Optional[MoveIntent]:
        """Where does ``active_id`` land when dropped on ``over_id``?

        ``over_id`` is either a lane id (``todo``, ``inProgress``, ``done``)
        or another task's id. Returns ``None`` when nothing should move.
        """
        board = self.state.selected_project
        if over_id is None or board is None:
            return None

        task = board.tasks.find(active_id)
        if task is None:
            logger.debug("Dragged task %s is not on the board", active_id)
            return None

        if over_id in LANE_IDS:
            status = LANE_IDS[over_id]
            if status != task.status:
                return MoveIntent(active_id, status, 0)
            lane = board.tasks.lane(status)
            index = _index_of(lane, active_id)
            return MoveIntent(active_id, status, index if index >= 0 else len(lane))

        over_task = board.tasks.find(over_id)
        if over_task is None:
            logger.debug("Drop target %s is neither a lane nor a task", over_id)
            return None

        lane = board.tasks.lane(over_task.status)
        target_index = _index_of(lane, over_id)
        position = target_index if target_index >= 0 else len(lane)
        if over_task.status == task.status and _index_of(lane, active_id) == position:
            return None
        return MoveIntent(active_id, over_task.status, position)

    async def handle_drag_end(self, active_id: str, over_id: Optional[str]) -> Optional[TaskRead]:
        intent = self.resolve_drop(active_id, over_id)
        if intent is None:
            return None
        return await self.state.move_task(intent.task_id, intent.status, intent.position)
