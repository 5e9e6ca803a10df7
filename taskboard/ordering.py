"""Dense per-lane ordering.

Every (project, lane) bucket holds positions ``0..n-1`` with no gaps or
duplicates. The functions here are pure: they decide where a task lands and
which siblings have to move, expressed as a :class:`Shift`. The task store
turns a shift into one bulk ``UPDATE``; the client cache applies the same
shift to its in-memory lanes, so both sides renumber identically.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from taskboard.errors import InvalidPosition

T = TypeVar("T")


@dataclass(frozen=True)
class Shift:
    """Move every sibling whose position lies in ``[low, high]`` by ``delta``.

    ``high=None`` means the range is open-ended (to the end of the bucket).
    """

    low: int
    high: Optional[int]
    delta: int

    def applies_to(self, position: int) -> bool:
        if position < self.low:
            return False
        return self.high is None or position <= self.high

    def apply(self, position: int) -> int:
        return position + self.delta if self.applies_to(position) else position


@dataclass(frozen=True)
class Placement:
    """Where the moved task lands and how its old and new buckets renumber."""

    position: int
    source_shift: Optional[Shift] = None
    target_shift: Optional[Shift] = None


def validate_index(index: int) -> int:
    if index < 0:
        raise InvalidPosition(index)
    return index


def clamp_index(index: int, limit: int) -> int:
    """Clamp an over-long target to ``limit`` (append)."""
    return min(validate_index(index), max(limit, 0))


def append(count: int) -> int:
    return count


def insert_at(count: int, index: int) -> Tuple[int, Shift]:
    if not 0 <= index <= count:
        raise InvalidPosition(index)
    return index, Shift(index, None, +1)


def remove_from(position: int) -> Shift:
    return Shift(position + 1, None, -1)


def move_within(from_index: int, to_index: int) -> Placement:
    if to_index > from_index:
        return Placement(to_index, target_shift=Shift(from_index + 1, to_index, -1))
    if to_index < from_index:
        return Placement(to_index, target_shift=Shift(to_index, from_index - 1, +1))
    return Placement(to_index)


def move_between(from_position: int, to_count: int, to_index: int) -> Placement:
    position, opening = insert_at(to_count, clamp_index(to_index, to_count))
    return Placement(position, source_shift=remove_from(from_position), target_shift=opening)


def plan_move(
    from_position: int,
    same_bucket: bool,
    target_count: int,
    requested: int,
) -> Placement:
    """Resolve a move request into a placement.

    ``target_count`` is the size of the destination bucket *including* the
    task when it stays in the same bucket.
    """
    validate_index(requested)
    if same_bucket:
        return move_within(from_position, clamp_index(requested, target_count - 1))
    return move_between(from_position, target_count, requested)


def check_dense(positions: Iterable[int]) -> bool:
    ordered = sorted(positions)
    return ordered == list(range(len(ordered)))


# ── In-memory application (client side) ─────────────────────────────────────


def apply_shift(tasks: Sequence[T], shift: Optional[Shift]) -> List[T]:
    """Apply ``shift`` to every task's ``position``; return them position-sorted."""
    if shift is not None:
        for task in tasks:
            task.position = shift.apply(task.position)
    return sorted(tasks, key=lambda task: task.position)
