"""Client side of the board: HTTP API, optimistic cache, drag handling."""

from taskboard.client.api import BoardAPI
from taskboard.client.cache import BoardState
from taskboard.client.controller import BoardController, MoveIntent

__all__ = ["BoardAPI", "BoardState", "BoardController", "MoveIntent"]
