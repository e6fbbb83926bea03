import logging
from copy import deepcopy
from dataclasses import replace
from typing import Generic, List, Optional, TypeVar

from cuescore.models import Event, Player, START_EVENT_TYPES

logger = logging.getLogger(__name__)

S = TypeVar("S")


class SnapshotHistory(Generic[S]):
    """
    Undo stack of full match-state snapshots.

    Responsibilities:
    - Store an independent deep copy of the state before each action
    - Hand back the most recent snapshot on undo
    - Optionally cap memory by dropping the oldest snapshots
    """

    def __init__(self, limit: int = 0, snapshots: Optional[List[S]] = None):
        if limit < 0:
            raise ValueError("limit must be >= 0")

        self._limit = limit
        self._stack: List[S] = [deepcopy(s) for s in (snapshots or [])]

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    def push(self, state: S) -> None:
        self._stack.append(deepcopy(state))

        if self._limit and len(self._stack) > self._limit:
            self._stack.pop(0)
            logger.debug("Undo limit %d reached, oldest snapshot dropped", self._limit)

    def pop(self) -> Optional[S]:
        if not self._stack:
            return None
        return self._stack.pop()

    def clear(self) -> None:
        self._stack = []

    @property
    def depth(self) -> int:
        return len(self._stack)

    @property
    def can_undo(self) -> bool:
        return bool(self._stack)

    @property
    def limit(self) -> int:
        return self._limit

    def snapshots(self) -> List[S]:
        return deepcopy(self._stack)


# ---------------------------------------------------------
# Event log helpers
# ---------------------------------------------------------

def replace_latest_start_event(events: List[Event], players: List[Player]) -> None:
    """
    Rewrite the player-name list of the most recent start event in place.
    Only the list slot is replaced; the event objects stay frozen.
    """
    for idx in range(len(events) - 1, -1, -1):
        if isinstance(events[idx], START_EVENT_TYPES):
            events[idx] = replace(
                events[idx],
                player_names=tuple(p.display_name for p in players),
            )
            return


def carry_player_names(target_players: List[Player], source_players: List[Player]) -> None:
    """
    Copy names by player id from source onto target.
    Names are identity metadata, so an undo must not roll them back.
    """
    names = {p.id: p.name for p in source_players}
    for player in target_players:
        if player.id in names:
            player.name = names[player.id]
