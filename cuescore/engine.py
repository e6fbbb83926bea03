import logging
from abc import ABC, abstractmethod
from copy import deepcopy
from datetime import datetime, timezone
from typing import Any, Callable, ClassVar, Dict, List, Optional, Type

from cuescore.config import UNDO_LIMIT
from cuescore.exceptions import StateValidationError
from cuescore.history import SnapshotHistory, carry_player_names, replace_latest_start_event
from cuescore.modes import Variant
from cuescore.models import (
    ActionResult,
    ActionWarning,
    Rejection,
    RejectionReason,
    Scoreboard,
)
from cuescore.serialization import build_blob, validate_blob

logger = logging.getLogger(__name__)

Clock = Callable[[], str]
Mutation = Callable[[Any, List[ActionWarning]], Optional[Rejection]]


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class GameEngine(ABC):
    """
    Shared turn-based scoring engine.

    Responsibilities:
    - Own the single live match state and its undo history
    - Apply actions copy-on-write: a rejected action never touches
      the live state and never pushes a snapshot
    - Undo, rename and (de)serialization common to both variants

    Variants subclass this and express each operation as a mutation
    of a draft copy of the state.
    """

    variant: ClassVar[Variant]
    state_type: ClassVar[type]

    _variants: ClassVar[Dict[Variant, Type["GameEngine"]]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if "variant" in cls.__dict__:
            GameEngine._variants[cls.variant] = cls

    def __init__(
        self,
        state,
        *,
        history: Optional[SnapshotHistory] = None,
        clock: Optional[Clock] = None,
    ):
        self.state = state
        self.history = history if history is not None else SnapshotHistory(limit=UNDO_LIMIT)
        self._clock = clock or utc_now

    # =========================================================
    # PUBLIC API
    # =========================================================

    @property
    def is_finished(self) -> bool:
        return self.state.winner is not None

    def undo(self) -> ActionResult:
        """
        Restore the state from before the last accepted action.
        """
        if self.is_finished:
            return self._reject(RejectionReason.GAME_OVER, "Game is over")

        previous = self.history.pop()
        if previous is None:
            return self._reject(RejectionReason.NOTHING_TO_UNDO, "Nothing to undo")

        current_names = [p.name for p in previous.players]
        carry_player_names(previous.players, self.state.players)
        if [p.name for p in previous.players] != current_names:
            replace_latest_start_event(previous.events, previous.players)

        self.state = previous
        logger.debug("%s undo, %d snapshot(s) left", self.variant.value, self.history.depth)
        return ActionResult(accepted=True, state=self.state)

    def rename_player(self, player_id: int, name: str) -> ActionResult:
        """
        Identity-preserving rename. Not an undoable action.
        """
        if not self.state.players:
            return self._reject(RejectionReason.NOT_INITIALIZED, "Game is not initialized")

        if not any(p.id == player_id for p in self.state.players):
            return self._reject(RejectionReason.UNKNOWN_PLAYER, f"No player with id {player_id}")

        draft = deepcopy(self.state)
        for player in draft.players:
            if player.id == player_id:
                player.name = name

        replace_latest_start_event(draft.events, draft.players)
        self.state = draft
        return ActionResult(accepted=True, state=self.state)

    @abstractmethod
    def scoreboard(self) -> Scoreboard:
        ...

    # =========================================================
    # SERIALIZATION
    # =========================================================

    def serialize(self) -> Dict[str, Any]:
        return build_blob(
            self.variant,
            self.state.to_dict(),
            [s.to_dict() for s in self.history.snapshots()],
        )

    @classmethod
    def deserialize(cls, blob: Dict[str, Any], *, clock: Optional[Clock] = None) -> "GameEngine":
        problems = validate_blob(blob)
        if problems:
            raise StateValidationError("Game state validation failed:\n" + "\n".join(f"- {p}" for p in problems[:50]))

        engine_cls = GameEngine._variants[Variant(blob["variant"])]
        if cls is not GameEngine and engine_cls is not cls:
            raise StateValidationError(f"Blob holds a {blob['variant']} game, not {cls.variant.value}")

        try:
            state = engine_cls.state_type.from_dict(blob["state"])
            snapshots = [engine_cls.state_type.from_dict(s) for s in blob["undo_stack"]]
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            raise StateValidationError(f"Malformed game state: {e}") from e

        history = SnapshotHistory(limit=UNDO_LIMIT, snapshots=snapshots)
        return engine_cls(state, history=history, clock=clock)

    # =========================================================
    # INTERNALS
    # =========================================================

    def _now(self) -> str:
        return self._clock()

    def _guard(self) -> Optional[Rejection]:
        if not self.state.players:
            return Rejection(RejectionReason.NOT_INITIALIZED, "Game is not initialized")

        if self.is_finished:
            return Rejection(RejectionReason.GAME_OVER, "Game is over")

        if self.state.active_player is None:
            return Rejection(
                RejectionReason.NO_ACTIVE_PLAYER,
                f"No player at index {self.state.current_player_index}",
            )
        return None

    def _transition(self, name: str, mutate: Mutation) -> ActionResult:
        rejection = self._guard()
        if rejection is not None:
            return self._reject(rejection.reason, rejection.message)

        draft = deepcopy(self.state)
        events_before = len(draft.events)
        warnings: List[ActionWarning] = []

        rejection = mutate(draft, warnings)
        if rejection is not None:
            return self._reject(rejection.reason, rejection.message, warnings)

        self.history.push(self.state)
        self.state = draft

        new_events = list(draft.events[events_before:])
        logger.debug("%s %s accepted, %d new event(s)", self.variant.value, name, len(new_events))
        for warning in warnings:
            logger.info("%s %s: %s", self.variant.value, name, warning.message)

        return ActionResult(accepted=True, state=self.state, events=new_events, warnings=warnings)

    def _reject(
        self,
        reason: RejectionReason,
        message: str = "",
        warnings: Optional[List[ActionWarning]] = None,
    ) -> ActionResult:
        logger.debug("%s action rejected: %s %s", self.variant.value, reason.value, message)
        return ActionResult(
            accepted=False,
            state=self.state,
            warnings=list(warnings or []),
            rejection=Rejection(reason, message),
        )
