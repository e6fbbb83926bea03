import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from cuescore import storage
from cuescore.century import CenturyGame
from cuescore.engine import Clock, GameEngine
from cuescore.exceptions import UnsupportedActionError
from cuescore.modes import Variant
from cuescore.models import ActionResult, Scoreboard
from cuescore.snooker import SnookerGame

logger = logging.getLogger(__name__)

Handler = Callable[[Any, Dict[str, Any]], ActionResult]


def _foul_args(action: Dict[str, Any]) -> Dict[str, int]:
    return {} if action.get("points") is None else {"penalty_points": int(action["points"])}


_SNOOKER_ACTIONS: Dict[str, Handler] = {
    "pot": lambda g, a: g.pot(a["ball"]),
    "foul": lambda g, a: g.foul(**_foul_args(a)),
    "miss": lambda g, a: g.miss(),
    "end_turn": lambda g, a: g.end_turn(),
    "end_frame": lambda g, a: g.end_frame(),
    "end_game": lambda g, a: g.end_frame(),
    "new_frame": lambda g, a: g.new_frame(),
    "rename": lambda g, a: g.rename_player(int(a["player_id"]), str(a["name"])),
    "undo": lambda g, a: g.undo(),
}

_CENTURY_ACTIONS: Dict[str, Handler] = {
    "pot": lambda g, a: g.pot(a["ball"]),
    "deduct": lambda g, a: g.deduct(a["ball"]),
    "foul_penalty": lambda g, a: g.foul_penalty(None if a.get("points") is None else int(a["points"])),
    "reset_score": lambda g, a: g.reset_score(),
    "end_turn": lambda g, a: g.end_turn(),
    "end_game": lambda g, a: g.end_game(),
    "rename": lambda g, a: g.rename_player(int(a["player_id"]), str(a["name"])),
    "undo": lambda g, a: g.undo(),
}

ACTIONS: Dict[Variant, Dict[str, Handler]] = {
    Variant.SNOOKER: _SNOOKER_ACTIONS,
    Variant.CENTURY: _CENTURY_ACTIONS,
}

_REQUIRED_ARGS = {
    "pot": ("ball",),
    "deduct": ("ball",),
    "rename": ("player_id", "name"),
}

_ENGINES = {
    Variant.SNOOKER: SnookerGame,
    Variant.CENTURY: CenturyGame,
}


def validate_action(variant: Variant, action: Any) -> Handler:
    if not isinstance(action, dict) or "action" not in action:
        raise UnsupportedActionError("invalid action format")

    name = action["action"]
    handler = ACTIONS[variant].get(name)
    if handler is None:
        raise UnsupportedActionError(f"{variant.value} does not support action: {name}")

    missing = [arg for arg in _REQUIRED_ARGS.get(name, ()) if arg not in action]
    if missing:
        raise UnsupportedActionError(f"action {name} is missing {missing}")

    return handler


class GameSession:
    """
    Single local scorekeeping session.

    Responsibilities:
    - Own one live game (Snooker or Century)
    - Dispatch action records onto the engine
    - Bulk replay action records (atomic)
    - Autosave through the storage adapter when a path is given
    """

    def __init__(
        self,
        variant,
        mode_id: Optional[str] = None,
        *,
        names: Optional[Sequence[str]] = None,
        save_path: Optional[Path] = None,
        clock: Optional[Clock] = None,
        game: Optional[GameEngine] = None,
    ):
        self.variant = Variant(variant)
        self.save_path = save_path
        self._clock = clock

        if game is not None:
            self._game = game
        else:
            self._game = self._new_engine(mode_id, names)

    @classmethod
    def restore(
        cls,
        variant,
        save_path: Optional[Path] = None,
        *,
        clock: Optional[Clock] = None,
    ) -> Optional["GameSession"]:
        """
        Resume the saved game for a variant, or None if there is none.
        """
        variant = Variant(variant)
        path = save_path or storage.default_save_path(variant)

        game = storage.load_game(path, variant, clock=clock)
        if game is None:
            return None

        logger.info("Restored %s game from %s", variant.value, path)
        return cls(variant, save_path=path, clock=clock, game=game)

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    @property
    def game(self) -> GameEngine:
        return self._game

    def new_game(self, mode_id: Optional[str] = None, names: Optional[Sequence[str]] = None) -> GameEngine:
        self._game = self._new_engine(mode_id, names)
        self._autosave()
        return self._game

    def dispatch(self, action: Dict[str, Any]) -> ActionResult:
        handler = validate_action(self.variant, action)
        result = handler(self._game, action)

        if result.accepted:
            self._autosave()
        return result

    def load_actions(self, actions: List[Dict[str, Any]]) -> List[Scoreboard]:
        """
        Replay action records on a fresh game of the same mode.
        Atomic: if any record is invalid -> no state mutation.
        """
        if not isinstance(actions, list):
            raise ValueError("actions must be a list")

        # Validate first
        handlers = [validate_action(self.variant, a) for a in actions]

        names = [p.name for p in self._game.state.players]
        temp_game = self._new_engine(self._mode_id(), names)
        temp_timeline: List[Scoreboard] = []

        for handler, action in zip(handlers, actions):
            handler(temp_game, action)
            temp_timeline.append(temp_game.scoreboard())

        # If everything succeeds -> commit
        self._game = temp_game
        self._autosave()

        return temp_timeline

    def scoreboard(self) -> Scoreboard:
        return self._game.scoreboard()

    def export_state(self) -> Dict[str, Any]:
        return self._game.serialize()

    def save(self) -> None:
        if self.save_path is None:
            raise RuntimeError("No save path configured")
        storage.save_game(self.save_path, self._game)

    # ---------------------------------------------------------
    # Internals
    # ---------------------------------------------------------

    def _mode_id(self) -> str:
        state = self._game.state
        return state.mode_id if self.variant is Variant.SNOOKER else state.mode.mode_id

    def _new_engine(self, mode_id: Optional[str], names: Optional[Sequence[str]]) -> GameEngine:
        engine_cls = _ENGINES[self.variant]
        if mode_id is None:
            return engine_cls.start(names=names, clock=self._clock)
        return engine_cls.start(mode_id, names=names, clock=self._clock)

    def _autosave(self) -> None:
        if self.save_path is not None:
            storage.save_game(self.save_path, self._game)
