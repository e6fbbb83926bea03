import json
import logging
from pathlib import Path
from typing import Optional

from cuescore.century import CenturyGame
from cuescore.config import CENTURY_SAVE_FILE, SAVES_DIR, SNOOKER_SAVE_FILE
from cuescore.engine import GameEngine
from cuescore.exceptions import StateValidationError
from cuescore.modes import Variant
from cuescore.serialization import blob_has_winner
from cuescore.snooker import SnookerGame

logger = logging.getLogger(__name__)

_SAVE_FILES = {
    Variant.SNOOKER: SNOOKER_SAVE_FILE,
    Variant.CENTURY: CENTURY_SAVE_FILE,
}


def default_save_path(variant) -> Path:
    return SAVES_DIR / _SAVE_FILES[Variant(variant)]


def clear_game(path: Path) -> None:
    path.unlink(missing_ok=True)


def save_game(path: Path, game: GameEngine) -> None:
    """
    Persist a game in progress. A finished game is not worth keeping,
    so its file is removed instead.
    """
    if game.is_finished:
        clear_game(path)
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(game.serialize(), f, ensure_ascii=False, indent=2)


def load_game(path: Path, variant=None, *, clock=None) -> Optional[GameEngine]:
    """
    Load a saved game, or None when there is nothing usable.
    Malformed and finished games are discarded.
    """
    if not path.exists():
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Discarding unreadable saved game %s: %s", path, e)
        clear_game(path)
        return None

    if blob_has_winner(data):
        logger.info("Discarding finished saved game %s", path)
        clear_game(path)
        return None

    engine_cls = GameEngine
    if variant is not None:
        engine_cls = SnookerGame if Variant(variant) is Variant.SNOOKER else CenturyGame

    try:
        return engine_cls.deserialize(data, clock=clock)
    except StateValidationError as e:
        logger.warning("Discarding malformed saved game %s: %s", path, e)
        clear_game(path)
        return None
