import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
SAVES_DIR = Path(os.getenv("CUESCORE_SAVES_DIR", PROJECT_ROOT / "saves"))

SCHEMA_VERSION = 1

SNOOKER_SAVE_FILE = "snooker_game_state.json"
CENTURY_SAVE_FILE = "century_game_state.json"

REDS_PER_FRAME = 15
SNOOKER_FOUL_POINTS = 4
CENTURY_FOUL_POINTS = 4

# 0 keeps every snapshot for the whole sitting
UNDO_LIMIT = int(os.getenv("CUESCORE_UNDO_LIMIT", "0"))

LOG_LEVEL = os.getenv("CUESCORE_LOG_LEVEL", "INFO")
