"""
Plain-record form of a whole game (state plus undo stack).

The blob only holds primitives, lists and dicts so any storage
collaborator can keep it as JSON:

    {
        "schema_version": 1,
        "variant": "snooker" | "century",
        "state": {...},
        "undo_stack": [{...}, ...]
    }

Validation here is structural only. A blob that passes may still describe
an odd game (e.g. an out-of-range current player); the engines reject
actions on such states instead of crashing.
"""

from typing import Any, Dict, List

from cuescore.config import SCHEMA_VERSION
from cuescore.modes import Variant

REQUIRED_FIELDS = {
    "schema_version",
    "variant",
    "state",
    "undo_stack",
}

_STATE_FIELDS = {
    Variant.SNOOKER: {"mode_id", "players"},
    Variant.CENTURY: {"mode", "players"},
}


def build_blob(variant: Variant, state: Dict[str, Any], undo_stack: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "schema_version": SCHEMA_VERSION,
        "variant": variant.value,
        "state": state,
        "undo_stack": undo_stack,
    }


def _state_problems(variant: Variant, state: Any, where: str) -> List[str]:
    if not isinstance(state, dict):
        return [f"{where} must be a dict"]

    problems: List[str] = []
    missing = _STATE_FIELDS[variant] - set(state.keys())
    if missing:
        problems.append(f"{where}: missing field(s) {sorted(missing)}")

    if "players" in state and not isinstance(state["players"], list):
        problems.append(f"{where}: players must be list")

    if "events" in state and not isinstance(state["events"], list):
        problems.append(f"{where}: events must be list")

    return problems


def validate_blob(blob: Any) -> List[str]:
    """
    Return list of problems (empty == valid).
    """
    if not isinstance(blob, dict):
        return ["blob must be a dict"]

    missing = REQUIRED_FIELDS - set(blob.keys())
    if missing:
        return [f"Missing field(s): {sorted(missing)}"]

    problems: List[str] = []

    if blob["schema_version"] != SCHEMA_VERSION:
        problems.append(f"unsupported schema_version: {blob['schema_version']}")

    try:
        variant = Variant(blob["variant"])
    except ValueError:
        problems.append(f"unknown variant: {blob['variant']}")
        return problems

    problems.extend(_state_problems(variant, blob["state"], "state"))

    if not isinstance(blob["undo_stack"], list):
        problems.append("undo_stack must be list")
    else:
        for i, snapshot in enumerate(blob["undo_stack"]):
            problems.extend(_state_problems(variant, snapshot, f"undo_stack[{i}]"))

    return problems


def blob_has_winner(blob: Dict[str, Any]) -> bool:
    state = blob.get("state") if isinstance(blob, dict) else None
    return isinstance(state, dict) and bool(state.get("winner"))
