from typing import Any, Dict, List, Optional, Sequence

from cuescore.engine import Clock
from cuescore.models import Scoreboard
from cuescore.session import GameSession, validate_action
from cuescore.modes import Variant


def build_timeline(
    variant,
    mode_id: str,
    actions: List[Dict[str, Any]],
    *,
    names: Optional[Sequence[str]] = None,
    clock: Optional[Clock] = None,
) -> List[Scoreboard]:
    """
    Replays a game from scratch using action records.
    Returns one scoreboard per accepted action, stopping at the first
    winner. Rejected actions leave no entry.
    Does NOT mutate external state.
    """
    variant = Variant(variant)

    # Validate every record before touching a game
    for action in actions:
        validate_action(variant, action)

    session = GameSession(variant, mode_id, names=names, clock=clock)

    timeline: List[Scoreboard] = []

    for action in actions:
        result = session.dispatch(action)
        if not result.accepted:
            continue

        timeline.append(session.scoreboard())

        if session.game.is_finished:
            break

    return timeline
