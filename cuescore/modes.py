from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, List, Optional

from cuescore.config import SNOOKER_FOUL_POINTS, CENTURY_FOUL_POINTS
from cuescore.exceptions import UnknownModeError


class Variant(str, Enum):
    SNOOKER = "snooker"
    CENTURY = "century"


@dataclass(frozen=True)
class GameConfig:
    """
    Static description of one selectable game mode.

    target_score is None for Snooker: a frame ends on the final Black
    or when ended manually.
    """
    mode_id: str
    variant: Variant
    num_players: int
    is_team_game: bool
    label: str
    players_per_team: Optional[int] = None
    target_score: Optional[int] = None
    foul_points: int = 4

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["variant"] = self.variant.value
        return d

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "GameConfig":
        return GameConfig(
            mode_id=str(d["mode_id"]),
            variant=Variant(d["variant"]),
            num_players=int(d["num_players"]),
            is_team_game=bool(d["is_team_game"]),
            label=str(d.get("label", d["mode_id"])),
            players_per_team=(int(d["players_per_team"]) if d.get("players_per_team") is not None else None),
            target_score=(int(d["target_score"]) if d.get("target_score") is not None else None),
            foul_points=int(d.get("foul_points", 4)),
        )


def _century_singles(n: int) -> GameConfig:
    return GameConfig(
        mode_id=f"singles-{n}",
        variant=Variant.CENTURY,
        num_players=n,
        is_team_game=False,
        label=f"Singles ({n} Players - Target 100)",
        target_score=100,
        foul_points=CENTURY_FOUL_POINTS,
    )


def _century_team(mode_id: str, per_team: int, label: str) -> GameConfig:
    return GameConfig(
        mode_id=mode_id,
        variant=Variant.CENTURY,
        num_players=per_team * 2,
        is_team_game=True,
        label=label,
        players_per_team=per_team,
        target_score=per_team * 100,
        foul_points=CENTURY_FOUL_POINTS,
    )


SNOOKER_MODES: Dict[str, GameConfig] = {
    "singles": GameConfig(
        mode_id="singles",
        variant=Variant.SNOOKER,
        num_players=2,
        is_team_game=False,
        label="Singles",
        foul_points=SNOOKER_FOUL_POINTS,
    ),
    "doubles": GameConfig(
        mode_id="doubles",
        variant=Variant.SNOOKER,
        num_players=4,
        is_team_game=True,
        label="Doubles",
        players_per_team=2,
        foul_points=SNOOKER_FOUL_POINTS,
    ),
}

CENTURY_MODES: Dict[str, GameConfig] = {
    **{f"singles-{n}": _century_singles(n) for n in range(2, 9)},
    "doubles": _century_team("doubles", 2, "Doubles (Target 200)"),
    "triples": _century_team("triples", 3, "Triples (Target 300)"),
    "quadruples": _century_team("quadruples", 4, "Quadruples (Target 400)"),
}

_REGISTRY: Dict[Variant, Dict[str, GameConfig]] = {
    Variant.SNOOKER: SNOOKER_MODES,
    Variant.CENTURY: CENTURY_MODES,
}


def resolve(variant, mode_id: str) -> GameConfig:
    try:
        modes = _REGISTRY[Variant(variant)]
    except ValueError:
        raise UnknownModeError(f"Unknown variant: {variant}") from None

    if mode_id not in modes:
        raise UnknownModeError(f"Unknown {Variant(variant).value} mode: {mode_id}")

    return modes[mode_id]


def modes_for(variant) -> List[GameConfig]:
    return list(_REGISTRY[Variant(variant)].values())
