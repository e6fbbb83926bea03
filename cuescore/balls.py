from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Union


class BallName(str, Enum):
    RED = "Red"
    YELLOW = "Yellow"
    GREEN = "Green"
    BROWN = "Brown"
    BLUE = "Blue"
    PINK = "Pink"
    BLACK = "Black"
    GREEN_STRIPE = "Green Stripe"


@dataclass(frozen=True)
class Ball:
    name: BallName
    value: int
    color_hex: str = "000000"
    text_color_hex: str = "ffffff"

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name.value,
            "value": self.value,
            "color_hex": self.color_hex,
            "text_color_hex": self.text_color_hex,
        }

    @staticmethod
    def from_dict(d: Dict[str, object]) -> "Ball":
        return Ball(
            name=BallName(d["name"]),
            value=int(d["value"]),
            color_hex=str(d.get("color_hex", "000000")),
            text_color_hex=str(d.get("text_color_hex", "ffffff")),
        )


BallLike = Union[Ball, BallName, str]


SNOOKER_BALLS: List[Ball] = [
    Ball(BallName.RED, 1, "dc2626", "ffffff"),
    Ball(BallName.YELLOW, 2, "facc15", "000000"),
    Ball(BallName.GREEN, 3, "16a34a", "ffffff"),
    Ball(BallName.BROWN, 4, "92400e", "ffffff"),
    Ball(BallName.BLUE, 5, "2563eb", "ffffff"),
    Ball(BallName.PINK, 6, "ec4899", "ffffff"),
    Ball(BallName.BLACK, 7, "000000", "ffffff"),
]

CENTURY_BALLS: List[Ball] = [
    Ball(BallName.YELLOW, 2, "facc15", "000000"),
    Ball(BallName.GREEN, 3, "16a34a", "ffffff"),
    Ball(BallName.BROWN, 4, "92400e", "ffffff"),
    Ball(BallName.BLUE, 5, "2563eb", "ffffff"),
    Ball(BallName.PINK, 6, "ec4899", "ffffff"),
    Ball(BallName.BLACK, 7, "000000", "ffffff"),
    Ball(BallName.RED, 15, "dc2626", "ffffff"),
    Ball(BallName.GREEN_STRIPE, 11, "16a34a", "ffffff"),
]

# Order the colours must be cleared once the reds are gone
COLOR_SEQUENCE: List[BallName] = [
    BallName.YELLOW,
    BallName.GREEN,
    BallName.BROWN,
    BallName.BLUE,
    BallName.PINK,
    BallName.BLACK,
]


def _name_of(ball: BallLike) -> Optional[BallName]:
    if isinstance(ball, Ball):
        return ball.name
    try:
        return BallName(ball)
    except ValueError:
        return None


def find_ball(catalog: Sequence[Ball], ball: BallLike) -> Optional[Ball]:
    """
    Resolve a ball against a catalog by name.

    The catalog entry wins over whatever value the caller passed in,
    so a Red is worth 1 in Snooker and 15 in Century.
    Returns None when the name is not part of the catalog.
    """
    name = _name_of(ball)
    if name is None:
        return None

    for candidate in catalog:
        if candidate.name == name:
            return candidate
    return None


def next_in_sequence(color: BallName) -> Optional[BallName]:
    idx = COLOR_SEQUENCE.index(color)
    if idx + 1 < len(COLOR_SEQUENCE):
        return COLOR_SEQUENCE[idx + 1]
    return None
