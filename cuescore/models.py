from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from cuescore.balls import Ball, BallName
from cuescore.config import REDS_PER_FRAME
from cuescore.modes import GameConfig


class Team(str, Enum):
    A = "A"
    B = "B"

    @property
    def opponent(self) -> "Team":
        return Team.B if self is Team.A else Team.A

    @property
    def label(self) -> str:
        return f"Team {self.value}"


class Phase(str, Enum):
    REDS_AND_COLORS = "reds_and_colors"
    COLORS_SEQUENCE = "colors_sequence"


@dataclass
class Player:
    id: int
    name: str = ""
    score: int = 0
    highest_break: int = 0
    team: Optional[Team] = None

    @property
    def display_name(self) -> str:
        return self.name or f"Player {self.id}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "score": self.score,
            "highest_break": self.highest_break,
            "team": self.team.value if self.team else None,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "Player":
        return Player(
            id=int(d["id"]),
            name=str(d.get("name", "") or ""),
            score=int(d.get("score", 0)),
            highest_break=int(d.get("highest_break", 0)),
            team=(Team(d["team"]) if d.get("team") else None),
        )


# =========================================================
# WINNER
# =========================================================

class WinnerKind(str, Enum):
    PLAYER = "player"
    TEAM = "team"
    DRAW = "draw"


@dataclass(frozen=True)
class Winner:
    """
    Outcome of a frame or game. "No winner yet" is plain None.
    """
    kind: WinnerKind
    player_id: Optional[int] = None
    team: Optional[Team] = None

    def __post_init__(self):
        if self.kind is WinnerKind.PLAYER and self.player_id is None:
            raise ValueError("player winner needs a player_id")
        if self.kind is WinnerKind.TEAM and self.team is None:
            raise ValueError("team winner needs a team")

    @staticmethod
    def of_player(player_id: int) -> "Winner":
        return Winner(WinnerKind.PLAYER, player_id=player_id)

    @staticmethod
    def of_team(team: Team) -> "Winner":
        return Winner(WinnerKind.TEAM, team=team)

    @staticmethod
    def draw() -> "Winner":
        return Winner(WinnerKind.DRAW)

    @property
    def is_draw(self) -> bool:
        return self.kind is WinnerKind.DRAW

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "player_id": self.player_id,
            "team": self.team.value if self.team else None,
        }

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> Optional["Winner"]:
        if not d:
            return None
        return Winner(
            kind=WinnerKind(d["kind"]),
            player_id=(int(d["player_id"]) if d.get("player_id") is not None else None),
            team=(Team(d["team"]) if d.get("team") else None),
        )


# =========================================================
# EVENTS
# =========================================================

@dataclass(frozen=True)
class FrameStartEvent:
    timestamp: str
    game_mode: str
    player_names: Tuple[str, ...]
    type: ClassVar[str] = "frame_start"


@dataclass(frozen=True)
class BreakCompletedEvent:
    timestamp: str
    player_id: int
    balls_potted: Tuple[Ball, ...]
    points: int
    type: ClassVar[str] = "break_completed"


@dataclass(frozen=True)
class FoulEvent:
    timestamp: str
    penalized_player_id: int
    beneficiary: str  # display name in singles, "Team X" in doubles
    points_awarded: int
    type: ClassVar[str] = "foul"


@dataclass(frozen=True)
class MissEvent:
    timestamp: str
    player_id: int
    type: ClassVar[str] = "miss"


@dataclass(frozen=True)
class FrameEndEvent:
    timestamp: str
    winner: str
    scores: Dict[str, int]
    type: ClassVar[str] = "frame_end"


@dataclass(frozen=True)
class CenturyGameStartEvent:
    timestamp: str
    mode_label: str
    target_score: int
    player_names: Tuple[str, ...]
    type: ClassVar[str] = "century_game_start"


@dataclass(frozen=True)
class CenturyPotEvent:
    timestamp: str
    player_id: int
    ball: Ball
    new_player_score: int
    new_team_score: Optional[int] = None
    type: ClassVar[str] = "century_pot"


@dataclass(frozen=True)
class CenturyDeductEvent:
    timestamp: str
    player_id: int
    ball: Ball
    new_player_score: int
    new_team_score: Optional[int] = None
    type: ClassVar[str] = "century_deduct"


@dataclass(frozen=True)
class CenturyFoulPenaltyEvent:
    timestamp: str
    player_id: int
    points_deducted: int
    new_player_score: int
    new_team_score: Optional[int] = None
    type: ClassVar[str] = "century_foul_penalty"


@dataclass(frozen=True)
class CenturyResetScoreEvent:
    timestamp: str
    player_id: int
    previous_player_score: int
    new_player_score: int
    previous_team_score: Optional[int] = None
    new_team_score: Optional[int] = None
    type: ClassVar[str] = "century_reset_score"


@dataclass(frozen=True)
class CenturyTurnChangeEvent:
    timestamp: str
    previous_player_id: int
    next_player_id: int
    type: ClassVar[str] = "century_turn_change"


@dataclass(frozen=True)
class CenturyGameEndEvent:
    timestamp: str
    winner: str
    final_scores: Dict[str, int]
    target_score: int
    type: ClassVar[str] = "century_game_end"


SnookerEvent = Union[FrameStartEvent, BreakCompletedEvent, FoulEvent, MissEvent, FrameEndEvent]
CenturyEvent = Union[
    CenturyGameStartEvent,
    CenturyPotEvent,
    CenturyDeductEvent,
    CenturyFoulPenaltyEvent,
    CenturyResetScoreEvent,
    CenturyTurnChangeEvent,
    CenturyGameEndEvent,
]
Event = Union[SnookerEvent, CenturyEvent]

EVENT_TYPES: Dict[str, type] = {
    cls.type: cls
    for cls in (
        FrameStartEvent,
        BreakCompletedEvent,
        FoulEvent,
        MissEvent,
        FrameEndEvent,
        CenturyGameStartEvent,
        CenturyPotEvent,
        CenturyDeductEvent,
        CenturyFoulPenaltyEvent,
        CenturyResetScoreEvent,
        CenturyTurnChangeEvent,
        CenturyGameEndEvent,
    )
}

START_EVENT_TYPES = (FrameStartEvent, CenturyGameStartEvent)


def event_to_dict(event: Event) -> Dict[str, Any]:
    d: Dict[str, Any] = {"type": event.type}
    for f in fields(event):
        value = getattr(event, f.name)
        if isinstance(value, Ball):
            value = value.to_dict()
        elif f.name == "balls_potted":
            value = [b.to_dict() for b in value]
        elif isinstance(value, tuple):
            value = list(value)
        elif isinstance(value, dict):
            value = dict(value)
        d[f.name] = value
    return d


_FIELD_DECODERS = {
    "ball": Ball.from_dict,
    "balls_potted": lambda raw: tuple(Ball.from_dict(b) for b in raw),
    "player_names": lambda raw: tuple(str(n) for n in raw),
    "scores": lambda raw: {str(k): int(v) for k, v in raw.items()},
    "final_scores": lambda raw: {str(k): int(v) for k, v in raw.items()},
}


def event_from_dict(d: Dict[str, Any]) -> Event:
    event_type = d.get("type")
    if event_type not in EVENT_TYPES:
        raise ValueError(f"Unknown event type: {event_type}")

    cls = EVENT_TYPES[event_type]
    kwargs = {}
    for f in fields(cls):
        if f.name not in d:
            continue
        raw = d[f.name]
        decoder = _FIELD_DECODERS.get(f.name)
        kwargs[f.name] = decoder(raw) if decoder and raw is not None else raw

    return cls(**kwargs)


# =========================================================
# MATCH STATE
# =========================================================

def _zero_team_scores() -> Dict[Team, int]:
    return {Team.A: 0, Team.B: 0}


def _active(players: List[Player], index: int) -> Optional[Player]:
    if 0 <= index < len(players):
        return players[index]
    return None


@dataclass
class SnookerState:
    """
    Live state of one Snooker frame.

    Frame scores are kept per side in team_scores. In singles player 1
    is side A and player 2 side B; in doubles the sides are the teams.
    Player.score holds the running break only.
    """
    mode_id: str
    players: List[Player]
    team_scores: Dict[Team, int] = field(default_factory=_zero_team_scores)
    current_player_index: int = 0
    reds_remaining: int = REDS_PER_FRAME
    phase: Phase = Phase.REDS_AND_COLORS
    last_pot_was_red: bool = False
    next_color: BallName = BallName.YELLOW
    current_break_pots: List[Ball] = field(default_factory=list)
    winner: Optional[Winner] = None
    events: List[Event] = field(default_factory=list)

    @property
    def is_doubles(self) -> bool:
        return self.mode_id == "doubles"

    @property
    def active_player(self) -> Optional[Player]:
        return _active(self.players, self.current_player_index)

    @property
    def current_break(self) -> int:
        player = self.active_player
        return player.score if player else 0

    @property
    def player_frame_scores(self) -> Tuple[int, int]:
        return self.team_scores[Team.A], self.team_scores[Team.B]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode_id": self.mode_id,
            "players": [p.to_dict() for p in self.players],
            "team_scores": {t.value: s for t, s in self.team_scores.items()},
            "current_player_index": self.current_player_index,
            "reds_remaining": self.reds_remaining,
            "phase": self.phase.value,
            "last_pot_was_red": self.last_pot_was_red,
            "next_color": self.next_color.value,
            "current_break_pots": [b.to_dict() for b in self.current_break_pots],
            "winner": self.winner.to_dict() if self.winner else None,
            "events": [event_to_dict(e) for e in self.events],
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "SnookerState":
        team_scores = _zero_team_scores()
        for key, value in (d.get("team_scores") or {}).items():
            team_scores[Team(key)] = int(value)

        return SnookerState(
            mode_id=str(d["mode_id"]),
            players=[Player.from_dict(p) for p in d["players"]],
            team_scores=team_scores,
            current_player_index=int(d.get("current_player_index", 0)),
            reds_remaining=int(d.get("reds_remaining", REDS_PER_FRAME)),
            phase=Phase(d.get("phase", Phase.REDS_AND_COLORS.value)),
            last_pot_was_red=bool(d.get("last_pot_was_red", False)),
            next_color=BallName(d.get("next_color", BallName.YELLOW.value)),
            current_break_pots=[Ball.from_dict(b) for b in d.get("current_break_pots", []) or []],
            winner=Winner.from_dict(d.get("winner")),
            events=[event_from_dict(e) for e in d.get("events", []) or []],
        )


@dataclass
class CenturyState:
    """
    Live state of one Century game.

    team_scores is derived from the players and only meaningful in team
    games; it is recomputed after every score change.
    """
    mode: GameConfig
    players: List[Player]
    team_scores: Dict[Team, int] = field(default_factory=_zero_team_scores)
    current_player_index: int = 0
    winner: Optional[Winner] = None
    events: List[Event] = field(default_factory=list)

    @property
    def is_team_game(self) -> bool:
        return self.mode.is_team_game

    @property
    def target_score(self) -> int:
        return self.mode.target_score or 0

    @property
    def active_player(self) -> Optional[Player]:
        return _active(self.players, self.current_player_index)

    @property
    def team_a_score(self) -> int:
        return self.team_scores[Team.A]

    @property
    def team_b_score(self) -> int:
        return self.team_scores[Team.B]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.to_dict(),
            "players": [p.to_dict() for p in self.players],
            "team_scores": {t.value: s for t, s in self.team_scores.items()},
            "current_player_index": self.current_player_index,
            "winner": self.winner.to_dict() if self.winner else None,
            "events": [event_to_dict(e) for e in self.events],
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "CenturyState":
        team_scores = _zero_team_scores()
        for key, value in (d.get("team_scores") or {}).items():
            team_scores[Team(key)] = int(value)

        return CenturyState(
            mode=GameConfig.from_dict(d["mode"]),
            players=[Player.from_dict(p) for p in d["players"]],
            team_scores=team_scores,
            current_player_index=int(d.get("current_player_index", 0)),
            winner=Winner.from_dict(d.get("winner")),
            events=[event_from_dict(e) for e in d.get("events", []) or []],
        )


# =========================================================
# ACTION RESULTS
# =========================================================

class RejectionReason(str, Enum):
    WRONG_BALL = "wrong_ball"
    UNKNOWN_BALL = "unknown_ball"
    GAME_OVER = "game_over"
    NOT_INITIALIZED = "not_initialized"
    NO_ACTIVE_PLAYER = "no_active_player"
    SINGLE_PLAYER = "single_player"
    NOTHING_TO_UNDO = "nothing_to_undo"
    UNKNOWN_PLAYER = "unknown_player"
    INVALID_PENALTY = "invalid_penalty"


@dataclass(frozen=True)
class Rejection:
    reason: RejectionReason
    message: str = ""


@dataclass(frozen=True)
class ActionWarning:
    code: str  # "wrong_ball" | "overshoot"
    message: str


@dataclass
class ActionResult:
    accepted: bool
    state: Any
    events: List[Event] = field(default_factory=list)
    warnings: List[ActionWarning] = field(default_factory=list)
    rejection: Optional[Rejection] = None

    @property
    def rejected(self) -> bool:
        return not self.accepted

    @property
    def winner(self) -> Optional[Winner]:
        return self.state.winner if self.state is not None else None


# =========================================================
# READ MODEL
# =========================================================

@dataclass(frozen=True)
class Scoreboard:
    """
    Flat read model of a game for renderers.
    scores and labels share stable keys: "player<id>" per player or
    "teamA"/"teamB" per side, so equal display names never collide.
    """
    variant: str
    mode_id: str
    event_count: int
    undo_depth: int
    current_player_id: Optional[int]
    current_player_name: Optional[str]
    scores: Dict[str, int]
    labels: Dict[str, str]
    is_finished: bool
    winner: Optional[str]
    current_break: Optional[int] = None
    reds_remaining: Optional[int] = None
    phase: Optional[str] = None
    expected_balls: Tuple[str, ...] = ()
    target_score: Optional[int] = None
