from typing import Dict, List, Optional, Tuple, TypeVar

from cuescore.models import (
    CenturyState,
    Player,
    SnookerState,
    Team,
    Winner,
    WinnerKind,
)

K = TypeVar("K")


def compare_sides(totals: Dict[K, int]) -> Optional[Tuple[K, bool]]:
    """
    Strict-maximum comparison.

    Returns (key, is_draw). is_draw is True when more than one side
    shares the maximum. None for an empty mapping.
    """
    if not totals:
        return None

    best = max(totals.values())
    leaders = [k for k, v in totals.items() if v == best]

    if len(leaders) > 1:
        return leaders[0], True
    return leaders[0], False


# =========================================================
# SNOOKER
# =========================================================

def _side_at(state: SnookerState, index: int) -> Team:
    player = state.players[index]
    if player.team is not None:
        return player.team
    return Team.A if index % 2 == 0 else Team.B


def snooker_side(state: SnookerState, player: Player) -> Team:
    """
    Scoring side of a player. Doubles players carry their team; singles
    players are seated A, B by position.
    """
    for idx, candidate in enumerate(state.players):
        if candidate.id == player.id:
            return _side_at(state, idx)
    raise ValueError(f"Player {player.id} is not in this frame")


def _side_player(state: SnookerState, team: Team) -> Optional[Player]:
    for idx, player in enumerate(state.players):
        if _side_at(state, idx) is team:
            return player
    return None


def evaluate_snooker_frame(state: SnookerState) -> Winner:
    outcome = compare_sides(state.team_scores)
    if outcome is None or outcome[1]:
        return Winner.draw()

    team = outcome[0]
    if state.is_doubles:
        return Winner.of_team(team)

    player = _side_player(state, team)
    return Winner.of_player(player.id) if player else Winner.of_team(team)


def snooker_side_label(state: SnookerState, team: Team) -> str:
    if not state.is_doubles:
        player = _side_player(state, team)
        if player is not None:
            return player.display_name
    return team.label


def snooker_frame_scores(state: SnookerState) -> Dict[str, int]:
    if state.is_doubles:
        return {"teamA": state.team_scores[Team.A], "teamB": state.team_scores[Team.B]}
    return {"player1": state.team_scores[Team.A], "player2": state.team_scores[Team.B]}


# =========================================================
# CENTURY
# =========================================================

def check_century_target(state: CenturyState, player: Player) -> Tuple[Optional[Winner], bool]:
    """
    Natural-win check after a score change by `player`.

    Exactly hitting the target wins; going past it is an overshoot,
    reported to the caller but not terminal.
    """
    target = state.target_score

    if state.is_team_game and player.team is not None:
        score = state.team_scores[player.team]
        if score == target:
            return Winner.of_team(player.team), False
        return None, score > target

    if player.score == target:
        return Winner.of_player(player.id), False
    return None, player.score > target


def evaluate_century_manual(state: CenturyState) -> Winner:
    if state.is_team_game:
        outcome = compare_sides(state.team_scores)
        if outcome is None or outcome[1]:
            return Winner.draw()
        return Winner.of_team(outcome[0])

    outcome = compare_sides({p.id: p.score for p in state.players})
    if outcome is None or outcome[1]:
        return Winner.draw()
    return Winner.of_player(outcome[0])


def century_final_scores(state: CenturyState) -> Dict[str, int]:
    if state.is_team_game:
        return {Team.A.label: state.team_scores[Team.A], Team.B.label: state.team_scores[Team.B]}
    return {p.display_name: p.score for p in state.players}


# =========================================================
# DISPLAY
# =========================================================

def winner_label(winner: Optional[Winner], players: List[Player]) -> Optional[str]:
    if winner is None:
        return None

    if winner.kind is WinnerKind.DRAW:
        return "Draw"

    if winner.kind is WinnerKind.TEAM and winner.team is not None:
        return winner.team.label

    for player in players:
        if player.id == winner.player_id:
            return player.display_name
    return f"Player {winner.player_id}"
