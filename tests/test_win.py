import pytest

from cuescore.modes import resolve
from cuescore.models import (
    CenturyState,
    Player,
    SnookerState,
    Team,
    Winner,
    WinnerKind,
)
from cuescore.win import (
    century_final_scores,
    check_century_target,
    compare_sides,
    evaluate_century_manual,
    evaluate_snooker_frame,
    snooker_frame_scores,
    snooker_side,
    snooker_side_label,
    winner_label,
)


def snooker_state(mode_id="singles", a=0, b=0):
    if mode_id == "doubles":
        players = [Player(id=i + 1, team=Team.A if i % 2 == 0 else Team.B) for i in range(4)]
    else:
        players = [Player(id=1, name="Ann"), Player(id=2)]
    return SnookerState(mode_id=mode_id, players=players, team_scores={Team.A: a, Team.B: b})


def century_state(mode_id, scores):
    config = resolve("century", mode_id)
    players = []
    for i, score in enumerate(scores):
        team = (Team.A if i % 2 == 0 else Team.B) if config.is_team_game else None
        players.append(Player(id=i + 1, score=score, team=team))

    state = CenturyState(mode=config, players=players)
    if config.is_team_game:
        state.team_scores = {
            Team.A: sum(p.score for p in players if p.team is Team.A),
            Team.B: sum(p.score for p in players if p.team is Team.B),
        }
    return state


# ---------- COMPARE_SIDES ----------

@pytest.mark.parametrize("totals, expected", [
    ({}, None),
    ({"a": 3}, ("a", False)),
    ({"a": 3, "b": 5}, ("b", False)),
    ({"a": 5, "b": 5, "c": 1}, ("a", True)),
    ({"a": -2, "b": -7}, ("a", False)),
])
def test_compare_sides(totals, expected):
    assert compare_sides(totals) == expected


# ---------- SNOOKER ----------

def test_snooker_singles_winner_is_player():
    state = snooker_state(a=10, b=40)

    assert evaluate_snooker_frame(state) == Winner.of_player(2)


def test_snooker_doubles_winner_is_team():
    state = snooker_state("doubles", a=60, b=12)

    assert evaluate_snooker_frame(state) == Winner.of_team(Team.A)


def test_snooker_tie_is_draw():
    assert evaluate_snooker_frame(snooker_state(a=20, b=20)).is_draw


def test_snooker_labels_and_scores():
    singles = snooker_state(a=7, b=4)
    doubles = snooker_state("doubles", a=1, b=2)

    assert snooker_side_label(singles, Team.A) == "Ann"
    assert snooker_side_label(singles, Team.B) == "Player 2"
    assert snooker_side_label(doubles, Team.B) == "Team B"
    assert snooker_frame_scores(singles) == {"player1": 7, "player2": 4}
    assert snooker_frame_scores(doubles) == {"teamA": 1, "teamB": 2}


def test_snooker_side_by_seat_or_team():
    singles = snooker_state()
    doubles = snooker_state("doubles")

    assert [snooker_side(singles, p) for p in singles.players] == [Team.A, Team.B]
    assert [snooker_side(doubles, p) for p in doubles.players] == [Team.A, Team.B, Team.A, Team.B]

    with pytest.raises(ValueError):
        snooker_side(singles, Player(id=9))


# ---------- CENTURY ----------

def test_century_exact_target():
    state = century_state("singles-2", [100, 40])

    assert check_century_target(state, state.players[0]) == (Winner.of_player(1), False)
    assert check_century_target(state, state.players[1]) == (None, False)


def test_century_overshoot_flag():
    state = century_state("singles-2", [101, 0])

    assert check_century_target(state, state.players[0]) == (None, True)


def test_century_team_target_uses_team_total():
    # team A: 120 + 80
    state = century_state("doubles", [120, 50, 80, 10])

    assert check_century_target(state, state.players[2]) == (Winner.of_team(Team.A), False)
    assert check_century_target(state, state.players[1]) == (None, False)


@pytest.mark.parametrize("mode, scores, expected", [
    ("singles-3", [10, 30, 20], Winner.of_player(2)),
    ("singles-3", [30, 30, 20], Winner.draw()),
    ("doubles", [10, 30, 10, 5], Winner.of_team(Team.B)),
    ("doubles", [10, 10, 10, 10], Winner.draw()),
])
def test_century_manual_end(mode, scores, expected):
    assert evaluate_century_manual(century_state(mode, scores)) == expected


def test_century_final_scores():
    assert century_final_scores(century_state("singles-2", [5, -3])) == {"Player 1": 5, "Player 2": -3}
    assert century_final_scores(century_state("doubles", [5, 1, 5, 1])) == {"Team A": 10, "Team B": 2}


# ---------- LABELS ----------

def test_winner_label():
    players = [Player(id=1, name="Ann"), Player(id=2)]

    assert winner_label(None, players) is None
    assert winner_label(Winner.draw(), players) == "Draw"
    assert winner_label(Winner.of_team(Team.B), players) == "Team B"
    assert winner_label(Winner.of_player(1), players) == "Ann"
    assert winner_label(Winner.of_player(2), players) == "Player 2"


def test_winner_dict_round_trip():
    winner = Winner.of_team(Team.A)

    assert Winner.from_dict(winner.to_dict()) == winner
    assert Winner.from_dict(None) is None
    assert Winner.from_dict({"kind": "draw"}).kind is WinnerKind.DRAW


@pytest.mark.parametrize("raw", [
    {"kind": "team"},
    {"kind": "team", "team": None, "player_id": 1},
    {"kind": "player"},
])
def test_incomplete_winner_rejected(raw):
    with pytest.raises(ValueError):
        Winner.from_dict(raw)
