from copy import deepcopy

import pytest

from cuescore.century import CenturyGame
from cuescore.modes import GameConfig, Variant
from cuescore.models import (
    CenturyDeductEvent,
    CenturyFoulPenaltyEvent,
    CenturyGameEndEvent,
    CenturyGameStartEvent,
    CenturyPotEvent,
    CenturyResetScoreEvent,
    CenturyState,
    CenturyTurnChangeEvent,
    Player,
    RejectionReason,
    Team,
    Winner,
)

TS = "2026-01-01T00:00:00+00:00"


# ---------- HELPERS ----------

def create_game(mode="singles-2", names=None):
    return CenturyGame.start(mode, names=names, clock=lambda: TS)


def create_solo_game():
    config = GameConfig(
        mode_id="solo",
        variant=Variant.CENTURY,
        num_players=1,
        is_team_game=False,
        label="Practice",
        target_score=100,
    )
    return CenturyGame(CenturyState(mode=config, players=[Player(id=1)]), clock=lambda: TS)


def assert_team_sums(game):
    s = game.state
    for team in Team:
        assert s.team_scores[team] == sum(p.score for p in s.players if p.team is team)


# ---------- INITIALIZATION ----------

def test_start_event_and_players():
    game = create_game("triples", names=["Ann"])
    s = game.state

    assert len(s.players) == 6
    assert [p.team for p in s.players] == [Team.A, Team.B] * 3
    assert s.events == [
        CenturyGameStartEvent(
            timestamp=TS,
            mode_label="Triples (Target 300)",
            target_score=300,
            player_names=("Ann", "Player 2", "Player 3", "Player 4", "Player 5", "Player 6"),
        )
    ]


def test_individual_players_have_no_team():
    game = create_game("singles-3")

    assert all(p.team is None for p in game.state.players)


# ---------- SCORING ----------

def test_pot_uses_century_values():
    game = create_game()

    game.pot("Red")
    result = game.pot("Green Stripe")

    assert game.state.players[0].score == 26
    assert result.events == [
        CenturyPotEvent(
            timestamp=TS,
            player_id=1,
            ball=result.events[0].ball,
            new_player_score=26,
            new_team_score=None,
        )
    ]
    assert result.events[0].ball.value == 11
    # potting keeps the turn
    assert game.state.current_player_index == 0


def test_scenario_a_exact_target_wins():
    game = create_game()

    for _ in range(14):
        game.pot("Black")
    assert game.state.players[0].score == 98

    result = game.pot("Yellow")

    assert game.state.winner == Winner.of_player(1)
    last = game.state.events[-1]
    assert isinstance(last, CenturyGameEndEvent)
    assert last.winner == "Player 1"
    assert last.final_scores == {"Player 1": 100, "Player 2": 0}
    assert last.target_score == 100
    assert [type(e) for e in result.events] == [CenturyPotEvent, CenturyGameEndEvent]


def test_overshoot_is_warning_not_win():
    game = create_game()
    for _ in range(14):
        game.pot("Black")

    result = game.pot("Black")

    assert result.accepted
    assert game.state.players[0].score == 105
    assert game.state.winner is None
    assert [w.code for w in result.warnings] == ["overshoot"]
    assert "Must hit 100 exactly" in result.warnings[0].message

    # play continues
    assert game.pot("Yellow").accepted


def test_deduct_can_win_without_passing_turn():
    game = create_game()
    for _ in range(15):
        game.pot("Black")

    result = game.deduct("Blue")

    assert game.state.winner == Winner.of_player(1)
    assert [type(e) for e in result.events] == [CenturyDeductEvent, CenturyGameEndEvent]
    assert game.state.current_player_index == 0


def test_scenario_d_doubles_deduct_ends_turn():
    game = create_game("doubles")
    for _ in range(3):
        game.pot("Red")
    game.pot("Blue")
    assert game.state.team_a_score == 50

    result = game.deduct("Blue")

    assert game.state.team_a_score == 45
    assert game.state.players[0].score == 45
    assert [type(e) for e in result.events] == [CenturyDeductEvent, CenturyTurnChangeEvent]
    assert result.events[0].new_team_score == 45
    assert result.events[1] == CenturyTurnChangeEvent(timestamp=TS, previous_player_id=1, next_player_id=2)
    assert game.state.current_player_index == 1


def test_negative_scores_are_not_clamped():
    game = create_game()

    game.deduct("Red")

    assert game.state.players[0].score == -15


def test_foul_penalty_deducts_and_passes_turn():
    game = create_game()
    game.pot("Pink")

    result = game.foul_penalty()

    assert game.state.players[0].score == 2
    assert [type(e) for e in result.events] == [CenturyFoulPenaltyEvent, CenturyTurnChangeEvent]
    assert result.events[0].points_deducted == 4
    assert game.state.current_player_index == 1


def test_reset_score_records_previous_value():
    game = create_game("doubles")
    game.pot("Red")
    game.end_turn()
    game.pot("Black")
    game.end_turn()
    game.pot("Green")  # player 3, team A

    result = game.reset_score()

    assert result.events == [
        CenturyResetScoreEvent(
            timestamp=TS,
            player_id=3,
            previous_player_score=3,
            new_player_score=0,
            previous_team_score=18,
            new_team_score=15,
        )
    ]
    assert game.state.team_scores == {Team.A: 15, Team.B: 7}


def test_team_reaching_target_wins():
    game = create_game("doubles")
    for _ in range(13):
        game.pot("Red")
    game.pot("Yellow")
    game.end_turn()
    game.end_turn()

    # player 3 is on team A with 197 already banked by player 1
    result = game.pot("Green")

    assert game.state.team_a_score == 200
    assert game.state.players[2].score == 3
    assert game.state.winner == Winner.of_team(Team.A)
    assert result.events[-1].winner == "Team A"
    assert result.events[-1].final_scores == {"Team A": 200, "Team B": 0}


# ---------- TURN HANDLING ----------

def test_end_turn_round_robin():
    game = create_game("singles-5")

    for expected in [1, 2, 3, 4, 0, 1]:
        result = game.end_turn()
        assert game.state.current_player_index == expected
        assert isinstance(result.events[0], CenturyTurnChangeEvent)


def test_single_player_cannot_end_turn():
    game = create_solo_game()

    result = game.end_turn()

    assert result.rejection.reason is RejectionReason.SINGLE_PLAYER
    assert game.history.depth == 0


def test_single_player_deduct_keeps_turn():
    game = create_solo_game()

    result = game.deduct("Blue")

    assert [type(e) for e in result.events] == [CenturyDeductEvent]
    assert game.state.current_player_index == 0


# ---------- MANUAL END ----------

def test_end_game_strict_max():
    game = create_game("singles-3", names=["Ann", "Bob", "Cy"])
    game.pot("Red")
    game.end_turn()
    game.pot("Black")

    result = game.end_game()

    assert game.state.winner == Winner.of_player(1)
    assert result.events[-1].winner == "Ann"
    assert result.events[-1].final_scores == {"Ann": 15, "Bob": 7, "Cy": 0}


def test_end_game_tie_is_draw():
    game = create_game("singles-3")
    game.pot("Black")
    game.end_turn()
    game.pot("Black")

    game.end_game()

    assert game.state.winner == Winner.draw()
    assert game.state.events[-1].winner == "Draw"


def test_end_game_team_totals():
    game = create_game("doubles")
    game.end_turn()
    game.pot("Blue")  # team B

    result = game.end_game()

    assert game.state.winner == Winner.of_team(Team.B)
    assert result.events[-1].final_scores == {"Team A": 0, "Team B": 5}


@pytest.mark.parametrize("action, args", [
    ("pot", ("Red",)),
    ("deduct", ("Red",)),
    ("foul_penalty", ()),
    ("reset_score", ()),
    ("end_turn", ()),
    ("end_game", ()),
    ("undo", ()),
])
def test_everything_rejected_after_winner(action, args):
    game = create_game()
    game.end_game()
    before = deepcopy(game.state)

    result = getattr(game, action)(*args)

    assert result.rejection.reason is RejectionReason.GAME_OVER
    assert game.state == before


# ---------- INVARIANTS ----------

@pytest.mark.parametrize("mode", ["doubles", "triples", "quadruples"])
def test_team_sums_always_match_players(mode):
    game = create_game(mode)
    script = ["Red", "Black", "deduct", "Pink", "foul", "Green Stripe", "reset", "end_turn"] * 4

    for step in script:
        if step == "deduct":
            game.deduct("Yellow")
        elif step == "foul":
            game.foul_penalty()
        elif step == "reset":
            game.reset_score()
        elif step == "end_turn":
            game.end_turn()
        else:
            game.pot(step)
        assert_team_sums(game)


def test_unknown_ball_rejected():
    game = create_game()

    result = game.pot("Cue")

    assert result.rejection.reason is RejectionReason.UNKNOWN_BALL


def test_scoreboard():
    game = create_game("doubles")
    game.pot("Red")

    board = game.scoreboard()

    assert board.scores == {"teamA": 15, "teamB": 0}
    assert board.labels == {"teamA": "Team A", "teamB": "Team B"}
    assert board.target_score == 200
    assert board.current_player_id == 1
    assert board.winner is None


def test_scoreboard_keeps_players_with_same_name_apart():
    game = create_game("singles-3", names=["Ann", "Ann", "Bob"])
    game.pot("Red")
    game.end_turn()
    game.pot("Blue")

    board = game.scoreboard()

    assert board.scores == {"player1": 15, "player2": 5, "player3": 0}
    assert board.labels == {"player1": "Ann", "player2": "Ann", "player3": "Bob"}
