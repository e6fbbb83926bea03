import logging
from typing import List, Optional, Sequence

from cuescore.balls import (
    COLOR_SEQUENCE,
    SNOOKER_BALLS,
    Ball,
    BallLike,
    BallName,
    find_ball,
    next_in_sequence,
)
from cuescore.config import SNOOKER_FOUL_POINTS
from cuescore.engine import Clock, GameEngine, utc_now
from cuescore.modes import Variant, resolve
from cuescore.models import (
    ActionResult,
    ActionWarning,
    BreakCompletedEvent,
    FoulEvent,
    FrameEndEvent,
    FrameStartEvent,
    MissEvent,
    Phase,
    Player,
    Rejection,
    RejectionReason,
    Scoreboard,
    SnookerState,
    Team,
)
from cuescore.win import (
    evaluate_snooker_frame,
    snooker_frame_scores,
    snooker_side,
    snooker_side_label,
    winner_label,
)

logger = logging.getLogger(__name__)


def _initial_state(mode_id: str, players: List[Player], timestamp: str) -> SnookerState:
    state = SnookerState(mode_id=mode_id, players=players)
    state.events.append(
        FrameStartEvent(
            timestamp=timestamp,
            game_mode=mode_id,
            player_names=tuple(p.display_name for p in players),
        )
    )
    return state


class SnookerGame(GameEngine):
    """
    Snooker frame recorder.

    Phases: REDS_AND_COLORS -> COLORS_SEQUENCE. A pot never passes the
    turn; foul and miss end the visit. The frame ends on the final Black
    or on end_frame(), and the higher side wins (equal is a draw).
    A finished frame only accepts rename_player and new_frame.
    """

    variant = Variant.SNOOKER
    state_type = SnookerState

    @classmethod
    def start(
        cls,
        mode_id: str = "singles",
        names: Optional[Sequence[str]] = None,
        *,
        clock: Optional[Clock] = None,
    ) -> "SnookerGame":
        config = resolve(Variant.SNOOKER, mode_id)
        names = list(names or [])

        players = [
            Player(
                id=i + 1,
                name=names[i] if i < len(names) else "",
                team=(Team.A if i % 2 == 0 else Team.B) if config.is_team_game else None,
            )
            for i in range(config.num_players)
        ]

        clock = clock or utc_now
        game = cls(_initial_state(config.mode_id, players, clock()), clock=clock)
        logger.info("Snooker %s frame started", config.mode_id)
        return game

    # =========================================================
    # PUBLIC API
    # =========================================================

    def pot(self, ball: BallLike) -> ActionResult:
        return self._transition("pot", lambda s, w: self._apply_pot(s, ball, w))

    def foul(self, penalty_points: int = SNOOKER_FOUL_POINTS) -> ActionResult:
        return self._transition("foul", lambda s, w: self._apply_foul(s, penalty_points))

    def miss(self) -> ActionResult:
        return self._transition("miss", lambda s, w: self._apply_miss(s))

    def end_turn(self) -> ActionResult:
        """
        Hand the table to the next player. Recorded as a miss.
        """
        return self.miss()

    def end_frame(self) -> ActionResult:
        return self._transition("end_frame", lambda s, w: self._finish_frame(s))

    def new_frame(self) -> ActionResult:
        """
        Reset the frame, keeping players (ids, names, teams).
        The event log starts over and the undo history is cleared.
        """
        if not self.state.players:
            return self._reject(RejectionReason.NOT_INITIALIZED, "Game is not initialized")

        players = [Player(id=p.id, name=p.name, team=p.team) for p in self.state.players]
        self.state = _initial_state(self.state.mode_id, players, self._now())
        self.history.clear()

        logger.info("Snooker new frame started")
        return ActionResult(accepted=True, state=self.state, events=list(self.state.events))

    def expected_balls(self) -> List[BallName]:
        s = self.state

        if s.winner is not None:
            return []

        if s.phase is Phase.COLORS_SEQUENCE:
            return [s.next_color]

        if s.last_pot_was_red or s.reds_remaining == 0:
            return list(COLOR_SEQUENCE)

        return [BallName.RED]

    def scoreboard(self) -> Scoreboard:
        s = self.state
        player = s.active_player
        scores = snooker_frame_scores(s)

        return Scoreboard(
            variant=self.variant.value,
            mode_id=s.mode_id,
            event_count=len(s.events),
            undo_depth=self.history.depth,
            current_player_id=player.id if player else None,
            current_player_name=player.display_name if player else None,
            scores=scores,
            labels=dict(zip(scores, (snooker_side_label(s, Team.A), snooker_side_label(s, Team.B)))),
            is_finished=self.is_finished,
            winner=winner_label(s.winner, s.players),
            current_break=s.current_break,
            reds_remaining=s.reds_remaining,
            phase=s.phase.value,
            expected_balls=tuple(b.value for b in self.expected_balls()),
        )

    # =========================================================
    # TRANSITIONS
    # =========================================================

    def _apply_pot(self, s: SnookerState, ball: BallLike, warnings: List[ActionWarning]) -> Optional[Rejection]:
        resolved = find_ball(SNOOKER_BALLS, ball)
        if resolved is None:
            return Rejection(RejectionReason.UNKNOWN_BALL, f"{ball} is not a snooker ball")

        wrong = self._wrong_ball_message(s, resolved)
        if wrong:
            warnings.append(ActionWarning("wrong_ball", wrong))
            return Rejection(RejectionReason.WRONG_BALL, wrong)

        player = s.active_player
        player.score += resolved.value
        s.team_scores[snooker_side(s, player)] += resolved.value
        s.current_break_pots.append(resolved)

        if s.phase is Phase.REDS_AND_COLORS:
            if resolved.name is BallName.RED:
                s.reds_remaining -= 1
                s.last_pot_was_red = True
            else:
                s.last_pot_was_red = False
                if s.reds_remaining == 0:
                    s.phase = Phase.COLORS_SEQUENCE
                    s.next_color = BallName.YELLOW
            return None

        following = next_in_sequence(resolved.name)
        if following is not None:
            s.next_color = following
            return None

        # final Black
        return self._finish_frame(s)

    def _apply_foul(self, s: SnookerState, penalty_points: int) -> Optional[Rejection]:
        if penalty_points < 0:
            return Rejection(RejectionReason.INVALID_PENALTY, "penalty_points must be >= 0")

        player = s.active_player
        beneficiary_team = snooker_side(s, player).opponent

        self._finalize_break(s, player)
        s.team_scores[beneficiary_team] += penalty_points

        s.events.append(
            FoulEvent(
                timestamp=self._now(),
                penalized_player_id=player.id,
                beneficiary=snooker_side_label(s, beneficiary_team),
                points_awarded=penalty_points,
            )
        )

        self._end_visit(s)
        return None

    def _apply_miss(self, s: SnookerState) -> Optional[Rejection]:
        player = s.active_player
        self._finalize_break(s, player)

        s.events.append(MissEvent(timestamp=self._now(), player_id=player.id))

        self._end_visit(s)
        return None

    def _finish_frame(self, s: SnookerState) -> Optional[Rejection]:
        self._finalize_break(s, s.active_player)

        s.winner = evaluate_snooker_frame(s)
        label = winner_label(s.winner, s.players)

        s.events.append(
            FrameEndEvent(
                timestamp=self._now(),
                winner=label,
                scores=snooker_frame_scores(s),
            )
        )

        logger.info("Snooker frame ended: %s (%d-%d)", label, *s.player_frame_scores)
        return None

    # =========================================================
    # HELPERS
    # =========================================================

    @staticmethod
    def _wrong_ball_message(s: SnookerState, ball: Ball) -> Optional[str]:
        if s.phase is Phase.COLORS_SEQUENCE and ball.name is not s.next_color:
            return f"Expected {s.next_color.value}, but potted {ball.name.value}. Pot ignored."

        if s.phase is Phase.REDS_AND_COLORS and ball.name is BallName.RED and s.reds_remaining <= 0:
            return "No reds remaining. Pot ignored."

        return None

    def _finalize_break(self, s: SnookerState, player: Player) -> None:
        if player.score > 0:
            player.highest_break = max(player.highest_break, player.score)
            s.events.append(
                BreakCompletedEvent(
                    timestamp=self._now(),
                    player_id=player.id,
                    balls_potted=tuple(s.current_break_pots),
                    points=player.score,
                )
            )

        player.score = 0
        s.current_break_pots = []

    @staticmethod
    def _end_visit(s: SnookerState) -> None:
        s.last_pot_was_red = False

        if s.reds_remaining == 0 and s.phase is Phase.REDS_AND_COLORS:
            s.phase = Phase.COLORS_SEQUENCE
            s.next_color = BallName.YELLOW

        s.current_player_index = (s.current_player_index + 1) % len(s.players)
