import logging
from typing import List, Optional, Sequence

from cuescore.balls import CENTURY_BALLS, BallLike, find_ball
from cuescore.engine import Clock, GameEngine, utc_now
from cuescore.modes import Variant, resolve
from cuescore.models import (
    ActionResult,
    ActionWarning,
    CenturyDeductEvent,
    CenturyGameEndEvent,
    CenturyGameStartEvent,
    CenturyFoulPenaltyEvent,
    CenturyPotEvent,
    CenturyResetScoreEvent,
    CenturyState,
    CenturyTurnChangeEvent,
    Player,
    Rejection,
    RejectionReason,
    Scoreboard,
    Team,
)
from cuescore.win import (
    century_final_scores,
    check_century_target,
    evaluate_century_manual,
    winner_label,
)

logger = logging.getLogger(__name__)


class CenturyGame(GameEngine):
    """
    Century recorder: first player (or team) to hit the target score
    exactly wins. Going past the target is only a warning.

    Team totals are always re-summed from the players, never adjusted
    incrementally. Once a winner is set every action is rejected,
    undo included.
    """

    variant = Variant.CENTURY
    state_type = CenturyState

    @classmethod
    def start(
        cls,
        mode_id: str = "singles-2",
        names: Optional[Sequence[str]] = None,
        *,
        clock: Optional[Clock] = None,
    ) -> "CenturyGame":
        config = resolve(Variant.CENTURY, mode_id)
        names = list(names or [])

        players = []
        for i in range(config.num_players):
            team = None
            if config.is_team_game:
                team = Team.A if i % 2 == 0 else Team.B
            players.append(Player(id=i + 1, name=names[i] if i < len(names) else "", team=team))

        clock = clock or utc_now
        state = CenturyState(mode=config, players=players)
        state.events.append(
            CenturyGameStartEvent(
                timestamp=clock(),
                mode_label=config.label,
                target_score=config.target_score,
                player_names=tuple(p.display_name for p in players),
            )
        )

        logger.info("Century %s started, target %d", config.mode_id, config.target_score)
        return cls(state, clock=clock)

    # =========================================================
    # PUBLIC API
    # =========================================================

    def pot(self, ball: BallLike) -> ActionResult:
        return self._transition("pot", lambda s, w: self._apply_ball(s, ball, w, deduct=False))

    def deduct(self, ball: BallLike) -> ActionResult:
        return self._transition("deduct", lambda s, w: self._apply_ball(s, ball, w, deduct=True))

    def foul_penalty(self, points: Optional[int] = None) -> ActionResult:
        return self._transition("foul_penalty", lambda s, w: self._apply_foul_penalty(s, points, w))

    def reset_score(self) -> ActionResult:
        return self._transition("reset_score", self._apply_reset)

    def end_turn(self) -> ActionResult:
        return self._transition("end_turn", lambda s, w: self._apply_end_turn(s))

    def end_game(self) -> ActionResult:
        return self._transition("end_game", lambda s, w: self._apply_end_game(s))

    def scoreboard(self) -> Scoreboard:
        s = self.state
        player = s.active_player

        if s.is_team_game:
            scores = {f"team{team.value}": score for team, score in s.team_scores.items()}
            labels = {f"team{team.value}": team.label for team in s.team_scores}
        else:
            scores = {f"player{p.id}": p.score for p in s.players}
            labels = {f"player{p.id}": p.display_name for p in s.players}

        return Scoreboard(
            variant=self.variant.value,
            mode_id=s.mode.mode_id,
            event_count=len(s.events),
            undo_depth=self.history.depth,
            current_player_id=player.id if player else None,
            current_player_name=player.display_name if player else None,
            scores=scores,
            labels=labels,
            is_finished=self.is_finished,
            winner=winner_label(s.winner, s.players),
            target_score=s.target_score,
        )

    # =========================================================
    # TRANSITIONS
    # =========================================================

    def _apply_ball(
        self,
        s: CenturyState,
        ball: BallLike,
        warnings: List[ActionWarning],
        *,
        deduct: bool,
    ) -> Optional[Rejection]:
        resolved = find_ball(CENTURY_BALLS, ball)
        if resolved is None:
            return Rejection(RejectionReason.UNKNOWN_BALL, f"{ball} is not a century ball")

        player = s.active_player
        player.score += -resolved.value if deduct else resolved.value
        self._recompute_team_scores(s)

        event_cls = CenturyDeductEvent if deduct else CenturyPotEvent
        s.events.append(
            event_cls(
                timestamp=self._now(),
                player_id=player.id,
                ball=resolved,
                new_player_score=player.score,
                new_team_score=self._team_score(s, player),
            )
        )

        self._check_target(s, player, warnings)

        # a deduction always ends the visit
        if deduct and s.winner is None and len(s.players) > 1:
            self._advance_turn(s)
        return None

    def _apply_foul_penalty(
        self,
        s: CenturyState,
        points: Optional[int],
        warnings: List[ActionWarning],
    ) -> Optional[Rejection]:
        penalty = s.mode.foul_points if points is None else points
        if penalty < 0:
            return Rejection(RejectionReason.INVALID_PENALTY, "points must be >= 0")

        player = s.active_player
        player.score -= penalty
        self._recompute_team_scores(s)

        s.events.append(
            CenturyFoulPenaltyEvent(
                timestamp=self._now(),
                player_id=player.id,
                points_deducted=penalty,
                new_player_score=player.score,
                new_team_score=self._team_score(s, player),
            )
        )

        self._check_target(s, player, warnings)

        if s.winner is None and len(s.players) > 1:
            self._advance_turn(s)
        return None

    def _apply_reset(self, s: CenturyState, warnings: List[ActionWarning]) -> Optional[Rejection]:
        player = s.active_player
        previous_score = player.score
        previous_team_score = self._team_score(s, player)

        player.score = 0
        self._recompute_team_scores(s)

        s.events.append(
            CenturyResetScoreEvent(
                timestamp=self._now(),
                player_id=player.id,
                previous_player_score=previous_score,
                new_player_score=0,
                previous_team_score=previous_team_score,
                new_team_score=self._team_score(s, player),
            )
        )

        if previous_score != 0:
            self._check_target(s, player, warnings)
        return None

    def _apply_end_turn(self, s: CenturyState) -> Optional[Rejection]:
        if len(s.players) <= 1:
            return Rejection(RejectionReason.SINGLE_PLAYER, "Only one player in the game")

        self._advance_turn(s)
        return None

    def _apply_end_game(self, s: CenturyState) -> Optional[Rejection]:
        s.winner = evaluate_century_manual(s)
        self._append_game_end(s)
        return None

    # =========================================================
    # HELPERS
    # =========================================================

    @staticmethod
    def _recompute_team_scores(s: CenturyState) -> None:
        totals = {Team.A: 0, Team.B: 0}
        if s.is_team_game:
            for p in s.players:
                if p.team is not None:
                    totals[p.team] += p.score
        s.team_scores = totals

    @staticmethod
    def _team_score(s: CenturyState, player: Player) -> Optional[int]:
        if s.is_team_game and player.team is not None:
            return s.team_scores[player.team]
        return None

    def _check_target(self, s: CenturyState, player: Player, warnings: List[ActionWarning]) -> None:
        winner, overshoot = check_century_target(s, player)

        if winner is not None:
            s.winner = winner
            self._append_game_end(s)
            return

        if overshoot:
            if s.is_team_game and player.team is not None:
                who, score = player.team.label, s.team_scores[player.team]
            else:
                who, score = player.display_name, player.score
            warnings.append(
                ActionWarning(
                    "overshoot",
                    f"{who}'s score is {score}. Must hit {s.target_score} exactly.",
                )
            )

    def _advance_turn(self, s: CenturyState) -> None:
        previous = s.active_player
        s.current_player_index = (s.current_player_index + 1) % len(s.players)

        s.events.append(
            CenturyTurnChangeEvent(
                timestamp=self._now(),
                previous_player_id=previous.id,
                next_player_id=s.active_player.id,
            )
        )

    def _append_game_end(self, s: CenturyState) -> None:
        label = winner_label(s.winner, s.players)
        s.events.append(
            CenturyGameEndEvent(
                timestamp=self._now(),
                winner=label,
                final_scores=century_final_scores(s),
                target_score=s.target_score,
            )
        )
        logger.info("Century game ended: %s", label)
