from __future__ import annotations

import functools
import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Tuple, Union

import numpy as np

from .board import Board
from .collision import collides, drop_distance, try_descend, try_move, try_rotate
from .pieces import Piece, PieceGenerator
from .placement import lock
from .rules import Difficulty, ScoringRules, apply_score
from .scheduler import ManualScheduler, Scheduler, TimerHandle
from .signals import GAME_OVER, LINE_CLEAR, LOCKED, MOVE, ROTATE, STARTED, STATE_CHANGED, GameSignals


logger = logging.getLogger(__name__)


class Action(IntEnum):
    LEFT = 0
    RIGHT = 1
    ROTATE = 2
    SOFT_DROP = 3
    HARD_DROP = 4
    NONE = 5


class SessionState(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    spawn_row: int = 0


class GameSession:
    """Owns one game: board, pieces, score and the descent timer.

    Commands other than ``start``/``restart``/``stop`` are ignored unless the
    session is playing. Every command runs to completion before returning, so
    collaborators only ever observe whole states.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        scheduler: Optional[Scheduler] = None,
        signals: Optional[GameSignals] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.signals = signals or GameSignals()
        self.rng = random.Random(self.config.random_seed)
        self.generator = PieceGenerator(self.config.width, self.config.spawn_row, self.rng)
        self.board = Board(self.config.width, self.config.height)
        self.state = SessionState.IDLE
        self.difficulty = Difficulty.EASY
        self.player_name = "Player"
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.current_piece: Optional[Piece] = None
        self.next_piece: Piece = self.generator.next()
        self._timer: Optional[TimerHandle] = None
        self._generation = 0

    # ---- state -------------------------------------------------------------

    @property
    def active(self) -> bool:
        return self.state is SessionState.PLAYING

    @property
    def game_over(self) -> bool:
        return self.state is SessionState.GAME_OVER

    @property
    def interval_ms(self) -> int:
        return self.difficulty.interval_ms

    # ---- lifecycle ---------------------------------------------------------

    def start(self, name: Optional[str] = None, difficulty: Union[Difficulty, str] = Difficulty.EASY) -> None:
        self.difficulty = Difficulty.parse(difficulty)
        self.player_name = (name or "").strip() or "Player"
        self._cancel_timer()
        self.board = Board(self.config.width, self.config.height)
        self.score = 0
        self.lines_cleared_total = 0
        self.pieces_locked = 0
        self.current_piece = self.generator.next()
        self.next_piece = self.generator.next()
        self.state = SessionState.PLAYING
        logger.info("game started for %s on %s", self.player_name, self.difficulty)
        self._arm_timer()
        self.signals.emit(STARTED, self, name=self.player_name, difficulty=self.difficulty)
        self._changed()

    def restart(self, difficulty: Union[Difficulty, str, None] = None) -> None:
        self.start(self.player_name, self.difficulty if difficulty is None else difficulty)

    def stop(self) -> None:
        self._cancel_timer()
        if self.state is SessionState.PLAYING:
            logger.info("game stopped at score %d", self.score)
        self.state = SessionState.IDLE
        self._changed()

    # ---- timer -------------------------------------------------------------

    def _arm_timer(self) -> None:
        self._generation += 1
        callback = functools.partial(self._on_timer, self._generation)
        self._timer = self.scheduler.schedule(self.interval_ms, callback)

    def _cancel_timer(self) -> None:
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_timer(self, generation: int) -> None:
        # A tick from a cancelled or superseded timer must not touch state.
        if generation != self._generation or not self.active:
            return
        self._timer = None
        self.tick()
        if self.active:
            self._arm_timer()

    # ---- commands ----------------------------------------------------------

    def tick(self) -> bool:
        """One descent step. Returns True if the piece moved down."""
        if not self.active:
            return False
        return self._descend_or_lock()

    def soft_drop(self) -> bool:
        if not self.active:
            return False
        return self._descend_or_lock()

    def hard_drop(self) -> int:
        """Drop to the floor and lock. Returns the rows travelled."""
        if not self.active:
            return 0
        assert self.current_piece is not None
        distance = drop_distance(self.current_piece, self.board)
        self.current_piece = self.current_piece.moved(d_row=distance)
        self._lock_and_spawn()
        self._changed()
        return distance

    def move_left(self) -> bool:
        return self._shift(-1)

    def move_right(self) -> bool:
        return self._shift(1)

    def rotate(self) -> bool:
        if not self.active:
            return False
        assert self.current_piece is not None
        rotated = try_rotate(self.current_piece, self.board)
        if rotated is None:
            return False
        self.current_piece = rotated
        self.signals.emit(ROTATE, self)
        self._changed()
        return True

    def _shift(self, d_col: int) -> bool:
        if not self.active:
            return False
        assert self.current_piece is not None
        moved = try_move(self.current_piece, self.board, d_col)
        if moved is None:
            return False
        self.current_piece = moved
        self.signals.emit(MOVE, self)
        self._changed()
        return True

    def _descend_or_lock(self) -> bool:
        assert self.current_piece is not None
        advanced = try_descend(self.current_piece, self.board)
        if advanced is not None:
            self.current_piece = advanced
            self._changed()
            return True
        self._lock_and_spawn()
        self._changed()
        return False

    def _lock_and_spawn(self) -> None:
        assert self.current_piece is not None
        piece = self.current_piece
        lines = lock(piece, self.board)
        self.pieces_locked += 1
        self.lines_cleared_total += lines
        apply_score(self, lines)

        self.current_piece = self.next_piece
        self.next_piece = self.generator.next()
        ended = collides(self.current_piece, self.board)
        if ended:
            self._cancel_timer()
            self.state = SessionState.GAME_OVER
            logger.info("game over: %s", self.final_report())

        # Cues go out only once the session is whole again.
        self.signals.emit(LOCKED, self, piece=piece, lines=lines)
        if lines > 0:
            self.signals.emit(LINE_CLEAR, self, lines=lines)
        if ended:
            self.signals.emit(GAME_OVER, self, name=self.player_name, score=self.score)

    def _changed(self) -> None:
        self.signals.emit(STATE_CHANGED, self)

    # ---- collaborator views -----------------------------------------------

    def step(self, action: Action) -> Tuple[np.ndarray, int, bool, dict]:
        if not self.active:
            return self.get_state(), 0, True, {}

        before = self.score
        if action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.HARD_DROP:
            self.hard_drop()
        elif action == Action.NONE:
            pass

        info = {
            "score": self.score,
            "lines_cleared_total": self.lines_cleared_total,
            "pieces_locked": self.pieces_locked,
        }
        return self.get_state(), self.score - before, self.game_over, info

    def get_state(self) -> np.ndarray:
        # Falling piece is overlaid as negative color ids.
        state = self.board.clone_state()
        if self.current_piece is not None and self.active:
            for y, x in self.current_piece.cells():
                if self.board.is_inside(y, x):
                    state[y, x] = -self.current_piece.color
        return state

    def final_report(self) -> str:
        return f"{self.player_name}, your score is: {self.score}"
