from __future__ import annotations

from typing import Callable, Dict

from blinker import Signal


MOVE = "move"
ROTATE = "rotate"
LINE_CLEAR = "line_clear"      # payload: lines=int
GAME_OVER = "game_over"        # payload: name=str, score=int
LOCKED = "locked"              # payload: piece=Piece, lines=int
STARTED = "started"            # payload: name=str, difficulty=Difficulty
STATE_CHANGED = "state_changed"

SIGNAL_NAMES = (MOVE, ROTATE, LINE_CLEAR, GAME_OVER, LOCKED, STARTED, STATE_CHANGED)


class GameSignals:
    """Per-session cues for audio and render collaborators.

    Each session owns its own blinker ``Signal`` objects so listeners of one
    game never hear another. Receivers are called as ``fn(sender, **payload)``
    and are held strongly, so lambdas and bound methods of short-lived
    objects keep working.
    """

    def __init__(self) -> None:
        self._signals: Dict[str, Signal] = {name: Signal(name) for name in SIGNAL_NAMES}

    def subscribe(self, name: str, fn: Callable[..., None], /) -> None:
        self._signals[name].connect(fn, weak=False)

    def unsubscribe(self, name: str, fn: Callable[..., None], /) -> None:
        self._signals[name].disconnect(fn)

    def emit(self, name: str, sender: object, /, **payload) -> None:
        self._signals[name].send(sender, **payload)
