"""Game module for Falling Blocks.

Exports the core game engine and supporting classes:
- Board: Grid representation and row clearing
- Piece / PieceGenerator: Tetromino pieces, rotation and random spawning
- collides / try_move / try_rotate / try_descend: Placement checks
- lock: Merge a piece into the board and clear full rows
- Difficulty / ScoringRules: Descent speed and scoring configuration
- GameSession: Session state machine and descent loop
"""

from .board import Board
from .pieces import COLORS, Piece, PieceGenerator, TetrominoType, rotate_cw
from .collision import collides, try_descend, try_move, try_rotate
from .placement import lock
from .rules import Difficulty, ScoringRules, apply_score
from .scheduler import ManualScheduler, Scheduler, TimerHandle
from .signals import GameSignals
from .core import Action, GameConfig, GameSession, SessionState

__all__ = [
    "Board",
    "COLORS",
    "Piece",
    "PieceGenerator",
    "TetrominoType",
    "rotate_cw",
    "collides",
    "try_descend",
    "try_move",
    "try_rotate",
    "lock",
    "Difficulty",
    "ScoringRules",
    "apply_score",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    "GameSignals",
    "Action",
    "GameConfig",
    "GameSession",
    "SessionState",
]
