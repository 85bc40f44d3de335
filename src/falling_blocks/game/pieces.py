from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    L = 4
    J = 5
    Z = 6
    S = 7


Shape = np.ndarray


def _shape(rows: List[List[int]]) -> Shape:
    arr = np.array(rows, dtype=np.bool_)
    arr.setflags(write=False)
    return arr


BASE_SHAPES: Dict[TetrominoType, Shape] = {
    TetrominoType.I: _shape([[1, 1, 1, 1]]),
    TetrominoType.O: _shape([[1, 1], [1, 1]]),
    TetrominoType.T: _shape([[1, 1, 1], [0, 1, 0]]),
    TetrominoType.L: _shape([[1, 1, 1], [1, 0, 0]]),
    TetrominoType.J: _shape([[1, 1, 1], [0, 0, 1]]),
    TetrominoType.Z: _shape([[1, 1, 0], [0, 1, 1]]),
    TetrominoType.S: _shape([[0, 1, 1], [1, 1, 0]]),
}

# Display colors keyed by the color identifier written into the board.
COLORS: Dict[int, str] = {
    int(TetrominoType.I): "#FF4136",
    int(TetrominoType.O): "#FF851B",
    int(TetrominoType.T): "#FFDC00",
    int(TetrominoType.L): "#2ECC40",
    int(TetrominoType.J): "#0074D9",
    int(TetrominoType.Z): "#B10DC9",
    int(TetrominoType.S): "#85144b",
}


def rotate_cw(shape: Shape) -> Shape:
    """Transpose then reverse rows: a clockwise quarter turn."""
    rotated = np.rot90(shape, k=-1).copy()
    rotated.setflags(write=False)
    return rotated


@dataclass(frozen=True, eq=False)
class Piece:
    kind: TetrominoType
    shape: Shape
    row: int = 0
    col: int = 0

    @property
    def color(self) -> int:
        return int(self.kind)

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    def moved(self, d_row: int = 0, d_col: int = 0) -> "Piece":
        return replace(self, row=self.row + d_row, col=self.col + d_col)

    def rotated(self) -> "Piece":
        return replace(self, shape=rotate_cw(self.shape))

    def offsets(self) -> List[Tuple[int, int]]:
        return [(int(dy), int(dx)) for dy, dx in np.argwhere(self.shape)]

    def cells(self) -> List[Tuple[int, int]]:
        """Absolute (row, col) of every occupied cell."""
        return [(self.row + dy, self.col + dx) for dy, dx in self.offsets()]

    def cell_count(self) -> int:
        return int(np.count_nonzero(self.shape))


def spawn_column(board_width: int, shape: Shape) -> int:
    return board_width // 2 - shape.shape[1] // 2


class PieceGenerator:
    """Uniform random piece source; holds nothing but its RNG."""

    def __init__(self, board_width: int = 10, spawn_row: int = 0, rng: Optional[random.Random] = None) -> None:
        self.board_width = board_width
        self.spawn_row = spawn_row
        self.rng = rng or random.Random()

    def create(self, kind: TetrominoType) -> Piece:
        shape = BASE_SHAPES[kind]
        return Piece(kind=kind, shape=shape, row=self.spawn_row, col=spawn_column(self.board_width, shape))

    def next(self) -> Piece:
        kind = self.rng.choice(list(TetrominoType))
        return self.create(kind)
