from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from .pieces import COLORS


EMPTY = 0


def is_valid_value(value: int) -> bool:
    return value == EMPTY or value in COLORS


class Board:
    """Fixed-size playfield of cell values.

    Cells hold 0 when empty and a positive color identifier otherwise.
    Row 0 is the top row. Direct cell access outside the grid raises
    ``IndexError``; callers that probe positions should use ``is_inside``.
    """

    def __init__(self, width: int = 10, height: int = 20) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        for value in {int(v) for row in rows for v in row}:
            if not is_valid_value(value):
                raise ValueError(f"invalid cell value {value}")
        data = np.asarray(rows, dtype=np.int8)
        board = cls(width=data.shape[1], height=data.shape[0])
        board.grid[:, :] = data
        return board

    def reset(self) -> None:
        self.grid.fill(EMPTY)

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def _check(self, row: int, col: int) -> None:
        if not self.is_inside(row, col):
            raise IndexError(f"cell ({row}, {col}) outside {self.height}x{self.width} board")

    def get_cell(self, row: int, col: int) -> int:
        self._check(row, col)
        return int(self.grid[row, col])

    def set_cell(self, row: int, col: int, value: int) -> None:
        self._check(row, col)
        if not is_valid_value(value):
            raise ValueError(f"invalid cell value {value}")
        self.grid[row, col] = value

    def is_row_full(self, row: int) -> bool:
        if not 0 <= row < self.height:
            raise IndexError(f"row {row} outside board")
        return bool(np.all(self.grid[row] != EMPTY))

    def full_rows(self) -> list[int]:
        return [int(r) for r in np.where(np.all(self.grid != EMPTY, axis=1))[0]]

    def clear_row(self, row: int) -> None:
        """Remove ``row`` and push an empty row in at the top."""
        self.clear_rows([row])

    def clear_rows(self, rows: Iterable[int]) -> int:
        rows = sorted(set(rows))
        for r in rows:
            if not 0 <= r < self.height:
                raise IndexError(f"row {r} outside board")
        if not rows:
            return 0
        num = len(rows)
        kept = np.delete(self.grid, rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        self.grid = np.vstack((new_rows, kept))
        return num

    def clear_full_rows(self) -> int:
        # All indices are collected before anything moves, so adjacent full
        # rows are each removed exactly once.
        return self.clear_rows(self.full_rows())

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()

    def __str__(self) -> str:
        return "\n".join("".join("#" if cell else "." for cell in row) for row in self.grid)
