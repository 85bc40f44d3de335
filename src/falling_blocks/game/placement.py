from __future__ import annotations

import logging

from .board import EMPTY, Board
from .pieces import Piece


logger = logging.getLogger(__name__)


def lock(piece: Piece, board: Board) -> int:
    """Write ``piece`` into ``board``, clear full rows and return how many.

    The piece must sit at a legal position. Cells still above the top edge are
    dropped since the board has nowhere to keep them.
    """
    cells = piece.cells()
    for y, x in cells:
        if x < 0 or x >= board.width or y >= board.height:
            raise ValueError(f"cannot lock {piece.kind.name} outside the board at ({y}, {x})")
        if y >= 0 and board.grid[y, x] != EMPTY:
            raise ValueError(f"cannot lock {piece.kind.name} over settled cell ({y}, {x})")
    for y, x in cells:
        if y >= 0:
            board.set_cell(y, x, piece.color)
    lines = board.clear_full_rows()
    logger.debug("locked %s at (%d, %d), cleared %d", piece.kind.name, piece.row, piece.col, lines)
    return lines
