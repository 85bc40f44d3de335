from __future__ import annotations

from typing import Optional

from .board import EMPTY, Board
from .pieces import Piece


def collides(piece: Piece, board: Board) -> bool:
    """Return True if ``piece`` cannot occupy its position on ``board``.

    Cells above the top edge (negative rows) are allowed so that freshly
    spawned or rotated pieces may poke out of the board. Horizontal bounds,
    the floor and settled cells all block.
    """
    for y, x in piece.cells():
        if x < 0 or x >= board.width or y >= board.height:
            return True
        if y >= 0 and board.grid[y, x] != EMPTY:
            return True
    return False


def try_move(piece: Piece, board: Board, d_col: int) -> Optional[Piece]:
    candidate = piece.moved(d_col=d_col)
    if collides(candidate, board):
        return None
    return candidate


def try_rotate(piece: Piece, board: Board) -> Optional[Piece]:
    # No wall kicks: a blocked rotation is simply rejected.
    candidate = piece.rotated()
    if collides(candidate, board):
        return None
    return candidate


def try_descend(piece: Piece, board: Board) -> Optional[Piece]:
    """Advance one row, or None when blocked and the piece must lock."""
    candidate = piece.moved(d_row=1)
    if collides(candidate, board):
        return None
    return candidate


def drop_distance(piece: Piece, board: Board) -> int:
    distance = 0
    while not collides(piece.moved(d_row=distance + 1), board):
        distance += 1
    return distance
