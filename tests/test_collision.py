import random

import pytest

from falling_blocks.game import Board, PieceGenerator, TetrominoType, collides, try_descend, try_move, try_rotate
from falling_blocks.game.collision import drop_distance


@pytest.fixture
def gen():
    return PieceGenerator(board_width=10)


def test_spawned_piece_fits_empty_board(gen):
    board = Board()
    for kind in TetrominoType:
        assert not collides(gen.create(kind), board)


def test_cells_above_top_edge_do_not_collide(gen):
    board = Board()
    piece = gen.create(TetrominoType.I).moved(d_row=-3)
    assert not collides(piece, board)


def test_horizontal_bounds_collide(gen):
    board = Board()
    o_piece = gen.create(TetrominoType.O)
    assert collides(o_piece.moved(d_col=-5), board)  # col -1
    assert not collides(o_piece.moved(d_col=4), board)  # cols 8..9
    assert collides(o_piece.moved(d_col=5), board)  # cols 9..10


def test_floor_collides(gen):
    board = Board()
    i_piece = gen.create(TetrominoType.I)
    assert not collides(i_piece.moved(d_row=19), board)
    assert collides(i_piece.moved(d_row=20), board)


def test_settled_cell_collides_but_empty_space_in_shape_does_not(gen):
    board = Board()
    t_piece = gen.create(TetrominoType.T).moved(d_row=5)  # rows 5..6, cols 4..6
    board.set_cell(6, 4, 1)  # under the empty corner of the T
    assert not collides(t_piece, board)
    board.set_cell(6, 5, 1)
    assert collides(t_piece, board)


def test_noop_move_matches_collision_status(gen):
    rng = random.Random(3)
    board = Board()
    for _ in range(40):
        board.set_cell(rng.randrange(20), rng.randrange(10), 1)
    for kind in TetrominoType:
        for d_row in range(-1, 20):
            for d_col in range(-5, 7):
                piece = gen.create(kind).moved(d_row=d_row, d_col=d_col)
                result = try_move(piece, board, 0)
                assert (result is None) == collides(piece, board)


def test_move_into_wall_fails(gen):
    board = Board()
    piece = gen.create(TetrominoType.O).moved(d_col=-4)
    assert piece.col == 0
    assert try_move(piece, board, -1) is None
    moved = try_move(piece, board, 1)
    assert moved is not None and moved.col == 1


def test_rotation_without_room_is_rejected(gen):
    board = Board()
    flat_i = gen.create(TetrominoType.I).moved(d_row=18, d_col=-3)
    # Vertical I would reach row 21.
    assert try_rotate(flat_i, board) is None

    upright_i = gen.create(TetrominoType.I).rotated().moved(d_row=5, d_col=6)
    assert upright_i.col == 9
    assert try_rotate(upright_i, board) is None


def test_rotation_near_top_edge_is_allowed(gen):
    board = Board()
    upright_i = gen.create(TetrominoType.I).rotated().moved(d_row=-2, d_col=-3)
    rotated = try_rotate(upright_i, board)
    assert rotated is not None
    assert rotated.shape.shape == (1, 4)


def test_rotation_blocked_by_settled_cell(gen):
    board = Board()
    t_piece = gen.create(TetrominoType.T).moved(d_row=5)
    # Clockwise T occupies (5,5), (6,4), (6,5), (7,5)
    board.set_cell(7, 5, 1)
    assert try_rotate(t_piece, board) is None


def test_descend_blocked_at_floor(gen):
    board = Board()
    o_piece = gen.create(TetrominoType.O)
    assert try_descend(o_piece, board).row == 1
    assert try_descend(o_piece.moved(d_row=18), board) is None
    assert drop_distance(o_piece, board) == 18
