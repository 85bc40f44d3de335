import random

from falling_blocks.game import Action, Difficulty, SessionState, TetrominoType


def _names(events):
    return [name for name, _ in events]


def _fill_row(board, row, skip=()):
    for col in range(board.width):
        if col not in skip:
            board.set_cell(row, col, 1)


def test_idle_session_ignores_commands(session, scheduler, recorder):
    assert session.state is SessionState.IDLE
    assert not session.active
    assert session.current_piece is None
    assert session.next_piece is not None

    assert session.move_left() is False
    assert session.move_right() is False
    assert session.rotate() is False
    assert session.soft_drop() is False
    assert session.tick() is False
    assert session.hard_drop() == 0
    assert recorder == []
    assert scheduler.pending() == 0


def test_start_enters_playing_with_fresh_state(session, scheduler):
    session.start("Ann", "medium")
    assert session.state is SessionState.PLAYING
    assert session.active
    assert session.player_name == "Ann"
    assert session.difficulty is Difficulty.MEDIUM
    assert session.score == 0
    assert session.board.filled_count() == 0
    assert session.current_piece.row == 0
    assert scheduler.pending() == 1


def test_blank_name_defaults_to_player(session):
    session.start("  ", Difficulty.EASY)
    assert session.player_name == "Player"
    assert session.final_report() == "Player, your score is: 0"


def test_timer_descends_at_difficulty_pace(session, scheduler):
    session.start("Ann", "easy")
    scheduler.advance(999)
    assert session.current_piece.row == 0
    scheduler.advance(1)
    assert session.current_piece.row == 1
    scheduler.advance(3000)
    assert session.current_piece.row == 4


def test_hard_difficulty_ticks_faster(session, scheduler):
    session.start("Ann", "hard")
    scheduler.advance(1000)
    assert session.current_piece.row == 5


def test_stop_cancels_pending_tick(session, scheduler):
    session.start("Ann", "easy")
    piece = session.current_piece
    session.stop()
    assert session.state is SessionState.IDLE
    assert scheduler.advance(5000) == 0
    assert session.current_piece is piece


def test_restart_replaces_running_timer(session, scheduler):
    session.start("Ann", "easy")
    session.restart()
    scheduler.advance(1000)
    assert session.current_piece.row == 1
    assert scheduler.pending() == 1


def test_restart_with_new_difficulty_keeps_name(session):
    session.start("Ann", "easy")
    session.restart("hard")
    assert session.player_name == "Ann"
    assert session.difficulty is Difficulty.HARD


def test_single_line_on_easy_scores_40(session, recorder):
    session.start("Ann", "easy")
    _fill_row(session.board, 19, skip={6, 7, 8, 9})
    session.current_piece = session.generator.create(TetrominoType.I).moved(d_row=19, d_col=3)

    assert session.soft_drop() is False
    assert session.score == 40
    assert session.lines_cleared_total == 1
    assert ("line_clear", {"lines": 1}) in recorder
    assert session.active


def test_double_line_on_hard_scores_300(session, recorder):
    session.start("Ann", "hard")
    _fill_row(session.board, 18, skip={4, 5})
    _fill_row(session.board, 19, skip={4, 5})
    session.current_piece = session.generator.create(TetrominoType.O).moved(d_row=18)

    session.soft_drop()
    assert session.score == 300
    assert ("line_clear", {"lines": 2}) in recorder
    assert session.board.filled_count() == 0


def test_lock_without_clear_emits_no_line_clear(session, recorder):
    session.start("Ann", "easy")
    session.current_piece = session.generator.create(TetrominoType.O).moved(d_row=18)
    session.soft_drop()
    assert session.score == 0
    assert "locked" in _names(recorder)
    assert "line_clear" not in _names(recorder)
    assert session.pieces_locked == 1


def _block_spawn_area(session):
    # Rows 0 and 1 filled except the last column so they never clear.
    _fill_row(session.board, 0, skip={9})
    _fill_row(session.board, 1, skip={9})
    session.current_piece = session.generator.create(TetrominoType.O).moved(d_row=18, d_col=-4)


def test_spawn_collision_ends_game(session, scheduler, recorder):
    session.start("Ann", "easy")
    _block_spawn_area(session)

    session.soft_drop()

    assert session.state is SessionState.GAME_OVER
    assert not session.active
    assert ("game_over", {"name": "Ann", "score": 0}) in recorder
    assert scheduler.pending() == 0
    assert session.move_left() is False
    assert session.final_report() == "Ann, your score is: 0"


def test_spawn_collision_from_timer_tick_stops_the_loop(session, scheduler):
    session.start("Ann", "easy")
    _block_spawn_area(session)

    scheduler.advance(1000)
    assert session.game_over
    board_before = session.board.clone_state()
    assert scheduler.advance(10000) == 0
    assert (session.board.grid == board_before).all()


def test_restart_after_game_over(session, scheduler):
    session.start("Ann", "easy")
    _block_spawn_area(session)
    session.soft_drop()
    assert session.game_over

    session.restart()
    assert session.active
    assert session.board.filled_count() == 0
    assert session.score == 0
    assert scheduler.pending() == 1


def test_move_left_at_wall_fails_silently(session, recorder):
    session.start("Ann", "easy")
    session.current_piece = session.generator.create(TetrominoType.O).moved(d_col=-4)

    assert session.move_left() is False
    assert session.current_piece.col == 0
    assert "move" not in _names(recorder)

    assert session.move_right() is True
    assert session.current_piece.col == 1
    assert _names(recorder) == ["move"]


def test_rotate_emits_signal_on_success_only(session, recorder):
    session.start("Ann", "easy")
    session.current_piece = session.generator.create(TetrominoType.T).moved(d_row=5)
    assert session.rotate() is True
    assert _names(recorder) == ["rotate"]

    flat_i = session.generator.create(TetrominoType.I).moved(d_row=18)
    session.current_piece = flat_i
    assert session.rotate() is False
    assert session.current_piece is flat_i
    assert _names(recorder) == ["rotate"]


def test_hard_drop_locks_at_floor(session):
    session.start("Ann", "easy")
    session.current_piece = session.generator.create(TetrominoType.I)
    assert session.hard_drop() == 19
    assert [session.board.get_cell(19, c) for c in range(3, 7)] == [int(TetrominoType.I)] * 4
    assert session.pieces_locked == 1


def test_step_dispatches_actions_and_reports_delta(session):
    session.start("Ann", "easy")
    _fill_row(session.board, 19, skip={6, 7, 8, 9})
    session.current_piece = session.generator.create(TetrominoType.I).moved(d_col=3)

    state, delta, done, info = session.step(Action.HARD_DROP)
    assert delta == 40
    assert not done
    assert info["score"] == 40
    assert state.shape == (20, 10)
    assert (state < 0).sum() == session.current_piece.cell_count()


def test_score_never_decreases_in_random_play(session, scheduler):
    rng = random.Random(11)
    session.start("Ann", "hard")
    last = 0
    for _ in range(2000):
        if not session.active:
            session.restart()
            last = 0
        session.step(Action(rng.randrange(len(Action))))
        scheduler.advance(50)
        assert session.score >= last
        last = session.score


def test_line_clear_receivers_see_the_promoted_piece(session):
    session.start("Ann", "easy")
    _fill_row(session.board, 19, skip={6, 7, 8, 9})
    locked = session.generator.create(TetrominoType.I).moved(d_row=19, d_col=3)
    session.current_piece = locked
    promoted = session.next_piece
    seen = {}

    def on_clear(sender, **payload):
        seen["current"] = sender.current_piece
        seen["overlay"] = int((sender.get_state() < 0).sum())
        seen["filled"] = sender.board.filled_count()
        seen["score"] = sender.score

    session.signals.subscribe("line_clear", on_clear)
    session.soft_drop()

    assert seen["current"] is promoted
    assert seen["current"] is not locked
    assert seen["overlay"] == promoted.cell_count()
    assert seen["filled"] == 0
    assert seen["score"] == 40
    assert session.next_piece is not promoted


def test_game_over_receiver_sees_finished_session_from_timer_tick(session, scheduler):
    session.start("Ann", "medium")
    _block_spawn_area(session)
    seen = []

    def on_game_over(sender, **payload):
        seen.append((sender.state, sender.active, scheduler.pending(), payload))

    session.signals.subscribe("game_over", on_game_over)
    scheduler.advance(500)

    assert seen == [(SessionState.GAME_OVER, False, 0, {"name": "Ann", "score": 0})]


def test_locked_signal_follows_spawn_check(session, recorder):
    session.start("Ann", "hard")
    _block_spawn_area(session)
    session.soft_drop()

    assert _names(recorder) == ["locked", "game_over"]
    assert recorder[-1] == ("game_over", {"name": "Ann", "score": 0})
