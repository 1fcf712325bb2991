from __future__ import annotations

import pytest

from treechess import (
    AlphaBetaTreeAI,
    Game,
    GameStatus,
    IllegalMove,
    InvalidPositionDescription,
    NaiveTreeAI,
    NoLegalMoves,
    OffBoardCoordinate,
    Position,
)


class TestGame:
    def test_initial_state(self):
        g = Game()
        assert g.get_turn_color() == "white"
        assert len(g.get_legal_moves()) == 20
        assert not g.is_game_over()
        assert g.get_result() is None
        assert g.get_full_fen() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w"

    def test_push_and_pop(self):
        g = Game()
        move = g.push_uci("e2e4")
        assert move.uci() == "e2e4"
        assert g.get_turn_color() == "black"
        assert g.get_full_fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b"
        assert g.pop() == move
        assert g.get_full_fen() == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w"
        assert g.pop() is None

    def test_illegal_and_garbage_moves(self):
        g = Game()
        with pytest.raises(IllegalMove):
            g.push_uci("e2e5")
        with pytest.raises(IllegalMove):
            g.push_uci("")
        with pytest.raises(OffBoardCoordinate):
            g.push_uci("zzzz")
        assert g.history == []

    def test_auto_queen_promotion(self):
        g = Game("4k3/P7/8/8/8/8/8/4K3 w - - 0 1")
        move = g.push_uci("a7a8")
        assert move.uci() == "a7a8q"
        g.pop()
        assert g.push_uci("a7a8n").uci() == "a7a8n"

    def test_capture_flag(self):
        g = Game("4k3/8/8/3q4/8/8/3R4/4K3 w - - 0 1")
        g.push_uci("d2d5")
        assert g.snapshot()["last_move_capture"] is True
        g.pop()
        assert g.last_move_was_capture is False

    def test_checkmate_result(self):
        g = Game("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 0 1")
        assert g.is_game_over()
        assert g.status is GameStatus.CHECKMATE
        assert g.get_result() == "0-1"
        snap = g.snapshot()
        assert snap["in_check"] is True
        assert snap["check_square"] == "e1"
        assert snap["legal_moves"] == []

    def test_stalemate_result(self):
        g = Game("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
        assert g.status is GameStatus.STALEMATE
        assert g.get_result() == "1/2-1/2"

    def test_mate_by_player(self):
        g = Game("6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1")
        g.push_uci("a1a8")
        assert g.get_result() == "1-0"

    def test_reset_reuses_position(self):
        g = Game()
        position = g.position
        g.push_uci("e2e4")
        g.reset("4k3/8/8/8/8/8/8/4K3 b - - 0 1")
        assert g.position is position
        assert g.history == []
        assert g.get_turn_color() == "black"
        g.reset()
        assert len(g.get_legal_moves()) == 20

    def test_bad_reset_keeps_game(self):
        g = Game()
        g.push_uci("e2e4")
        with pytest.raises(InvalidPositionDescription):
            g.reset("not a position")
        assert len(g.history) == 1
        assert g.get_turn_color() == "black"

    def test_strict_game(self):
        with pytest.raises(InvalidPositionDescription):
            Game("4k3/8/8/8/8/8/8/4R1K1 w - - 0 1", strict=True)

    def test_snapshot_keys(self):
        snap = Game().snapshot()
        assert set(snap) == {
            "fen",
            "turn",
            "legal_moves",
            "status",
            "game_over",
            "result",
            "last_move",
            "in_check",
            "check_square",
            "last_move_capture",
        }
        assert snap["status"] == "ongoing"


class TestAITurn:
    @pytest.mark.parametrize("strategy", [NaiveTreeAI, AlphaBetaTreeAI])
    def test_play_ai_turn(self, strategy):
        g = Game()
        g.push_uci("e2e4")
        ai = strategy(g.position, depth=2)
        move = g.play_ai_turn(ai)
        assert g.history[-1] is move
        assert g.get_turn_color() == "white"
        assert ai.moves_evaluated() > 0

    def test_ai_must_share_position(self):
        g = Game()
        with pytest.raises(ValueError):
            g.play_ai_turn(AlphaBetaTreeAI(Position(), depth=1))

    def test_ai_on_finished_game(self):
        g = Game("rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 0 1")
        with pytest.raises(NoLegalMoves):
            g.play_ai_turn(AlphaBetaTreeAI(g.position, depth=1))
        assert g.history == []

    def test_ai_survives_reset(self):
        g = Game()
        ai = AlphaBetaTreeAI(g.position, depth=1)
        g.reset("6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1")
        assert g.play_ai_turn(ai).uci() == "a1a8"
        assert g.is_game_over()
