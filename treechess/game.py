from __future__ import annotations

from typing import Dict, List, Optional

from loguru import logger

from .ai import TreeAI
from .exceptions import IllegalMove
from .movegen import MoveGenerator
from .position import STARTING_DESCRIPTION, Coordinate, GameStatus, Move, PieceColor, Position


class Game:
    """Owns the Position and the move history and exposes a clean interface for the web/API.

    The Position object lives as long as the Game; ``reset`` reloads it in
    place so AIs bound to it stay valid.
    """

    def __init__(self, starting_fen: Optional[str] = None, strict: bool = False) -> None:
        self.strict = strict
        self.position = Position(starting_fen, strict=strict)
        self.generator = MoveGenerator(self.position)
        self.history: List[Move] = []
        self.last_move_was_capture: bool = False
        self._legal_moves: List[Move] = []
        self._refresh()

    def reset(self, starting_fen: Optional[str] = None) -> None:
        self.position.load(starting_fen or STARTING_DESCRIPTION, strict=self.strict)
        self.history.clear()
        self.last_move_was_capture = False
        self._refresh()

    def _refresh(self) -> None:
        self._legal_moves = self.generator.legal_moves_for_side(self.position.side_to_move)

    def get_full_fen(self) -> str:
        return self.position.description()

    def get_turn_color(self) -> str:
        return "white" if self.position.side_to_move is PieceColor.WHITE else "black"

    def get_legal_moves(self) -> List[str]:
        return [move.uci() for move in self._legal_moves]

    @property
    def status(self) -> GameStatus:
        return self.position.status

    def is_game_over(self) -> bool:
        return self.position.is_terminal

    def get_result(self) -> Optional[str]:
        status = self.status
        if status is GameStatus.ONGOING:
            return None
        if status is GameStatus.STALEMATE:
            return "1/2-1/2"
        return "0-1" if self.position.side_to_move is PieceColor.WHITE else "1-0"

    def push_uci(self, uci: str) -> Move:
        uci = uci.strip().lower()
        if len(uci) not in (4, 5):
            raise IllegalMove(f"Illegal move: {uci}")
        Coordinate.parse(uci[:2])
        Coordinate.parse(uci[2:4])

        for move in self._legal_moves:
            if move.uci() == uci:
                self.push(move)
                return move

        # Auto-queen promotion if user sends e7e8 or similar without suffix
        if len(uci) == 4:
            for move in self._legal_moves:
                if move.uci() == uci + "q":
                    self.push(move)
                    return move

        raise IllegalMove(f"Illegal move: {uci}")

    def push(self, move: Move) -> None:
        self.position.apply(move)
        self.history.append(move)
        self.last_move_was_capture = move.is_capture
        logger.debug(f"Applied {move.uci()} at ply {self.position.ply}")
        self._refresh()

    def pop(self) -> Optional[Move]:
        if not self.history:
            return None
        move = self.history.pop()
        self.position.undo(move)
        self.last_move_was_capture = self.history[-1].is_capture if self.history else False
        logger.debug(f"Undid {move.uci()} back to ply {self.position.ply}")
        self._refresh()
        return move

    def play_ai_turn(self, ai: TreeAI, depth: Optional[int] = None) -> Move:
        """Let ``ai`` choose a move for the side to move and play it."""
        if ai.position is not self.position:
            raise ValueError("AI is bound to a different position than this game")
        move = ai.select_move(depth)
        self.push(move)
        return move

    def snapshot(self) -> Dict[str, object]:
        last_uci: Optional[str] = None
        if self.history:
            last_uci = self.history[-1].uci()

        in_check = self.position.is_check
        check_square: Optional[str] = None
        if in_check:
            check_square = self.position.king(self.position.side_to_move).location.name

        return {
            "fen": self.get_full_fen(),
            "turn": self.get_turn_color(),
            "legal_moves": self.get_legal_moves(),
            "status": self.status.value,
            "game_over": self.is_game_over(),
            "result": self.get_result(),
            "last_move": last_uci,
            "in_check": in_check,
            "check_square": check_square,
            "last_move_capture": self.last_move_was_capture,
        }
