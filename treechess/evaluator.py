from __future__ import annotations

from typing import Dict, Optional

from .position import PieceColor, PieceType, Position


# Saturating score magnitude; search sentinels are biased away from it by depth.
INF = 999_999_999


class Evaluator:
    """Static material evaluation for positions.

    Scores are from the perspective of the side to move: positive favors the
    side to move. Units are centipawns.
    """

    # Material values
    MATERIAL_VALUES: Dict[PieceType, int] = {
        PieceType.PAWN: 100,
        PieceType.KNIGHT: 300,
        PieceType.BISHOP: 350,
        PieceType.ROOK: 500,
        PieceType.QUEEN: 900,
        PieceType.KING: 99999,
    }

    CHECKMATE_SCORE = INF

    def __init__(
        self, piece_values: Optional[Dict[PieceType, int]] = None, stalemate_score: int = 0
    ) -> None:
        self.piece_values = dict(self.MATERIAL_VALUES)
        if piece_values:
            self.piece_values.update(piece_values)
        self.stalemate_score = stalemate_score

    @classmethod
    def from_config(cls, cfg) -> "Evaluator":
        values = {PieceType[name.upper()]: value for name, value in cfg.piece_values.items()}
        return cls(values, stalemate_score=cfg.stalemate_score)

    def evaluate(self, position: Position) -> int:
        # the terminal flags describe the side the generator last looked at,
        # which the search keeps equal to the side to move
        if position.is_terminal:
            if position.is_check:
                return -self.CHECKMATE_SCORE
            return self.stalemate_score

        values = self.piece_values
        score = 0
        for piece in position.white_pieces:
            if piece.active:
                score += values[piece.piece_type]
        for piece in position.black_pieces:
            if piece.active:
                score -= values[piece.piece_type]
        return score if position.side_to_move is PieceColor.WHITE else -score
