"""Chess engine package providing the position model, move generation, evaluation, and tree search.

Modules:
- position: Board state with reversible in-place apply/undo of moves
- movegen: Pseudolegal and legal move generation, attack detection
- evaluator: Material evaluation from the side to move's perspective
- ai: Naive minimax and alpha-beta search strategies
- game: Game orchestration and board snapshots for the web/API
"""

from .ai import AlphaBetaTreeAI, NaiveTreeAI, SearchResult, TreeAI, create_ai
from .evaluator import Evaluator
from .exceptions import (
    ChessEngineError,
    IllegalMove,
    InvalidPositionDescription,
    NoLegalMoves,
    OffBoardCoordinate,
)
from .game import Game
from .movegen import MoveGenerator
from .position import (
    STARTING_DESCRIPTION,
    Coordinate,
    GameStatus,
    Move,
    Piece,
    PieceColor,
    PieceType,
    Position,
)

__all__ = [
    "AlphaBetaTreeAI",
    "ChessEngineError",
    "Coordinate",
    "Evaluator",
    "Game",
    "GameStatus",
    "IllegalMove",
    "InvalidPositionDescription",
    "Move",
    "MoveGenerator",
    "NaiveTreeAI",
    "NoLegalMoves",
    "OffBoardCoordinate",
    "Piece",
    "PieceColor",
    "PieceType",
    "Position",
    "STARTING_DESCRIPTION",
    "SearchResult",
    "TreeAI",
    "create_ai",
]
