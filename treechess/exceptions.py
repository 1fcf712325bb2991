from __future__ import annotations


class ChessEngineError(Exception):
    """Base exception for engine errors."""

    pass


class InvalidPositionDescription(ChessEngineError, ValueError):
    """Raised when a position-description string cannot be loaded."""

    pass


class NoLegalMoves(ChessEngineError):
    """Raised when a move is requested for a side that has none."""

    pass


class OffBoardCoordinate(ChessEngineError, ValueError):
    """Raised when a square name does not denote a board cell."""

    pass


class IllegalMove(ChessEngineError, ValueError):
    """Raised when a requested move is not legal in the current position."""

    pass
