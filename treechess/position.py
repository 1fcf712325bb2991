from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, NamedTuple, Optional

import chess
from loguru import logger

from .exceptions import InvalidPositionDescription, OffBoardCoordinate


STARTING_DESCRIPTION = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
UNSET_PLY = -1
FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


class PieceColor(Enum):
    BLACK = 0
    WHITE = 1

    @property
    def opponent(self) -> "PieceColor":
        return PieceColor.BLACK if self is PieceColor.WHITE else PieceColor.WHITE


class PieceType(Enum):
    PAWN = 0
    KNIGHT = 1
    BISHOP = 2
    ROOK = 3
    QUEEN = 4
    KING = 5


class GameStatus(Enum):
    ONGOING = "ongoing"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"


PIECE_LETTERS: Dict[PieceType, str] = {
    PieceType.PAWN: "p",
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
    PieceType.KING: "k",
}
PIECE_SYMBOLS: Dict[str, PieceType] = {letter: kind for kind, letter in PIECE_LETTERS.items()}


class Coordinate(NamedTuple):
    rank: int
    file: int

    @classmethod
    def parse(cls, name: str) -> "Coordinate":
        """Parse an algebraic square name such as ``e4``."""
        if len(name) != 2 or name[0] not in FILE_NAMES or name[1] not in RANK_NAMES:
            raise OffBoardCoordinate(f"Not a board square: {name!r}")
        return cls(RANK_NAMES.index(name[1]), FILE_NAMES.index(name[0]))

    @property
    def name(self) -> str:
        return f"{FILE_NAMES[self.file]}{RANK_NAMES[self.rank]}"


@dataclass(eq=False)
class Piece:
    """A piece owned by a Position. Compared by identity."""

    color: PieceColor
    piece_type: PieceType
    location: Coordinate = Coordinate(0, 0)
    active: bool = True
    move_count: int = 0
    first_move_ply: int = UNSET_PLY
    index: int = 0

    @property
    def symbol(self) -> str:
        letter = PIECE_LETTERS[self.piece_type]
        return letter.upper() if self.color is PieceColor.WHITE else letter


class Move(NamedTuple):
    """A move value. ``target`` is the captured piece, the castling rook, or the
    pawn taken en passant. ``castle`` is +1 king-side, -1 queen-side, 0 otherwise.
    """

    held: Piece
    target: Optional[Piece]
    begin: Coordinate
    end: Coordinate
    en_passant: bool = False
    castle: int = 0
    promotion: Optional[PieceType] = None

    @property
    def is_capture(self) -> bool:
        return self.target is not None and self.castle == 0

    def uci(self) -> str:
        suffix = PIECE_LETTERS[self.promotion] if self.promotion is not None else ""
        return f"{self.begin.name}{self.end.name}{suffix}"


def _validate_strict(description: str) -> None:
    try:
        board = chess.Board(description)
    except ValueError as exc:
        raise InvalidPositionDescription(f"Invalid position description {description!r}: {exc}") from exc
    if not board.is_valid():
        raise InvalidPositionDescription(
            f"Invalid position description {description!r}: {board.status()!r}"
        )


class Position:
    """Authoritative game position, mutated in place by matched apply/undo pairs.

    ``grid[rank][file]`` holds the active piece on that cell or ``None``; rank 0
    is White's back rank. Captured pieces stay in their color's registry with
    ``active=False`` so registry indices remain stable across undo.

    ``is_terminal`` and ``is_check`` are written by the move generator for the
    side it last generated moves for.
    """

    def __init__(self, description: Optional[str] = None, strict: bool = False) -> None:
        self.grid: List[List[Optional[Piece]]] = [[None] * 8 for _ in range(8)]
        self.white_pieces: List[Piece] = []
        self.black_pieces: List[Piece] = []
        self.white_king: Optional[Piece] = None
        self.black_king: Optional[Piece] = None
        self.side_to_move = PieceColor.WHITE
        self.ply = 0
        self.is_terminal = False
        self.is_check = False
        self.load(description or STARTING_DESCRIPTION, strict=strict)

    def load(self, description: str, strict: bool = False) -> None:
        """Load placement and side to move from a position-description string.

        Only the first two whitespace-separated fields are read. In permissive
        mode unrecognized placement characters are skipped; with ``strict`` the
        whole description must be a valid position according to python-chess.
        The current state is kept if loading fails.
        """
        fields = description.split()
        if len(fields) < 2:
            raise InvalidPositionDescription(
                f"Expected placement and side-to-move fields: {description!r}"
            )
        if strict:
            _validate_strict(description)
        placement, to_play = fields[0], fields[1]
        if to_play not in ("w", "b"):
            raise InvalidPositionDescription(f"Unknown side to move {to_play!r}")

        grid: List[List[Optional[Piece]]] = [[None] * 8 for _ in range(8)]
        registries: Dict[PieceColor, List[Piece]] = {PieceColor.WHITE: [], PieceColor.BLACK: []}
        kings: Dict[PieceColor, Piece] = {}
        rank, file = 7, 0
        for char in placement:
            if char == "/":
                rank -= 1
                file = 0
                continue
            if char in "0123456789":
                file += int(char)
                continue
            kind = PIECE_SYMBOLS.get(char.lower())
            if kind is None:
                logger.debug(f"Skipping unrecognized placement character {char!r}")
                continue
            if not (0 <= rank < 8 and 0 <= file < 8):
                raise InvalidPositionDescription(
                    f"Piece {char!r} falls outside the board in {placement!r}"
                )
            color = PieceColor.WHITE if char.isupper() else PieceColor.BLACK
            registry = registries[color]
            piece = Piece(color, kind, Coordinate(rank, file), index=len(registry))
            if kind is PieceType.KING:
                if color in kings:
                    raise InvalidPositionDescription(f"More than one {color.name.lower()} king")
                kings[color] = piece
            registry.append(piece)
            grid[rank][file] = piece
            file += 1
        for color in (PieceColor.WHITE, PieceColor.BLACK):
            if color not in kings:
                raise InvalidPositionDescription(f"Missing {color.name.lower()} king")

        self.grid = grid
        self.white_pieces = registries[PieceColor.WHITE]
        self.black_pieces = registries[PieceColor.BLACK]
        self.white_king = kings[PieceColor.WHITE]
        self.black_king = kings[PieceColor.BLACK]
        self.side_to_move = PieceColor.WHITE if to_play == "w" else PieceColor.BLACK
        self.ply = 0
        self.is_terminal = False
        self.is_check = False

    def description(self) -> str:
        """Placement and side to move, in the format ``load`` reads."""
        rows = []
        for rank in range(7, -1, -1):
            row, empty = "", 0
            for piece in self.grid[rank]:
                if piece is None:
                    empty += 1
                    continue
                if empty:
                    row += str(empty)
                    empty = 0
                row += piece.symbol
            if empty:
                row += str(empty)
            rows.append(row)
        side = "w" if self.side_to_move is PieceColor.WHITE else "b"
        return f"{'/'.join(rows)} {side}"

    def pieces(self, color: PieceColor) -> List[Piece]:
        return self.white_pieces if color is PieceColor.WHITE else self.black_pieces

    def king(self, color: PieceColor) -> Piece:
        return self.white_king if color is PieceColor.WHITE else self.black_king

    @property
    def status(self) -> GameStatus:
        if not self.is_terminal:
            return GameStatus.ONGOING
        return GameStatus.CHECKMATE if self.is_check else GameStatus.STALEMATE

    @staticmethod
    def is_on_board(coord: Coordinate) -> bool:
        return 0 <= coord.rank < 8 and 0 <= coord.file < 8

    def has_piece(self, coord: Coordinate) -> bool:
        return self.is_on_board(coord) and self.grid[coord.rank][coord.file] is not None

    def piece_at(self, coord: Coordinate) -> Optional[Piece]:
        if not self.is_on_board(coord):
            return None
        return self.grid[coord.rank][coord.file]

    def piece_at_unchecked(self, coord: Coordinate) -> Optional[Piece]:
        """Lookup without bounds checking, for move generation's inner loops.

        The caller guarantees ``coord`` is on the board. Anything else is
        undefined: negative indices silently wrap to the other edge.
        """
        return self.grid[coord.rank][coord.file]

    def owned_at(self, coord: Coordinate) -> Optional[Piece]:
        """The piece at ``coord`` if it belongs to the side to move."""
        piece = self.piece_at(coord)
        if piece is None or piece.color is not self.side_to_move:
            return None
        return piece

    def apply(self, move: Move) -> None:
        held = move.held
        begin, end = move.begin, move.end
        grid = self.grid
        if move.en_passant:
            grid[begin.rank][begin.file] = None
            grid[begin.rank][end.file] = None
            grid[end.rank][end.file] = held
            move.target.active = False
        elif move.castle:
            rook = move.target
            grid[begin.rank][begin.file] = None
            grid[end.rank][0 if move.castle < 0 else 7] = None
            grid[end.rank][end.file] = held
            grid[end.rank][end.file - move.castle] = rook
            rook.location = Coordinate(end.rank, end.file - move.castle)
        else:
            grid[begin.rank][begin.file] = None
            grid[end.rank][end.file] = held
            if move.target is not None:
                move.target.active = False
            if move.promotion is not None:
                held.piece_type = move.promotion

        self.side_to_move = self.side_to_move.opponent
        if held.move_count == 0:
            held.first_move_ply = self.ply
        held.location = end
        held.move_count += 1
        self.ply += 1

    def undo(self, move: Move) -> None:
        """Exact inverse of ``apply`` for the same move value."""
        held = move.held
        begin, end = move.begin, move.end
        grid = self.grid
        if move.en_passant:
            grid[begin.rank][begin.file] = held
            grid[begin.rank][end.file] = move.target
            grid[end.rank][end.file] = None
            move.target.active = True
        elif move.castle:
            rook = move.target
            home_file = 0 if move.castle < 0 else 7
            grid[begin.rank][begin.file] = held
            grid[end.rank][home_file] = rook
            grid[end.rank][end.file] = None
            grid[end.rank][end.file - move.castle] = None
            rook.location = Coordinate(end.rank, home_file)
        else:
            grid[begin.rank][begin.file] = held
            grid[end.rank][end.file] = move.target
            if move.target is not None:
                move.target.active = True
            if move.promotion is not None:
                held.piece_type = PieceType.PAWN

        self.side_to_move = self.side_to_move.opponent
        if held.move_count == 1:
            held.first_move_ply = UNSET_PLY
        held.location = begin
        held.move_count -= 1
        self.ply -= 1
