from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .position import Coordinate, Move, Piece, PieceColor, PieceType, Position


Offsets = Tuple[Tuple[int, int], ...]

KNIGHT_OFFSETS: Offsets = ((2, 1), (1, 2), (-1, 2), (-2, 1), (-2, -1), (-1, -2), (1, -2), (2, -1))
KING_OFFSETS: Offsets = ((1, 0), (1, 1), (0, 1), (-1, 1), (-1, 0), (-1, -1), (0, -1), (1, -1))
ROOK_DIRECTIONS: Offsets = ((1, 0), (0, 1), (-1, 0), (0, -1))
BISHOP_DIRECTIONS: Offsets = ((1, 1), (-1, 1), (-1, -1), (1, -1))
QUEEN_DIRECTIONS: Offsets = ROOK_DIRECTIONS + BISHOP_DIRECTIONS
PROMOTION_TYPES = (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)


class MoveGenerator:
    """Legal move generation over a shared Position.

    Dispatch is a closed switch on ``PieceType`` rather than per-piece classes.
    Legality is decided by applying each pseudolegal candidate, testing whether
    the mover's king is attacked, and undoing it, so the Position is left
    unchanged after every call.
    """

    def __init__(self, position: Position) -> None:
        self.position = position

    def pseudolegal_moves(self, piece: Piece, begin: Optional[Coordinate] = None) -> List[Move]:
        if begin is None:
            begin = piece.location
        kind = piece.piece_type
        if kind is PieceType.PAWN:
            return self._pawn_moves(piece, begin)
        if kind is PieceType.KNIGHT:
            return self._step_moves(piece, begin, KNIGHT_OFFSETS)
        if kind is PieceType.BISHOP:
            return self._slide_moves(piece, begin, BISHOP_DIRECTIONS)
        if kind is PieceType.ROOK:
            return self._slide_moves(piece, begin, ROOK_DIRECTIONS)
        if kind is PieceType.QUEEN:
            return self._slide_moves(piece, begin, QUEEN_DIRECTIONS)
        return self._king_moves(piece, begin)

    def legal_moves(self, begin: Coordinate) -> List[Move]:
        """Legal moves of the side-to-move piece on ``begin``; empty if there is none."""
        piece = self.position.owned_at(begin)
        if piece is None:
            return []
        return list(self._iter_legal(piece))

    def legal_moves_for_side(self, side: PieceColor) -> List[Move]:
        """All legal moves of ``side`` in registry order.

        Also records on the Position whether ``side`` has no legal move and
        whether its king is attacked.
        """
        position = self.position
        moves: List[Move] = []
        for piece in position.pieces(side):
            if piece.active:
                moves.extend(self._iter_legal(piece))
        position.is_terminal = not moves
        position.is_check = self.is_attacked(position.king(side).location, side)
        return moves

    def update_terminal_state(self, side: Optional[PieceColor] = None) -> bool:
        """Refresh ``is_terminal``/``is_check`` without building the move list."""
        position = self.position
        if side is None:
            side = position.side_to_move
        has_move = False
        for piece in position.pieces(side):
            if piece.active and next(self._iter_legal(piece), None) is not None:
                has_move = True
                break
        position.is_terminal = not has_move
        position.is_check = self.is_attacked(position.king(side).location, side)
        return position.is_terminal

    def is_attacked(self, coord: Coordinate, color: PieceColor) -> bool:
        """True if a piece of ``color``'s opponent attacks ``coord``."""
        grid = self.position.grid
        enemy = color.opponent
        rank, file = coord

        for dr, df in KNIGHT_OFFSETS:
            r, f = rank + dr, file + df
            if 0 <= r < 8 and 0 <= f < 8:
                piece = grid[r][f]
                if piece is not None and piece.color is enemy and piece.piece_type is PieceType.KNIGHT:
                    return True

        for dr, df in KING_OFFSETS:
            r, f = rank + dr, file + df
            if 0 <= r < 8 and 0 <= f < 8:
                piece = grid[r][f]
                if piece is not None and piece.color is enemy and piece.piece_type is PieceType.KING:
                    return True

        # an enemy pawn attacks from one rank behind, relative to its own direction
        r = rank - (1 if enemy is PieceColor.WHITE else -1)
        if 0 <= r < 8:
            for f in (file - 1, file + 1):
                if 0 <= f < 8:
                    piece = grid[r][f]
                    if piece is not None and piece.color is enemy and piece.piece_type is PieceType.PAWN:
                        return True

        if self._ray_attacked(rank, file, enemy, ROOK_DIRECTIONS, PieceType.ROOK):
            return True
        return self._ray_attacked(rank, file, enemy, BISHOP_DIRECTIONS, PieceType.BISHOP)

    def _ray_attacked(
        self, rank: int, file: int, enemy: PieceColor, directions: Offsets, slider: PieceType
    ) -> bool:
        grid = self.position.grid
        for dr, df in directions:
            r, f = rank + dr, file + df
            while 0 <= r < 8 and 0 <= f < 8:
                piece = grid[r][f]
                if piece is not None:
                    if piece.color is enemy and piece.piece_type in (slider, PieceType.QUEEN):
                        return True
                    break
                r += dr
                f += df
        return False

    def _iter_legal(self, piece: Piece) -> Iterator[Move]:
        position = self.position
        king = position.king(piece.color)
        for move in self.pseudolegal_moves(piece, piece.location):
            if move.castle and not self._castle_path_safe(move):
                continue
            position.apply(move)
            try:
                attacked = self.is_attacked(king.location, king.color)
            finally:
                position.undo(move)
            if not attacked:
                yield move

    def _castle_path_safe(self, move: Move) -> bool:
        # the king may not castle out of or through check; the destination is
        # covered by the regular king-safety test
        color = move.held.color
        transit = Coordinate(move.begin.rank, move.begin.file + move.castle)
        return not self.is_attacked(move.begin, color) and not self.is_attacked(transit, color)

    def _step_moves(self, piece: Piece, begin: Coordinate, offsets: Offsets) -> List[Move]:
        at = self.position.piece_at_unchecked
        moves = []
        for dr, df in offsets:
            rank, file = begin.rank + dr, begin.file + df
            if 0 <= rank < 8 and 0 <= file < 8:
                end = Coordinate(rank, file)
                target = at(end)
                if target is None or target.color is not piece.color:
                    moves.append(Move(piece, target, begin, end))
        return moves

    def _slide_moves(self, piece: Piece, begin: Coordinate, directions: Offsets) -> List[Move]:
        at = self.position.piece_at_unchecked
        moves = []
        for dr, df in directions:
            rank, file = begin.rank + dr, begin.file + df
            while 0 <= rank < 8 and 0 <= file < 8:
                end = Coordinate(rank, file)
                target = at(end)
                if target is not None:
                    if target.color is not piece.color:
                        moves.append(Move(piece, target, begin, end))
                    break
                moves.append(Move(piece, None, begin, end))
                rank += dr
                file += df
        return moves

    def _pawn_moves(self, piece: Piece, begin: Coordinate) -> List[Move]:
        at = self.position.piece_at_unchecked
        white = piece.color is PieceColor.WHITE
        step = 1 if white else -1
        start_rank = 1 if white else 6
        moves: List[Move] = []
        rank = begin.rank + step
        if not 0 <= rank < 8:
            return moves

        ahead = Coordinate(rank, begin.file)
        if at(ahead) is None:
            self._add_pawn_move(moves, piece, None, begin, ahead)
            if begin.rank == start_rank:
                two_ahead = Coordinate(rank + step, begin.file)
                if at(two_ahead) is None:
                    moves.append(Move(piece, None, begin, two_ahead))

        for file in (begin.file - 1, begin.file + 1):
            if not 0 <= file < 8:
                continue
            end = Coordinate(rank, file)
            target = at(end)
            if target is not None:
                if target.color is not piece.color:
                    self._add_pawn_move(moves, piece, target, begin, end)
                continue
            victim = at(Coordinate(begin.rank, file))
            if victim is not None and self._en_passant_victim(victim, piece.color):
                moves.append(Move(piece, victim, begin, end, en_passant=True))
        return moves

    @staticmethod
    def _add_pawn_move(
        moves: List[Move], piece: Piece, target: Optional[Piece], begin: Coordinate, end: Coordinate
    ) -> None:
        if end.rank in (0, 7):
            for kind in PROMOTION_TYPES:
                moves.append(Move(piece, target, begin, end, promotion=kind))
        else:
            moves.append(Move(piece, target, begin, end))

    def _en_passant_victim(self, victim: Piece, capturer: PieceColor) -> bool:
        # only a pawn whose single move so far was a double advance on the previous ply
        landing_rank = 3 if victim.color is PieceColor.WHITE else 4
        return (
            victim.piece_type is PieceType.PAWN
            and victim.color is not capturer
            and victim.move_count == 1
            and victim.first_move_ply == self.position.ply - 1
            and victim.location.rank == landing_rank
        )

    def _king_moves(self, piece: Piece, begin: Coordinate) -> List[Move]:
        moves = self._step_moves(piece, begin, KING_OFFSETS)
        home_rank = 0 if piece.color is PieceColor.WHITE else 7
        if piece.move_count == 0 and begin == (home_rank, 4):
            for castle in (1, -1):
                move = self._castle_move(piece, begin, castle)
                if move is not None:
                    moves.append(move)
        return moves

    def _castle_move(self, king: Piece, begin: Coordinate, castle: int) -> Optional[Move]:
        at = self.position.piece_at_unchecked
        rook_file = 7 if castle > 0 else 0
        rook = at(Coordinate(begin.rank, rook_file))
        if (
            rook is None
            or rook.piece_type is not PieceType.ROOK
            or rook.color is not king.color
            or rook.move_count != 0
        ):
            return None
        for file in range(begin.file + castle, rook_file, castle):
            if at(Coordinate(begin.rank, file)) is not None:
                return None
        return Move(king, rook, begin, Coordinate(begin.rank, begin.file + 2 * castle), castle=castle)
