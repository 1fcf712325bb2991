from __future__ import annotations

from typing import Tuple

import pytest

from treechess import Position


def _fingerprint(position: Position) -> Tuple:
    grid = tuple(tuple(id(cell) if cell is not None else None for cell in row) for row in position.grid)
    pieces = tuple(
        (id(p), p.piece_type, p.location, p.active, p.move_count, p.first_move_ply, p.index)
        for p in position.white_pieces + position.black_pieces
    )
    return grid, pieces, position.side_to_move, position.ply


@pytest.fixture
def fingerprint():
    """Observable state of a Position, for before/after comparisons."""
    return _fingerprint


@pytest.fixture
def start_position() -> Position:
    return Position()
