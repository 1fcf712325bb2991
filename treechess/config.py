# treechess/config.py
from __future__ import annotations

import os
import sys
import tomllib
from dataclasses import dataclass, field
from typing import Dict

from loguru import logger

# Defaults (centipawns)
PIECE_VALUES = {
    "PAWN": 100,
    "KNIGHT": 300,
    "BISHOP": 350,
    "ROOK": 500,
    "QUEEN": 900,
    "KING": 99999,
}

STRATEGY_NAMES = ("naive", "alphabeta")


@dataclass
class SearchConfig:
    depth: int = 2
    strategy: str = "alphabeta"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.depth, int) or self.depth < 1:
            raise ValueError(f"Search depth must be a positive integer, got {self.depth!r}")
        if self.strategy not in STRATEGY_NAMES:
            raise ValueError(
                f"Unknown search strategy {self.strategy!r}; expected one of {STRATEGY_NAMES}"
            )


@dataclass
class EvalConfig:
    piece_values: Dict[str, int] = field(default_factory=lambda: PIECE_VALUES.copy())
    stalemate_score: int = 0


@dataclass
class Config:
    search: SearchConfig = field(default_factory=SearchConfig)
    eval: EvalConfig = field(default_factory=EvalConfig)
    log_level: str = "INFO"
    strict_descriptions: bool = False

    @staticmethod
    def load_from_toml(path: str = "config.toml") -> "Config":
        cfg = Config()
        if not os.path.exists(path):
            return cfg
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        for section in ("search", "eval"):
            target = getattr(cfg, section)
            for k, v in raw.get(section, {}).items():
                if hasattr(target, k):
                    setattr(target, k, v)
                else:
                    logger.warning(f"Ignoring unknown [{section}] key {k!r} in {path}")
        for k in ("log_level", "strict_descriptions"):
            if k in raw:
                setattr(cfg, k, raw[k])
        cfg.search.validate()
        return cfg


def setup_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with one at ``level``."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


# single globally importable config instance
CONFIG = Config.load_from_toml(os.environ.get("TREECHESS_CONFIG_TOML", "config.toml"))
# allow env override of depth for quick debugging
override_depth = os.environ.get("TREECHESS_SEARCH_DEPTH")
if override_depth:
    previous_depth = CONFIG.search.depth
    try:
        CONFIG.search.depth = int(override_depth)
        CONFIG.search.validate()
    except ValueError:
        logger.warning(f"Ignoring invalid TREECHESS_SEARCH_DEPTH={override_depth!r}")
        CONFIG.search.depth = previous_depth
