from __future__ import annotations

import pytest

from treechess.config import Config, SearchConfig, setup_logging


def test_defaults():
    cfg = Config()
    assert cfg.search.depth == 2
    assert cfg.search.strategy == "alphabeta"
    assert cfg.eval.piece_values["KING"] == 99999
    assert cfg.strict_descriptions is False


def test_missing_file_gives_defaults(tmp_path):
    cfg = Config.load_from_toml(str(tmp_path / "missing.toml"))
    assert cfg == Config()


def test_load_from_toml(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text(
        'log_level = "DEBUG"\n'
        "strict_descriptions = true\n"
        "[search]\n"
        "depth = 3\n"
        'strategy = "naive"\n'
        "unknown = 1\n"
        "[eval]\n"
        "stalemate_score = -25\n"
    )
    cfg = Config.load_from_toml(str(path))
    assert cfg.search.depth == 3
    assert cfg.search.strategy == "naive"
    assert cfg.eval.stalemate_score == -25
    assert cfg.log_level == "DEBUG"
    assert cfg.strict_descriptions is True


def test_invalid_toml_search_rejected(tmp_path):
    path = tmp_path / "config.toml"
    path.write_text("[search]\ndepth = 0\n")
    with pytest.raises(ValueError):
        Config.load_from_toml(str(path))


@pytest.mark.parametrize("kwargs", [{"depth": 0}, {"depth": -2}, {"strategy": "random"}])
def test_search_config_validation(kwargs):
    with pytest.raises(ValueError):
        SearchConfig(**kwargs)


def test_setup_logging_accepts_level():
    setup_logging("debug")
    setup_logging("INFO")
