from __future__ import annotations

from flask import Flask, jsonify, request
from loguru import logger
import sys
from pathlib import Path
from typing import Optional

# Ensure project root is importable when running this file directly
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from treechess import ChessEngineError, Evaluator, Game, create_ai
from treechess.config import CONFIG, Config, SearchConfig, setup_logging


def create_app(config: Optional[Config] = None) -> Flask:
    cfg = config or CONFIG
    app = Flask(__name__)

    game = Game(strict=cfg.strict_descriptions)
    evaluator = Evaluator.from_config(cfg.eval)
    search = SearchConfig(depth=cfg.search.depth, strategy=cfg.search.strategy)

    def ai_reply(depth: int, strategy: str):
        ai = create_ai(game.position, SearchConfig(depth=depth, strategy=strategy), evaluator)
        move = game.play_ai_turn(ai)
        return move.uci(), ai.moves_evaluated()

    def error(exc: Exception):
        logger.warning(f"{request.method} {request.path} rejected: {exc}")
        return jsonify({"error": str(exc)}), 400

    @app.post("/api/new")
    def api_new():
        data = request.get_json(silent=True) or {}
        fen = data.get("fen")
        color = (data.get("color") or "white").lower()

        try:
            # Validate before touching the game so a bad request keeps the old one
            requested = SearchConfig(
                depth=int(data.get("depth", search.depth)),
                strategy=data.get("strategy", search.strategy),
            )
            game.reset(fen)
        except (ChessEngineError, ValueError, TypeError) as exc:
            return error(exc)
        search.depth, search.strategy = requested.depth, requested.strategy

        ai_move_uci = None
        evaluated_moves = None
        pre_fen: Optional[str] = None
        # If player chose black, AI (white) makes the first move immediately
        if color == "black" and not game.is_game_over():
            # Capture starting position to allow frontend to animate the first AI move
            pre_fen = game.get_full_fen()
            ai_move_uci, evaluated_moves = ai_reply(search.depth, search.strategy)

        snap = game.snapshot()
        snap["ai_move"] = ai_move_uci
        snap["evaluated_moves"] = evaluated_moves
        if pre_fen is not None:
            snap["pre_fen"] = pre_fen
        return jsonify(snap)

    @app.post("/api/move")
    def api_move():
        payload = request.get_json(silent=True) or {}
        uci = payload.get("move")
        if not uci:
            return jsonify({"error": "Missing move"}), 400

        try:
            depth = int(payload.get("depth", search.depth))
            requested = SearchConfig(depth=depth, strategy=payload.get("strategy", search.strategy))
            game.push_uci(uci)
        except (ChessEngineError, ValueError, TypeError) as exc:
            return error(exc)

        if game.is_game_over():
            snap = game.snapshot()
            snap["ai_move"] = None
            snap["evaluated_moves"] = None
            return jsonify(snap)

        # AI move
        ai_move_uci, evaluated_moves = ai_reply(requested.depth, requested.strategy)

        snap = game.snapshot()
        snap["ai_move"] = ai_move_uci
        snap["evaluated_moves"] = evaluated_moves
        return jsonify(snap)

    @app.get("/api/state")
    def api_state():
        return jsonify(game.snapshot())

    return app


app = create_app()

if __name__ == "__main__":
    setup_logging(CONFIG.log_level)
    app.run(host="0.0.0.0", port=5000, debug=True)
