"""JSON API for the arbitrage calculator.

The browser front end keeps the user's incomes, loans and plans and posts
the whole snapshot whenever it needs a fresh projection; the server keeps no
state between requests.
"""

import os

from flask import Flask, jsonify, request

from arbitrage_calc.config import EngineSettings, clamp_horizon, suggested_return
from arbitrage_calc.data_models import SIP_TYPES
from arbitrage_calc.engine import summarize
from arbitrage_calc.logging_config import get_logger
from arbitrage_calc.main import result_to_dict, scenario_from_dict
from arbitrage_calc.utils import parse_choice

logger = get_logger("web")


def create_app(settings: EngineSettings = None) -> Flask:
    app = Flask(__name__)
    app.config["ENGINE_SETTINGS"] = settings or EngineSettings.from_env()
    app.config["MAX_CONTENT_LENGTH"] = int(os.environ.get("ARBITRAGE_MAX_CONTENT_LENGTH", 1024 * 1024))

    @app.get("/healthz")
    def healthz():
        return jsonify({"status": "ok"})

    @app.post("/api/project")
    def project_scenario():
        engine_settings = app.config["ENGINE_SETTINGS"]
        data = request.get_json(silent=True)
        if data is None:
            return jsonify({"error": "Request body must be a JSON object"}), 400
        try:
            portfolio, horizon = scenario_from_dict(data, engine_settings)
        except (ValueError, TypeError) as exc:
            logger.warning("Rejected scenario: %s", exc)
            return jsonify({"error": str(exc)}), 400
        result = portfolio.project(clamp_horizon(horizon, engine_settings), engine_settings)
        payload = result_to_dict(result)
        payload["summary"] = summarize(portfolio.incomes, portfolio.loans, portfolio.sips, result)
        return jsonify(payload)

    @app.get("/api/suggested-return/<sip_type>")
    def suggested(sip_type: str):
        try:
            canonical = parse_choice(sip_type, SIP_TYPES, "SIP type")
        except ValueError as exc:
            return jsonify({"error": str(exc)}), 404
        value = suggested_return(canonical, app.config["ENGINE_SETTINGS"])
        return jsonify({"type": canonical, "expected_return": float(value)})

    return app


if __name__ == "__main__":
    print("Starting arbitrage calculator API...")
    create_app().run(host="0.0.0.0", port=int(os.environ.get("PORT", 8710)), debug=True)
