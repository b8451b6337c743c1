"""Flask app serving the public leaderboard API."""
from __future__ import annotations

import json
import logging

from flask import Flask, jsonify, request

from sodamerge.leaderboard.config import LeaderboardConfig
from sodamerge.leaderboard.rate_limit import RateLimiter
from sodamerge.leaderboard.storage import LeaderboardStore
from sodamerge.leaderboard.validation import ValidationError, to_int, validate_submission

logger = logging.getLogger(__name__)


def client_address() -> str:
    forwarded = request.headers.get("X-Forwarded-For", "")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return request.remote_addr or "unknown"


def create_app(
    config: LeaderboardConfig | None = None,
    *,
    store: LeaderboardStore | None = None,
    rate_limiter: RateLimiter | None = None,
) -> Flask:
    config = config or LeaderboardConfig()
    store = store or LeaderboardStore(config.data_file, config.max_entries)
    rate_limiter = rate_limiter or RateLimiter(config.rate_limit_max, config.rate_limit_window)

    app = Flask(__name__)
    app.config["LEADERBOARD"] = config
    app.config["MAX_CONTENT_LENGTH"] = config.max_body_bytes
    app.extensions["leaderboard_store"] = store
    app.extensions["leaderboard_rate_limiter"] = rate_limiter

    @app.before_request
    def preflight():
        if request.method == "OPTIONS":
            return app.response_class(status=204)
        return None

    @app.after_request
    def add_cors_headers(response):
        response.headers["Access-Control-Allow-Origin"] = config.allowed_origin
        response.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
        response.headers["Access-Control-Allow-Headers"] = "Content-Type"
        return response

    @app.errorhandler(404)
    @app.errorhandler(405)
    def not_found(error):
        return jsonify(error="Not found"), 404

    @app.errorhandler(413)
    def payload_too_large(error):
        return jsonify(error="Payload too large"), 400

    @app.get("/health")
    def health():
        return jsonify(ok=True)

    @app.get("/api/leaderboard")
    def list_entries():
        requested = to_int(request.args.get("limit"))
        if requested is None:
            limit = config.default_limit
        else:
            limit = max(1, min(config.max_limit, requested))
        return jsonify(entries=store.top(limit))

    @app.post("/api/leaderboard")
    def submit_entry():
        if not rate_limiter.allow(client_address()):
            return jsonify(error="Too many requests. Try again in a minute."), 429
        raw = request.get_data(cache=False)
        if len(raw) > config.max_body_bytes:
            return jsonify(error="Payload too large"), 400
        if not raw:
            return jsonify(error="Empty body"), 400
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            return jsonify(error="Invalid JSON"), 400
        try:
            submission = validate_submission(payload)
        except ValidationError as exc:
            return jsonify(error=str(exc)), 400
        try:
            store.add(submission)
        except OSError:
            app.logger.exception("Failed to persist leaderboard entry")
            return jsonify(error="Could not save score"), 500
        return jsonify(ok=True), 201

    return app


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = LeaderboardConfig.from_env()
    store = LeaderboardStore(config.data_file, config.max_entries)
    try:
        store.ensure()
    except OSError:
        logger.exception("Failed to initialize leaderboard storage at %s", config.data_file)
        raise SystemExit(1)
    app = create_app(config, store=store)
    logger.info("Leaderboard API listening on http://localhost:%d", config.port)
    app.run(host=config.host, port=config.port)


if __name__ == "__main__":
    main()
