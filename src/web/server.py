"""Flask JSON API for scoring listings and reading score history."""

from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Any

from flask import Flask, jsonify, request

from src.core.alerts import AlertManager
from src.core.config import Settings, get_settings
from src.core.recorder import ScoreRecorder
from src.core.scoring import ScoringEngine
from src.db.repository import Repository

logger = logging.getLogger(__name__)


def _error(message: str, status: int = 400):
    return jsonify({"error": message}), status


def create_app(
    repo: Repository | None = None,
    engine: ScoringEngine | None = None,
    settings: Settings | None = None,
) -> Flask:
    """Create and configure the Flask application."""
    settings = settings or get_settings()
    app = Flask(__name__)
    app.json.sort_keys = False

    repo = repo or Repository(settings.history.max_entries_per_listing)
    engine = engine or ScoringEngine(settings)
    alert_manager = AlertManager(settings.alerts)
    recorder = ScoreRecorder(repo, engine=engine, alert_manager=alert_manager, settings=settings)

    app.extensions["listing_scorer"] = {
        "repo": repo,
        "engine": engine,
        "recorder": recorder,
        "alerts": alert_manager,
    }

    @app.route("/api/health")
    def api_health():
        return jsonify({"status": "ok", "time": datetime.now().isoformat()})

    @app.route("/api/score", methods=["POST"])
    def api_score():
        """Score a listing, optionally recording it in history."""
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return _error("Request body must be a JSON object")

        listing = body.get("listing")
        if not isinstance(listing, dict):
            return _error("'listing' must be a JSON object")

        market = body.get("market")
        if market is not None and not isinstance(market, dict):
            return _error("'market' must be a JSON object or null")

        result = engine.calculate(listing, market)
        payload: dict[str, Any] = result.to_dict()

        if body.get("record"):
            payload["recorded"] = recorder.record(result)

        return jsonify(payload)

    @app.route("/api/scores")
    def api_latest_scores():
        """Latest score of every recorded listing."""
        min_score = request.args.get("min_score", type=int)
        max_score = request.args.get("max_score", type=int)
        latest = repo.get_all_latest(min_score=min_score, max_score=max_score)
        return jsonify({
            "count": len(latest),
            "items": [
                {
                    "sku": h.listing_key,
                    "asin": h.asin,
                    "total_score": h.total_score,
                    "components": h.components,
                    "calculated_at": h.calculated_at.isoformat(),
                }
                for h in latest
            ],
        })

    @app.route("/api/scores/<sku>/history")
    def api_score_history(sku: str):
        """Recorded scores for a listing, oldest first."""
        days = request.args.get("days", default=settings.history.default_days, type=int)
        if days is None or days <= 0:
            return _error("'days' must be a positive integer")
        history = repo.get_score_history(sku, days=days)
        return jsonify({
            "sku": sku,
            "days": days,
            "count": len(history),
            "entries": [h.to_trend_point() for h in history],
        })

    @app.route("/api/scores/<sku>/trend")
    def api_score_trend(sku: str):
        """Improving / declining / stable analysis for a listing."""
        trend = recorder.get_trend(sku)
        return jsonify({"sku": sku, **trend.to_dict()})

    @app.route("/api/scores/statistics")
    def api_statistics():
        return jsonify(repo.get_statistics())

    @app.route("/api/score-distribution")
    def api_score_distribution():
        """Listing counts per score bucket."""
        buckets = repo.get_distribution()
        return jsonify({
            "buckets": buckets,
            "total": sum(b["count"] for b in buckets),
        })

    @app.route("/api/alerts")
    def api_alerts():
        limit = request.args.get("limit", default=20, type=int)
        return jsonify({
            "unread": alert_manager.unread_count,
            "items": [
                {
                    "type": a.alert_type.value,
                    "sku": a.sku,
                    "message": a.message,
                    "old_value": a.old_value,
                    "new_value": a.new_value,
                    "created_at": a.created_at.isoformat(),
                    "is_read": a.is_read,
                }
                for a in alert_manager.get_recent_alerts(limit)
            ],
        })

    return app


class WebServer:
    """Manages the Flask web server in a background thread."""

    def __init__(self, host: str = "127.0.0.1", port: int = 5050, app: Flask | None = None) -> None:
        self.host = host
        self.port = port
        self._app = app
        self._thread: threading.Thread | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def url(self) -> str:
        """Get the base URL of the API."""
        return f"http://{self.host}:{self.port}"

    def start(self) -> str:
        """Start the web server. Returns the URL."""
        if self._running:
            return self.url

        if self._app is None:
            self._app = create_app()
        self._running = True

        def run_server():
            # Request logging is noisy at INFO
            logging.getLogger("werkzeug").setLevel(logging.ERROR)

            try:
                self._app.run(
                    host=self.host,
                    port=self.port,
                    debug=False,
                    use_reloader=False,
                    threaded=True,
                )
            except Exception as e:
                logger.error(f"Web server error: {e}")
            finally:
                self._running = False

        self._thread = threading.Thread(target=run_server, daemon=True)
        self._thread.start()

        logger.info(f"Listing score API started at {self.url}")
        return self.url

    def join(self, timeout: float | None = None) -> None:
        """Block until the server thread exits."""
        if self._thread is not None:
            self._thread.join(timeout)

    def stop(self) -> None:
        """Stop the web server."""
        self._running = False
        # The daemon thread ends with the process
        logger.info("Listing score API stopped")
