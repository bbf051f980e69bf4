"""
Flask/SocketIO API for streaming tag frames to the browser.

Only server concerns live here (routes + events). The WebRenderer records
frames and calls ``broadcast`` to push each new one.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, send_from_directory
from flask_socketio import SocketIO, emit

from infra.logger import get_logger

logger = get_logger(__name__)


class GameAPI:
    """
    Flask application with REST endpoints and WebSocket events.

    ``history`` is shared with the WebRenderer, which appends to it in place.

    Routes:
        GET /                      viewer page
        GET /api/history           every recorded frame
        GET /api/current           latest frame
        GET /api/step/<n>          frame recorded for step n
        GET /api/tags              every tag event so far, in step order
    """

    def __init__(self, host: str = "127.0.0.1", port: int = 5000):
        static_dir = Path(__file__).resolve().parent / "static"
        self.app = Flask(
            __name__,
            static_folder=str(static_dir),
            static_url_path="",
        )
        self.socketio = SocketIO(
            self.app,
            cors_allowed_origins="*",
            async_mode="threading",
        )
        self.host = host
        self.port = port

        # Frame storage (managed by WebRenderer via shared reference)
        self.history: List[Dict[str, Any]] = []
        self.current_state: Optional[Dict[str, Any]] = None

        self._register_routes(static_dir)
        self._register_socket_events()

    def _find_step(self, step_number: int) -> Optional[Dict[str, Any]]:
        # history normally starts at step 0 but a viewer may attach late
        return next((s for s in self.history if s.get("step") == step_number), None)

    def _register_routes(self, static_dir: Path) -> None:
        app = self.app

        @app.route("/")
        def index():
            return send_from_directory(static_dir, "index.html")

        @app.route("/api/history")
        def get_history():
            return jsonify({"steps": self.history, "total_steps": len(self.history)})

        @app.route("/api/current")
        def get_current():
            if self.current_state is None:
                return jsonify({"error": "No frame captured yet"}), 404
            return jsonify(self.current_state)

        @app.route("/api/step/<int:step_number>")
        def get_step(step_number: int):
            frame = self._find_step(step_number)
            if frame is None:
                return jsonify({"error": f"Step {step_number} not recorded"}), 404
            return jsonify(frame)

        @app.route("/api/tags")
        def get_tags():
            tags = [
                {"step": frame.get("step"), **tag}
                for frame in self.history
                for tag in frame.get("tags", [])
            ]
            return jsonify({"tags": tags, "total_tags": len(tags)})

    def _register_socket_events(self) -> None:
        socketio = self.socketio

        @socketio.on("connect")
        def handle_connect():
            logger.debug("viewer connected")
            if self.current_state is not None:
                emit("state_update", self.current_state)

        @socketio.on("request_history")
        def handle_history_request():
            emit("history", {"steps": self.history})

    def broadcast(self, state: Dict[str, Any]) -> None:
        """Push a render state to all connected clients."""
        self.current_state = state
        self.socketio.emit("state_update", state)

    def run(self) -> None:
        """Start the Flask server (blocking call)."""
        self.socketio.run(
            self.app,
            host=self.host,
            port=self.port,
            debug=False,
            use_reloader=False,
            allow_unsafe_werkzeug=True,
        )
