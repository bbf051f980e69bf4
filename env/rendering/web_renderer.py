"""
Browser viewer for tag runs.

Keeps the render-state history of a run and serves it through ``GameAPI``.
Live runs push every captured frame to connected browsers; finished runs
can be written to a replay file and opened again later.
"""

from __future__ import annotations

import json
import threading
import time
import webbrowser
from pathlib import Path
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from infra.logger import get_logger
from infra.paths import PROJECT_ROOT, REPLAY_STORAGE_DIR
from .api import GameAPI
from .render_state import RenderStateBuilder

if TYPE_CHECKING:
    from game_frame import Frame

logger = get_logger(__name__)

REPLAY_FORMAT_VERSION = "1.0"


class WebRenderer:
    """
    Viewer that records render states and serves them to the browser.

    Args:
        port: Port for the Flask/SocketIO server
        live: Start the server now and broadcast each frame as it arrives
        auto_open: Open a browser tab once the server is up
        host: Interface the server binds to
    """

    def __init__(
        self,
        port: int = 5000,
        live: bool = True,
        auto_open: bool = True,
        host: str = "127.0.0.1",
    ):
        self.port = port
        self.live = live
        self.api = GameAPI(host=host, port=port)
        # The API serves this exact list, so it must only be mutated in place.
        self.history: List[Dict[str, Any]] = self.api.history
        self._thread: Optional[threading.Thread] = None

        if live:
            self.start(auto_open=auto_open)

    @property
    def url(self) -> str:
        return f"http://localhost:{self.port}"

    @property
    def serving(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def capture(self, frame: "Frame") -> None:
        """Record a frame, pushing it to browsers when live."""
        state = RenderStateBuilder.build(frame)
        self.history.append(state)
        if self.live:
            self.api.broadcast(state)
        else:
            self.api.current_state = state

    # ------------------------------------------------------------------#
    # Replays
    # ------------------------------------------------------------------#
    def save(self, filename: str | Path | None = None) -> Path:
        """
        Write the recorded history as a replay file.

        Args:
            filename: Target path. Relative paths are resolved against the
                project root; None picks a timestamped name under
                storage/replays.

        Returns:
            The path written
        """
        if filename is None:
            path = REPLAY_STORAGE_DIR / f"replay_{time.strftime('%Y%m%d_%H%M%S')}.json"
        else:
            path = Path(filename)
            if not path.is_absolute():
                path = PROJECT_ROOT / path
        path.parent.mkdir(parents=True, exist_ok=True)

        replay = {"version": REPLAY_FORMAT_VERSION, "steps": self.history}
        path.write_text(json.dumps(replay, indent=2), encoding="utf-8")
        logger.info("Saved %d frames to %s", len(self.history), path)
        return path

    def load_replay(self, filename: str | Path, auto_open: bool = True) -> int:
        """
        Replace the history with a saved replay and serve it.

        Starts the server if it is not already running.

        Returns:
            Number of frames loaded

        Raises:
            ValueError: If the file is not a replay this viewer understands
        """
        replay = json.loads(Path(filename).read_text(encoding="utf-8"))
        version = replay.get("version")
        if version != REPLAY_FORMAT_VERSION:
            raise ValueError(f"Unsupported replay version {version!r} in {filename}")

        self.history[:] = replay.get("steps", [])
        self.api.current_state = self.history[-1] if self.history else None
        logger.info("Loaded %d frames from %s", len(self.history), filename)

        if self.serving:
            if auto_open:
                webbrowser.open(self.url)
        else:
            self.start(auto_open=auto_open)
        return len(self.history)

    def clear(self) -> None:
        """Forget every recorded frame."""
        self.history.clear()
        self.api.current_state = None

    # ------------------------------------------------------------------#
    # Server
    # ------------------------------------------------------------------#
    def start(self, auto_open: bool = True) -> None:
        """Run the API server on a daemon thread (no-op if already serving)."""
        if not self.serving:
            self._thread = threading.Thread(target=self.api.run, name="tag-web-viewer", daemon=True)
            self._thread.start()
            logger.info("Web viewer listening on %s", self.url)
            if auto_open:
                # give werkzeug a moment to bind before the browser asks
                time.sleep(1.0)
        if auto_open:
            webbrowser.open(self.url)

    def close(self) -> None:
        """
        Nothing to release.

        Flask-SocketIO has no programmatic stop in threading mode; the daemon
        thread ends with the process.
        """
        logger.debug("Web viewer closed after %d frames", len(self.history))
