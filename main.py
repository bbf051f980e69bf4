"""Command-line launcher: run a tag simulation, stream it, or serve the API."""

import argparse
import sys
import time

from infra.logger import configure_logging, get_logger


class _Pacer:
    """Viewer that sleeps between frames so live output is watchable."""

    def __init__(self, delay: float):
        self.delay = delay

    def capture(self, frame) -> None:
        if self.delay > 0 and not frame.done:
            time.sleep(self.delay)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Simulate a game of tag on a grid.")
    parser.add_argument("player_count", nargs="?", type=int, default=None,
                        help="Number of players (default: 5)")
    parser.add_argument("step_count", nargs="?", type=int, default=None,
                        help="Number of steps to simulate (default: 100)")
    parser.add_argument("--seed", type=int, default=0, help="Seed for the initial placement (default: 0)")
    parser.add_argument("--width", type=int, default=None, help="Field width (default: sized to the players)")
    parser.add_argument("--height", type=int, default=None, help="Field height (default: sized to the players)")
    parser.add_argument("--no-tag-backs", action="store_true",
                        help="IT ignores the player who just tagged it while other runners remain")
    parser.add_argument("--delay", type=float, default=0.0, help="Seconds to pause between frames")
    parser.add_argument("--quiet", action="store_true", help="Do not print ASCII frames")
    parser.add_argument("--web", action="store_true", help="Stream frames to the browser viewer")
    parser.add_argument("--web-port", type=int, default=5055, help="Port for the browser viewer (default: 5055)")
    parser.add_argument("--save-replay", default=None, help="Write the recorded frames to this JSON file (with --web)")
    parser.add_argument("--replay", default=None, help="Open a saved replay in the browser viewer instead of running")
    parser.add_argument("--serve", action="store_true", help="Serve the HTTP API with uvicorn instead of running")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind with --serve (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port for the API with --serve (default: 8000)")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO)")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines")
    return parser


def serve(args: argparse.Namespace) -> None:
    import uvicorn

    log = get_logger(__name__)
    log.info("Starting tag API at http://%s:%d", args.host, args.port)
    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
    )


def _wait_forever(port: int) -> None:
    log = get_logger(__name__)
    log.info("Viewer still running at http://localhost:%d (Ctrl+C to exit)", port)
    try:
        while True:
            time.sleep(1.0)
    except KeyboardInterrupt:
        pass


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging once at startup.
    configure_logging(level=args.log_level, json=args.log_json)
    log = get_logger(__name__)

    if args.serve:
        serve(args)
        return 0

    # Imported late so --help and --serve stay cheap.
    from env.core.errors import InvalidConfiguration
    from env.rendering import AsciiRenderer, WebRenderer
    from env.scenario import Scenario
    from game_runner import Simulation

    if args.replay:
        viewer = WebRenderer(port=args.web_port, live=False)
        try:
            count = viewer.load_replay(args.replay)
        except (OSError, ValueError) as exc:
            parser.error(f"cannot load replay {args.replay}: {exc}")
        log.info("Replaying %d frames from %s", count, args.replay)
        _wait_forever(args.web_port)
        return 0

    try:
        scenario = Scenario.from_counts(
            args.player_count,
            args.step_count,
            field_width=args.width,
            field_height=args.height,
            seed=args.seed,
            no_tag_backs=args.no_tag_backs,
        )
    except InvalidConfiguration as exc:
        parser.error(str(exc))

    viewers = []
    ascii_view = None
    if not args.quiet:
        ascii_view = AsciiRenderer(stream=sys.stdout)
        viewers.append(ascii_view)
    web = None
    if args.web:
        web = WebRenderer(port=args.web_port, live=True, auto_open=True)
        viewers.append(web)
    if args.delay:
        viewers.append(_Pacer(args.delay))

    simulation = Simulation(scenario, viewers=viewers)
    initial = simulation.get_initial_frame()
    if ascii_view is not None:
        ascii_view.capture(initial)
    if web is not None:
        web.capture(initial)

    frames = simulation.run(include_history=True)
    tag_count = sum(len(f.tags) for f in frames)
    final = frames[-1]
    log.info("Done: %d steps, %d tags, player %d is it", final.step, tag_count, final.it_player)

    if web is not None:
        if args.save_replay:
            web.save(args.save_replay)
        _wait_forever(args.web_port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
