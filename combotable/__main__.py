"""Command-line entry point for the combotable client."""

from __future__ import annotations

import argparse
import sys

from .app import TableClientApp
from .config import ClientConfig, DisplayConfig, InteractionConfig
from .errors import SnapshotError
from .logging_utils import get_logger, setup_logging
from .resources import ResourceManager
from .transport import JsonLinesTransport

_log = get_logger("combotable")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the combotable pygame client.")
    parser.add_argument(
        "--state",
        help="Table state document (JSON) to render; intents are written to stdout.",
    )
    parser.add_argument(
        "--width",
        type=int,
        help="Override the display width.",
    )
    parser.add_argument(
        "--height",
        type=int,
        help="Override the display height.",
    )
    parser.add_argument(
        "--fps",
        type=int,
        help="Override the target frame rate.",
    )
    parser.add_argument(
        "--fullscreen",
        dest="fullscreen",
        action="store_true",
        help="Start the client in full-screen mode.",
    )
    parser.add_argument(
        "--windowed",
        dest="fullscreen",
        action="store_false",
        help="Force the client to start in windowed mode.",
    )
    parser.add_argument(
        "--drag-threshold",
        type=float,
        help="Pixels the mouse must travel before a press becomes a drag.",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Only allow table takes that leave a valid trio or run behind.",
    )
    parser.add_argument(
        "--no-touch",
        dest="touch",
        action="store_false",
        help="Ignore touch input.",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    )
    parser.set_defaults(fullscreen=None)
    return parser


def parse_config(namespace: argparse.Namespace) -> ClientConfig:
    config = ClientConfig()
    display = config.display
    interaction = config.interaction
    width = namespace.width or display.width
    height = namespace.height or display.height
    fps = namespace.fps or display.frame_rate
    fullscreen = (
        display.fullscreen
        if namespace.fullscreen is None
        else namespace.fullscreen
    )
    drag_threshold = (
        interaction.drag_threshold
        if namespace.drag_threshold is None
        else max(0.0, namespace.drag_threshold)
    )

    return ClientConfig(
        display=DisplayConfig(
            width=width,
            height=height,
            caption=display.caption,
            frame_rate=fps,
            fullscreen=fullscreen,
        ),
        assets=config.assets,
        interaction=InteractionConfig(
            drag_threshold=drag_threshold,
            touch_enabled=namespace.touch,
            strict_shrink=namespace.strict,
            min_combination_size=interaction.min_combination_size,
        ),
        log_level=(namespace.log_level or config.log_level).upper(),
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = parse_config(args)
    setup_logging(config.log_level)

    snapshot = None
    transport = None
    if args.state:
        try:
            snapshot = ResourceManager(config.assets).load_state(args.state)
        except (FileNotFoundError, SnapshotError) as exc:
            _log.error("Cannot load table state: %s", exc)
            return 2
        transport = JsonLinesTransport(sys.stdout)

    app = TableClientApp(config, transport=transport, snapshot=snapshot)
    app.run()
    return 0


if __name__ == "__main__":  # pragma: no cover - module use only
    raise SystemExit(main())
