"""Command-line launcher for the snake engine."""

from __future__ import annotations

import argparse
import json
import logging
import sys

import numpy as np

logger = logging.getLogger(__name__)

_KEYS = ("up", "down", "left", "right")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-engine",
        description="Run or inspect the snake game engine.",
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to a JSON engine config (flags override its fields).",
    )
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--tick-interval-ms", type=int, default=None)
    parser.add_argument(
        "--food-strategy", type=str, default=None,
        choices=["rejection", "free_cells"],
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- serve ---
    serve_p = sub.add_parser("serve", help="Run the HTTP/WebSocket server.")
    serve_p.add_argument("--host", type=str, default="127.0.0.1")
    serve_p.add_argument("--port", type=int, default=8000)

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play a headless game with random key presses.",
    )
    sim_p.add_argument("--max-ticks", type=int, default=500)
    sim_p.add_argument(
        "--turn-probability", type=float, default=0.2,
        help="Chance of pressing a random key before each tick.",
    )
    sim_p.add_argument(
        "--show-frames", action="store_true",
        help="Print every frame instead of only the last one.",
    )

    # --- show-config ---
    sub.add_parser("show-config", help="Print the effective config as JSON.")

    return parser


def _load_config(args: argparse.Namespace):
    from snake_engine.config import EngineConfig

    config = EngineConfig.load(args.config) if args.config else EngineConfig()
    return config.with_overrides(
        width=args.width,
        height=args.height,
        seed=args.seed,
        tick_interval_ms=args.tick_interval_ms,
        food_strategy=args.food_strategy,
    )


def _run_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from snake_engine.server.app import create_app

    app = create_app(_load_config(args))
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def _run_simulate(args: argparse.Namespace) -> int:
    from snake_engine.engine import GameEngine
    from snake_engine.render import render_text

    config = _load_config(args)
    engine = GameEngine(config=config)
    keys = np.random.default_rng(config.seed)
    engine.ensure_food()

    for _ in range(args.max_ticks):
        if keys.random() < args.turn_probability:
            engine.queue_direction(_KEYS[int(keys.integers(len(_KEYS)))])
        engine.tick()
        if engine.game_over:
            break
        engine.ensure_food()
        if args.show_frames:
            print(render_text(engine.get_state()))  # noqa: T201
            print()  # noqa: T201

    state = engine.get_state()
    print(render_text(state))  # noqa: T201
    logger.info("Simulation ended after %d ticks.", state["tick"])
    return 0


def _run_show_config(args: argparse.Namespace) -> int:
    print(json.dumps(_load_config(args).to_dict(), indent=2))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-engine`` CLI."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "serve": _run_serve,
        "simulate": _run_simulate,
        "show-config": _run_show_config,
    }
    try:
        return handlers[args.command](args)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
