"""Entry point: ``python -m director``.

Supports two modes:
  - ``python -m director``            → Launch FastAPI server with live telemetry
  - ``python -m director cli``        → Headless game loop driving the director
"""

from __future__ import annotations

import argparse
import asyncio
import logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Procedural Population Director")
    sub = parser.add_subparsers(dest="command")

    # --- Server mode (default) ---
    srv = sub.add_parser("serve", help="Start the FastAPI telemetry server (default)")
    srv.add_argument("--host", type=str, default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)
    srv.add_argument("--seed", type=int, default=42)
    srv.add_argument("--model-dir", type=str, default="models")
    srv.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    # --- Headless CLI mode ---
    cli = sub.add_parser("cli", help="Run a headless game loop")
    cli.add_argument("--seed", type=int, default=42)
    cli.add_argument("--frames", type=int, default=6000)
    cli.add_argument("--model-dir", type=str, default="models")
    cli.add_argument("--log-level", type=str, default="INFO", choices=["DEBUG", "INFO", "WARNING"])

    return parser


def _run_server(args: argparse.Namespace) -> None:
    import uvicorn

    from director.api.app import create_app
    from director.config import DirectorConfig

    config = DirectorConfig(
        world_seed=args.seed,
        model_dir=args.model_dir,
        log_level=args.log_level,
    )
    app = create_app(config)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())


def _run_cli(args: argparse.Namespace) -> None:
    from director.config import DirectorConfig
    from director.engine.director import Director
    from director.engine.game_loop import GameLoop, SimClock
    from director.inference.store import BaselineTrainer, NpzModelStore
    from director.utils.logging import setup_logging

    config = DirectorConfig(
        world_seed=args.seed,
        max_frames=args.frames,
        model_dir=args.model_dir,
        log_level=args.log_level,
    )

    setup_logging(config.log_level)

    store = NpzModelStore(config.model_dir)
    trainer = BaselineTrainer(store, config.enemy_model_name, config.structure_model_name)
    clock = SimClock()
    director = Director(config, store=store, trainer=trainer, clock=clock)

    if not asyncio.run(director.start()):
        logger.warning("Running without AI population (models unavailable).")

    loop = GameLoop(config, director, clock)
    try:
        loop.run()
    finally:
        metrics = director.get_metrics()
        logger.info(
            "Inference: %d calls, %.3f ms avg | cache hits %d, misses %d, evictions %d",
            metrics.inference_count, metrics.avg_inference_ms,
            metrics.cache_hits, metrics.cache_misses, metrics.cache_evictions,
        )
        director.dispose()


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    # Default to serve mode if no subcommand given
    if args.command is None or args.command == "serve":
        if args.command is None:
            args = parser.parse_args(["serve"])
        _run_server(args)
    elif args.command == "cli":
        _run_cli(args)


if __name__ == "__main__":
    main()
