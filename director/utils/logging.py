"""Logging setup shared by the server and the headless CLI."""

from __future__ import annotations

import logging
import sys

# Per-request and per-poll loggers that would drown out frame summaries
NOISY_LOGGERS: tuple[str, ...] = ("uvicorn.access", "httpx")


def setup_logging(level: str = "INFO", quiet: tuple[str, ...] = NOISY_LOGGERS) -> None:
    """Send director logs to stdout, tagged with the emitting thread.

    The game loop runs on ``director-loop`` while requests are served on the
    server's threads, so the thread name is part of every line. Loggers named
    in *quiet* never drop below WARNING.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s [%(levelname)-5s] %(threadName)-13s %(name)-30s | %(message)s",
        datefmt="%H:%M:%S",
    ))

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in quiet:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
