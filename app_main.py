"""Application entry point for QuizRunner."""

from __future__ import annotations

import argparse
from pathlib import Path

from quiz_runner.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quiz_runner.core.event_log_exporter import load_event_log_from_file, save_event_log_to_file
from quiz_runner.core.quiz_importer import load_quiz_from_file
from quiz_runner.core.quiz_manager import QuizManager
from quiz_runner.server.api_server import serve_api
from quiz_runner.utils.logging_config import configure_logging


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve a quiz session over HTTP.")
    parser.add_argument("quiz", type=Path, help="Path to the quiz definition JSON file.")
    parser.add_argument(
        "--event-log",
        type=Path,
        default=None,
        help="Event log to resume from (if present) and to write back on shutdown.",
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser.parse_args()


def main() -> None:
    """Initialize logging, build the session and serve it until interrupted."""
    args = _parse_args()
    logger = configure_logging()
    logger.info("Starting QuizRunner with %s", args.quiz)

    definition = load_quiz_from_file(args.quiz)
    if args.event_log is not None and args.event_log.exists():
        quiz_manager = QuizManager.replay(definition, load_event_log_from_file(args.event_log))
    else:
        quiz_manager = QuizManager.from_definition(definition)

    try:
        serve_api(quiz_manager=quiz_manager, host=args.host, port=args.port)
    finally:
        if args.event_log is not None:
            save_event_log_to_file(args.event_log, quiz_manager.export_event_log())
            logger.info("Event log written to %s", args.event_log)


if __name__ == "__main__":
    main()
