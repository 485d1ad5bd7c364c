"""Application entrypoint — start the API server or run one-off commands."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import uvicorn
from pydantic import ValidationError

from neuroaura.config import get_settings
from neuroaura.logger import setup_logging


def _score_file(path: str) -> int:
    """Score a payload stored as JSON and print the result; return the exit status."""
    from neuroaura.models import validate_payload
    from neuroaura.scoring import calculate_stress_score

    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Cannot read payload: {exc}", file=sys.stderr)
        return 2

    try:
        payload = validate_payload(data)
    except ValidationError as exc:
        print(f"Invalid payload:\n{exc}", file=sys.stderr)
        return 2

    result = calculate_stress_score(payload)
    print(result.model_dump_json(indent=2))
    return 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="neuroaura",
        description="Deterministic stress scoring service.",
    )
    sub = parser.add_subparsers(dest="command")

    # ── serve ─────────────────────────────────────────────────
    serve_parser = sub.add_parser("serve", help="Start the API server.")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    serve_parser.add_argument("--reload", action="store_true")

    # ── init-db ───────────────────────────────────────────────
    sub.add_parser("init-db", help="Create database tables.")

    # ── score ─────────────────────────────────────────────────
    score_parser = sub.add_parser("score", help="Score an assessment payload JSON file.")
    score_parser.add_argument("payload", help="Path to the payload JSON file.")

    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(settings.log_level)

    if args.command == "serve":
        uvicorn.run(
            "neuroaura.api.server:app",
            host=args.host or settings.api_host,
            port=args.port or settings.api_port,
            reload=args.reload,
        )
    elif args.command == "init-db":
        from neuroaura.storage.database import init_db

        asyncio.run(init_db())
        print("Database tables created.")
    elif args.command == "score":
        sys.exit(_score_file(args.payload))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
