"""Inkbound launcher. Serves the session API, or lints a book with --validate."""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")


def validate(path: Path) -> int:
    """Print every content error in the book at `path`. Returns the exit code."""
    from pydantic import ValidationError

    from inkbound.models import Book
    from inkbound.validation import find_content_errors

    try:
        book = Book.model_validate_json(path.read_bytes())
    except OSError as e:
        print(f"{path}: cannot read ({e.strerror or e})")
        return 1
    except ValidationError as e:
        print(f"{path}: not a valid book\n{e}")
        return 1

    errors = find_content_errors(book)
    for problem in errors:
        print(f"{path}: {problem}")
    if not errors:
        print(f"{path}: OK ({len(book.screens)} screens)")
    return 1 if errors else 0


def main():
    parser = argparse.ArgumentParser(description="Inkbound visual novel server")
    parser.add_argument("--config", type=Path, default=None,
                        help="JSON config file (default: INKBOUND_CONFIG or built-in defaults)")
    parser.add_argument("--host", default=None, help="Bind address (overrides config)")
    parser.add_argument("--port", type=int, default=None, help="Port (overrides config)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--validate", type=Path, metavar="BOOK",
                        help="Check a book for content errors and exit")
    args = parser.parse_args()

    if args.validate:
        sys.exit(validate(args.validate))

    # The app reads its config in its own import, so hand the file over via env.
    if args.config:
        os.environ["INKBOUND_CONFIG"] = str(args.config.resolve())

    import uvicorn

    from inkbound.config import get_config

    config = get_config(args.config)
    logging.basicConfig(
        level=str(config["log_level"]).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = args.host or config["host"]
    port = args.port or config["port"]

    print(f"Starting Inkbound on http://localhost:{port} ...")
    uvicorn.run("inkbound.app:app", host=host, port=port, reload=args.reload)


if __name__ == "__main__":
    main()
