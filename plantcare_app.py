"""Development entry point for the houseplant care tracker backend.

For WSGI servers use the factory directly, e.g. ``gunicorn "app:create_app()"``.
"""
from __future__ import annotations

import logging
import os

from app import create_app


def _env_flag_true(name: str) -> bool:
    v = os.getenv(name)
    return bool(v and v.lower() in ("1", "true", "yes", "on"))


def main() -> int:
    host = os.getenv("PLANTCARE_HOST", "127.0.0.1")
    port = int(os.getenv("PLANTCARE_PORT", "8000"))
    debug = _env_flag_true("PLANTCARE_DEBUG")

    app = create_app()
    logging.info("Starting server on %s:%s", host, port)

    try:
        app.run(host=host, port=port, debug=debug, use_reloader=False)
        logging.info("Server stopped.")
        return 0
    except KeyboardInterrupt:
        logging.info("Server stopped by user.")
        return 0
    finally:
        app.config["CONTAINER"].shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
