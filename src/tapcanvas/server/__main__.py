from __future__ import annotations

import argparse
import logging

import uvicorn

from .app import create_app
from .config import get_settings


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Run the shared tap canvas server.")
    ap.add_argument("--host", default=settings.host, help="Bind address")
    ap.add_argument("--port", type=int, default=settings.port, help="Bind port")
    ap.add_argument("--db", default=settings.db_path, help="sqlite file for the marker store")
    args = ap.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = settings.model_copy(update={"host": args.host, "port": args.port, "db_path": args.db})
    logging.getLogger(__name__).info("server running at http://%s:%d", args.host, args.port)
    uvicorn.run(create_app(settings), host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
