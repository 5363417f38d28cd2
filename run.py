import argparse
import logging

import uvicorn

from linkup.core.config import settings
from linkup.db.init_db import init_db

logger = logging.getLogger("linkup")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the LinkUp REST API")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Port to listen on (default: 8000)")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Restart on code changes (always on when DEBUG is set)",
    )
    parser.add_argument(
        "--migrate",
        action="store_true",
        help="Apply Alembic migrations up to head before serving",
    )
    parser.add_argument("--log-level", default="debug" if settings.DEBUG else "info")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    if args.migrate:
        init_db()

    reload = args.reload or settings.DEBUG
    logger.info(
        f"Starting {settings.PROJECT_NAME} ({settings.ENVIRONMENT}) on http://{args.host}:{args.port}, "
        f"docs at {settings.DOCS_URL}, reload {'on' if reload else 'off'}"
    )

    uvicorn.run(
        "linkup.main:app",
        host=args.host,
        port=args.port,
        reload=reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
