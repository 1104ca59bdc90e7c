"""Command line entry point for the QuickDrop services."""
import argparse

import uvicorn

from quickdrop.config import settings


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="quickdrop", description="QuickDrop file transfer log services"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    api = subparsers.add_parser("api", help="Run the transfer log API")
    api.add_argument("--host", default=settings.HOST)
    api.add_argument("--port", type=int, default=settings.PORT)

    dashboard = subparsers.add_parser("dashboard", help="Run the dashboard")
    dashboard.add_argument("--host", default=settings.HOST)
    dashboard.add_argument("--port", type=int, default=settings.DASHBOARD_PORT)

    args = parser.parse_args(argv)
    target = "quickdrop.main:app" if args.command == "api" else "quickdrop.dashboard.main:app"
    uvicorn.run(
        target,
        host=args.host,
        port=args.port,
        reload=settings.is_development,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
