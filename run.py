"""
Serve the Flowguard API with uvicorn.

Host, port and log level default to the FLOWGUARD_HOST, FLOWGUARD_PORT and
FLOWGUARD_LOG_LEVEL settings; command line flags override them.

Usage:
    python run.py
    python run.py --reload
    FLOWGUARD_PORT=8080 python run.py
"""
import argparse

import uvicorn

from flowguard.config.settings import settings


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the Flowguard API")
    parser.add_argument("--host", default=settings.host, help=f"Bind address (default: {settings.host})")
    parser.add_argument("--port", type=int, default=settings.port, help=f"Bind port (default: {settings.port})")
    parser.add_argument(
        "--reload",
        action="store_true",
        default=False,
        help="Restart on code changes; only honoured when FLOWGUARD_DEBUG is true",
    )
    parser.add_argument("--workers", type=int, default=1, help="Worker processes, ignored with --reload")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    reload = args.reload and settings.debug

    print(f"Flowguard ({settings.environment}) on http://{args.host}:{args.port}")
    if settings.registry_path:
        print(f"  Node catalogue: {settings.registry_path}")
    if args.reload and not reload:
        print("  --reload ignored because debug is off")

    # The node registry is loaded once per worker by the application lifespan
    uvicorn.run(
        "flowguard.main:app",
        host=args.host,
        port=args.port,
        reload=reload,
        workers=1 if reload else args.workers,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
