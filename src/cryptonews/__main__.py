"""Entry point for the crypto news aggregator: python -m cryptonews"""

import argparse
import asyncio
import json
import logging
import sys

from cryptonews.aggregator import collect_news
from cryptonews.config import Settings

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)
# Quiet noisy loggers
logging.getLogger("httpx").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cryptonews",
        description="Aggregate crypto market news from RSS/Atom feeds.",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve = subparsers.add_parser("serve", help="Serve the news API over HTTP")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


async def run_once(settings: Settings) -> int:
    """Run one aggregation and print the JSON response. Returns the exit status."""
    result = await collect_news(settings=settings)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0 if result.success else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.from_env()

    if args.command == "serve":
        import uvicorn

        from cryptonews.api import create_app

        uvicorn.run(create_app(settings), host=args.host, port=args.port)
        return 0

    return asyncio.run(run_once(settings))


if __name__ == "__main__":
    sys.exit(main())
