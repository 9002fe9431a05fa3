import argparse
import asyncio
import logging
import random

from .house import SimpleDecisionProvider, StyleDecisionProvider
from .server import BotServer

logging.basicConfig(level=logging.INFO)


def main() -> None:
    parser = argparse.ArgumentParser(description="Serve a house bot over WebSockets")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8765)
    parser.add_argument(
        "--strategy",
        choices=("style", "simple"),
        default="style",
        help="style follows each seat's style tag; simple always checks or calls",
    )
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    if args.strategy == "simple":
        provider = SimpleDecisionProvider()
    else:
        provider = StyleDecisionProvider(random.Random(args.seed))

    asyncio.run(BotServer(provider).start(host=args.host, port=args.port))


if __name__ == "__main__":
    main()
