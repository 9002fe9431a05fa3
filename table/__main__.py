import argparse
import asyncio
import logging
import random

from bots.house import SimpleDecisionProvider, StyleDecisionProvider
from bots.remote import RemoteDecisionProvider
from holdem.game import GameEngine
from holdem.models import GameState, TableConfig

from .session import TableSession

logging.basicConfig(level=logging.INFO)

LOGGER = logging.getLogger("holdem.session")


async def _run(args: argparse.Namespace) -> None:
    config = TableConfig(
        seats=args.seats,
        starting_stack=args.starting_stack,
        sb=args.sb,
        bb=args.bb,
        move_time_ms=args.move_time,
        side_pots=args.side_pots,
    )
    if args.bot_url:
        provider = RemoteDecisionProvider(args.bot_url)
    else:
        provider = StyleDecisionProvider(random.Random(args.seed))

    engine = GameEngine(config, provider, random.Random(args.seed))
    # The human seat plays on autopilot in the demo.
    session = TableSession(engine, human_provider=SimpleDecisionProvider())
    state = GameState()
    try:
        await session.run(state, hands=args.hands, seed=args.seed)
    finally:
        if isinstance(provider, RemoteDecisionProvider):
            await provider.close()

    for player in state.players:
        LOGGER.info("%-10s %6s chips", player.name, player.chips)


def main() -> None:
    parser = argparse.ArgumentParser(description="Play a demo Hold'em session against house bots")
    parser.add_argument("--hands", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--seats", type=int, default=8)
    parser.add_argument("--starting-stack", type=int, default=1_000)
    parser.add_argument("--sb", type=int, default=10)
    parser.add_argument("--bb", type=int, default=20)
    parser.add_argument(
        "--move-time",
        type=int,
        default=15_000,
        help="Decision time limit in milliseconds (0 waits indefinitely)",
    )
    parser.add_argument("--side-pots", action="store_true", help="Split unequal all-ins into side pots")
    parser.add_argument("--bot-url", default=None, help="WebSocket URL of a bot that plays every non-human seat")
    args = parser.parse_args()

    asyncio.run(_run(args))


if __name__ == "__main__":
    main()
