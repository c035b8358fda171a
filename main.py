#!/usr/bin/env python3
"""Rank Deck — an animated card deck you can browse, level up and re-lay out."""

import argparse
import logging

from game.config import DEFAULT_CARD_COUNT


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Rank Deck — browse, level up and re-lay out a deck of cards.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Controls:
  N / Right Arrow   Next card
  Space / C         Complete (rank up, then move to the completed pile)
  G                 Cycle layout (Study → Grid → Stack)
  R                 Reset (return completed cards to the deck)
  Q                 Quit

Examples:
  python main.py                  Start with 14 random cards
  python main.py --cards 6 --seed 3
""",
    )
    parser.add_argument(
        "--cards",
        type=int,
        default=DEFAULT_CARD_COUNT,
        help="Number of cards dealt at start (default: %(default)s)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for card ranks")
    parser.add_argument(
        "--legacy-completion",
        action="store_true",
        help="Let a pending completion fire even after Next/Reset/Complete",
    )
    parser.add_argument(
        "--debug",
        metavar="LOGFILE",
        default=None,
        help="Write debug logs to LOGFILE",
    )
    args = parser.parse_args()

    if args.debug:
        logging.basicConfig(
            filename=args.debug,
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )

    from game.config import DeckConfig
    from ui.app import RankDeckApp

    config = DeckConfig(
        initial_card_count=args.cards,
        seed=args.seed,
        cancel_stale_completion=not args.legacy_completion,
    )
    app = RankDeckApp(config)
    app.run()


if __name__ == "__main__":
    main()
