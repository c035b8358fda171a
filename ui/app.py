"""Rank Deck — Textual application entry point.

``RankDeckApp`` owns the ``Session`` and shows the ``DeckScreen``.  The
session's level-up timer runs on the asyncio loop Textual drives, so it is
created with the default ``AsyncioScheduler``.
"""

from __future__ import annotations

from textual.app import App

from game.config import DeckConfig
from game.session import Session


class RankDeckApp(App):
    """Root Textual application for the card deck demo."""

    TITLE = "Rank Deck"

    def __init__(self, config: DeckConfig | None = None) -> None:
        super().__init__()
        self.config = config or DeckConfig()
        self.session = Session.create(self.config)

    def on_mount(self) -> None:
        from ui.screens.deck import DeckScreen

        self.push_screen(DeckScreen(self.session))
