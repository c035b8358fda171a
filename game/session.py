"""Study session — the single source of truth for the deck demo.

``Session`` owns:
- ``buffer``         — a ``RingBuffer`` of the active cards with the cursor
- ``completed``      — completed cards, most recent first
- ``is_leveling_up`` — True between ``level_up`` and its timed completion
- ``layout``         — the active ``CardLayout``

Commands mutate state synchronously and then notify subscribers.  The one
exception is ``level_up``: it ranks the current card up immediately and
schedules ``complete`` to run ``level_up_delay`` seconds later on the same
event loop.

Every card lives in exactly one of ``buffer`` or ``completed``; no command
adds or drops cards, so the total count is fixed for the session's lifetime.

The session is free of UI concerns.  ``layout_positions`` is the read model
the presentation layer draws from.
"""

from __future__ import annotations

import logging
import random
from typing import Callable

from cards.models import Card
from cards.ring import InvalidStateError, RingBuffer
from game.config import DeckConfig
from game.layout import CardLayout, PositionedCard, compute_layout
from game.scheduler import AsyncioScheduler, ScheduledCall, Scheduler

logger = logging.getLogger(__name__)

Subscriber = Callable[["Session"], None]


class Session:
    """Active deck, completed pile and layout mode for one run of the demo."""

    def __init__(
        self,
        cards: list[Card],
        config: DeckConfig | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.config = config or DeckConfig()
        self.buffer: RingBuffer[Card] = RingBuffer(cards)
        self.completed: list[Card] = []
        self.is_leveling_up: bool = False
        self.layout: CardLayout = CardLayout.STUDY
        self._scheduler: Scheduler = scheduler or AsyncioScheduler()
        self._pending_completion: ScheduledCall | None = None
        self._subscribers: list[Subscriber] = []

    @classmethod
    def create(
        cls,
        config: DeckConfig | None = None,
        scheduler: Scheduler | None = None,
        rng: random.Random | None = None,
    ) -> Session:
        """Build the initial session: ``initial_card_count`` fresh random cards."""
        config = config or DeckConfig()
        rng = rng or random.Random(config.seed)
        cards = [Card.new(rng) for _ in range(config.initial_card_count)]
        logger.debug("Created session with %d cards", len(cards))
        return cls(cards, config=config, scheduler=scheduler)

    # ── Read Model ──────────────────────────────────────────────────────

    @property
    def cards(self) -> list[Card]:
        return self.buffer.items

    @property
    def all_cards(self) -> list[Card]:
        return [*self.buffer.items, *self.completed]

    @property
    def card_count(self) -> int:
        return len(self.buffer) + len(self.completed)

    @property
    def current_card(self) -> Card | None:
        return None if self.buffer.is_empty else self.buffer.current

    def layout_positions(self, viewport_width: float) -> list[PositionedCard]:
        """Positioned cards for the active layout at ``viewport_width`` points."""
        return compute_layout(
            self.layout,
            self.buffer.items,
            self.completed,
            self.buffer.current_index,
            self.is_leveling_up,
            viewport_width,
        )

    # ── Subscriptions ───────────────────────────────────────────────────

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback(session)`` after every state change.

        Returns a function that removes the subscription.
        """
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            callback(self)

    # ── Commands ────────────────────────────────────────────────────────

    def advance(self) -> None:
        self._cancel_stale_completion()
        if self.buffer.is_empty:
            return
        self.buffer.advance()
        logger.debug("Advanced to index %d", self.buffer.current_index)
        self._notify()

    def reset(self) -> None:
        """Return completed cards to the end of the active deck.

        Ranks and completion flags are left as they are.
        """
        self._cancel_stale_completion()
        self.buffer.extend(self.completed)
        self.completed = []
        self.buffer.reset_cursor()
        logger.debug("Reset deck: %d active cards", len(self.buffer))
        self._notify()

    def complete(self) -> None:
        """Move the current card to the front of the completed pile.

        A pending level-up completion is cancelled first, so the timer cannot
        complete a second card.
        """
        self._cancel_stale_completion()
        self._complete()

    def complete_now(self) -> None:
        """Complete the current card immediately, skipping any pending timer."""
        self.complete()

    def _complete(self) -> None:
        self.is_leveling_up = False
        card = self.buffer.pop_current()
        self.completed.insert(0, card)
        logger.debug("Completed card %s (rank %d)", card.id, card.rank)
        self._notify()

    def level_up(self) -> None:
        """Rank up the current card and complete it after ``level_up_delay``."""
        self._cancel_stale_completion()
        self.buffer.current = self.buffer.current.rank_up()
        self.is_leveling_up = True
        logger.debug(
            "Leveling up card %s to rank %d", self.buffer.current.id, self.buffer.current.rank
        )
        handle: ScheduledCall | None = None

        def on_elapsed() -> None:
            self._on_level_up_elapsed(handle)

        handle = self._scheduler.call_later(self.config.level_up_delay, on_elapsed)
        self._pending_completion = handle
        self._notify()

    def cycle_layout(self) -> None:
        self.layout = self.layout.next()
        logger.debug("Layout is now %s", self.layout.value)
        self._notify()

    # ── Pending Completion ──────────────────────────────────────────────

    def _on_level_up_elapsed(self, handle: ScheduledCall | None) -> None:
        if handle is self._pending_completion:
            self._pending_completion = None
        elif self.config.cancel_stale_completion:
            # Superseded token; cancellation raced the timer.
            return

        if self.buffer.is_empty:
            logger.warning("Stale level-up completion fired with no active cards left")
            if self.is_leveling_up:
                self.is_leveling_up = False
                self._notify()
            raise InvalidStateError("Level-up completion fired on an empty deck")
        self._complete()

    def _cancel_stale_completion(self) -> None:
        if not self.config.cancel_stale_completion or self._pending_completion is None:
            return
        self._pending_completion.cancel()
        self._pending_completion = None
        self.is_leveling_up = False
        logger.debug("Cancelled pending level-up completion")
