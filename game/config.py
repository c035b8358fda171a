"""Session configuration.

``DeckConfig`` holds the few knobs a session exposes.  Layout geometry is not
here: card size, spacing and the visible window belong to ``game.layout``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_CARD_COUNT = 14
DEFAULT_LEVEL_UP_DELAY = 0.3  # seconds between rank-up and the card moving to completed


class DeckConfig(BaseModel):
    initial_card_count: int = Field(default=DEFAULT_CARD_COUNT, ge=1)
    level_up_delay: float = Field(default=DEFAULT_LEVEL_UP_DELAY, gt=0)
    # When False a pending completion survives advance/reset/level_up and
    # completes whichever card is current when its timer fires.
    cancel_stale_completion: bool = True
    seed: int | None = None
