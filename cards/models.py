"""Card data model — the unit the deck is made of.

A ``Card`` is a small immutable value: an opaque ``id``, a ``rank`` between
``MIN_RANK`` and ``MAX_RANK`` and an ``is_complete`` flag.  Operations that
"change" a card (``rank_up``, ``mark_complete``) return a new value, so a card
held by the layout layer can never be aliased by a later command.

Identity is carried by ``id`` alone: two cards with the same id are the same
card regardless of rank or completion, which is what equality and hashing
use.
"""

from __future__ import annotations

import random
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

MIN_RANK = 1
MAX_RANK = 9


def _new_card_id() -> str:
    return uuid4().hex


class Card(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_card_id)
    rank: int = Field(default=MIN_RANK, ge=MIN_RANK, le=MAX_RANK)
    is_complete: bool = False

    @classmethod
    def new(cls, rng: random.Random | None = None) -> Card:
        """Create a fresh card with a random rank."""
        rng = rng or random.Random()
        return cls(rank=rng.randint(MIN_RANK, MAX_RANK))

    def rank_up(self) -> Card:
        """Return this card with its rank incremented, wrapping 9 → 1."""
        rank = self.rank + 1
        if rank > MAX_RANK:
            rank = MIN_RANK
        return self.model_copy(update={"rank": rank})

    def mark_complete(self) -> Card:
        return self.model_copy(update={"is_complete": True})

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
