"""Animated rank value — how a rank change is displayed.

A rank change (4 → 5) is not shown as an instant jump.  The presentation
layer springs a continuous ``display_rank`` from the old rank to the new one
and the label shows ``displayed_rank(display_rank, target)``: the ceiling of
the continuous value, capped at the target.  The digit therefore never runs
ahead of the continuous value and never shows more than the true rank.

Each time the shown digit changes, the new digit slides in from the top
edge while fading in, and the old one slides out through the bottom edge
while fading out (``INSERTION`` / ``REMOVAL``).
"""

from __future__ import annotations

import math
from typing import Literal

from pydantic import BaseModel, ConfigDict

SETTLE_EPSILON = 1e-3


def displayed_rank(display_rank: float, target_rank: int) -> int:
    """Integer label for a rank that is animating toward ``target_rank``."""
    return min(target_rank, math.ceil(display_rank))


# ── Digit Transitions ───────────────────────────────────────────────────────


class DigitFrame(BaseModel):
    """One digit to draw: vertical offset in label heights, and opacity."""

    model_config = ConfigDict(frozen=True)

    digit: int
    offset: float = 0.0
    opacity: float = 1.0


class DigitTransition(BaseModel):
    model_config = ConfigDict(frozen=True)

    edge: Literal["top", "bottom"]
    appearing: bool
    # Spring response of the digit swap.  Both digits share one swap, timed
    # by the insertion; the removal carries no timing of its own.
    response: float | None = None

    def frame(self, digit: int, progress: float) -> DigitFrame:
        progress = max(0.0, min(1.0, progress))
        direction = -1.0 if self.edge == "top" else 1.0
        if self.appearing:
            return DigitFrame(digit=digit, offset=direction * (1.0 - progress), opacity=progress)
        return DigitFrame(digit=digit, offset=direction * progress, opacity=1.0 - progress)


INSERTION = DigitTransition(edge="top", appearing=True, response=0.2)
REMOVAL = DigitTransition(edge="bottom", appearing=False)


# ── Rank Transition ─────────────────────────────────────────────────────────


class RankTransition(BaseModel):
    """Continuous rank value moving from ``from_rank`` to ``to_rank``."""

    from_rank: int
    to_rank: int
    display_rank: float

    @classmethod
    def settled(cls, rank: int) -> RankTransition:
        return cls(from_rank=rank, to_rank=rank, display_rank=float(rank))

    @property
    def displayed_integer(self) -> int:
        return displayed_rank(self.display_rank, self.to_rank)

    @property
    def is_settled(self) -> bool:
        return abs(self.display_rank - self.to_rank) < SETTLE_EPSILON

    def retarget(self, rank: int) -> RankTransition:
        """Start moving toward ``rank`` from wherever the value is now."""
        if rank == self.to_rank:
            return self
        return RankTransition(
            from_rank=self.displayed_integer, to_rank=rank, display_rank=self.display_rank
        )

    def with_display(self, display_rank: float) -> RankTransition:
        return self.model_copy(update={"display_rank": display_rank})

    def frames(self, previous_digit: int | None, digit_progress: float) -> list[DigitFrame]:
        """Digits to draw while the label swaps from ``previous_digit``.

        ``digit_progress`` runs 0 → 1 for the swap.  Once it reaches 1, or if
        the digit has not changed, only the current digit is returned.
        """
        current = self.displayed_integer
        if previous_digit is None or previous_digit == current or digit_progress >= 1.0:
            return [DigitFrame(digit=current)]
        return [
            REMOVAL.frame(previous_digit, digit_progress),
            INSERTION.frame(current, digit_progress),
        ]
