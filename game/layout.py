"""Layout computation — where each card sits for the active view mode.

Every function here is pure: it takes a card, its index and the session
state it needs and returns a ``PositionedCard`` holding *target* values
(x, y, shadow, stacking order, spring delay/response).  Animating toward
those targets is the presentation layer's job (see ``ui.tween``).

Three modes, cycled Study → Grid → Stack → Study:

``STUDY``  the active cards in a horizontal carousel around the cursor.
           Cards more than ``MAX_VISIBLE_OFFSET`` slots to the right are
           squeezed together; cards already passed are dimmed.  Completed
           cards fan down a sidebar on the right edge.
``GRID``   active then completed cards in rows of ``GRID_COLUMNS``.
``STACK``  every card piled at the origin.

Coordinates are in points with the origin at the top-left of the viewport.
"""

from __future__ import annotations

from enum import Enum
from typing import Sequence

from pydantic import BaseModel, ConfigDict

from cards.models import Card

# ── Constants ───────────────────────────────────────────────────────────────

CARD_SIZE = 35.0
CARD_SPACING = CARD_SIZE / 4  # 8.75
CARD_GAP = CARD_SIZE + CARD_SPACING  # 43.75
MAX_VISIBLE_OFFSET = 4
GRID_COLUMNS = 3

OVERFLOW_COMPRESSION = 0.3
OVERFLOW_SHADOW_STEP = 0.2
UNSELECTED_SHADOW = 0.3
PASSED_SHADOW = 0.6
STACK_SHADOW = 0.2
COMPLETED_SHADOW_STEP = 0.3

SELECTED_LIFT = -10.0
DELAY_PER_SLOT = 0.02
DEFAULT_RESPONSE = 0.6
LEVELING_UP_RESPONSE = 0.4
DAMPING_FRACTION = 0.8


# ── Layout Mode ─────────────────────────────────────────────────────────────


class CardLayout(str, Enum):
    STUDY = "study"
    GRID = "grid"
    STACK = "stack"

    def next(self) -> CardLayout:
        return _NEXT_LAYOUT[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()


_NEXT_LAYOUT: dict[CardLayout, CardLayout] = {
    CardLayout.STUDY: CardLayout.GRID,
    CardLayout.GRID: CardLayout.STACK,
    CardLayout.STACK: CardLayout.STUDY,
}


# ── Positioned Card ─────────────────────────────────────────────────────────


class PositionedCard(BaseModel):
    """Render-ready placement of one card.  Derived, never stored."""

    model_config = ConfigDict(frozen=True)

    id: str
    x: float
    y: float
    animation_delay: float = 0.0
    animation_response: float = DEFAULT_RESPONSE
    shadow_intensity: float = 0.0
    stack_order: float = 0.0
    card: Card

    @classmethod
    def of(cls, card: Card, **fields: float) -> PositionedCard:
        return cls(id=card.id, card=card, **fields)


# ── Per-Mode Positions ──────────────────────────────────────────────────────


def study_position(
    card: Card,
    index: int,
    current_index: int,
    is_leveling_up: bool,
) -> PositionedCard:
    """Carousel slot for an active card relative to the cursor."""
    is_selected = index == current_index
    position = float(index - current_index)
    shadow = 0.0 if is_selected else UNSELECTED_SHADOW

    overflow = max(0.0, position - MAX_VISIBLE_OFFSET)
    position = min(position, float(MAX_VISIBLE_OFFSET))
    position += overflow * OVERFLOW_COMPRESSION
    shadow += min(1.0, overflow * OVERFLOW_SHADOW_STEP)
    if position < 0:
        shadow += PASSED_SHADOW

    y = 0.0
    if is_selected:
        y += SELECTED_LIFT
        if is_leveling_up:
            y += SELECTED_LIFT

    return PositionedCard.of(
        card,
        x=position * CARD_GAP,
        y=y,
        animation_delay=abs(position) * DELAY_PER_SLOT,
        animation_response=LEVELING_UP_RESPONSE if is_leveling_up else DEFAULT_RESPONSE,
        shadow_intensity=shadow,
        stack_order=-float(index),
    )


def completed_position(card: Card, index: int, viewport_width: float) -> PositionedCard:
    """Sidebar slot for a completed card; index 0 is the most recent."""
    return PositionedCard.of(
        card.mark_complete(),
        x=viewport_width - CARD_SIZE,
        y=index * (CARD_SIZE / 3),
        shadow_intensity=index * COMPLETED_SHADOW_STEP,
        stack_order=-float(index),
    )


def grid_position(card: Card, index: int) -> PositionedCard:
    row, column = divmod(index, GRID_COLUMNS)
    return PositionedCard.of(
        card,
        x=column * CARD_GAP,
        y=row * CARD_GAP,
        stack_order=-float(index),
    )


def stack_position(card: Card, index: int) -> PositionedCard:
    return PositionedCard.of(
        card,
        x=0.0,
        y=0.0,
        shadow_intensity=STACK_SHADOW if index > 0 else 0.0,
        stack_order=-float(index),
    )


# ── Dispatch ────────────────────────────────────────────────────────────────


def compute_layout(
    layout: CardLayout,
    active: Sequence[Card],
    completed: Sequence[Card],
    current_index: int,
    is_leveling_up: bool,
    viewport_width: float,
) -> list[PositionedCard]:
    """Return the positioned cards for ``layout``.

    Study lists the active cards followed by the completed sidebar; Grid and
    Stack lay out active cards followed by completed ones as one sequence.
    """
    if layout is CardLayout.STUDY:
        positions = [
            study_position(card, i, current_index, is_leveling_up)
            for i, card in enumerate(active)
        ]
        positions.extend(
            completed_position(card, j, viewport_width)
            for j, card in enumerate(completed)
        )
        return positions

    combined = [*active, *completed]
    if layout is CardLayout.GRID:
        return [grid_position(card, i) for i, card in enumerate(combined)]
    if layout is CardLayout.STACK:
        return [stack_position(card, i) for i, card in enumerate(combined)]
    raise ValueError(f"Unknown layout: {layout!r}")
