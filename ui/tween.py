"""Spring tweens — the presentation layer's animation driver.

The session only publishes *target* values per card.  ``CardTweens`` keeps
one ``Tween`` per animated field (x, y, shadow) plus the rank value, and
steps them all toward their latest targets every frame.

``Spring`` follows the response / damping-fraction parametrisation: a
``response`` of 0.6 s means one undamped oscillation takes 0.6 s, and a
damping fraction of 0.8 gives a slight overshoot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from game.layout import DAMPING_FRACTION, PositionedCard
from game.rank import INSERTION, RankTransition

SETTLE_DISTANCE = 0.01
SETTLE_VELOCITY = 0.01
MAX_SUBSTEP = 1 / 240


@dataclass(frozen=True)
class Spring:
    response: float = 0.6
    damping_fraction: float = DAMPING_FRACTION

    @property
    def stiffness(self) -> float:
        return (2 * math.pi / self.response) ** 2

    @property
    def damping(self) -> float:
        return 4 * math.pi * self.damping_fraction / self.response


@dataclass
class Tween:
    """One float springing toward ``target`` after an optional ``delay``."""

    value: float
    target: float = field(default=math.nan)
    velocity: float = 0.0
    spring: Spring = field(default_factory=Spring)
    delay: float = 0.0

    def __post_init__(self) -> None:
        if math.isnan(self.target):
            self.target = self.value

    def retarget(self, target: float, spring: Spring | None = None, delay: float = 0.0) -> None:
        if target == self.target and spring in (None, self.spring):
            return
        self.target = target
        self.delay = delay
        if spring is not None:
            self.spring = spring

    def snap(self, value: float) -> None:
        self.value = self.target = value
        self.velocity = 0.0
        self.delay = 0.0

    @property
    def is_settled(self) -> bool:
        return (
            abs(self.value - self.target) < SETTLE_DISTANCE
            and abs(self.velocity) < SETTLE_VELOCITY
        )

    def step(self, dt: float) -> None:
        if self.delay > 0:
            used = min(dt, self.delay)
            self.delay -= used
            dt -= used
        while dt > 0 and not self.is_settled:
            h = min(dt, MAX_SUBSTEP)
            accel = (
                self.spring.stiffness * (self.target - self.value)
                - self.spring.damping * self.velocity
            )
            self.velocity += accel * h
            self.value += self.velocity * h
            dt -= h
        if self.is_settled:
            self.value = self.target
            self.velocity = 0.0


@dataclass
class RankTween:
    """Springs the continuous rank and the digit swap that follows it."""

    transition: RankTransition
    value: Tween
    digit: Tween
    previous_digit: int | None = None

    @classmethod
    def settled(cls, rank: int) -> RankTween:
        return cls(
            transition=RankTransition.settled(rank),
            value=Tween(float(rank)),
            digit=Tween(1.0, spring=Spring(response=INSERTION.response or 0.2)),
        )

    def retarget(self, rank: int, spring: Spring) -> None:
        if rank == self.transition.to_rank:
            return
        before = self.transition.displayed_integer
        self.transition = self.transition.retarget(rank)
        self.value.retarget(float(rank), spring)
        # A wrap (9 → 1) caps the label at the new target straight away.
        self._swap_from(before)

    def step(self, dt: float) -> None:
        before = self.transition.displayed_integer
        self.value.step(dt)
        self.transition = self.transition.with_display(self.value.value)
        self._swap_from(before)
        self.digit.step(dt)

    def _swap_from(self, before: int) -> None:
        if self.transition.displayed_integer == before:
            return
        self.previous_digit = before
        self.digit.snap(0.0)
        self.digit.retarget(1.0)

    @property
    def is_settled(self) -> bool:
        return self.value.is_settled and self.digit.is_settled


@dataclass
class CardTween:
    x: Tween
    y: Tween
    shadow: Tween
    rank: RankTween
    stack_order: float
    is_complete: bool

    @classmethod
    def at(cls, positioned: PositionedCard) -> CardTween:
        return cls(
            x=Tween(positioned.x),
            y=Tween(positioned.y),
            shadow=Tween(positioned.shadow_intensity),
            rank=RankTween.settled(positioned.card.rank),
            stack_order=positioned.stack_order,
            is_complete=positioned.card.is_complete,
        )

    def retarget(self, positioned: PositionedCard) -> None:
        spring = Spring(response=positioned.animation_response)
        delay = positioned.animation_delay
        self.x.retarget(positioned.x, spring, delay)
        self.y.retarget(positioned.y, spring, delay)
        self.shadow.retarget(positioned.shadow_intensity, spring, delay)
        self.rank.retarget(positioned.card.rank, spring)
        self.stack_order = positioned.stack_order
        self.is_complete = positioned.card.is_complete

    def step(self, dt: float) -> None:
        self.x.step(dt)
        self.y.step(dt)
        self.shadow.step(dt)
        self.rank.step(dt)

    @property
    def is_settled(self) -> bool:
        return (
            self.x.is_settled
            and self.y.is_settled
            and self.shadow.is_settled
            and self.rank.is_settled
        )


class CardTweens:
    """Per-card tweens keyed by card id, fed from positioned-card targets."""

    def __init__(self) -> None:
        self._tweens: dict[str, CardTween] = {}

    def update(self, positions: list[PositionedCard]) -> None:
        """Retarget every card to its new position; new cards appear in place."""
        seen: set[str] = set()
        for positioned in positions:
            seen.add(positioned.id)
            tween = self._tweens.get(positioned.id)
            if tween is None:
                self._tweens[positioned.id] = CardTween.at(positioned)
            else:
                tween.retarget(positioned)
        for card_id in list(self._tweens):
            if card_id not in seen:
                del self._tweens[card_id]

    def step(self, dt: float) -> None:
        for tween in self._tweens.values():
            tween.step(dt)

    @property
    def is_settled(self) -> bool:
        return all(t.is_settled for t in self._tweens.values())

    def drawing_order(self) -> list[CardTween]:
        """Tweens sorted so higher ``stack_order`` is drawn last (on top)."""
        return sorted(self._tweens.values(), key=lambda t: t.stack_order)

    def get(self, card_id: str) -> CardTween | None:
        return self._tweens.get(card_id)

    def __len__(self) -> int:
        return len(self._tweens)
