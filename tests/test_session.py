"""Tests for game.session.Session."""
from __future__ import annotations

import random

import pytest

from cards.models import Card
from cards.ring import InvalidStateError
from game.config import DeckConfig
from game.layout import CARD_GAP, CardLayout
from game.session import Session


def _make_session(scheduler, ranks: list[int], **config) -> tuple[Session, list[Card]]:
    cards = [Card(rank=r) for r in ranks]
    return Session(list(cards), config=DeckConfig(**config), scheduler=scheduler), cards


def _ids(cards: list[Card]) -> list[str]:
    return [c.id for c in cards]


class TestCreate:
    def test_initial_state(self, scheduler) -> None:
        session = Session.create(scheduler=scheduler, rng=random.Random(1))
        assert len(session.cards) == 14
        assert session.completed == []
        assert session.layout is CardLayout.STUDY
        assert session.buffer.current_index == 0
        assert session.is_leveling_up is False
        assert all(1 <= c.rank <= 9 and not c.is_complete for c in session.cards)
        assert len(set(_ids(session.cards))) == 14

    def test_card_count_from_config(self, scheduler) -> None:
        session = Session.create(DeckConfig(initial_card_count=3), scheduler=scheduler)
        assert session.card_count == 3

    def test_seed_makes_ranks_repeatable(self, scheduler) -> None:
        a = Session.create(DeckConfig(seed=42), scheduler=scheduler)
        b = Session.create(DeckConfig(seed=42), scheduler=scheduler)
        assert [c.rank for c in a.cards] == [c.rank for c in b.cards]


class TestLevelUpScenario:
    def test_level_up_then_complete(self, scheduler) -> None:
        session, (a, b, c) = _make_session(scheduler, [9, 3, 5])

        session.level_up()
        assert session.cards[0].rank == 1
        assert session.is_leveling_up is True
        assert _ids(session.cards) == _ids([a, b, c])
        assert session.completed == []

        scheduler.advance(0.3)
        assert len(session.completed) == 1
        done = session.completed[0]
        assert done.id == a.id and done.rank == 1
        assert _ids(session.cards) == _ids([b, c])
        assert session.buffer.current_index == 0
        assert session.is_leveling_up is False

    def test_completion_not_before_delay(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1, 2])
        session.level_up()
        scheduler.advance(0.29)
        assert session.completed == []
        assert session.is_leveling_up is True

    def test_level_up_on_empty_raises(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [])
        with pytest.raises(InvalidStateError):
            session.level_up()

    def test_completed_sidebar_shows_complete(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1, 2])
        session.level_up()
        scheduler.advance(0.3)
        sidebar = session.layout_positions(300)[-1]
        assert sidebar.card.is_complete


class TestComplete:
    def test_moves_current_to_front_of_completed(self, scheduler) -> None:
        session, (a, b, c) = _make_session(scheduler, [1, 2, 3])
        session.complete_now()
        session.advance()
        session.complete_now()
        assert _ids(session.completed) == _ids([c, a])
        assert _ids(session.cards) == _ids([b])
        assert session.buffer.current_index == 0

    def test_complete_clears_leveling_up(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1, 2, 3])
        session.level_up()
        session.complete_now()
        assert session.is_leveling_up is False
        assert scheduler.pending == []
        assert len(session.completed) == 1

    def test_direct_complete_cancels_pending_timer(self, scheduler) -> None:
        session, (a, b, c) = _make_session(scheduler, [1, 2, 3])
        session.level_up()
        session.complete()
        assert scheduler.pending == []
        scheduler.advance(1.0)
        assert _ids(session.completed) == [a.id]
        assert _ids(session.cards) == _ids([b, c])
        assert session.is_leveling_up is False

    def test_complete_on_empty_raises(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1])
        session.complete_now()
        with pytest.raises(InvalidStateError):
            session.complete_now()


class TestReset:
    def test_scenario(self, scheduler) -> None:
        session, (a, b, c) = _make_session(scheduler, [1, 2, 3])
        session.complete_now()
        assert _ids(session.cards) == _ids([b, c])
        session.advance()
        session.reset()
        assert _ids(session.cards) == _ids([b, c, a])
        assert session.completed == []
        assert session.buffer.current_index == 0

    def test_twice_same_as_once(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1, 2, 3, 4])
        session.complete_now()
        session.complete_now()
        session.reset()
        once = _ids(session.cards)
        session.advance()
        session.reset()
        assert _ids(session.cards) == once
        assert session.buffer.current_index == 0

    def test_keeps_rank_and_completion_flag(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [4, 2])
        session.buffer.current = session.buffer.current.mark_complete()
        session.level_up()
        scheduler.advance(0.3)
        session.reset()
        returned = session.cards[-1]
        assert returned.rank == 5
        assert returned.is_complete is True


class TestAdvanceAndLayout:
    def test_advance_on_empty_is_noop(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [])
        session.advance()
        assert session.buffer.current_index == 0

    def test_cycle_layout(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1])
        seen = []
        for _ in range(3):
            session.cycle_layout()
            seen.append(session.layout)
        assert seen == [CardLayout.GRID, CardLayout.STACK, CardLayout.STUDY]

    def test_layout_positions_follow_cursor(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1, 2, 3])
        session.advance()
        xs = [p.x for p in session.layout_positions(300)]
        assert xs == [-CARD_GAP, 0, CARD_GAP]

    def test_layout_positions_is_pure(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1, 2, 3])
        assert session.layout_positions(300) == session.layout_positions(300)
        assert session.buffer.current_index == 0


class TestStaleCompletion:
    def test_advance_cancels_pending(self, scheduler) -> None:
        session, (a, b, _) = _make_session(scheduler, [1, 2, 3])
        session.level_up()
        session.advance()
        assert session.is_leveling_up is False
        scheduler.advance(1.0)
        assert session.completed == []
        assert session.current_card == b

    def test_reset_cancels_pending(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1, 2])
        session.level_up()
        session.reset()
        scheduler.advance(1.0)
        assert session.completed == []

    def test_second_level_up_replaces_first(self, scheduler) -> None:
        session, (a, _) = _make_session(scheduler, [1, 2])
        session.level_up()
        scheduler.advance(0.2)
        session.level_up()
        scheduler.advance(0.2)
        assert session.completed == []
        scheduler.advance(0.2)
        assert _ids(session.completed) == [a.id]
        assert session.completed[0].rank == 3

    def test_legacy_mode_completes_whatever_is_current(self, scheduler) -> None:
        session, (a, b, _) = _make_session(scheduler, [1, 2, 3], cancel_stale_completion=False)
        session.level_up()
        session.advance()
        scheduler.advance(0.3)
        assert _ids(session.completed) == [b.id]
        assert session.completed[0].rank == 2

    def test_legacy_mode_fails_fast_on_empty_deck(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1], cancel_stale_completion=False)
        session.level_up()
        session.complete_now()
        with pytest.raises(InvalidStateError):
            scheduler.advance(0.3)
        assert len(session.completed) == 1
        assert session.is_leveling_up is False


class TestConservation:
    def test_random_command_sequences(self, scheduler) -> None:
        rng = random.Random(1234)
        session = Session.create(scheduler=scheduler, rng=rng)
        ids = set(_ids(session.cards))
        for _ in range(500):
            command = rng.choice(["advance", "complete", "reset", "level_up", "tick", "layout"])
            if command in ("complete", "level_up") and session.current_card is None:
                command = "reset"
            if command == "advance":
                session.advance()
            elif command == "complete":
                session.complete_now()
            elif command == "reset":
                session.reset()
            elif command == "level_up":
                session.level_up()
            elif command == "layout":
                session.cycle_layout()
            else:
                scheduler.advance(0.3)
            everything = _ids(session.all_cards)
            assert session.card_count == 14
            assert len(everything) == len(set(everything))
            assert set(everything) == ids


class TestSubscribe:
    def test_notified_after_each_command(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1, 2, 3])
        events: list[int] = []
        session.subscribe(lambda s: events.append(len(s.completed)))
        session.advance()
        session.level_up()
        scheduler.advance(0.3)
        session.cycle_layout()
        session.reset()
        assert events == [0, 0, 1, 1, 0]

    def test_unsubscribe(self, scheduler) -> None:
        session, _ = _make_session(scheduler, [1, 2])
        events: list[Session] = []
        unsubscribe = session.subscribe(events.append)
        unsubscribe()
        session.advance()
        assert events == []
