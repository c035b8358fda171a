from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.screen import Screen
from textual.widgets import Button

from game.session import Session
from ui.widgets.deck_canvas import DeckCanvas
from ui.widgets.status_bar import StatusBar


class DeckScreen(Screen):
    BINDINGS = [
        Binding("n", "advance", "Next [N]", show=True),
        Binding("right", "advance", "Next", show=False),
        Binding("space", "level_up", "Complete [Space]", show=True),
        Binding("c", "level_up", "Complete", show=False),
        Binding("g", "cycle_layout", "Layout [G]", show=True),
        Binding("r", "reset", "Reset [R]", show=True),
        Binding("q", "quit_app", "Quit", show=True),
    ]

    DEFAULT_CSS = """
    DeckScreen {
        layout: vertical;
    }
    #status-bar {
        border-bottom: solid $primary;
        height: 2;
    }
    #button-bar {
        height: 3;
        border-top: solid $primary;
        align: center middle;
    }
    #button-bar Button {
        margin: 0 2;
        min-width: 12;
    }
    #reset-button {
        color: $error;
    }
    """

    def __init__(self, session: Session, **kwargs) -> None:
        super().__init__(**kwargs)
        self.session = session
        self._unsubscribe = None

    def compose(self) -> ComposeResult:
        yield StatusBar(id="status-bar")
        yield DeckCanvas(self.session, id="deck-canvas")
        with Horizontal(id="button-bar"):
            yield Button("Next", id="next-button")
            yield Button("Complete", id="complete-button")
            yield Button("Layout", id="layout-button")
            yield Button("Reset", id="reset-button")

    def on_mount(self) -> None:
        self._unsubscribe = self.session.subscribe(lambda _session: self._refresh_widgets())
        self._refresh_widgets()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # ── Actions ─────────────────────────────────────────────────────────

    def on_button_pressed(self, event: Button.Pressed) -> None:
        actions = {
            "next-button": self.action_advance,
            "complete-button": self.action_level_up,
            "layout-button": self.action_cycle_layout,
            "reset-button": self.action_reset,
        }
        action = actions.get(event.button.id or "")
        if action is not None:
            action()

    def action_advance(self) -> None:
        self.session.advance()

    def action_level_up(self) -> None:
        if self.session.current_card is None:
            self.app.bell()
            return
        self.session.level_up()

    def action_cycle_layout(self) -> None:
        self.session.cycle_layout()

    def action_reset(self) -> None:
        self.session.reset()

    def action_quit_app(self) -> None:
        self.app.exit()

    # ── Widget Updates ──────────────────────────────────────────────────

    def _refresh_widgets(self) -> None:
        session = self.session
        self.query_one("#status-bar", StatusBar).set_status(
            layout=session.layout,
            active=len(session.buffer),
            completed=len(session.completed),
            position=session.buffer.current_index,
            is_leveling_up=session.is_leveling_up,
        )
        self.query_one("#deck-canvas", DeckCanvas).sync()
