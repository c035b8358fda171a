from __future__ import annotations

from rich.text import Text
from textual.widget import Widget

from game.layout import CardLayout


class StatusBar(Widget):
    """Shows the layout mode, deck counts and the leveling-up state."""

    DEFAULT_CSS = """
    StatusBar {
        width: 1fr;
        height: 1;
        padding: 0 1;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._layout: CardLayout = CardLayout.STUDY
        self._active: int = 0
        self._completed: int = 0
        self._position: int = 0
        self._is_leveling_up: bool = False

    def set_status(
        self,
        layout: CardLayout,
        active: int,
        completed: int,
        position: int,
        is_leveling_up: bool = False,
    ) -> None:
        self._layout = layout
        self._active = active
        self._completed = completed
        self._position = position
        self._is_leveling_up = is_leveling_up
        self.refresh()

    def render(self) -> Text:
        text = Text()
        text.append(f"{self._layout.label} ", style="bold cyan")
        text.append("· ", style="dim")
        if self._active:
            text.append(f"Card {self._position + 1}/{self._active}", style="bold")
        else:
            text.append("No cards left", style="bold red")
        text.append("  Done ", style="dim")
        text.append(str(self._completed), style="bold green")
        if self._is_leveling_up:
            text.append("  ▲ leveling up", style="bold yellow")
        return text
