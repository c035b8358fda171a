"""DeckCanvas widget — draws the animated cards onto the terminal.

Layout coordinates are in points; the canvas maps them to cells with
``POINTS_PER_COLUMN`` horizontally and ``POINTS_PER_ROW`` vertically, so a
card (``CARD_SIZE`` points square) is a 7×3 box.  Cards are painted in
``stack_order`` order so the highest order ends on top.  Shadow darkens a
card's face; completed cards get a green tint.
"""

from __future__ import annotations

from rich.color import Color
from rich.style import Style
from rich.text import Text
from textual.timer import Timer
from textual.widget import Widget

from game.layout import CARD_SIZE
from game.rank import DigitFrame
from game.session import Session
from ui.tween import CardTween, CardTweens

POINTS_PER_COLUMN = 5.0
POINTS_PER_ROW = CARD_SIZE / 3
CARD_COLUMNS = round(CARD_SIZE / POINTS_PER_COLUMN)  # 7
CARD_ROWS = 3
TOP_MARGIN = 2  # rows reserved above y=0 for the selected-card lift
LEFT_MARGIN = 1
FRAME_INTERVAL = 1 / 30

FACE_RGB = (228, 228, 228)
COMPLETE_RGB = (120, 200, 130)
INK_RGB = (20, 20, 20)
MAX_DARKEN = 0.85

Cell = tuple[str, Style]


def _mix(a: tuple[int, int, int], b: tuple[int, int, int], t: float) -> Color:
    t = max(0.0, min(1.0, t))
    r, g, bl = (round(x + (y - x) * t) for x, y in zip(a, b))
    return Color.from_rgb(r, g, bl)


def _face_rgb(tween: CardTween) -> tuple[int, int, int]:
    base = COMPLETE_RGB if tween.is_complete else FACE_RGB
    darken = 1.0 - min(1.0, max(0.0, tween.shadow.value)) * MAX_DARKEN
    return tuple(round(c * darken) for c in base)  # type: ignore[return-value]


def _paint_card(grid: list[list[Cell]], tween: CardTween) -> None:
    height = len(grid)
    width = len(grid[0]) if grid else 0
    left = LEFT_MARGIN + round(tween.x.value / POINTS_PER_COLUMN)
    top = TOP_MARGIN + round(tween.y.value / POINTS_PER_ROW)

    face = _face_rgb(tween)
    face_color = Color.from_rgb(*face)
    border = Style(color=_mix(face, INK_RGB, 0.5), bgcolor=face_color)
    blank = Style(bgcolor=face_color)

    rows = [
        "╭" + "─" * (CARD_COLUMNS - 2) + "╮",
        "│" + " " * (CARD_COLUMNS - 2) + "│",
        "╰" + "─" * (CARD_COLUMNS - 2) + "╯",
    ]
    for dy, line in enumerate(rows):
        row = top + dy
        if not 0 <= row < height:
            continue
        for dx, char in enumerate(line):
            col = left + dx
            if 0 <= col < width:
                grid[row][col] = (char, border if char != " " else blank)

    rank = tween.rank
    frames: list[DigitFrame] = rank.transition.frames(rank.previous_digit, rank.digit.value)
    centre_col = left + CARD_COLUMNS // 2
    for frame in frames:
        row = top + 1 + round(frame.offset)
        if not (top <= row < top + CARD_ROWS and 0 <= row < height and 0 <= centre_col < width):
            continue
        ink = _mix(face, INK_RGB, frame.opacity)
        grid[row][centre_col] = (str(frame.digit), Style(color=ink, bgcolor=face_color, bold=True))


def rasterize(tweens: CardTweens, columns: int, rows: int) -> Text:
    """Paint every card into a ``columns`` × ``rows`` block of styled text."""
    empty: Cell = (" ", Style())
    grid: list[list[Cell]] = [[empty] * columns for _ in range(rows)]
    for tween in tweens.drawing_order():
        _paint_card(grid, tween)

    text = Text(no_wrap=True, overflow="crop")
    for r, row in enumerate(grid):
        for char, style in row:
            text.append(char, style=style)
        if r < rows - 1:
            text.append("\n")
    return text


class DeckCanvas(Widget):
    DEFAULT_CSS = """
    DeckCanvas {
        width: 1fr;
        height: 1fr;
        padding: 0 1;
    }
    """

    def __init__(self, session: Session, **kwargs) -> None:
        super().__init__(**kwargs)
        self._session = session
        self._tweens = CardTweens()
        self._timer: Timer | None = None

    @property
    def viewport_width(self) -> float:
        columns = max(CARD_COLUMNS, self.content_size.width - LEFT_MARGIN)
        return columns * POINTS_PER_COLUMN

    def on_mount(self) -> None:
        self.sync()
        self._timer = self.set_interval(FRAME_INTERVAL, self._tick)

    def on_resize(self) -> None:
        self.sync()

    def sync(self) -> None:
        """Retarget the tweens from the session's current layout."""
        self._tweens.update(self._session.layout_positions(self.viewport_width))
        self.refresh()

    def _tick(self) -> None:
        if self._tweens.is_settled:
            return
        self._tweens.step(FRAME_INTERVAL)
        self.refresh()

    def render(self) -> Text:
        size = self.content_size
        return rasterize(self._tweens, max(1, size.width), max(1, size.height))
