"""Drawing the task screen into an in-memory grid of styled cells."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Sequence

from wcwidth import wcwidth

from chute_kun.layout import (
    Rect,
    compute_layout,
    delete_popup_button_hitboxes,
    delete_popup_rect,
    estimate_popup_button_hitboxes,
    estimate_popup_rect,
    input_popup_button_hitboxes,
    input_popup_rect,
)
from chute_kun.task import DayPlan, Task, TaskState
from chute_kun.text import (
    EMPTY_HINT,
    View,
    format_actual_last_finish_time,
    help_lines_for_width,
    schedule_starts,
    state_icon,
    tab_titles,
)


class Color(Enum):
    """Terminal colours used by the screen."""

    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    GRAY = "gray"
    DARK_GRAY = "darkgray"
    DARK_BLUE = "#003c78"
    DARK_TEAL = "#006464"


# Darker list highlights keep light text readable on common terminals.
SELECTED_ROW_BG = Color.DARK_BLUE
HOVER_ROW_BG = Color.DARK_TEAL


@dataclass(frozen=True)
class Style:
    """Foreground, background and boldness of a cell; ``None`` means default."""

    fg: Color | None = None
    bg: Color | None = None
    bold: bool = False

    def patch(self, other: Style) -> Style:
        """Overlay ``other`` on this style, keeping what it leaves unset."""
        return Style(
            fg=other.fg if other.fg is not None else self.fg,
            bg=other.bg if other.bg is not None else self.bg,
            bold=self.bold or other.bold,
        )


@dataclass
class Cell:
    """One terminal cell: the text shown in it and its style."""

    symbol: str = " "
    style: Style = field(default_factory=Style)


class Screen:
    """A fixed-size grid of cells that drawing writes into."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._cells = [[Cell() for _ in range(width)] for _ in range(height)]

    @property
    def area(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    def put(self, x: int, y: int, text: str, style: Style) -> int:
        """Write ``text`` from ``(x, y)``, clipped at the right edge; return the next column."""
        return self._put_clipped(x, y, text, style, self.width)

    def _put_clipped(self, x: int, y: int, text: str, style: Style, limit: int) -> int:
        if not 0 <= y < self.height:
            return x
        limit = min(limit, self.width)
        row = self._cells[y]
        for ch in text:
            width = wcwidth(ch)
            if width < 0:
                continue
            if width == 0:
                if 0 < x <= limit:
                    row[x - 1].symbol += ch
                continue
            if x + width > limit:
                break
            if x >= 0:
                for offset, cell in enumerate(row[x : x + width]):
                    cell.symbol = ch if offset == 0 else ""
                    cell.style = cell.style.patch(style)
            x += width
        return x

    def fill(self, rect: Rect, style: Style) -> None:
        """Overlay ``style`` on every cell of ``rect`` that lies on screen."""
        for row in self._cells[max(0, rect.y) : rect.y + rect.height]:
            for cell in row[max(0, rect.x) : rect.x + rect.width]:
                cell.style = cell.style.patch(style)

    def _clear(self, rect: Rect) -> None:
        for row in self._cells[max(0, rect.y) : rect.y + rect.height]:
            for cell in row[max(0, rect.x) : rect.x + rect.width]:
                cell.symbol = " "
                cell.style = Style()

    def line(self, y: int) -> str:
        """The text of row ``y``."""
        return "".join(cell.symbol for cell in self._cells[y])

    def cell(self, x: int, y: int) -> Cell:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"cell ({x}, {y}) is outside a {self.width}x{self.height} screen")
        return self._cells[y][x]


class Popup(Enum):
    """Modal state shown over the task list."""

    INPUT = "input"
    COMMAND = "command"
    ESTIMATE = "estimate"
    CONFIRM_DELETE = "confirm_delete"


@dataclass
class DrawState:
    """Everything the screen shows."""

    day: DayPlan = field(default_factory=DayPlan)
    future: list[Task] = field(default_factory=list)
    past: list[Task] = field(default_factory=list)
    view: View = View.TODAY
    selected: int = 0
    hovered: int | None = None
    hovered_tab: int | None = None
    popup: Popup | None = None
    input_buffer: str = ""
    # Estimate being edited; defaults to the selected task's estimate.
    estimate: int | None = None
    # Label of the popup button under the pointer.
    hover_button: str | None = None

    def tasks_in_view(self) -> list[Task]:
        if self.view is View.PAST:
            return self.past
        if self.view is View.FUTURE:
            return self.future
        return self.day.tasks

    @property
    def selected_title(self) -> str:
        tasks = self.day.tasks
        return tasks[self.selected].title if 0 <= self.selected < len(tasks) else ""

    @property
    def shown_estimate(self) -> int:
        if self.estimate is not None:
            return self.estimate
        tasks = self.day.tasks
        return tasks[self.selected].estimate_min if 0 <= self.selected < len(tasks) else 0


Span = tuple[str, Style]

_PLAIN = Style()
_BUTTON_HOVER = Style(fg=Color.BLACK, bg=Color.CYAN, bold=True)


def _clip(rect: Rect, bounds: Rect) -> Rect:
    x = max(rect.x, bounds.x)
    y = max(rect.y, bounds.y)
    right = min(rect.x + rect.width, bounds.x + bounds.width)
    bottom = min(rect.y + rect.height, bounds.y + bounds.height)
    return Rect(x, y, max(0, right - x), max(0, bottom - y))


def _write_spans(screen: Screen, x: int, y: int, limit: int, spans: Sequence[Span]) -> int:
    for text, style in spans:
        x = screen._put_clipped(x, y, text, style, limit)
    return x


def _paragraph(
    screen: Screen, rect: Rect, lines: Sequence[Sequence[Span]], base: Style | None = None
) -> None:
    if rect.width == 0 or rect.height == 0:
        return
    if base is not None:
        screen.fill(rect, base)
    for offset, spans in zip(range(rect.height), lines):
        _write_spans(screen, rect.x, rect.y + offset, rect.x + rect.width, spans)


def _draw_block(screen: Screen, rect: Rect, border: Style, title: Sequence[Span]) -> None:
    if rect.width == 0 or rect.height == 0:
        return
    right = rect.x + rect.width - 1
    bottom = rect.y + rect.height - 1
    for y in (rect.y, bottom):
        screen.put(rect.x, y, "─" * rect.width, border)
    for y in range(rect.y, bottom + 1):
        screen.put(rect.x, y, "│", border)
        screen.put(right, y, "│", border)
    screen.put(rect.x, rect.y, "┌", border)
    screen.put(right, rect.y, "┐", border)
    screen.put(rect.x, bottom, "└", border)
    screen.put(right, bottom, "┘", border)
    _write_spans(screen, rect.x + 1, rect.y, right, title)


def _header_spans(now_min: int, day: DayPlan) -> list[Span]:
    esd = day.esd(now_min)
    total_est = sum(t.estimate_min for t in day.tasks)
    act_sec = sum(t.actual_min * 60 + t.actual_carry_sec for t in day.tasks)
    rem_sec = max(0, total_est * 60 - act_sec)
    sep = ("  |  ", Style(fg=Color.DARK_GRAY))

    def pill(label: str, bg: Color) -> Span:
        return label, Style(fg=Color.BLACK, bg=bg, bold=True)

    def value(text: str, fg: Color) -> Span:
        return text, Style(fg=fg, bold=True)

    return [
        pill("ESD", Color.BLUE),
        (" ", _PLAIN),
        value(f"{esd // 60:02}:{esd % 60:02}", Color.CYAN),
        sep,
        pill("Est", Color.GREEN),
        (" ", _PLAIN),
        value(f"{rem_sec // 60}m {rem_sec % 60}s", Color.GREEN),
        sep,
        pill("Act", Color.MAGENTA),
        (" ", _PLAIN),
        value(f"{act_sec // 60}m {act_sec % 60}s", Color.MAGENTA),
    ]


def _banner_spans(day: DayPlan) -> list[Span] | None:
    index = day.active_index()
    if index is None:
        return None
    task = day.tasks[index]
    return [
        ("Now:", Style(fg=Color.YELLOW, bold=True)),
        (" ", _PLAIN),
        (state_icon(task.state), _PLAIN),
        (" ", _PLAIN),
        (task.title, Style(fg=Color.CYAN)),
        (f" (est:{task.estimate_min}m act:{task.actual_min}m {task.actual_carry_sec}s)", _PLAIN),
    ]


def _tab_spans(state: DrawState) -> list[Span]:
    titles, selected = tab_titles(state.view)
    spans: list[Span] = []
    for i, title in enumerate(titles):
        style = _PLAIN
        if i == state.hovered_tab and i != selected:
            style = Style(fg=Color.CYAN)
        if i == selected:
            style = Style(fg=Color.YELLOW, bold=True)
        spans.append((title, style))
        if i + 1 != len(titles):
            spans.append(("│", Style(fg=Color.DARK_GRAY)))
    return spans


def _column_widths(width: int) -> tuple[int, int, int]:
    plan = min(5, width)
    remaining = max(0, width - plan - 2)
    actual = min(30, max(0, remaining - 10))
    return plan, actual, max(0, remaining - actual)


def _table_row(screen: Screen, rect: Rect, y: int, texts: Sequence[str], style: Style) -> None:
    x = rect.x
    for text, width in zip(texts, _column_widths(rect.width)):
        screen._put_clipped(x, y, text, style, min(x + width, rect.x + rect.width))
        x += width + 1


def _shown_seconds(task: Task) -> int:
    return task.actual_carry_sec if task.state in (TaskState.ACTIVE, TaskState.PAUSED) else 0


def _draw_table(screen: Screen, rect: Rect, now_min: int, state: DrawState, tasks: list[Task]) -> None:
    if rect.width == 0 or rect.height == 0:
        return
    _table_row(screen, rect, rect.y, ["Plan", "Actual", "Task"], Style(fg=Color.YELLOW, bold=True))
    selected = min(state.selected, max(0, len(tasks) - 1))
    starts = schedule_starts(now_min, tasks)
    for i, (task, start) in enumerate(zip(tasks, starts)):
        y = rect.y + 1 + i
        if y >= rect.y + rect.height:
            break
        if i == selected:
            screen.fill(Rect(rect.x, y, rect.width, 1), Style(bg=SELECTED_ROW_BG))
        elif state.hovered == i:
            screen.fill(Rect(rect.x, y, rect.width, 1), Style(bg=HOVER_ROW_BG))
        title = (
            f"{state_icon(task.state)} {task.title} "
            f"(est:{task.estimate_min}m act:{task.actual_min}m {_shown_seconds(task)}s)"
        )
        cells = [
            f"{(start // 60) % 24:02}:{start % 60:02}",
            format_actual_last_finish_time(task),
            title,
        ]
        _table_row(screen, rect, y, cells, _PLAIN)


def _content_lines(state: DrawState) -> list[list[Span]] | None:
    """Prompt lines for modal states that replace the table, or ``None``."""
    title = state.selected_title
    if state.popup is Popup.ESTIMATE:
        spans: list[Span] = [
            ("Estimate: ", _PLAIN),
            (f"{state.shown_estimate}m", Style(fg=Color.YELLOW, bold=True)),
        ]
        if title:
            spans += [(" — ", _PLAIN), (title, Style(fg=Color.CYAN))]
        spans.append(("  (+/-5m or j/k, Enter=OK Esc=Cancel)", _PLAIN))
        return [spans]
    if state.popup is Popup.COMMAND:
        suffix = f" — {title}" if title else ""
        text = f"Command: {state.input_buffer} _{suffix}  (Enter=Run Esc=Cancel)"
        return [[(text, _PLAIN)]]
    if state.popup is Popup.INPUT:
        return [[(f"Input: {state.input_buffer} _  (Enter=Add Esc=Cancel)", _PLAIN)]]
    return None


def _draw_popup(
    screen: Screen,
    popup: Rect,
    color: Color,
    title: str,
    message: str,
    buttons: Sequence[tuple[str, Rect, Color]],
    hover: str | None,
) -> None:
    border = Style(fg=color)
    screen._clear(popup)
    _draw_block(screen, popup, border, [(title, Style(fg=color, bold=True))])
    inner = popup.inner()
    if inner.width == 0 or inner.height == 0:
        return
    limit = inner.x + inner.width
    screen._put_clipped(inner.x, inner.y, message, Style(fg=color), limit)
    for label, box, bg in buttons:
        if box.y >= inner.y + inner.height:
            continue
        style = _BUTTON_HOVER if hover == label else Style(fg=Color.BLACK, bg=bg, bold=True)
        screen._put_clipped(box.x, box.y, label, style, limit)


def _draw_overlays(screen: Screen, state: DrawState) -> None:
    area = screen.area
    title = state.selected_title
    if state.popup is Popup.ESTIMATE:
        popup = estimate_popup_rect(area, state.shown_estimate, title)
        minus, plus, ok, cancel = estimate_popup_button_hitboxes(popup)
        _draw_popup(
            screen,
            popup,
            Color.YELLOW,
            " Estimate ",
            f"Estimate: {state.shown_estimate}m — {title}",
            [
                ("-5m", minus, Color.GRAY),
                ("+5m", plus, Color.GREEN),
                ("OK", ok, Color.BLUE),
                ("Cancel", cancel, Color.GRAY),
            ],
            state.hover_button,
        )
    elif state.popup is Popup.INPUT:
        popup = input_popup_rect(area, state.input_buffer)
        add, cancel = input_popup_button_hitboxes(popup)
        _draw_popup(
            screen,
            popup,
            Color.CYAN,
            " New Task ",
            f"Title: {state.input_buffer} _",
            [("Add", add, Color.GREEN), ("Cancel", cancel, Color.GRAY)],
            state.hover_button,
        )
    elif state.popup is Popup.CONFIRM_DELETE:
        popup = delete_popup_rect(area, title)
        delete, cancel = delete_popup_button_hitboxes(popup)
        _draw_popup(
            screen,
            popup,
            Color.RED,
            " Confirm ",
            f"Delete? — {title}  (Enter=Delete Esc=Cancel)",
            [("Delete", delete, Color.RED), ("Cancel", cancel, Color.GRAY)],
            state.hover_button,
        )


def draw(screen: Screen, state: DrawState, now_min: int) -> None:
    """Draw the whole screen for ``state``, scheduling from ``now_min``."""
    area = screen.area
    _draw_block(screen, area, _PLAIN, _header_spans(now_min, state.day))
    inner = area.inner()
    if inner.width == 0 or inner.height == 0:
        return

    banner = _banner_spans(state.day)
    layout = compute_layout(area, state.view, banner is not None)

    _paragraph(screen, _clip(layout.tabs, inner), [_tab_spans(state)])
    if banner is not None and layout.banner is not None:
        _paragraph(screen, _clip(layout.banner, inner), [banner])

    content = _clip(layout.list, inner)
    prompt = _content_lines(state)
    if prompt is not None:
        _paragraph(screen, content, prompt)
    else:
        tasks = state.tasks_in_view()
        if tasks:
            _draw_table(screen, content, now_min, state, tasks)
        else:
            _paragraph(screen, content, [[(EMPTY_HINT, _PLAIN)]])

    help_rect = _clip(layout.help, inner)
    if help_rect.height > 0:
        lines = help_lines_for_width(state.view, max(inner.width, 1))
        _paragraph(
            screen,
            help_rect,
            [[(line, _PLAIN)] for line in lines],
            base=Style(fg=Color.DARK_GRAY),
        )

    _draw_overlays(screen, replace(state))