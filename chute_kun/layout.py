"""Screen geometry: layout regions, popups and clickable hitboxes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from chute_kun.text import View, display_width, help_lines_for_width, tab_titles

_U16_MAX = 0xFFFF
# Table header plus at least two task rows.
MIN_LIST_LINES = 3
_BUTTON_GAP = 2


def _sat(value: int) -> int:
    return max(0, min(_U16_MAX, value))


@dataclass(frozen=True)
class Rect:
    """A rectangle of terminal cells."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return _sat(self.x + self.width)

    @property
    def bottom(self) -> int:
        return _sat(self.y + self.height)

    def inner(self) -> Rect:
        """The area left inside a one-cell border on every side."""
        x = min(_sat(self.x + 1), self.right)
        y = min(_sat(self.y + 1), self.bottom)
        return Rect(x, y, _sat(self.width - 2), _sat(self.height - 2))

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


class Layout(NamedTuple):
    """Regions inside the outer border: tabs, optional banner, list and help."""

    tabs: Rect
    banner: Rect | None
    list: Rect
    help: Rect


def _border_inner(rect: Rect) -> Rect:
    return Rect(rect.x + 1, rect.y + 1, _sat(rect.width - 2), _sat(rect.height - 2))


def _centered_popup(area: Rect, message: str, min_width: int) -> Rect:
    inner = area.inner()
    content = _sat(display_width(message))
    width = min(max(min(_sat(content + 4), inner.width), min_width), inner.width)
    height = 4  # border, message line, button line, border
    x = inner.x + _sat(inner.width - width) // 2
    y = inner.y + _sat(inner.height - height) // 2
    return Rect(x, y, width, height)


def _button_row(popup: Rect, labels: list[str]) -> list[Rect]:
    inner = _border_inner(popup)
    y = inner.y + 1
    widths = [display_width(label) for label in labels]
    total = sum(widths) + _BUTTON_GAP * (len(widths) - 1)
    x = inner.x + _sat(inner.width - total) // 2
    boxes = []
    for width in widths:
        boxes.append(Rect(x, y, width, 1))
        x += width + _BUTTON_GAP
    return boxes


def tab_hitboxes(view: View, tabs_rect: Rect) -> list[Rect]:
    """Clickable boxes for the tab titles, separated by a one-cell divider."""
    titles, _ = tab_titles(view)
    boxes = []
    x = tabs_rect.x
    for i, title in enumerate(titles):
        width = display_width(title)
        boxes.append(Rect(x, tabs_rect.y, max(width, 1), 1))
        x = _sat(x + width)
        if i + 1 != len(titles):
            x = _sat(x + 1)
    return boxes


def delete_popup_rect(area: Rect, title: str) -> Rect:
    """Centered delete-confirmation popup for the task titled ``title``."""
    message = f"Delete? — {title}  (Enter=Delete Esc=Cancel)"
    return _centered_popup(area, message, 20)


def delete_popup_button_hitboxes(popup: Rect) -> tuple[Rect, Rect]:
    """Boxes of the Delete and Cancel buttons."""
    delete, cancel = _button_row(popup, ["Delete", "Cancel"])
    return delete, cancel


def estimate_popup_rect(area: Rect, estimate: int, title: str) -> Rect:
    """Centered estimate-editor popup."""
    message = f"Estimate: {estimate}m — {title}"
    return _centered_popup(area, message, 30)


def estimate_popup_button_hitboxes(popup: Rect) -> tuple[Rect, Rect, Rect, Rect]:
    """Boxes of the -5m, +5m, OK and Cancel buttons."""
    minus, plus, ok, cancel = _button_row(popup, ["-5m", "+5m", "OK", "Cancel"])
    return minus, plus, ok, cancel


def input_popup_rect(area: Rect, buffer: str) -> Rect:
    """Centered new-task input popup."""
    message = f"Title: {buffer} _"
    return _centered_popup(area, message, 30)


def input_popup_button_hitboxes(popup: Rect) -> tuple[Rect, Rect]:
    """Boxes of the Add and Cancel buttons."""
    add, cancel = _button_row(popup, ["Add", "Cancel"])
    return add, cancel


def compute_layout(area: Rect, view: View, has_banner: bool) -> Layout:
    """Split the bordered ``area`` into tabs, optional banner, list and help."""
    inner = _border_inner(area)
    help_height = len(help_lines_for_width(view, max(inner.width, 1)))
    reserved = 1 + (1 if has_banner else 0) + MIN_LIST_LINES
    max_help = _sat(inner.height - reserved)
    if max_help > 0:
        help_height = min(help_height, max_help)
    help_height = max(help_height, 1)

    tabs = Rect(inner.x, inner.y, inner.width, 1)
    y = inner.y + 1
    banner = None
    if has_banner:
        banner = Rect(inner.x, y, inner.width, 1)
        y += 1
    list_height = _sat(_sat(inner.height - (y - inner.y)) - help_height)
    list_rect = Rect(inner.x, y, inner.width, list_height)
    help_rect = Rect(
        inner.x,
        inner.y + _sat(inner.height - help_height),
        inner.width,
        help_height,
    )
    return Layout(tabs, banner, list_rect, help_rect)