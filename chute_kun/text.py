"""Plain-text formatting of task lists, headers, tabs and key help."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence

from wcwidth import wcswidth, wcwidth

from chute_kun.task import DayPlan, Task, TaskState

_U16_MAX = 0xFFFF
EMPTY_HINT = "No tasks — press 'i' to add"
_HELP_SEP = " | "


class View(Enum):
    """Which date list is on screen."""

    PAST = "Past"
    TODAY = "Today"
    FUTURE = "Future"


def display_width(text: str) -> int:
    """Number of terminal cells ``text`` occupies."""
    width = wcswidth(text)
    if width >= 0:
        return width
    return sum(max(0, wcwidth(ch)) for ch in text)


def _hhmm(minutes: int) -> str:
    return f"{(minutes // 60) % 24:02}:{minutes % 60:02}"


# --- key help ----------------------------------------------------------------


def format_help_line() -> str:
    """Full keyboard help on one line."""
    nav = "q: quit | Tab: switch view"
    task = (
        "Enter: start/pause | Shift+Enter/f: finish | Space: pause | i: interrupt | "
        "p: postpone | x: delete | b: bring | [: up | ]: down | e: edit | j/k"
    )
    return f"{nav} | {task}"


def format_help_line_for(view: View) -> str:
    """Help trimmed to what makes sense in ``view``."""
    if view is View.TODAY:
        return format_help_line()
    if view is View.FUTURE:
        return "q: quit | Tab: switch view | b: bring"
    return "q: quit | Tab: switch view"


def help_items_for(view: View) -> list[str]:
    """Help entries for ``view``, ready to be wrapped."""
    items = ["q: quit", "Tab: switch view"]
    if view is View.TODAY:
        items += [
            "Enter: start/resume",
            "Space: pause",
            "Shift+Enter/f: finish",
            "i: interrupt",
            "p: postpone",
            "x: delete",
            "[: up",
            "]: down",
            "e: edit",
            "j/k",
        ]
    return items


def wrap_help_items_to_width(items: Iterable[str], width: int) -> list[str]:
    """Join items with `` | `` into lines no wider than ``width`` cells."""
    if width <= 0:
        return [""]
    lines: list[str] = []
    current = ""
    for item in items:
        if not current:
            current = item
            continue
        candidate = f"{current}{_HELP_SEP}{item}"
        if display_width(candidate) <= width:
            current = candidate
        else:
            lines.append(current)
            current = item
    if current:
        lines.append(current)
    return lines


def help_lines_for_width(view: View, width: int) -> list[str]:
    return wrap_help_items_to_width(help_items_for(view), width)


# --- tabs --------------------------------------------------------------------


def tab_titles(view: View) -> tuple[list[str], int]:
    """Tab labels and the index of the selected one."""
    views = list(View)
    return [v.value for v in views], views.index(view)


# --- task rows ---------------------------------------------------------------

_ICONS = {
    TaskState.PLANNED: " ",
    TaskState.ACTIVE: ">",
    TaskState.PAUSED: "=",
    TaskState.DONE: "x",
}


def state_icon(state: TaskState) -> str:
    return _ICONS[state]


def format_actual_last_finish_time(task: Task) -> str:
    """HH:MM of the final finish, else of the latest closed session, else ``--:--``."""
    if task.finished_at_min is not None:
        return _hhmm(task.finished_at_min)
    end = next((s.end_min for s in reversed(task.sessions) if s.end_min is not None), None)
    return _hhmm(end) if end is not None else "--:--"


def _remaining(task: Task) -> int:
    if task.state is TaskState.DONE:
        return 0
    return max(0, task.estimate_min - task.actual_min)


def schedule_starts(now_min: int, tasks: Iterable[Task]) -> list[int]:
    """Planned start minute of each task, laid end to end from ``now_min``."""
    starts: list[int] = []
    cursor = now_min
    for task in tasks:
        starts.append(cursor)
        cursor = min(_U16_MAX, cursor + _remaining(task))
    return starts


def _shown_seconds(task: Task) -> int:
    if task.state in (TaskState.ACTIVE, TaskState.PAUSED):
        return task.actual_carry_sec
    return 0


def _actual_column(task: Task) -> str:
    start, end = task.started_at_min, task.finished_at_min
    if start is not None and end is not None:
        return f"実測 {_hhmm(start)}-{_hhmm(end)}"
    if start is not None:
        return f"実測 {_hhmm(start)}-"
    return "実測 --:--"


def format_task_list(now_min: int, tasks: Sequence[Task], selected: int) -> list[str]:
    """One line per task: planned start, marker, icon, title, estimate, actuals."""
    if not tasks:
        return [EMPTY_HINT]
    lines = []
    for i, (task, start) in enumerate(zip(tasks, schedule_starts(now_min, tasks))):
        marker = "▶" if i == selected else " "
        planned = (
            f"{_hhmm(start)} {marker} {state_icon(task.state)} {task.title} "
            f"(est:{task.estimate_min}m act:{task.actual_min}m {_shown_seconds(task)}s)"
        )
        lines.append(f"{planned}  |  {_actual_column(task)}")
    return lines


# --- header and banner -------------------------------------------------------


def format_header_line(now_min: int, day: DayPlan) -> str:
    """Expected finish, remaining estimate and total actual time for the day."""
    esd = day.esd(now_min)
    total_est = sum(t.estimate_min for t in day.tasks)
    total_act_sec = sum(t.actual_min * 60 + t.actual_carry_sec for t in day.tasks)
    rem_sec = max(0, total_est * 60 - total_act_sec)
    return (
        f"ESD {_hhmm_raw(esd)} | Est {rem_sec // 60}m {rem_sec % 60}s | "
        f"Act {total_act_sec // 60}m {total_act_sec % 60}s"
    )


def _hhmm_raw(minutes: int) -> str:
    return f"{minutes // 60:02}:{minutes % 60:02}"


def format_active_banner(day: DayPlan) -> str | None:
    """``Now: > Title (est:..m act:..m ..s)`` for the running task, if any."""
    index = day.active_index()
    if index is None:
        return None
    task = day.tasks[index]
    return (
        f"Now: {state_icon(task.state)} {task.title} "
        f"(est:{task.estimate_min}m act:{task.actual_min}m {task.actual_carry_sec}s)"
    )