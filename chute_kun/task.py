"""Tasks, work sessions and the plan for a single day."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

U16_MAX = 0xFFFF


def _clamp_u16(value: int) -> int:
    return max(0, min(U16_MAX, value))


@dataclass
class Session:
    """One stretch of work on a task, in minutes since local midnight."""

    start_min: int
    end_min: int | None = None


class TaskState(Enum):
    PLANNED = "Planned"
    ACTIVE = "Active"
    PAUSED = "Paused"
    DONE = "Done"


@dataclass
class Task:
    """A task with its estimate, accumulated work and session log."""

    title: str
    estimate_min: int
    actual_min: int = 0
    # Seconds (< 60) accumulated toward the next whole actual minute.
    actual_carry_sec: int = 0
    # First start, in minutes since local midnight.
    started_at_min: int | None = None
    # Finish time, in minutes since local midnight.
    finished_at_min: int | None = None
    sessions: list[Session] = field(default_factory=list)
    state: TaskState = TaskState.PLANNED
    # Completion date as YYYYMMDD.
    done_ymd: int | None = None

    def start_session(self, now_min: int) -> None:
        """Open a session unless one is already open."""
        if not self.sessions or self.sessions[-1].end_min is not None:
            self.sessions.append(Session(now_min))

    def end_session(self, now_min: int) -> None:
        """Close the open session, if any."""
        if self.sessions and self.sessions[-1].end_min is None:
            self.sessions[-1].end_min = now_min


class DayPlan:
    """An ordered list of tasks with at most one active task."""

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self.tasks: list[Task] = list(tasks) if tasks is not None else []
        self._active: int | None = next(
            (i for i, t in enumerate(self.tasks) if t.state is TaskState.ACTIVE),
            None,
        )

    def __repr__(self) -> str:
        return f"DayPlan(tasks={self.tasks!r}, active={self._active!r})"

    def _valid(self, index: int) -> bool:
        return 0 <= index < len(self.tasks)

    def active_index(self) -> int | None:
        return self._active

    def add_task(self, task: Task) -> int:
        """Append a task and return its index."""
        self.tasks.append(task)
        return len(self.tasks) - 1

    def start(self, index: int) -> None:
        """Activate the task at ``index``, pausing any other active task."""
        current = self._active
        if current is not None:
            if current == index:
                return
            if self._valid(current):
                self.tasks[current].state = TaskState.PAUSED
        if self._valid(index):
            self.tasks[index].state = TaskState.ACTIVE
            self._active = index

    def pause_active(self) -> None:
        current, self._active = self._active, None
        if current is not None and self._valid(current):
            self.tasks[current].state = TaskState.PAUSED

    def finish_at(self, index: int, today_ymd: int) -> None:
        """Mark the task at ``index`` done on ``today_ymd`` (YYYYMMDD)."""
        if not self._valid(index):
            return
        if self._active == index:
            self._active = None
        task = self.tasks[index]
        task.state = TaskState.DONE
        task.done_ymd = today_ymd

    def add_actual_to_active(self, minutes: int) -> None:
        if self._active is not None and self._valid(self._active):
            task = self.tasks[self._active]
            task.actual_min = _clamp_u16(task.actual_min + minutes)

    def remaining_total_min(self) -> int:
        return sum(
            max(0, t.estimate_min - t.actual_min)
            for t in self.tasks
            if t.state is not TaskState.DONE
        )

    def esd(self, now_min: int) -> int:
        """Expected finish: the later of now and the last recorded finish, plus open estimates."""
        est_sum = sum(t.estimate_min for t in self.tasks if t.state is not TaskState.DONE)
        last = self._latest_actual_finish_min()
        base = now_min if last is None else max(last, now_min)
        return esd_from(base, [est_sum])

    def _latest_actual_finish_min(self) -> int | None:
        ends: list[int] = []
        for t in self.tasks:
            if t.finished_at_min is not None:
                ends.append(t.finished_at_min)
            ends.extend(s.end_min for s in t.sessions if s.end_min is not None)
        return max(ends, default=None)

    def reorder_down(self, index: int) -> int:
        if index < 0 or index + 1 >= len(self.tasks):
            return index
        self.tasks[index], self.tasks[index + 1] = self.tasks[index + 1], self.tasks[index]
        if self._active == index:
            self._active = index + 1
        elif self._active == index + 1:
            self._active = index
        return index + 1

    def reorder_up(self, index: int) -> int:
        if index <= 0 or index >= len(self.tasks):
            return index
        self.tasks[index - 1], self.tasks[index] = self.tasks[index], self.tasks[index - 1]
        if self._active == index:
            self._active = index - 1
        elif self._active == index - 1:
            self._active = index
        return index - 1

    def adjust_estimate(self, index: int, delta_min: int) -> None:
        if self._valid(index):
            task = self.tasks[index]
            task.estimate_min = _clamp_u16(task.estimate_min + delta_min)

    def remove(self, index: int) -> Task | None:
        """Remove and return the task at ``index``, keeping the active pointer right."""
        if not self._valid(index):
            return None
        if self._active is not None:
            if self._active == index:
                self._active = None
            elif self._active > index:
                self._active -= 1
        return self.tasks.pop(index)


def esd_from(now_min: int, remaining_mins: Iterable[int]) -> int:
    """Expected finish minute: now plus the remaining minutes, saturating."""
    return _clamp_u16(now_min + sum(remaining_mins))


def tc_log_line(task: Task) -> str:
    return (
        f"tc-log | {task.title} | act:{task.actual_min}m | "
        f"est:{task.estimate_min}m | state:{task.state.value}"
    )