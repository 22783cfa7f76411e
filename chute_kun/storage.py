"""TOML snapshots of today's, future and past tasks."""

from __future__ import annotations

import os
import sys
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from chute_kun.task import Session, Task, TaskState

_LISTS = ("today", "future", "past")
_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFFFFFF


@dataclass
class Snapshot:
    """Versioned, flat snapshot of the task lists."""

    version: int = 1
    today: list[Task] = field(default_factory=list)
    future: list[Task] = field(default_factory=list)
    past: list[Task] = field(default_factory=list)


# --- writing -----------------------------------------------------------------

_ESCAPES = {'"': '\\"', "\\": "\\\\", "\b": "\\b", "\t": "\\t", "\n": "\\n", "\f": "\\f", "\r": "\\r"}


def _toml_str(text: str) -> str:
    out = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _task_lines(name: str, task: Task) -> list[str]:
    lines = [
        f"[[{name}]]",
        f"title = {_toml_str(task.title)}",
        f"estimate_min = {task.estimate_min}",
        f"actual_min = {task.actual_min}",
        f"actual_carry_sec = {task.actual_carry_sec}",
    ]
    if task.started_at_min is not None:
        lines.append(f"started_at_min = {task.started_at_min}")
    if task.finished_at_min is not None:
        lines.append(f"finished_at_min = {task.finished_at_min}")
    if not task.sessions:
        lines.append("sessions = []")
    lines.append(f"state = {_toml_str(task.state.value)}")
    if task.done_ymd is not None:
        lines.append(f"done_ymd = {task.done_ymd}")
    for session in task.sessions:
        lines += ["", f"[[{name}.sessions]]", f"start_min = {session.start_min}"]
        if session.end_min is not None:
            lines.append(f"end_min = {session.end_min}")
    return lines


def save_to_string(snapshot: Snapshot) -> str:
    """Serialize a snapshot to TOML, one table block per task."""
    lines = [f"version = {snapshot.version}"]
    lines += [f"{name} = []" for name in _LISTS if not getattr(snapshot, name)]
    for name in _LISTS:
        for task in getattr(snapshot, name):
            lines.append("")
            lines += _task_lines(name, task)
    return "\n".join(lines) + "\n"


# --- reading -----------------------------------------------------------------


def _int(table: dict[str, Any], key: str, upper: int, *, required: bool = True) -> int | None:
    if key not in table:
        if required:
            raise ValueError(f"missing field `{key}`")
        return None
    value = table[key]
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= upper:
        raise ValueError(f"invalid value for `{key}`: {value!r}")
    return value


def _parse_session(raw: Any) -> Session:
    if not isinstance(raw, dict):
        raise ValueError("session must be a table")
    return Session(_int(raw, "start_min", _U16_MAX), _int(raw, "end_min", _U16_MAX, required=False))


def _parse_task(raw: Any) -> Task:
    if not isinstance(raw, dict):
        raise ValueError("task must be a table")
    title = raw.get("title")
    if not isinstance(title, str):
        raise ValueError("missing or invalid field `title`")
    try:
        state = TaskState(raw.get("state"))
    except ValueError:
        raise ValueError(f"invalid value for `state`: {raw.get('state')!r}") from None
    sessions = raw.get("sessions", [])
    if not isinstance(sessions, list):
        raise ValueError("invalid value for `sessions`")
    return Task(
        title=title,
        estimate_min=_int(raw, "estimate_min", _U16_MAX),
        actual_min=_int(raw, "actual_min", _U16_MAX),
        actual_carry_sec=_int(raw, "actual_carry_sec", _U16_MAX, required=False) or 0,
        started_at_min=_int(raw, "started_at_min", _U16_MAX, required=False),
        finished_at_min=_int(raw, "finished_at_min", _U16_MAX, required=False),
        sessions=[_parse_session(s) for s in sessions],
        state=state,
        done_ymd=_int(raw, "done_ymd", _U32_MAX, required=False),
    )


def load_from_str(text: str) -> Snapshot:
    """Parse a TOML snapshot; raises ``ValueError`` on malformed input."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ValueError(f"parse snapshot toml: {exc}") from exc
    lists = {}
    for name in _LISTS:
        raw = data.get(name, [])
        if not isinstance(raw, list):
            raise ValueError(f"invalid value for `{name}`")
        lists[name] = [_parse_task(item) for item in raw]
    return Snapshot(version=_int(data, "version", 0xFF), **lists)


# --- files -------------------------------------------------------------------


def save_to_path(snapshot: Snapshot, path: str | os.PathLike[str]) -> None:
    """Write the snapshot, creating parent directories when possible."""
    target = Path(path)
    text = save_to_string(snapshot)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        pass
    target.write_text(text, encoding="utf-8")


def load_from_path(path: str | os.PathLike[str]) -> Snapshot | None:
    """Read a snapshot, or return ``None`` when the file does not exist."""
    target = Path(path)
    if not target.exists():
        return None
    return load_from_str(target.read_text(encoding="utf-8"))


def _platform_data_dir() -> Path | None:
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        return Path(appdata) if appdata else None
    try:
        home = Path.home()
    except RuntimeError:
        return None
    if sys.platform == "darwin":
        return home / "Library" / "Application Support"
    return home / ".local" / "share"


def default_state_path() -> Path | None:
    """Resolve the snapshot path.

    Order: ``CHUTE_KUN_STATE``, ``$XDG_DATA_HOME/chute_kun``,
    ``$HOME/.local/share/chute_kun``, then the platform data directory.
    """
    explicit = os.environ.get("CHUTE_KUN_STATE")
    if explicit is not None:
        return Path(explicit)
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg is not None:
        return Path(xdg) / "chute_kun" / "snapshot.toml"
    home = os.environ.get("HOME")
    if home is not None:
        return Path(home) / ".local" / "share" / "chute_kun" / "snapshot.toml"
    base = _platform_data_dir()
    return base / "chute_kun" / "snapshot.toml" if base is not None else None