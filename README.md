# chute_kun

A small library for planning a working day in the TaskChute style:
a list of tasks with time estimates, actual time tracking per task,
an estimated end of day (ESD), TOML snapshots of the task lists, and a
character-cell rendering of the plan for terminal front ends.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## What is in it

- `chute_kun.task`: `Task`, `Session`, `TaskState` and `DayPlan`. A day plan
  keeps at most one active task (`start`, `pause_active`, `finish_at`),
  accumulates actual minutes (`add_actual_to_active`), reorders tasks
  (`reorder_up`, `reorder_down`), adjusts estimates (`adjust_estimate`),
  removes tasks (`remove`) and computes the estimated end of day with
  `esd`: the later of now and the latest recorded finish, plus the
  estimates of tasks not yet done. `Task.start_session` / `end_session`
  keep a log of work sessions. `tc_log_line` formats a one-line log entry.
- `chute_kun.storage`: `Snapshot` holds the `today`, `future` and `past`
  task lists with a `version`. `save_to_string` / `load_from_str` convert it
  to and from TOML (`load_from_str` raises `ValueError` on malformed input),
  and `save_to_path` / `load_from_path` write and read a file
  (`load_from_path` returns `None` when the file does not exist).
  `default_state_path()` resolves where the snapshot lives:
  `CHUTE_KUN_STATE` if set, otherwise `$XDG_DATA_HOME/chute_kun/snapshot.toml`,
  otherwise `$HOME/.local/share/chute_kun/snapshot.toml`, otherwise the
  platform's data directory.
- `chute_kun.text`: the `View` enum (Past / Today / Future), plain-text task
  lines (`format_task_list`), planned start times (`schedule_starts`), the
  header line (`ESD 10:30 | Est 90m 0s | Act 0m 0s`), the active-task banner,
  help lines per view wrapped to a width, and tab titles.
- `chute_kun.layout`: `Rect` geometry, `compute_layout` for the tabs, banner,
  list and help regions, and the rectangles of the delete, estimate and input
  popups with their button hitboxes, for mouse hit testing.
- `chute_kun.render`: a character-cell `Screen` (`put`, `fill`, `line`,
  `cell`) and `draw(screen, state, now_min)`, which paints a `DrawState`
  (header, tabs, active banner, task table, help, and any `Popup`) with
  `Style` colours.

## Example

```python
from chute_kun.task import DayPlan, Task
from chute_kun.text import format_header_line, format_task_list

day = DayPlan([Task("Write report", 30), Task("Review", 60)])
day.start(0)
day.add_actual_to_active(10)

print(format_header_line(9 * 60, day))
for line in format_task_list(9 * 60, day.tasks, selected=0):
    print(line)
```

Rendering to a screen buffer:

```python
from chute_kun.render import DrawState, Screen, draw

screen = Screen(80, 10)
draw(screen, DrawState(day=day), 9 * 60)
print(screen.line(0))
```

Snapshots in TOML keep one `[[today]]`, `[[future]]` or `[[past]]` block
per task, so the file diffs cleanly under version control.

## What it does not do

There is no command to run and no interactive terminal application: the
package does not read the keyboard or mouse, run a clock, load a key-binding
or configuration file, or output `Screen` contents to a real terminal. It
provides the model, storage, geometry and drawing that such a front end
would build on.