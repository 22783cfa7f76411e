import pytest

from chute_kun.task import DayPlan, Session, Task, TaskState
from chute_kun.text import (
    View,
    format_active_banner,
    format_actual_last_finish_time,
    format_header_line,
    format_help_line,
    format_help_line_for,
    format_task_list,
    help_items_for,
    help_lines_for_width,
    schedule_starts,
    state_icon,
    tab_titles,
    wrap_help_items_to_width,
)


def test_help_line_includes_primary_keys():
    s = format_help_line()
    for part in ["q: quit", "Tab", "Enter", "Shift+Enter", "start/pause", "i: interrupt",
                 "p: postpone", "b: bring", "[: up", "]: down", "e: edit", "j/k"]:
        assert part in s


def test_today_help_includes_task_actions():
    s = format_help_line_for(View.TODAY)
    for part in ["Enter", "Shift+Enter", "start/pause", "i: interrupt", "e: edit",
                 "j/k", "p: postpone", "Tab", "q: quit"]:
        assert part in s


@pytest.mark.parametrize("view", [View.FUTURE, View.PAST])
def test_future_and_past_help_hide_task_actions(view):
    s = format_help_line_for(view)
    assert "Shift+Enter" not in s
    assert "start/pause" not in s
    assert "p: postpone" not in s
    assert "Tab" in s
    assert "q: quit" in s


def test_future_help_offers_bring():
    assert format_help_line_for(View.FUTURE) == "q: quit | Tab: switch view | b: bring"


def test_help_items_per_view():
    assert help_items_for(View.PAST) == ["q: quit", "Tab: switch view"]
    today = help_items_for(View.TODAY)
    assert today[:2] == ["q: quit", "Tab: switch view"]
    assert today[-1] == "j/k"
    assert len(today) == 12


def test_wrap_respects_width_and_keeps_items():
    items = help_items_for(View.TODAY)
    lines = wrap_help_items_to_width(items, 30)
    assert all(len(line) <= 30 for line in lines)
    assert " | ".join(lines) == " | ".join(items)


def test_wrap_zero_width_gives_single_empty_line():
    assert wrap_help_items_to_width(["a", "b"], 0) == [""]


def test_wrap_wide_enough_gives_one_line():
    assert wrap_help_items_to_width(["a", "b", "c"], 80) == ["a | b | c"]


def test_wrap_counts_wide_characters():
    assert wrap_help_items_to_width(["日本", "語"], 8) == ["日本", "語"]
    assert wrap_help_items_to_width(["日本", "語"], 9) == ["日本 | 語"]


def test_help_lines_for_width_matches_items():
    assert help_lines_for_width(View.PAST, 100) == ["q: quit | Tab: switch view"]


def test_tab_titles_and_selected_index_follow_view():
    titles, sel = tab_titles(View.TODAY)
    assert titles == ["Past", "Today", "Future"]
    assert sel == 1
    assert tab_titles(View.PAST)[1] == 0
    assert tab_titles(View.FUTURE)[1] == 2


def test_state_icons():
    assert [state_icon(s) for s in TaskState] == [" ", ">", "=", "x"]


def test_shows_hint_when_no_tasks_then_title_after_add():
    assert any("No tasks" in line for line in format_task_list(9 * 60, [], 0))
    lines = format_task_list(9 * 60, [Task("Hello", 10)], 0)
    assert any("Hello" in line for line in lines)


def test_task_lines_prefix_with_scheduled_time_at_left():
    lines = format_task_list(9 * 60, [Task("A", 30), Task("B", 20)], 0)
    assert lines[0].startswith("09:00 ")
    assert lines[1].startswith("09:30 ")


def test_active_progress_shortens_next_task_scheduled_time():
    day = DayPlan([Task("A", 30), Task("B", 20)])
    day.start(0)
    day.add_actual_to_active(10)
    lines = format_task_list(9 * 60, day.tasks, 0)
    assert lines[1].startswith("09:20 ")


def test_selected_row_shows_marker_and_moves_down():
    tasks = [Task("A", 10), Task("B", 20)]
    lines = format_task_list(9 * 60, tasks, 0)
    assert lines[0].startswith("09:00 ")
    assert lines[0][6:].startswith("▶ ")
    assert lines[1].startswith("09:10 ")
    assert "▶ " not in lines[1]

    lines = format_task_list(9 * 60, tasks, 1)
    assert "▶ " not in lines[0]
    assert lines[1][6:].startswith("▶ ")


def test_task_line_full_format():
    task = Task("A", 30, actual_min=2, actual_carry_sec=7, state=TaskState.PAUSED,
                started_at_min=9 * 60 + 5)
    (line,) = format_task_list(9 * 60, [task], 0)
    assert line == "09:00 ▶ = A (est:30m act:2m 7s)  |  実測 09:05-"


def test_task_line_actual_column_variants():
    done = Task("D", 5, state=TaskState.DONE, started_at_min=600, finished_at_min=615)
    planned = Task("P", 5)
    lines = format_task_list(0, [done, planned], 5)
    assert lines[0].endswith("実測 10:00-10:15")
    assert lines[1].endswith("実測 --:--")


def test_planned_task_hides_carry_seconds():
    task = Task("A", 10, actual_carry_sec=42)
    assert "act:0m 0s" in format_task_list(0, [task], 0)[0]


def test_schedule_starts_skip_done_and_wrap_hours():
    tasks = [Task("A", 30, state=TaskState.DONE), Task("B", 90), Task("C", 5)]
    assert schedule_starts(23 * 60, tasks) == [1380, 1380, 1470]
    assert format_task_list(23 * 60, tasks, 0)[2].startswith("00:30 ")


def test_actual_last_finish_time():
    assert format_actual_last_finish_time(Task("A", 5)) == "--:--"
    t = Task("A", 5, sessions=[Session(540, 550), Session(560, 575), Session(600)])
    assert format_actual_last_finish_time(t) == "09:35"
    t.finished_at_min = 630
    assert format_actual_last_finish_time(t) == "10:30"


def test_header_totals_sum_carry_seconds_across_tasks():
    day = DayPlan([Task("A", 30, actual_carry_sec=59, state=TaskState.PAUSED)])
    day.add_task(Task("B", 30, actual_carry_sec=30))
    day.start(1)
    header = format_header_line(9 * 60, day)
    assert "Act 1m 29s" in header


def test_header_and_task_lines_show_seconds():
    day = DayPlan([Task("A", 30)])
    day.start(0)
    day.tasks[0].actual_carry_sec = 5
    assert "Act 0m 5s" in format_header_line(9 * 60, day)
    assert any("act:0m 5s" in line for line in format_task_list(9 * 60, day.tasks, 0))


def test_header_esd_and_totals():
    day = DayPlan([Task("A", 30), Task("B", 60)])
    assert format_header_line(9 * 60, day) == "ESD 10:30 | Est 90m 0s | Act 0m 0s"


def test_header_remaining_never_negative():
    day = DayPlan([Task("A", 1, actual_min=5)])
    assert "Est 0m 0s" in format_header_line(0, day)


def test_active_banner():
    day = DayPlan([Task("Focus Work", 30, actual_min=3, actual_carry_sec=12)])
    assert format_active_banner(day) is None
    day.start(0)
    assert format_active_banner(day) == "Now: > Focus Work (est:30m act:3m 12s)"
    day.pause_active()
    assert format_active_banner(day) is None