from __future__ import annotations

from typing import Dict, List, Tuple

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import ScheduledSlice


def gantt_entries(slices: List[ScheduledSlice]) -> List[Tuple[int, int]]:
    """
    Return ``(pid, cumulative_finish)`` pairs in dispatch order.

    The cumulative time is the running sum of the CPU time each slice
    actually consumed, so idle gaps do not count.
    """
    entries: List[Tuple[int, int]] = []
    elapsed = 0
    for sl in slices:
        elapsed += sl.duration
        entries.append((sl.pid, elapsed))
    return entries


def render_gantt(slices: List[ScheduledSlice]) -> str:
    """
    Plain-text Gantt chart: one cell per slice with cumulative finish times.
    """
    if not slices:
        return "(no execution)"

    entries = gantt_entries(slices)
    bar = "".join(f"| P{pid} " for pid, _ in entries) + "|"
    marks = "0 " + "".join(f"{finish:>3} " for _, finish in entries)

    return "\n".join(["Gantt Chart:", bar, marks.rstrip()])


def build_rich_gantt(slices: List[ScheduledSlice]) -> tuple[Panel, str]:
    """
    Build a Rich Panel containing a colored Gantt chart and a string with time marks.

    Unlike ``render_gantt`` this draws real start/end times, idle gaps included.
    """
    if not slices:
        panel = Panel("No execution", title="Gantt Chart")
        return panel, ""

    slices = sorted(slices, key=lambda s: (s.start_time, s.end_time))

    colors = ["red", "green", "yellow", "blue", "magenta", "cyan"]
    pid_to_color: Dict[int, str] = {}

    def pid_color(pid: int) -> str:
        if pid not in pid_to_color:
            pid_to_color[pid] = colors[len(pid_to_color) % len(colors)]
        return pid_to_color[pid]

    timeline = Text()
    labels = Text()
    time_marks = "0"
    last_time = 0

    for sl in slices:
        idle_gap = sl.start_time - last_time
        if idle_gap > 0:
            timeline.append("." * idle_gap)
            labels.append(" " * idle_gap)
            time_marks += f"{sl.start_time:>3}"

        width = max(1, sl.duration)
        label = f"P{sl.pid}"[:width].ljust(width)
        timeline.append(" " * width, style=f"on {pid_color(sl.pid)}")
        labels.append(label, style="bold")

        last_time = sl.end_time
        time_marks += f"{last_time:>3}"

    table = Table.grid(padding=(0, 0))
    table.add_row(timeline)
    table.add_row(labels)

    return Panel.fit(table, title="Gantt Chart"), time_marks
