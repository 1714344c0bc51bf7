"""
Text reports for schedule results.

The ``*_schedule(sink, title, processes)`` functions run one scheduler and
write its report to ``sink``, any writable text stream.
"""

from __future__ import annotations

from typing import Optional, Sequence, TextIO

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .algorithms import schedule_fcfs, schedule_rr, schedule_sjf, schedule_sjf_priority
from .gantt import build_rich_gantt, render_gantt
from .models import Process, ScheduleResult

HEADERS = ["ID", "Priority", "Burst", "Arrival", "Wait", "Turnaround", "Exit"]


def build_schedule_table(result: ScheduleResult) -> Table:
    table = Table(title="Schedule", box=box.SIMPLE_HEAVY)
    for h in HEADERS:
        table.add_column(h, justify="center" if h == "ID" else "right")

    for p in result.processes:
        table.add_row(
            p.pid,
            str(p.priority),
            str(p.burst_time),
            str(p.arrival_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.completion_time),
        )
    return table


def summary_line(result: ScheduleResult) -> str:
    system = result.system
    assert system is not None
    return (
        f"Average wait: {system.avg_waiting:.2f}  "
        f"Average turnaround: {system.avg_turnaround:.2f}  "
        f"Throughput: {system.throughput:.3f}"
    )


def write_report(sink: Optional[TextIO], title: str, result: ScheduleResult) -> None:
    """
    Write title, Gantt chart, per-process table and summary line.

    Terminals get the colored rich chart; files and other streams get the
    plain-text one.
    """
    console = Console(file=sink, highlight=False)

    console.print(f"[bold]{escape(title)}[/bold]")
    if result.quantum is not None:
        console.print(f"Quantum: {result.quantum}")
    console.print()

    if console.is_terminal:
        panel, time_marks = build_rich_gantt(result.timeline)
        console.print(panel)
        if time_marks:
            console.print(time_marks)
    else:
        console.print(render_gantt(result.timeline), markup=False, soft_wrap=True)

    console.print()
    console.print(build_schedule_table(result))
    console.print(summary_line(result), markup=False)
    console.print()


def fcfs_schedule(sink: Optional[TextIO], title: str, processes: Sequence[Process]) -> ScheduleResult:
    result = schedule_fcfs(processes)
    write_report(sink, title, result)
    return result


def sjf_schedule(sink: Optional[TextIO], title: str, processes: Sequence[Process]) -> ScheduleResult:
    result = schedule_sjf(processes)
    write_report(sink, title, result)
    return result


def sjf_priority_schedule(sink: Optional[TextIO], title: str, processes: Sequence[Process]) -> ScheduleResult:
    result = schedule_sjf_priority(processes)
    write_report(sink, title, result)
    return result


def rr_schedule(
    sink: Optional[TextIO], title: str, processes: Sequence[Process], quantum: Optional[int] = None
) -> ScheduleResult:
    result = schedule_rr(processes, quantum=quantum)
    write_report(sink, title, result)
    return result
