"""
schedsim package.

Simulates FCFS, SJF, priority-preemptive SJF and Round Robin scheduling over
a fixed set of processes and reports waiting time, turnaround time,
throughput and a Gantt trace.
"""

from .algorithms import (
    ALGORITHMS,
    run_algorithm,
    schedule_fcfs,
    schedule_rr,
    schedule_sjf,
    schedule_sjf_priority,
)
from .errors import EmptyInputError, InvalidProcessError, SchedulerError
from .models import Process, ProcessMetrics, ScheduledSlice, ScheduleResult, SystemMetrics
from .report import fcfs_schedule, rr_schedule, sjf_priority_schedule, sjf_schedule, write_report

__all__ = [
    "ALGORITHMS",
    "EmptyInputError",
    "InvalidProcessError",
    "Process",
    "ProcessMetrics",
    "ScheduleResult",
    "ScheduledSlice",
    "SchedulerError",
    "SystemMetrics",
    "fcfs_schedule",
    "rr_schedule",
    "run_algorithm",
    "schedule_fcfs",
    "schedule_rr",
    "schedule_sjf",
    "schedule_sjf_priority",
    "sjf_priority_schedule",
    "sjf_schedule",
    "write_report",
]
