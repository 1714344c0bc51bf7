from __future__ import annotations

from typing import Sequence

from .models import Process


class SchedulerError(Exception):
    """Base class for errors raised by schedsim."""


class EmptyInputError(SchedulerError, ValueError):
    """Raised when a scheduler is handed no processes at all."""


class InvalidProcessError(SchedulerError, ValueError):
    """Raised for process records no scheduler can run."""


def validate_processes(processes: Sequence[Process], require_sorted: bool = False) -> None:
    """
    Check the input contract shared by every scheduler.

    Bursts must be positive, otherwise the tick-based loops never finish.
    With ``require_sorted`` the arrival times must also be non-decreasing.
    """
    if not processes:
        raise EmptyInputError("At least one process is required")

    seen: set[str] = set()
    for p in processes:
        if p.pid in seen:
            raise InvalidProcessError(f"Duplicate process id '{p.pid}'")
        seen.add(p.pid)

        if p.arrival_time < 0:
            raise InvalidProcessError(f"Process '{p.pid}' has negative arrival time {p.arrival_time}")
        if p.burst_time <= 0:
            raise InvalidProcessError(f"Process '{p.pid}' has non-positive burst time {p.burst_time}")

    if require_sorted:
        for prev, cur in zip(processes, processes[1:]):
            if cur.arrival_time < prev.arrival_time:
                raise InvalidProcessError(
                    f"Processes must be sorted by arrival time ('{cur.pid}' arrives before '{prev.pid}')"
                )
