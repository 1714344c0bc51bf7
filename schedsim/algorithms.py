from __future__ import annotations

import heapq
import itertools
from collections import deque
from typing import Deque, Dict, List, Optional, Sequence, Tuple

from .errors import validate_processes
from .models import Process, ScheduleResult
from .simulation import SimulationState

DEFAULT_QUANTUM = 4


def schedule_fcfs(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive).

    The input must already be sorted by arrival time; it is run in that
    order, each process to completion.
    """
    processes = list(processes)
    validate_processes(processes, require_sorted=True)

    state = SimulationState(processes)
    ready: Deque[Process] = deque()

    while not state.done:
        ready.extend(state.admit_arrived())

        if not ready:
            # CPU idle: jump to the next arrival.
            state.idle(state.next_arrival() - state.time)
            continue

        current = ready.popleft()
        state.execute(current, current.burst_time)

    return state.build_result("FCFS")


def schedule_sjf(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First, re-evaluated every time unit.

    At each tick the ready process with the least remaining time runs for
    one unit. Ties go to whichever was admitted to the ready list first.
    """
    processes = list(processes)
    validate_processes(processes)

    state = SimulationState(processes)
    ready: List[Process] = []

    while not state.done:
        ready.extend(state.admit_arrived())

        if not ready:
            state.idle(state.next_arrival() - state.time)
            continue

        # list.sort is stable, so equal remaining times keep admission order.
        ready.sort(key=lambda p: state.remaining[p.pid])
        current = ready[0]

        if state.execute(current, 1):
            ready.pop(0)
            continue

        # Arrivals shorter than what is left of the current job are admitted
        # now, ahead of longer arrivals which wait for the next scan.
        left = state.remaining[current.pid]
        ready.extend(state.admit_arrived(lambda p: p.burst_time < left))

    return state.build_result("SJF")


def schedule_sjf_priority(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Priority-preemptive SJF variant.

    Lower numeric priority value means higher priority. The scheduler decides
    again after every time unit: the running process is pushed back onto the
    heap and loses the CPU as soon as something with a better priority is
    ready. Equal priorities are served in admission order; a preempted
    process keeps its original place among its equals.
    """
    processes = list(processes)
    validate_processes(processes)

    state = SimulationState(processes)
    heap: List[Tuple[int, int, Process]] = []
    sequence = itertools.count()
    admitted_at: Dict[str, int] = {}

    def push(p: Process) -> None:
        if p.pid not in admitted_at:
            admitted_at[p.pid] = next(sequence)
        heapq.heappush(heap, (p.priority, admitted_at[p.pid], p))

    while not state.done:
        for p in state.admit_arrived():
            push(p)

        if not heap:
            # CPU idle: jump to the next arrival.
            state.idle(state.next_arrival() - state.time)
            continue

        _, _, current = heapq.heappop(heap)

        if state.execute(current, 1):
            continue

        for p in state.admit_arrived(lambda p: p.priority < current.priority):
            push(p)
        push(current)

    return state.build_result("SJF (priority)")


def schedule_rr(processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum (default 4).

    A process that uses up its quantum goes to the back of the queue, behind
    anything that arrived while it was running.
    """
    if quantum is None:
        quantum = DEFAULT_QUANTUM
    if quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")

    processes = list(processes)
    validate_processes(processes)

    state = SimulationState(processes)
    ready: Deque[Process] = deque()

    while not state.done:
        ready.extend(state.admit_arrived())

        if not ready:
            state.idle(state.next_arrival() - state.time)
            continue

        current = ready.popleft()

        if state.execute(current, quantum):
            continue

        ready.extend(state.admit_arrived())
        ready.append(current)

    return state.build_result("Round Robin", quantum=quantum)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "sjfp": schedule_sjf_priority,
    "rr": schedule_rr,
}

TITLES = {
    "fcfs": "First-come, first-serve",
    "sjf": "Shortest-job-first",
    "sjfp": "Shortest-job-first with priority",
    "rr": "Round-robin",
}


def run_algorithm(name: str, processes: Sequence[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.

    FCFS input is sorted by arrival time first (stable, so equal arrivals
    keep their file order).
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    if name == "fcfs":
        processes = sorted(processes, key=lambda p: p.arrival_time)

    func = ALGORITHMS[name]
    return func(processes, quantum=quantum)
