"""
Per-run simulation state shared by the schedulers.

Each scheduler call builds one ``SimulationState``, drives it with its own
selection policy and throws it away once ``build_result`` has been called.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from .metrics import compute_system_metrics
from .models import Process, ProcessMetrics, ScheduledSlice, ScheduleResult

logger = logging.getLogger(__name__)


class SimulationState:
    def __init__(self, processes: Sequence[Process]) -> None:
        self.processes: List[Process] = list(processes)
        self.time = 0

        # Not yet admitted, kept in arrival order (stable w.r.t. input order).
        self.backlog: List[Process] = sorted(self.processes, key=lambda p: p.arrival_time)

        self.remaining: Dict[str, int] = {p.pid: p.burst_time for p in self.processes}
        self.first_dispatch: Dict[str, int] = {}
        self.completion: Dict[str, int] = {}
        self.completed: set[str] = set()
        self.timeline: List[ScheduledSlice] = []

    @property
    def done(self) -> bool:
        return len(self.completed) == len(self.processes)

    def admit_arrived(self, accept: Optional[Callable[[Process], bool]] = None) -> List[Process]:
        """
        Move every arrived process (optionally filtered by ``accept``) out of
        the backlog and return them in arrival order.
        """
        admitted: List[Process] = []
        still_waiting: List[Process] = []
        for p in self.backlog:
            if p.arrival_time <= self.time and (accept is None or accept(p)):
                admitted.append(p)
            else:
                still_waiting.append(p)
        self.backlog = still_waiting

        for p in admitted:
            logger.debug("t=%d: admitted %s", self.time, p.pid)
        return admitted

    def idle(self, ticks: int = 1) -> None:
        self.time += ticks

    def next_arrival(self) -> Optional[int]:
        return self.backlog[0].arrival_time if self.backlog else None

    def execute(self, process: Process, run_time: int) -> bool:
        """
        Run ``process`` for up to ``run_time`` units starting now.

        Records the slice, first dispatch and, when remaining work hits zero,
        completion. Returns True if the process finished.
        """
        pid = process.pid
        assert pid in self.remaining, f"unknown process {pid}"
        assert pid not in self.completed, f"{pid} dispatched after completion"

        run_time = min(run_time, self.remaining[pid])
        assert run_time > 0

        if pid not in self.first_dispatch:
            self.first_dispatch[pid] = self.time

        start = self.time
        self.time += run_time
        self.remaining[pid] -= run_time
        self.timeline.append(ScheduledSlice(pid=pid, start_time=start, end_time=self.time))

        if self.remaining[pid] == 0:
            self.completed.add(pid)
            self.completion[pid] = self.time
            logger.debug("t=%d: %s completed", self.time, pid)
            return True
        return False

    def build_result(self, algorithm: str, quantum: Optional[int] = None) -> ScheduleResult:
        assert self.done, "simulation stopped before every process completed"

        metrics: List[ProcessMetrics] = []
        for p in self.processes:
            completion_time = self.completion[p.pid]
            start_time = self.first_dispatch[p.pid]
            turnaround_time = completion_time - p.arrival_time
            metrics.append(
                ProcessMetrics(
                    pid=p.pid,
                    arrival_time=p.arrival_time,
                    burst_time=p.burst_time,
                    start_time=start_time,
                    completion_time=completion_time,
                    waiting_time=start_time - p.arrival_time,
                    turnaround_time=turnaround_time,
                    ready_time=turnaround_time - p.burst_time,
                    priority=p.priority,
                )
            )

        result = ScheduleResult(algorithm=algorithm, quantum=quantum, processes=metrics, timeline=self.timeline)
        system = compute_system_metrics(result)
        logger.info(
            "%s: %d processes, avg wait %.2f, avg turnaround %.2f, throughput %.3f",
            algorithm,
            len(metrics),
            system.avg_waiting,
            system.avg_turnaround,
            system.throughput,
        )
        return result
