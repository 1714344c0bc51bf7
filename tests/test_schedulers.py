import pytest

from schedsim.algorithms import (
    ALGORITHMS,
    run_algorithm,
    schedule_fcfs,
    schedule_rr,
    schedule_sjf,
    schedule_sjf_priority,
)
from schedsim.errors import EmptyInputError, InvalidProcessError
from schedsim.gantt import merge_slices
from schedsim.models import Process


def _procs():
    return [
        Process("P1", arrival_time=0, burst_time=5, priority=2),
        Process("P2", arrival_time=1, burst_time=3, priority=1),
        Process("P3", arrival_time=2, burst_time=8, priority=3),
    ]


def _mixed():
    # E arrives after everything else has finished, leaving the CPU idle.
    return [
        Process("A", arrival_time=0, burst_time=7, priority=3),
        Process("B", arrival_time=2, burst_time=4, priority=1),
        Process("C", arrival_time=4, burst_time=1, priority=4),
        Process("D", arrival_time=5, burst_time=4, priority=2),
        Process("E", arrival_time=20, burst_time=3, priority=1),
    ]


def _bars(result):
    return [(s.pid, s.start_time, s.end_time) for s in merge_slices(result.timeline)]


def test_fcfs_order():
    res = schedule_fcfs(_procs())
    assert [s.pid for s in res.timeline] == ["P1", "P2", "P3"]
    assert res.processes[0].waiting_time == 0
    assert res.processes[1].waiting_time == 4
    assert res.processes[2].waiting_time == 6


def test_fcfs_reference_workload():
    procs = [
        Process("P1", arrival_time=0, burst_time=5),
        Process("P2", arrival_time=1, burst_time=3),
        Process("P3", arrival_time=2, burst_time=2),
    ]
    res = schedule_fcfs(procs)
    assert [m.completion_time for m in res.processes] == [5, 8, 10]
    assert [m.waiting_time for m in res.processes] == [0, 4, 6]
    assert res.system.avg_turnaround == pytest.approx(20 / 3)
    assert res.system.avg_waiting == pytest.approx(10 / 3)
    assert res.system.throughput == pytest.approx(0.3)


def test_fcfs_zero_arrival_waits_for_service_time():
    # A second process arriving at 0 waits for the first, no carry-over.
    procs = [
        Process("A", arrival_time=0, burst_time=3),
        Process("B", arrival_time=0, burst_time=2),
        Process("C", arrival_time=0, burst_time=1),
    ]
    res = schedule_fcfs(procs)
    assert [m.waiting_time for m in res.processes] == [0, 3, 5]
    assert _bars(res) == [("A", 0, 3), ("B", 3, 5), ("C", 5, 6)]


def test_fcfs_idle_gap():
    procs = [Process("A", arrival_time=0, burst_time=2), Process("B", arrival_time=5, burst_time=3)]
    res = schedule_fcfs(procs)
    assert _bars(res) == [("A", 0, 2), ("B", 5, 8)]
    assert res.metrics_for("B").waiting_time == 0
    assert res.system.throughput == pytest.approx(2 / 8)
    assert res.system.cpu_busy_time == 5


def test_fcfs_requires_sorted_input():
    procs = [Process("A", arrival_time=3, burst_time=2), Process("B", arrival_time=0, burst_time=1)]
    with pytest.raises(InvalidProcessError):
        schedule_fcfs(procs)

    res = run_algorithm("fcfs", procs)
    assert [s.pid for s in res.timeline] == ["B", "A"]


def test_sjf_order():
    res = schedule_sjf(_procs())
    # P2 arrives at 1 with a shorter burst than what P1 has left and takes over.
    assert _bars(res) == [("P1", 0, 1), ("P2", 1, 4), ("P1", 4, 8), ("P3", 8, 16)]
    assert res.metrics_for("P1").completion_time == 8
    assert res.metrics_for("P1").waiting_time == 0
    assert res.metrics_for("P1").ready_time == 3
    assert res.metrics_for("P2").waiting_time == 0
    assert res.metrics_for("P3").waiting_time == 6


def test_sjf_runs_one_unit_per_slice():
    res = schedule_sjf(_procs())
    assert all(s.length == 1 for s in res.timeline)
    assert len(res.timeline) == 16


def test_sjf_tie_goes_to_earlier_admission():
    procs = [
        Process("A", arrival_time=0, burst_time=3),
        Process("B", arrival_time=1, burst_time=2),
    ]
    # At t=1 both have 2 units left; A was admitted first.
    res = schedule_sjf(procs)
    assert _bars(res) == [("A", 0, 3), ("B", 3, 5)]

    same_arrival = [
        Process("X", arrival_time=0, burst_time=2),
        Process("Y", arrival_time=0, burst_time=2),
    ]
    res = schedule_sjf(same_arrival)
    assert _bars(res) == [("X", 0, 2), ("Y", 2, 4)]


def test_sjf_priority_order():
    res = schedule_sjf_priority(_procs())
    assert _bars(res) == [("P1", 0, 1), ("P2", 1, 4), ("P1", 4, 8), ("P3", 8, 16)]


def test_sjf_priority_preempts_at_next_tick():
    procs = [
        Process("L", arrival_time=0, burst_time=5, priority=3),
        Process("H", arrival_time=2, burst_time=2, priority=1),
    ]
    res = schedule_sjf_priority(procs)
    assert _bars(res) == [("L", 0, 2), ("H", 2, 4), ("L", 4, 7)]
    assert res.metrics_for("H").start_time == 2
    assert res.metrics_for("L").completion_time == 7


def test_sjf_priority_equal_priorities_in_admission_order():
    procs = [
        Process("A", arrival_time=0, burst_time=3, priority=1),
        Process("B", arrival_time=0, burst_time=3, priority=1),
        Process("C", arrival_time=1, burst_time=1, priority=1),
    ]
    res = schedule_sjf_priority(procs)
    assert _bars(res) == [("A", 0, 3), ("B", 3, 6), ("C", 6, 7)]


def test_sjf_priority_tracks_remaining_work():
    res = schedule_sjf_priority([Process("A", arrival_time=0, burst_time=4, priority=2)])
    assert len(res.timeline) == 4
    assert res.metrics_for("A").completion_time == 4


def test_rr_default_quantum():
    res = schedule_rr(_procs())
    assert res.quantum == 4
    assert _bars(res) == [("P1", 0, 4), ("P2", 4, 7), ("P3", 7, 11), ("P1", 11, 12), ("P3", 12, 16)]
    # Waiting time stops at first dispatch; ready_time counts every wait.
    assert [(m.waiting_time, m.ready_time) for m in res.processes] == [(0, 7), (3, 3), (5, 6)]
    assert res.system.avg_waiting == pytest.approx(8 / 3)


def test_rr_newcomers_queue_ahead_of_preempted():
    procs = [Process("A", arrival_time=0, burst_time=4), Process("B", arrival_time=1, burst_time=2)]
    res = schedule_rr(procs, quantum=2)
    assert _bars(res) == [("A", 0, 2), ("B", 2, 4), ("A", 4, 6)]


@pytest.mark.parametrize("quantum", [1, 2, 3, 4])
def test_rr_slices_never_exceed_quantum(quantum):
    res = schedule_rr(_mixed(), quantum=quantum)
    assert all(0 < s.length <= quantum for s in res.timeline)


def test_rr_rejects_non_positive_quantum():
    with pytest.raises(ValueError):
        schedule_rr(_procs(), quantum=0)


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_every_burst_is_fully_served(name):
    procs = _mixed()
    res = run_algorithm(name, procs)

    served = {p.pid: 0 for p in procs}
    for s in res.timeline:
        served[s.pid] += s.length
    assert served == {p.pid: p.burst_time for p in procs}
    assert res.system.cpu_busy_time == sum(p.burst_time for p in procs)


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_timeline_has_no_overlap(name):
    res = run_algorithm(name, _mixed())
    slices = res.timeline
    assert all(s.start_time < s.end_time for s in slices)
    assert slices == sorted(slices, key=lambda s: s.start_time)
    for prev, cur in zip(slices, slices[1:]):
        assert prev.end_time <= cur.start_time


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_waiting_and_turnaround_identities(name):
    procs = {p.pid: p for p in _mixed()}
    res = run_algorithm(name, list(procs.values()))
    assert {m.pid for m in res.processes} == set(procs)
    for m in res.processes:
        assert m.turnaround_time == m.completion_time - m.arrival_time
        assert m.waiting_time == m.start_time - m.arrival_time
        assert m.turnaround_time == m.burst_time + m.ready_time
        assert 0 <= m.waiting_time <= m.ready_time


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_idle_cpu_resumes_on_arrival(name):
    res = run_algorithm(name, _mixed())
    e = res.metrics_for("E")
    assert e.start_time == 20
    assert e.completion_time == 23
    assert res.system.makespan == 23
    assert res.system.throughput == pytest.approx(5 / 23)
    assert res.system.cpu_busy_time == 19
    assert res.system.cpu_utilization == pytest.approx(19 / 23)


@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_rejects_empty_input(name):
    with pytest.raises(EmptyInputError):
        run_algorithm(name, [])


@pytest.mark.parametrize(
    "bad",
    [
        Process("Z", arrival_time=0, burst_time=0),
        Process("Z", arrival_time=0, burst_time=-2),
        Process("Z", arrival_time=-1, burst_time=2),
        Process("P1", arrival_time=3, burst_time=1),
    ],
)
@pytest.mark.parametrize("name", list(ALGORITHMS))
def test_rejects_invalid_processes(name, bad):
    with pytest.raises(InvalidProcessError):
        run_algorithm(name, _procs() + [bad])


def test_runs_do_not_share_state():
    first = schedule_sjf(_procs())
    second = schedule_sjf(_procs())
    assert first.timeline == second.timeline
    assert first.timeline is not second.timeline


def test_unknown_algorithm():
    with pytest.raises(ValueError):
        run_algorithm("lottery", _procs())


def test_late_arrival_does_not_spin_the_clock():
    procs = [Process("A", arrival_time=10**9, burst_time=2, priority=1)]
    for name in ALGORITHMS:
        res = run_algorithm(name, procs)
        assert _bars(res) == [("A", 10**9, 10**9 + 2)]
        assert res.metrics_for("A").waiting_time == 0
