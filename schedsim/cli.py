from __future__ import annotations

import argparse
import contextlib
import logging
from pathlib import Path
from typing import Iterator, List, Optional, TextIO

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, DEFAULT_QUANTUM, TITLES, run_algorithm
from .errors import SchedulerError
from .metrics import summarize_process_metrics
from .models import Process
from .report import write_report
from .workload_io import load_workload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="CPU scheduling simulator (FCFS, SJF, SJF with priority, Round Robin).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every dispatch and completion.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run one scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        help="Algorithm to use.",
    )
    _add_workload_arguments(run_parser)

    all_parser = subparsers.add_parser("all", help="Run all four algorithms and write one report each.")
    _add_workload_arguments(all_parser)

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run several algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=list(ALGORITHMS),
        help="Algorithms to compare (default: all).",
    )
    _add_workload_arguments(compare_parser)

    return parser


def _add_workload_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to a CSV (id, arrival, burst, priority) or JSON workload file.",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the report to this file instead of stdout.",
    )


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


@contextlib.contextmanager
def _open_output(path: Optional[str]) -> Iterator[Optional[TextIO]]:
    if path is None:
        yield None
        return
    with Path(path).open("w", encoding="utf-8") as f:
        yield f


def _run_one(sink: Optional[TextIO], name: str, processes: List[Process], quantum: int) -> None:
    result = run_algorithm(name, processes, quantum=quantum if name == "rr" else None)
    write_report(sink, TITLES[name], result)


def _compare_table(processes: List[Process], algorithms: List[str], quantum: int) -> Table:
    summary_table = Table(title="Algorithm comparison", box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm")
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg waiting", justify="right")
    summary_table.add_column("Avg turnaround", justify="right")
    summary_table.add_column("Avg ready", justify="right")
    summary_table.add_column("Throughput", justify="right")
    summary_table.add_column("CPU util", justify="right")

    for alg in algorithms:
        q = quantum if alg == "rr" else None
        result = run_algorithm(alg, processes, quantum=q)
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_ready']:.2f}",
            f"{result.system.throughput:.3f}",
            f"{result.system.cpu_utilization*100:.1f}%",
        )

    return summary_table


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose)
    err_console = Console(stderr=True)

    try:
        processes = load_workload(args.workload)

        with _open_output(args.output) as sink:
            if args.command == "run":
                _run_one(sink, args.algorithm, processes, args.quantum)
            elif args.command == "all":
                for name in ALGORITHMS:
                    _run_one(sink, name, processes, args.quantum)
            elif args.command == "compare":
                Console(file=sink).print(_compare_table(processes, args.algorithms, args.quantum))
            else:
                parser.error(f"Unknown command: {args.command}")
    except (SchedulerError, ValueError, OSError) as exc:
        err_console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
