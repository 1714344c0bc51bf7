from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence

from .errors import InvalidProcessError, validate_processes
from .models import Process

logger = logging.getLogger(__name__)

FIELDS = ("pid", "arrival_time", "burst_time", "priority")


def load_workload(path: str | Path) -> List[Process]:
    """
    Load a workload from a JSON or comma-separated file into a list of
    Process objects.

    CSV files may start with a ``pid,arrival_time,burst_time,priority``
    header; without one every line is read as ``id, arrival, burst, priority``.
    Any suffix other than ``.json`` is treated as comma-separated text.
    """
    path = Path(path)

    if path.suffix.lower() == ".json":
        processes = _load_json(path)
    else:
        processes = _load_csv(path)

    validate_processes(processes)
    logger.debug("loaded %d processes from %s", len(processes), path)
    return processes


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        raw = json.load(f)

    if not isinstance(raw, Iterable) or isinstance(raw, (str, dict)):
        raise InvalidProcessError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        rows = [row for row in csv.reader(f) if any(cell.strip() for cell in row)]

    if not rows:
        return []

    header = [cell.strip().lower() for cell in rows[0]]
    if "pid" in header:
        return [_process_from_mapping(dict(zip(header, row))) for row in rows[1:]]

    return [_process_from_row(row) for row in rows]


def _process_from_row(row: Sequence[str]) -> Process:
    if len(row) < 3:
        raise InvalidProcessError(f"Invalid process record: {','.join(row)!r}")
    return _process_from_mapping(dict(zip(FIELDS, row)))


def _process_from_mapping(mapping: Mapping) -> Process:
    try:
        pid = str(mapping["pid"]).strip()
        arrival_time = int(str(mapping["arrival_time"]).strip())
        burst_time = int(str(mapping["burst_time"]).strip())
        priority_val = mapping.get("priority")
        priority_str = "" if priority_val is None else str(priority_val).strip()
        priority = int(priority_str) if priority_str else 0
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise InvalidProcessError(f"Invalid process entry: {mapping!r}") from exc

    if not pid:
        raise InvalidProcessError(f"Process entry without an id: {mapping!r}")

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
