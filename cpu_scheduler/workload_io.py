from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Any, List, Mapping, Union

from .errors import InvalidInputError
from .models import Process


def load_workload(path: Union[str, Path]) -> List[Process]:
    """
    Load a workload from a JSON or CSV file into a list of Process objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise InvalidInputError(f"Unsupported workload format: {suffix or path.name} (use .json or .csv)")


def _load_json(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"{path}: invalid JSON ({exc.msg})") from exc

    if not isinstance(raw, list):
        raise InvalidInputError("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry, position) for position, entry in enumerate(raw, start=1)]


def _load_csv(path: Path) -> List[Process]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        return [_process_from_mapping(row, position) for position, row in enumerate(reader, start=1)]


def _as_int(value: Any) -> int:
    # JSON floats and booleans are rejected, not truncated.
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise TypeError(f"expected an integer, got {value!r}")
    if isinstance(value, str):
        return int(value.strip())
    return value


def _int_field(mapping: Mapping[str, Any], key: str, default: int) -> int:
    value = mapping.get(key)
    if value is None or (isinstance(value, str) and not value.strip()):
        return default
    return _as_int(value)


def _process_from_mapping(mapping: Any, position: int) -> Process:
    # PIDs default to the 1-based row position.
    try:
        arrival_time = _as_int(mapping["arrival_time"])
        burst_time = _as_int(mapping["burst_time"])
        pid = _int_field(mapping, "pid", position)
        priority = _int_field(mapping, "priority", 0)
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid process entry: {mapping!r}") from exc

    return Process(
        pid=pid,
        arrival_time=arrival_time,
        burst_time=burst_time,
        priority=priority,
    )
