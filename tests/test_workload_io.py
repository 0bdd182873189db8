from pathlib import Path

import pytest

from cpu_scheduler.errors import InvalidInputError
from cpu_scheduler.models import Process
from cpu_scheduler.workload_io import load_workload


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"pid":4,"arrival_time":0,"burst_time":3,"priority":1},'
                 '{"arrival_time":1,"burst_time":2}]')
    procs = load_workload(p)
    assert isinstance(procs[0], Process)
    assert procs[0].pid == 4
    assert procs[1] == Process(pid=2, arrival_time=1, burst_time=2, priority=0)


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\n1,0,3,1\n2,1,2,\n")
    procs = load_workload(p)
    assert procs[0].pid == 1
    assert procs[0].priority == 1
    assert procs[1].priority == 0


def test_load_csv_without_pid_column(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("arrival_time,burst_time\n0,3\n2,4\n")
    assert [proc.pid for proc in load_workload(p)] == [1, 2]


@pytest.mark.parametrize(
    "name, content",
    [
        ("bad.json", '[{"pid": 1, "burst_time": 3}]'),
        ("bad.json", '[{"arrival_time": "soon", "burst_time": 3}]'),
        ("bad.json", '{"arrival_time": 0, "burst_time": 3}'),
        ("bad.json", "[{"),
        ("bad.csv", "arrival_time,burst_time\n0,x\n"),
        ("bad.txt", "0 3"),
    ],
)
def test_invalid_workloads(tmp_path: Path, name, content):
    p = tmp_path / name
    p.write_text(content)
    with pytest.raises(InvalidInputError):
        load_workload(p)


@pytest.mark.parametrize(
    "entry",
    [
        '{"arrival_time": 2.9, "burst_time": 3}',
        '{"arrival_time": 0, "burst_time": 3.7}',
        '{"arrival_time": true, "burst_time": 3}',
        '{"arrival_time": 0, "burst_time": 3, "priority": 1.5}',
        '{"pid": false, "arrival_time": 0, "burst_time": 3}',
    ],
)
def test_json_rejects_non_integer_numbers(tmp_path: Path, entry):
    p = tmp_path / "w.json"
    p.write_text(f"[{entry}]")
    with pytest.raises(InvalidInputError):
        load_workload(p)


def test_json_and_csv_accept_numeric_strings(tmp_path: Path):
    j = tmp_path / "w.json"
    j.write_text('[{"arrival_time": "2", "burst_time": " 4 "}]')
    c = tmp_path / "w.csv"
    c.write_text("arrival_time,burst_time\n2,4\n")
    assert load_workload(j) == load_workload(c) == [Process(pid=1, arrival_time=2, burst_time=4)]


def test_csv_rejects_fractional_value(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("arrival_time,burst_time\n2.5,3\n")
    with pytest.raises(InvalidInputError):
        load_workload(p)
