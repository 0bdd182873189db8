from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import ALGORITHMS, run_algorithm
from .gantt import build_rich_gantt, render_gantt
from .metrics import summarize_process_metrics
from .models import Process, ScheduleResult
from .workload_io import load_workload

DEFAULT_QUANTUM = 2
DEFAULT_ALGORITHMS = list(ALGORITHMS)

MENU_ITEMS = [
    "Input Process Details",
    "Run FCFS",
    "Run SJF",
    "Run Round Robin",
    "Run Priority Scheduling",
    "Exit",
]
MENU_ALGORITHMS: Dict[str, str] = {"2": "fcfs", "3": "sjf", "4": "rr", "5": "priority"}

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpu-scheduler",
        description="CPU scheduling simulator (FCFS, SJF, Round Robin, Priority).",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log every dispatch decision.",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser("run", help="Run a scheduling algorithm on a workload file.")
    run_parser.add_argument(
        "--algorithm",
        "-a",
        required=True,
        choices=list(ALGORITHMS),
        help="Algorithm to use.",
    )
    run_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    run_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=None,
        help="Time quantum for round-robin (ignored by FCFS, SJF, Priority).",
    )
    run_parser.add_argument(
        "--eager-admission",
        action="store_true",
        help="Round-robin only: queue every process present at the first arrival before the first dispatch.",
    )
    run_parser.add_argument(
        "--plain",
        action="store_true",
        help="Print the Gantt chart as plain text with cumulative finish times.",
    )

    compare_parser = subparsers.add_parser(
        "compare",
        help="Run multiple algorithms on the same workload and compare average metrics.",
    )
    compare_parser.add_argument(
        "--workload",
        "-w",
        required=True,
        help="Path to JSON or CSV workload file.",
    )
    compare_parser.add_argument(
        "--algorithms",
        "-a",
        nargs="+",
        choices=list(ALGORITHMS),
        default=DEFAULT_ALGORITHMS,
        help="Algorithms to compare (default: %(default)s).",
    )
    compare_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help="Time quantum used for RR when included (default: %(default)s).",
    )

    menu_parser = subparsers.add_parser(
        "menu",
        help="Interactive menu: enter processes and run algorithms on them.",
    )
    menu_parser.add_argument(
        "--quantum",
        "-q",
        type=int,
        default=DEFAULT_QUANTUM,
        help="Default quantum offered at the Round Robin prompt (default: %(default)s).",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _print_result(result: ScheduleResult, console: Console, plain: bool = False) -> None:
    console.print(f"[bold]Algorithm:[/bold] {result.algorithm}")
    if result.quantum is not None:
        console.print(f"[bold]Quantum:[/bold] {result.quantum}")

    console.print()

    headers = ["PID", "Arrive", "Burst", "Priority", "Start", "Complete", "Wait", "Turnaround", "Response"]

    proc_table = Table(title="Per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h in {"PID", "Priority"} else "right")

    for p in result.processes:
        proc_table.add_row(
            f"P{p.pid}",
            str(p.arrival_time),
            str(p.burst_time),
            str(p.priority),
            str(p.start_time),
            str(p.completion_time),
            str(p.waiting_time),
            str(p.turnaround_time),
            str(p.response_time),
        )

    console.print(proc_table)
    console.print(f"Average Waiting Time: {result.avg_waiting_time:.2f}")
    console.print(f"Average Turnaround Time: {result.avg_turnaround_time:.2f}")
    if result.system:
        sys_ = result.system
        console.print(
            f"[dim]Makespan {sys_.makespan}, idle {sys_.idle_time}, "
            f"CPU utilization {sys_.cpu_utilization * 100:.1f}%[/dim]"
        )

    console.print()

    if plain:
        console.print(render_gantt(result.timeline), markup=False, highlight=False)
        return

    panel, time_marks = build_rich_gantt(result.timeline)
    console.print(panel)
    if time_marks:
        console.print(time_marks, highlight=False)


def _print_comparison(results: List[ScheduleResult], console: Console, title: str) -> None:
    # WT / TAT / RT are waiting, turnaround and response time.
    summary_table = Table(title=title, box=box.SIMPLE_HEAVY)
    summary_table.add_column("Algorithm", no_wrap=True)
    summary_table.add_column("Quantum", justify="right")
    summary_table.add_column("Avg WT", justify="right")
    summary_table.add_column("Avg TAT", justify="right")
    summary_table.add_column("Avg RT", justify="right")
    summary_table.add_column("Util", justify="right")

    for result in results:
        summary = summarize_process_metrics(result.processes)
        summary_table.add_row(
            result.algorithm,
            "" if result.quantum is None else str(result.quantum),
            f"{summary['avg_waiting']:.2f}",
            f"{summary['avg_turnaround']:.2f}",
            f"{summary['avg_response']:.2f}",
            f"{result.system.cpu_utilization * 100:.1f}%" if result.system else "",
        )

    console.print(summary_table)


def _prompt_int(prompt: str, console: Console, minimum: Optional[int] = None, default: Optional[int] = None) -> int:
    """
    Ask until the user types an integer >= ``minimum``; Enter picks ``default``.
    """
    while True:
        raw = input(prompt).strip()
        if not raw and default is not None:
            return default
        try:
            value = int(raw)
        except ValueError:
            console.print(f"[red]'{escape(raw)}' is not an integer, try again.[/red]")
            continue
        if minimum is not None and value < minimum:
            console.print(f"[red]Value must be at least {minimum}, try again.[/red]")
            continue
        return value


def _input_processes(console: Console) -> List[Process]:
    n = _prompt_int("Enter number of processes: ", console, minimum=1)
    processes: List[Process] = []
    for pid in range(1, n + 1):
        console.print(f"Enter details for Process {pid}:")
        processes.append(
            Process(
                pid=pid,
                arrival_time=_prompt_int("Arrival Time: ", console, minimum=0),
                burst_time=_prompt_int("Burst Time: ", console, minimum=1),
                priority=_prompt_int("Priority: ", console),
            )
        )
    return processes


def _interactive_menu(default_quantum: int, console: Console) -> None:
    # The shell owns the current process set; policies only ever read it.
    processes: List[Process] = []

    while True:
        console.print("\n[bold cyan]==== CPU Scheduling Simulator ====[/bold cyan]")
        for idx, label in enumerate(MENU_ITEMS, start=1):
            console.print(f"  [yellow]{idx}[/yellow]. {label}")

        choice = input("Enter choice: ").strip()

        if choice == "6":
            console.print("Exiting...")
            return

        if choice == "1":
            processes = _input_processes(console)
            console.print(f"[green]{len(processes)} process(es) recorded.[/green]")
            continue

        alg = MENU_ALGORITHMS.get(choice)
        if alg is None:
            console.print("[red]Invalid choice! Try again.[/red]")
            continue

        if not processes:
            console.print("[red]No process details entered![/red]")
            continue

        quantum = None
        if alg == "rr":
            quantum = _prompt_int(f"Enter Time Quantum [{default_quantum}]: ", console, minimum=1, default=default_quantum)

        try:
            result = run_algorithm(alg, processes, quantum=quantum)
        except ValueError as exc:
            console.print(f"[red]Error: {escape(str(exc))}[/red]")
            continue

        _print_result(result, console)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    console = Console()

    if args.command == "menu":
        try:
            _interactive_menu(args.quantum, console)
        except (EOFError, KeyboardInterrupt):
            console.print("\nExiting...")
        return 0

    try:
        processes = load_workload(Path(args.workload))

        if args.command == "run":
            result = run_algorithm(
                args.algorithm,
                processes,
                quantum=args.quantum,
                eager_admission=args.eager_admission,
            )
            _print_result(result, console, plain=args.plain)
            return 0

        if args.command == "compare":
            results = [
                run_algorithm(alg, processes, quantum=args.quantum if alg == "rr" else None)
                for alg in args.algorithms
            ]
            _print_comparison(results, console, title=f"Algorithm comparison: {args.workload}")
            return 0
    except (ValueError, OSError) as exc:
        logger.debug("command %s failed", args.command, exc_info=True)
        console.print(f"[red]Error: {escape(str(exc))}[/red]")
        return 2

    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
