"""
CPU scheduler package.

Simulates FCFS, SJF, Round Robin and Priority scheduling over a set of
processes and reports per-process timing metrics and a Gantt chart.
"""

__all__ = ["algorithms", "cli", "errors", "gantt", "metrics", "models", "workload_io"]
