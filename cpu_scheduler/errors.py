from __future__ import annotations


class SchedulerError(Exception):
    """Base class for errors raised by the scheduling engine."""


class InvalidInputError(SchedulerError, ValueError):
    """
    A process set, quantum or workload file that cannot be scheduled.
    """
