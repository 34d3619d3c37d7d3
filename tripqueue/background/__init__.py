# tripqueue/background/__init__.py
"""
Background job processing.

Exports:
    - JobProcessor: Sweep over queue records
    - SweepScheduler: Periodic sweeps
    - SweepDispatcher: Fire-and-forget work after submissions
    - ServiceLifecycle: Wiring, startup and shutdown
"""

from tripqueue.background.lifecycle import ServiceLifecycle
from tripqueue.background.processor import JobProcessor, SweepReport
from tripqueue.background.worker import SweepDispatcher, SweepScheduler

__all__ = [
    "JobProcessor",
    "SweepReport",
    "SweepScheduler",
    "SweepDispatcher",
    "ServiceLifecycle",
]
