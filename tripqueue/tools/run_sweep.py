# tripqueue/tools/run_sweep.py
"""run_sweep implementation: one synchronous pass of the job processor."""

import logging

from tripqueue.background.processor import JobProcessor

logger = logging.getLogger(__name__)


async def run_sweep(processor: JobProcessor) -> dict:
    """
    Run one sweep and wait for it.

    Returns:
        SweepReport as dict
    """
    report = await processor.sweep()
    return report.to_dict()
