"""Queue-triggered worker for the get-dictionary command.

The Lambda handler is ``dictbot.worker.handler.handler``.
"""

from dictbot.worker.consumer import BatchResult, JobConsumer, RecordOutcome

__all__ = [
    "BatchResult",
    "JobConsumer",
    "RecordOutcome",
]
