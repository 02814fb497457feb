"""Queue transport: job submission and delivery deduplication."""

from dictbot.queue.dedup import DeduplicationRecord
from dictbot.queue.enqueuer import JobEnqueuer, get_job_enqueuer, reset_enqueuer

__all__ = [
    "DeduplicationRecord",
    "JobEnqueuer",
    "get_job_enqueuer",
    "reset_enqueuer",
]
