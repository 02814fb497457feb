"""Lambda entry point for the SQS-triggered dictionary worker.

The deduplication record and codec are created once per cold start and reused
by every invocation in the same warm environment.
"""

import asyncio
import logging
from functools import partial
from typing import Any

import httpx

from dictbot.config import Settings, get_settings
from dictbot.dictionary.codec import get_codec
from dictbot.dictionary.pipeline import run_pipeline
from dictbot.discord.notifier import FollowupNotifier
from dictbot.logging_config import configure_logging
from dictbot.queue.dedup import DeduplicationRecord
from dictbot.worker.consumer import BatchResult, JobConsumer

logger = logging.getLogger(__name__)

HTTP_TIMEOUT = httpx.Timeout(30.0)

_dedup: DeduplicationRecord | None = None
_logging_configured = False


def get_dedup_record() -> DeduplicationRecord:
    """Return this execution environment's deduplication record."""
    global _dedup
    if _dedup is None:
        _dedup = DeduplicationRecord(get_settings().dedup_capacity)
    return _dedup


def reset_dedup_record() -> None:
    """Drop the deduplication record, as a cold start would. Used for testing."""
    global _dedup
    _dedup = None


async def consume_batch(records: list[dict], settings: Settings) -> BatchResult:
    """Build the consumer for one invocation and run it over ``records``."""
    codec = get_codec()
    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT) as client:
        consumer = JobConsumer(
            dedup=get_dedup_record(),
            notifier=FollowupNotifier(client, settings.discord_api_base),
            pipeline=partial(run_pipeline, client, codec=codec, settings=settings),
            attachment_limit=settings.attachment_limit_bytes,
            deliver_original=settings.deliver_original_text,
            scratch_root=settings.scratch_root or None,
        )
        return await consumer.consume(records)


def handler(event: dict, context: Any) -> dict:
    """Process an SQS event batch.

    Always acknowledges every record: users are told about failures directly,
    and redelivery would repeat messages they have already seen.
    """
    global _logging_configured
    settings = get_settings()
    if not _logging_configured:
        configure_logging(settings.log_level, settings.environment)
        _logging_configured = True

    records = event.get("Records", [])
    if not records:
        return BatchResult().to_response()

    logger.info("Received %d record(s)", len(records))
    result = asyncio.run(consume_batch(records, settings))
    return result.to_response()
