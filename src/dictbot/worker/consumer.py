"""Queue consumer for dictionary jobs.

Each delivered record is deduplicated, run through the dictionary pipeline
inside its own scratch workspace, and reported back to the user through
follow-up messages. Records are processed strictly in sequence and in
isolation: one record's failure never aborts the batch.
"""

import logging
from collections.abc import Awaitable, Callable
from enum import Enum

import httpx
from pydantic import BaseModel, ValidationError

from dictbot.config import ATTACHMENT_LIMIT_BYTES
from dictbot.dictionary.workspace import JobWorkspace
from dictbot.discord.notifier import DeliveryMode, FollowupNotifier
from dictbot.errors import DeliveryError, classify_exception, user_message
from dictbot.models.artifact import Artifact, DictionaryArtifact
from dictbot.models.job import JobDescriptor, QueueRecord
from dictbot.queue.dedup import DeduplicationRecord

logger = logging.getLogger(__name__)

Pipeline = Callable[[JobWorkspace], Awaitable[DictionaryArtifact]]

_DELIVERY_ERRORS = (DeliveryError, httpx.HTTPError, OSError)


class RecordOutcome(str, Enum):
    """What happened to one queue record."""

    PROCESSED = "processed"
    DUPLICATE = "duplicate"
    INVALID = "invalid"
    FAILED = "failed"


class BatchResult(BaseModel):
    """Per-outcome counts for one invocation."""

    processed: int = 0
    duplicate: int = 0
    invalid: int = 0
    failed: int = 0

    def record(self, outcome: RecordOutcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)

    def to_response(self) -> dict:
        """Lambda partial-batch response: every record is acknowledged."""
        return {"batchItemFailures": [], **self.model_dump()}


def format_size(size_bytes: int) -> str:
    return f"{size_bytes / (1024 * 1024):.2f} MB ({size_bytes:,} bytes)"


def build_size_summary(artifact: DictionaryArtifact) -> str:
    """Informational text sent before any file delivery."""
    lines = ["Dictionary fetch completed!"]
    lines.extend(f"{item.label}: {format_size(item.size_bytes)}" for item in artifact.all_files())
    return "\n".join(lines)


class JobConsumer:
    """Processes dictionary job records delivered by an at-least-once queue."""

    def __init__(
        self,
        dedup: DeduplicationRecord,
        notifier: FollowupNotifier,
        pipeline: Pipeline,
        *,
        attachment_limit: int = ATTACHMENT_LIMIT_BYTES,
        deliver_original: bool = False,
        scratch_root: str | None = None,
    ):
        self.dedup = dedup
        self.notifier = notifier
        self.pipeline = pipeline
        self.attachment_limit = attachment_limit
        self.deliver_original = deliver_original
        self.scratch_root = scratch_root

    async def consume(self, records: list[dict]) -> BatchResult:
        """Process a batch of raw queue records one at a time."""
        result = BatchResult()
        for raw in records:
            record = QueueRecord.from_sqs(raw)
            try:
                outcome = await self.process_record(record)
            except Exception:
                logger.error("Unhandled error for message %s", record.message_id, exc_info=True)
                outcome = RecordOutcome.FAILED
            result.record(outcome)
        logger.info("Batch complete: %s", result.model_dump())
        return result

    async def process_record(self, record: QueueRecord) -> RecordOutcome:
        """Deduplicate, then run and report one job.

        Identifiers are recorded before any side effect so a redelivery that
        arrives mid-processing is skipped.
        """
        if record.message_id and self.dedup.seen(record.message_id):
            logger.info(
                "Skipping duplicate delivery %s (receive count %d)",
                record.message_id,
                record.receive_count,
            )
            return RecordOutcome.DUPLICATE

        try:
            descriptor = JobDescriptor.model_validate_json(record.body)
        except ValidationError:
            logger.error("Invalid job descriptor in message %s", record.message_id, exc_info=True)
            self._remember(record.message_id)
            return RecordOutcome.INVALID

        if self.dedup.seen(descriptor.logical_key):
            logger.info(
                "Skipping duplicate request %s in message %s",
                descriptor.logical_key,
                record.message_id,
            )
            self._remember(record.message_id)
            return RecordOutcome.DUPLICATE

        self._remember(record.message_id, descriptor.logical_key)
        logger.info(
            "Processing dictionary job for user %s (message %s, receive count %d)",
            descriptor.user_id,
            record.message_id,
            record.receive_count,
        )

        try:
            workspace = JobWorkspace.create(self.scratch_root)
        except Exception as exc:
            await self._report_failure(descriptor, exc)
            return RecordOutcome.FAILED

        try:
            return await self._run_job(descriptor, workspace)
        finally:
            workspace.cleanup()

    def _remember(self, *keys: str) -> None:
        # Records without a message id must not share the empty key.
        self.dedup.add(*(key for key in keys if key))

    async def _run_job(self, descriptor: JobDescriptor, workspace: JobWorkspace) -> RecordOutcome:
        try:
            artifact = await self.pipeline(workspace)
            await self.notifier.send_text(
                descriptor.application_id, descriptor.token, build_size_summary(artifact)
            )
            deliverable = await self._select_deliverable(descriptor, artifact)
        except Exception as exc:
            await self._report_failure(descriptor, exc)
            return RecordOutcome.FAILED

        await self._deliver_files(descriptor, deliverable)
        return RecordOutcome.PROCESSED

    async def _report_failure(self, descriptor: JobDescriptor, exc: Exception) -> None:
        category = classify_exception(exc)
        logger.error(
            "Dictionary job failed for user %s (%s): %s",
            descriptor.user_id,
            category.value,
            exc,
            exc_info=True,
        )
        await self._notify_failure(descriptor, user_message(category))

    async def _select_deliverable(
        self, descriptor: JobDescriptor, artifact: DictionaryArtifact
    ) -> list[Artifact]:
        """Filter out files over the attachment limit, warning the user for each."""
        candidates = [artifact.original] if self.deliver_original else []
        candidates.extend(artifact.variants)

        deliverable = []
        for item in candidates:
            if item.size_bytes > self.attachment_limit:
                logger.warning(
                    "%s is %d bytes, over the %d byte limit; not sending",
                    item.path.name,
                    item.size_bytes,
                    self.attachment_limit,
                )
                await self._send_followup(
                    descriptor,
                    f"⚠️ {item.label} is {format_size(item.size_bytes)}, over the "
                    f"{format_size(self.attachment_limit)} attachment limit, so it was not sent.",
                )
                continue
            deliverable.append(item)
        return deliverable

    async def _deliver_files(self, descriptor: JobDescriptor, files: list[Artifact]) -> None:
        """Send each file as its own message; a failure falls back to a text notice."""
        for item in files:
            try:
                await self.notifier.send_file(
                    descriptor.application_id,
                    descriptor.token,
                    f"{item.label} ({format_size(item.size_bytes)})",
                    item.path,
                )
            except _DELIVERY_ERRORS as exc:
                logger.warning("Failed to deliver %s: %s", item.path.name, exc, exc_info=True)
                await self._send_followup(
                    descriptor,
                    f"⚠️ Could not upload {item.path.name} "
                    f"({format_size(item.size_bytes)}): {_describe(exc)}",
                )

    async def _send_followup(self, descriptor: JobDescriptor, content: str) -> None:
        try:
            await self.notifier.send_text(
                descriptor.application_id, descriptor.token, content, mode=DeliveryMode.FOLLOWUP
            )
        except _DELIVERY_ERRORS:
            logger.error("Failed to send follow-up to user %s", descriptor.user_id, exc_info=True)

    async def _notify_failure(self, descriptor: JobDescriptor, content: str) -> None:
        try:
            await self.notifier.send_text(descriptor.application_id, descriptor.token, content)
        except _DELIVERY_ERRORS:
            logger.error(
                "Failed to send failure notice to user %s", descriptor.user_id, exc_info=True
            )


def _describe(exc: BaseException) -> str:
    if isinstance(exc, DeliveryError):
        return f"upload rejected with HTTP {exc.status_code}"
    return "upload failed"
