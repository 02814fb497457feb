"""Job submission to the SQS work queue."""

import asyncio
import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from dictbot.config import get_settings
from dictbot.errors import EnqueueError
from dictbot.models.job import JobDescriptor

logger = logging.getLogger(__name__)


class JobEnqueuer:
    """Serializes JobDescriptors and sends them to the queue.

    The boto3 client is created on first enqueue so that requests which never
    enqueue (handshakes, inline commands) do not depend on AWS configuration.
    """

    def __init__(self, queue_url: str, region_name: str | None = None, sqs_client=None):
        self.queue_url = queue_url
        self.region_name = region_name or None
        self._sqs = sqs_client

    def _client(self):
        if self._sqs is None:
            self._sqs = boto3.client("sqs", region_name=self.region_name)
        return self._sqs

    async def enqueue(self, descriptor: JobDescriptor) -> str:
        """Send one descriptor and return the queue-assigned message id.

        Raises EnqueueError on missing configuration or any transport failure.
        """
        if not self.queue_url:
            raise EnqueueError("Job queue URL is not configured")
        try:
            response = await asyncio.to_thread(
                self._send, descriptor.to_message_body()
            )
        except (BotoCoreError, ClientError) as exc:
            raise EnqueueError(f"Failed to enqueue job: {exc}") from exc

        message_id = response.get("MessageId", "")
        logger.info(
            "Enqueued dictionary job %s for user %s", message_id, descriptor.user_id
        )
        return message_id

    def _send(self, body: str) -> dict:
        return self._client().send_message(QueueUrl=self.queue_url, MessageBody=body)


_enqueuer: JobEnqueuer | None = None


def get_job_enqueuer() -> JobEnqueuer:
    """Return the cached enqueuer built from settings. Usable as a FastAPI dependency."""
    global _enqueuer
    if _enqueuer is None:
        settings = get_settings()
        _enqueuer = JobEnqueuer(settings.job_queue_url, settings.aws_region)
    return _enqueuer


def reset_enqueuer() -> None:
    """Reset the cached enqueuer instance. Used for testing."""
    global _enqueuer
    _enqueuer = None
