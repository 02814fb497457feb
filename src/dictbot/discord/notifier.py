"""Follow-up delivery to the webhook of the originating interaction.

Two endpoints are used: PATCH on ``messages/@original`` replaces the deferred
"thinking" message, POST on the webhook appends a new message. Both accept a
JSON ``{content}`` body or a multipart body with a ``content`` field and a
``files[0]`` attachment.

Unlike fire-and-forget notifications, these calls raise DeliveryError on a
non-2xx response; the job consumer decides how to degrade.
"""

import asyncio
import logging
from enum import Enum
from pathlib import Path

import httpx
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from dictbot.errors import DeliveryError

logger = logging.getLogger(__name__)

MAX_CONTENT_LENGTH = 2000
ATTACHMENT_CONTENT_TYPE = "application/octet-stream"


class DeliveryMode(str, Enum):
    """Which webhook endpoint a follow-up goes to."""

    EDIT_ORIGINAL = "edit_original"
    FOLLOWUP = "followup"


def _is_retryable(error: BaseException) -> bool:
    """Rate limits, server errors and transport failures are transient."""
    if isinstance(error, DeliveryError):
        return error.status_code == 429 or error.status_code >= 500
    return isinstance(error, httpx.TransportError)


def truncate_content(content: str, limit: int = MAX_CONTENT_LENGTH) -> str:
    if len(content) <= limit:
        return content
    return content[: limit - 1] + "…"


class FollowupNotifier:
    """Sends text and file follow-ups for one interaction token at a time."""

    def __init__(self, client: httpx.AsyncClient, api_base: str = "https://discord.com/api/v10"):
        self.client = client
        self.api_base = api_base.rstrip("/")

    def endpoint(self, application_id: str, token: str, mode: DeliveryMode) -> tuple[str, str]:
        """Return ``(method, url)`` for the delivery mode."""
        webhook = f"{self.api_base}/webhooks/{application_id}/{token}"
        if mode == DeliveryMode.EDIT_ORIGINAL:
            return "PATCH", f"{webhook}/messages/@original"
        return "POST", webhook

    async def send_text(
        self,
        application_id: str,
        token: str,
        content: str,
        mode: DeliveryMode = DeliveryMode.EDIT_ORIGINAL,
    ) -> None:
        """Send a plain text message.

        Raises:
            DeliveryError: On a non-2xx response after retries.
        """
        method, url = self.endpoint(application_id, token, mode)
        await self._request(method, url, json={"content": truncate_content(content)})

    async def send_file(
        self,
        application_id: str,
        token: str,
        content: str,
        file_path: Path | str,
        mode: DeliveryMode = DeliveryMode.FOLLOWUP,
    ) -> None:
        """Send a message with one file attachment as multipart/form-data.

        Raises:
            DeliveryError: On a non-2xx response after retries.
        """
        path = Path(file_path)
        data = await asyncio.to_thread(path.read_bytes)
        method, url = self.endpoint(application_id, token, mode)
        await self._request(
            method,
            url,
            data={"content": truncate_content(content)},
            files={"files[0]": (path.name, data, ATTACHMENT_CONTENT_TYPE)},
        )
        logger.info("Delivered %s (%d bytes)", path.name, len(data))

    @retry(
        retry=retry_if_exception(_is_retryable),
        wait=wait_exponential_jitter(initial=1, max=10, jitter=1),
        stop=stop_after_attempt(3),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        response = await self.client.request(method, url, **kwargs)
        if not response.is_success:
            raise DeliveryError(response.status_code, response.text[:500])
        return response
