"""Error taxonomy for the dictionary job.

Every failure the worker can report to a user carries an explicit
ErrorCategory, set where the failure is raised. The consumer maps the
category to a user-facing message; it never inspects exception text.
"""

import errno
from enum import Enum


class ErrorCategory(str, Enum):
    """User-visible failure categories for a dictionary job."""

    DOWNLOAD = "download"
    MISSING_FILE = "missing_file"
    EMPTY_ARCHIVE = "empty_archive"
    DECODE = "decode"
    OUT_OF_MEMORY = "out_of_memory"
    TIMEOUT = "timeout"
    RESOURCE_EXHAUSTION = "resource_exhaustion"
    GENERIC = "generic"


USER_MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.DOWNLOAD: "Sorry, the dictionary could not be downloaded. Please try again later.",
    ErrorCategory.MISSING_FILE: "Sorry, the dictionary file was not found. It may have moved upstream.",
    ErrorCategory.EMPTY_ARCHIVE: "Sorry, the downloaded dictionary archive was empty.",
    ErrorCategory.DECODE: "Sorry, the dictionary text could not be decoded.",
    ErrorCategory.OUT_OF_MEMORY: "Sorry, the dictionary is too large to process (out of memory).",
    ErrorCategory.TIMEOUT: "Sorry, processing timed out. Please try again later.",
    ErrorCategory.RESOURCE_EXHAUSTION: "Sorry, the worker ran out of resources while processing the dictionary.",
    ErrorCategory.GENERIC: "Error fetching dictionary data. Please try again later.",
}

_EXHAUSTION_ERRNOS = {errno.ENOSPC, errno.EMFILE, errno.ENFILE, errno.ENOMEM}


class JobError(Exception):
    """Base error for the dictionary job, tagged with a category."""

    category: ErrorCategory = ErrorCategory.GENERIC

    def __init__(self, message: str, category: ErrorCategory | None = None):
        super().__init__(message)
        if category is not None:
            self.category = category


class DownloadError(JobError):
    """Archive download failed (non-2xx status or transport error)."""

    category = ErrorCategory.DOWNLOAD

    def __init__(self, message: str, status_code: int | None = None):
        category = ErrorCategory.MISSING_FILE if status_code == 404 else ErrorCategory.DOWNLOAD
        super().__init__(message, category)
        self.status_code = status_code


class DownloadTimeoutError(JobError):
    """Archive download exceeded its time budget."""

    category = ErrorCategory.TIMEOUT


class EmptyArchiveError(JobError):
    """The downloaded archive contained no entries."""

    category = ErrorCategory.EMPTY_ARCHIVE


class DecodeError(JobError):
    """The extracted entry could not be decoded with the selected codec."""

    category = ErrorCategory.DECODE


class DeliveryError(Exception):
    """A follow-up webhook call returned a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"HTTP {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class EnqueueError(Exception):
    """A job descriptor could not be submitted to the queue."""


def classify_exception(exc: BaseException) -> ErrorCategory:
    """Return the category for an exception raised inside a job.

    Tagged JobErrors keep their own category. Untagged built-ins are mapped by
    type only.
    """
    if isinstance(exc, JobError):
        return exc.category
    if isinstance(exc, MemoryError):
        return ErrorCategory.OUT_OF_MEMORY
    if isinstance(exc, FileNotFoundError):
        return ErrorCategory.MISSING_FILE
    if isinstance(exc, TimeoutError):
        return ErrorCategory.TIMEOUT
    if isinstance(exc, OSError) and exc.errno in _EXHAUSTION_ERRNOS:
        return ErrorCategory.RESOURCE_EXHAUSTION
    return ErrorCategory.GENERIC


def user_message(category: ErrorCategory) -> str:
    """Return the apology text shown to the user for a failure category."""
    return USER_MESSAGES.get(category, USER_MESSAGES[ErrorCategory.GENERIC])
