"""Single-entry extraction from the downloaded dictionary archive."""

import asyncio
import logging
import shutil
import zipfile
from pathlib import Path

from dictbot.errors import EmptyArchiveError, JobError

logger = logging.getLogger(__name__)


async def extract_first_entry(archive_path: Path, dest: Path) -> Path:
    """Extract the first listed archive entry to ``dest``.

    The upstream URL ends in .txt but serves a zip; this is expected.
    zipfile is synchronous, so the work runs in a thread.
    """
    try:
        name = await asyncio.to_thread(_extract, archive_path, dest)
    except BaseException:
        dest.unlink(missing_ok=True)
        raise
    logger.info("Extracted %s (%d bytes)", name, dest.stat().st_size)
    return dest


def _extract(archive_path: Path, dest: Path) -> str:
    try:
        with zipfile.ZipFile(archive_path) as archive:
            entries = [info for info in archive.infolist() if not info.is_dir()]
            if not entries:
                raise EmptyArchiveError("Archive contains no entries")
            first = entries[0]
            with archive.open(first) as src, dest.open("wb") as out:
                shutil.copyfileobj(src, out)
            return first.filename
    except zipfile.BadZipFile as exc:
        raise JobError(f"Downloaded file is not a valid archive: {exc}") from exc
