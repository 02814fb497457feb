"""Chunked transcoding of the dictionary into filtered text variants.

Entry lines carry a bracketed segment delimited by 【 and 】:

    head word【gloss】

BY_SOURCE drops the bracketed gloss and keeps the head word. BY_TARGET drops
the head word and the brackets and keeps the gloss. Text after 】 is kept by
both; lines without brackets pass through unchanged.

The source file is read into memory as raw bytes, then decoded, filtered and
re-encoded one batch of lines at a time so the decoded text and encoded output
of the whole file never coexist.
"""

import asyncio
import logging
import re
from collections.abc import Callable, Iterator
from pathlib import Path

from dictbot.dictionary.codec import TextCodec
from dictbot.errors import DecodeError, ErrorCategory, JobError
from dictbot.models.artifact import VariantKind

logger = logging.getLogger(__name__)

GLOSS_SEGMENT = re.compile(r"【[^】\r\n]*】")
HEADWORD_PREFIX = re.compile(r"^[^【\r\n]*【([^】\r\n]*)】", re.MULTILINE)


def strip_gloss(text: str) -> str:
    """Remove every 【...】 segment, keeping the head word."""
    return GLOSS_SEGMENT.sub("", text)


def strip_headword(text: str) -> str:
    """Replace ``head【gloss】`` at the start of each line with ``gloss``."""
    return HEADWORD_PREFIX.sub(r"\1", text)


FILTERS: dict[VariantKind, Callable[[str], str]] = {
    VariantKind.BY_SOURCE: strip_gloss,
    VariantKind.BY_TARGET: strip_headword,
}


def iter_line_batches(data: bytes, batch_lines: int) -> Iterator[tuple[bytes, int]]:
    """Yield ``(chunk, line_count)`` slices of ``data`` split on newlines.

    Splitting on LF is safe for Shift_JIS: 0x0A never appears as a trail byte.
    """
    if batch_lines < 1:
        raise ValueError("batch_lines must be positive")
    start = 0
    total = len(data)
    while start < total:
        end = start
        lines = 0
        while lines < batch_lines and end < total:
            newline = data.find(b"\n", end)
            end = total if newline == -1 else newline + 1
            lines += 1
        yield data[start:end], lines
        start = end


def transcode(
    data: bytes,
    out,
    codec: TextCodec,
    line_filter: Callable[[str], str],
    batch_lines: int = 5000,
    progress_interval: int = 50000,
) -> int:
    """Decode, filter and re-encode ``data`` batch by batch into ``out``.

    Returns the number of lines processed.
    """
    processed = 0
    next_report = progress_interval
    for chunk, count in iter_line_batches(data, batch_lines):
        try:
            text = codec.decode(chunk)
        except UnicodeDecodeError as exc:
            raise DecodeError(
                f"Could not decode line {processed + 1}+ as {codec.name}: {exc.reason}"
            ) from exc
        out.write(codec.encode(line_filter(text)))
        processed += count
        if progress_interval and processed >= next_report:
            logger.info("Transcoded %d lines", processed)
            next_report = (processed // progress_interval + 1) * progress_interval
    return processed


async def derive_variant(
    source_path: Path,
    kind: VariantKind,
    dest: Path,
    codec: TextCodec,
    batch_lines: int = 5000,
    progress_interval: int = 50000,
) -> Path:
    """Write the ``kind`` variant of ``source_path`` to ``dest``."""
    if not codec.lossless_filtering:
        logger.warning(
            "Deriving %s with fallback codec %s; output will equal the source bytes",
            kind.value,
            codec.name,
        )
    try:
        lines = await asyncio.to_thread(
            _derive, source_path, dest, codec, FILTERS[kind], batch_lines, progress_interval
        )
    except BaseException:
        dest.unlink(missing_ok=True)
        raise
    logger.info("Derived %s variant: %d lines, %d bytes", kind.value, lines, dest.stat().st_size)
    return dest


def _derive(
    source_path: Path,
    dest: Path,
    codec: TextCodec,
    line_filter: Callable[[str], str],
    batch_lines: int,
    progress_interval: int,
) -> int:
    try:
        data = source_path.read_bytes()
        with dest.open("wb") as out:
            return transcode(data, out, codec, line_filter, batch_lines, progress_interval)
    except MemoryError as exc:
        raise JobError(
            f"Out of memory deriving variant from {source_path.name}",
            ErrorCategory.OUT_OF_MEMORY,
        ) from exc
