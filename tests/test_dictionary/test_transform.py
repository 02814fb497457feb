"""Tests for bracket filters and chunked transcoding."""

import io
import logging

import pytest

from dictbot.dictionary.codec import FallbackCodec, LegacyCodec
from dictbot.dictionary.transform import (
    derive_variant,
    iter_line_batches,
    strip_gloss,
    strip_headword,
    transcode,
)
from dictbot.errors import DecodeError, ErrorCategory
from dictbot.models.artifact import VariantKind

EXPECTED_BY_SOURCE = "犬\r\n猫 名詞\r\n# comment line\r\n鳥\r\n"
EXPECTED_BY_TARGET = "dog\r\ncat 名詞\r\n# comment line\r\nbird\r\n"


# -- Filters --


def test_strip_gloss_keeps_head_word():
    assert strip_gloss("犬【dog】") == "犬"


def test_strip_gloss_keeps_trailing_text():
    assert strip_gloss("猫【cat】 名詞") == "猫 名詞"


def test_strip_headword_keeps_gloss():
    assert strip_headword("犬【dog】") == "dog"


def test_strip_headword_applies_per_line():
    assert strip_headword("犬【dog】\n猫【cat】\n") == "dog\ncat\n"


def test_filters_do_not_cross_lines():
    text = "open【unterminated\nclosed】 here\n"
    assert strip_gloss(text) == text
    assert strip_headword(text) == text


def test_lines_without_brackets_pass_through():
    assert strip_gloss("plain line") == "plain line"
    assert strip_headword("plain line") == "plain line"


# -- Batching --


def test_iter_line_batches_groups_lines():
    batches = list(iter_line_batches(b"a\nb\nc", 2))
    assert batches == [(b"a\nb\n", 2), (b"c", 1)]


def test_iter_line_batches_trailing_newline():
    assert list(iter_line_batches(b"a\nb\n", 2)) == [(b"a\nb\n", 2)]


def test_iter_line_batches_empty():
    assert list(iter_line_batches(b"", 10)) == []


def test_iter_line_batches_rejects_zero():
    with pytest.raises(ValueError):
        list(iter_line_batches(b"a", 0))


def test_batches_reassemble_to_input(dictionary_bytes: bytes):
    chunks = [chunk for chunk, _ in iter_line_batches(dictionary_bytes, 3)]
    assert b"".join(chunks) == dictionary_bytes


def test_transcode_logs_progress(dictionary_bytes: bytes, caplog: pytest.LogCaptureFixture):
    out = io.BytesIO()
    with caplog.at_level(logging.INFO, logger="dictbot.dictionary.transform"):
        lines = transcode(dictionary_bytes, out, LegacyCodec(), strip_gloss, batch_lines=1, progress_interval=2)

    assert lines == 4
    assert "Transcoded 2 lines" in caplog.text
    assert "Transcoded 4 lines" in caplog.text


def test_transcode_batch_size_does_not_change_output(dictionary_bytes: bytes):
    outputs = set()
    for batch_lines in (1, 2, 3, 100):
        out = io.BytesIO()
        transcode(dictionary_bytes, out, LegacyCodec(), strip_headword, batch_lines=batch_lines)
        outputs.add(out.getvalue())
    assert len(outputs) == 1


# -- derive_variant --


async def test_derive_by_source(tmp_path, dictionary_bytes: bytes):
    source = tmp_path / "dictionary.txt"
    source.write_bytes(dictionary_bytes)
    dest = tmp_path / "by_source.txt"

    await derive_variant(source, VariantKind.BY_SOURCE, dest, LegacyCodec(), batch_lines=2)

    assert dest.read_bytes() == EXPECTED_BY_SOURCE.encode("cp932")


async def test_derive_by_target(tmp_path, dictionary_bytes: bytes):
    source = tmp_path / "dictionary.txt"
    source.write_bytes(dictionary_bytes)
    dest = tmp_path / "by_target.txt"

    await derive_variant(source, VariantKind.BY_TARGET, dest, LegacyCodec(), batch_lines=2)

    assert dest.read_bytes() == EXPECTED_BY_TARGET.encode("cp932")


async def test_derive_is_deterministic(tmp_path, dictionary_bytes: bytes):
    source = tmp_path / "dictionary.txt"
    source.write_bytes(dictionary_bytes)
    first = tmp_path / "first.txt"
    second = tmp_path / "second.txt"

    await derive_variant(source, VariantKind.BY_TARGET, first, LegacyCodec())
    await derive_variant(source, VariantKind.BY_TARGET, second, LegacyCodec())

    assert first.read_bytes() == second.read_bytes()


async def test_derive_with_fallback_codec_copies_bytes(
    tmp_path, dictionary_bytes: bytes, caplog: pytest.LogCaptureFixture
):
    source = tmp_path / "dictionary.txt"
    source.write_bytes(dictionary_bytes)
    dest = tmp_path / "by_source.txt"

    with caplog.at_level(logging.WARNING, logger="dictbot.dictionary.transform"):
        await derive_variant(source, VariantKind.BY_SOURCE, dest, FallbackCodec())

    assert dest.read_bytes() == dictionary_bytes
    assert "fallback codec" in caplog.text


async def test_derive_decode_failure_removes_output(tmp_path):
    source = tmp_path / "dictionary.txt"
    source.write_bytes("犬【dog】\n".encode("cp932") + b"\x81\n")
    dest = tmp_path / "by_source.txt"

    with pytest.raises(DecodeError) as info:
        await derive_variant(source, VariantKind.BY_SOURCE, dest, LegacyCodec(), batch_lines=1)

    assert info.value.category == ErrorCategory.DECODE
    assert not dest.exists()


async def test_derive_missing_source_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        await derive_variant(
            tmp_path / "absent.txt", VariantKind.BY_SOURCE, tmp_path / "out.txt", LegacyCodec()
        )
