"""Text codecs for the legacy Japanese dictionary encoding.

The dictionary is distributed as Shift_JIS (Microsoft cp932 variant). The
codec is chosen once by a capability probe: if the runtime ships cp932 we use
it, otherwise we degrade to a byte-preserving latin-1 codec. In fallback mode
the bracket filters cannot match Japanese markers, so derived variants are
byte-identical copies of the source.
"""

import codecs
import logging
from typing import Protocol

logger = logging.getLogger(__name__)

LEGACY_ENCODING = "cp932"
FALLBACK_ENCODING = "latin-1"


class TextCodec(Protocol):
    """Decode/encode pair used by the transcoder."""

    name: str
    lossless_filtering: bool

    def decode(self, data: bytes) -> str: ...

    def encode(self, text: str) -> bytes: ...


class LegacyCodec:
    """Full Shift_JIS codec. Decoding is strict."""

    lossless_filtering = True

    def __init__(self, encoding: str = LEGACY_ENCODING):
        self.name = encoding

    def decode(self, data: bytes) -> str:
        return data.decode(self.name)

    def encode(self, text: str) -> bytes:
        return text.encode(self.name)


class FallbackCodec:
    """Byte-preserving codec: every byte maps to exactly one code point."""

    lossless_filtering = False

    def __init__(self):
        self.name = FALLBACK_ENCODING

    def decode(self, data: bytes) -> str:
        return data.decode(self.name)

    def encode(self, text: str) -> bytes:
        return text.encode(self.name)


def legacy_codec_available(encoding: str = LEGACY_ENCODING) -> bool:
    """Probe whether the runtime can transcode the legacy encoding."""
    try:
        codecs.lookup(encoding)
    except LookupError:
        return False
    return True


def select_codec(encoding: str = LEGACY_ENCODING) -> TextCodec:
    """Pick the codec for this process."""
    if legacy_codec_available(encoding):
        return LegacyCodec(encoding)
    logger.warning(
        "Codec %s unavailable; falling back to %s. Bracket filtering will be a no-op.",
        encoding,
        FALLBACK_ENCODING,
    )
    return FallbackCodec()


_codec: TextCodec | None = None


def get_codec() -> TextCodec:
    """Return the process-wide codec, probing on first use."""
    global _codec
    if _codec is None:
        _codec = select_codec()
    return _codec


def reset_codec() -> None:
    """Reset the cached codec. Used for testing."""
    global _codec
    _codec = None
