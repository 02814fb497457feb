"""Shared test fixtures."""

import io
import zipfile

import pytest
from fastapi.testclient import TestClient
from nacl.signing import SigningKey

from dictbot.app import app
from dictbot.config import Settings, get_settings
from dictbot.dictionary.codec import reset_codec
from dictbot.queue.enqueuer import reset_enqueuer
from dictbot.worker.handler import reset_dedup_record

TIMESTAMP = "1700000000"


@pytest.fixture(scope="session")
def client() -> TestClient:
    """Create a TestClient for the FastAPI app."""
    return TestClient(app)


@pytest.fixture(autouse=True)
def _reset_singletons():
    """Drop cached settings, clients and warm-environment state between tests."""
    _reset()
    yield
    _reset()
    app.dependency_overrides.clear()


def _reset() -> None:
    get_settings.cache_clear()
    reset_enqueuer()
    reset_dedup_record()
    reset_codec()


@pytest.fixture
def signing_key() -> SigningKey:
    return SigningKey.generate()


@pytest.fixture
def public_key_hex(signing_key: SigningKey) -> str:
    return signing_key.verify_key.encode().hex()


@pytest.fixture
def sign(signing_key: SigningKey):
    """Return a helper producing Discord signature headers for a raw body."""

    def _sign(body: bytes, timestamp: str = TIMESTAMP) -> dict:
        signature = signing_key.sign(timestamp.encode() + body).signature.hex()
        return {
            "X-Signature-Ed25519": signature,
            "X-Signature-Timestamp": timestamp,
            "Content-Type": "application/json",
        }

    return _sign


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the environment with scratch files under tmp_path."""
    return Settings(
        _env_file=None,
        discord_public_key="",
        discord_api_base="https://discord.test/api/v10",
        job_queue_url="https://sqs.test/queue",
        scratch_root=str(tmp_path),
        transcode_batch_lines=2,
        progress_interval_lines=4,
    )


def build_zip(entries: dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


@pytest.fixture
def make_zip():
    """Return a helper building an in-memory zip archive."""
    return build_zip


@pytest.fixture
def dictionary_bytes() -> bytes:
    """A small cp932-encoded dictionary with bracketed glosses."""
    text = "犬【dog】\r\n猫【cat】 名詞\r\n# comment line\r\n鳥【bird】\r\n"
    return text.encode("cp932")
