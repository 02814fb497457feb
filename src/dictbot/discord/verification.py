"""Discord request signature verification (Ed25519) and its FastAPI dependency."""

import json
import logging

from fastapi import HTTPException, Request
from nacl.exceptions import CryptoError
from nacl.signing import VerifyKey

from dictbot.config import get_settings

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"


def verify_signature(
    signature: str | None,
    timestamp: str | None,
    body: bytes | str | None,
    public_key: str | None,
) -> bool:
    """Check an Ed25519 signature over ``timestamp || body``.

    Returns False for absent or malformed inputs and for failed checks; never
    raises. ``body`` must be the exact bytes Discord sent.
    """
    if not signature or not timestamp or not public_key or body is None:
        return False
    raw = body.encode("utf-8") if isinstance(body, str) else body
    try:
        verify_key = VerifyKey(bytes.fromhex(public_key))
        verify_key.verify(timestamp.encode("utf-8") + raw, bytes.fromhex(signature))
    except (CryptoError, ValueError, TypeError):
        return False
    return True


async def verify_discord_request(request: Request) -> dict:
    """Verify the request signature and return the parsed interaction payload.

    Reads the raw body FIRST so the signature is checked against the exact
    bytes Discord signed. The body is not parsed unless the check passes.

    Raises HTTPException(401) on a bad signature, 400 on a non-JSON body.
    """
    settings = get_settings()
    body = await request.body()

    signature = request.headers.get(SIGNATURE_HEADER, "")
    timestamp = request.headers.get(TIMESTAMP_HEADER, "")

    if not verify_signature(signature, timestamp, body, settings.discord_public_key):
        logger.warning("Rejected interaction with invalid signature")
        raise HTTPException(status_code=401, detail="Invalid request signature")

    try:
        payload = json.loads(body)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Malformed interaction body") from exc
    if not isinstance(payload, dict):
        raise HTTPException(status_code=400, detail="Malformed interaction body")
    return payload
