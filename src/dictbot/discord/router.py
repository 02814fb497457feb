"""Discord interactions webhook router with signature verification."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from dictbot.discord.handlers import handle_interaction
from dictbot.discord.verification import verify_discord_request
from dictbot.queue.enqueuer import JobEnqueuer, get_job_enqueuer

router = APIRouter(prefix="", tags=["discord"])


@router.post("/interactions")
async def interactions(
    payload: dict = Depends(verify_discord_request),
    enqueuer: JobEnqueuer = Depends(get_job_enqueuer),
) -> JSONResponse:
    """Receive Discord interaction webhooks.

    Always answers within the request: long-running commands are deferred
    and completed by the queue worker.
    """
    return await handle_interaction(payload, enqueuer)
