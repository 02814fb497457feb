"""Interaction dispatch and the slash command table."""

import logging
from collections.abc import Awaitable, Callable

from fastapi.responses import JSONResponse
from pydantic import ValidationError

from dictbot.errors import EnqueueError
from dictbot.models.interaction import (
    Interaction,
    InteractionResponseType,
    InteractionType,
    message_response,
)
from dictbot.models.job import JobDescriptor
from dictbot.queue.enqueuer import JobEnqueuer

logger = logging.getLogger(__name__)

UNKNOWN_COMMAND = "Unknown command"
ENQUEUE_FAILED = "Failed to start the dictionary download. Please try again later."

CommandHandler = Callable[[Interaction, JobEnqueuer], Awaitable[dict]]


async def ping(interaction: Interaction, enqueuer: JobEnqueuer) -> dict:
    return message_response("Pong! 🏓")


async def hello(interaction: Interaction, enqueuer: JobEnqueuer) -> dict:
    user = interaction.invoker
    name = user.username if user and user.username else "there"
    return message_response(f"Hello, {name}! 👋")


async def get_dictionary(interaction: Interaction, enqueuer: JobEnqueuer) -> dict:
    """Enqueue the dictionary job and defer; the worker answers via follow-up."""
    user = interaction.invoker
    descriptor = JobDescriptor.create(
        application_id=interaction.application_id,
        token=interaction.token,
        user_id=user.id if user else "",
    )
    try:
        await enqueuer.enqueue(descriptor)
    except EnqueueError:
        logger.error("Could not enqueue dictionary job for user %s", descriptor.user_id, exc_info=True)
        return message_response(ENQUEUE_FAILED)
    return {"type": InteractionResponseType.DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE}


COMMANDS: dict[str, CommandHandler] = {
    "ping": ping,
    "hello": hello,
    "get-dictionary": get_dictionary,
}


async def handle_interaction(payload: dict, enqueuer: JobEnqueuer) -> JSONResponse:
    """Dispatch a verified interaction based on its type.

    - PING: acknowledge the handshake
    - APPLICATION_COMMAND: run the named command (unknown names get a message)
    - anything else: 400
    """
    interaction_type = payload.get("type")

    if interaction_type == InteractionType.PING:
        return JSONResponse({"type": InteractionResponseType.PONG})

    if interaction_type == InteractionType.APPLICATION_COMMAND:
        try:
            interaction = Interaction.model_validate(payload)
        except ValidationError:
            logger.warning("Malformed application command payload", exc_info=True)
            return JSONResponse({"error": "Malformed interaction"}, status_code=400)

        handler = COMMANDS.get(interaction.command_name)
        if handler is None:
            logger.info("Unknown command: %s", interaction.command_name)
            return JSONResponse(message_response(UNKNOWN_COMMAND))

        logger.info("Dispatching command %s", interaction.command_name)
        return JSONResponse(await handler(interaction, enqueuer))

    logger.warning("Unknown interaction type: %r", interaction_type)
    return JSONResponse({"error": "Unknown interaction type"}, status_code=400)
