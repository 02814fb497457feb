"""Slash command definitions and their registration call.

Registration runs outside the webhook, from a deploy step:

    python -m dictbot.discord.commands
"""

import asyncio
import logging

import httpx

from dictbot.config import get_settings
from dictbot.logging_config import configure_logging

logger = logging.getLogger(__name__)

APPLICATION_COMMANDS: list[dict] = [
    {"name": "ping", "description": "Ping the bot"},
    {"name": "hello", "description": "Say hello to a user"},
    {"name": "get-dictionary", "description": "Fetch and convert the Japanese-English dictionary"},
]


async def register_commands(
    client: httpx.AsyncClient,
    application_id: str,
    bot_token: str,
    api_base: str = "https://discord.com/api/v10",
) -> list[dict]:
    """Overwrite the application's global commands with APPLICATION_COMMANDS.

    Returns the registered command objects. Raises httpx.HTTPStatusError on
    a non-2xx response.
    """
    if not application_id or not bot_token:
        raise ValueError("application_id and bot_token are required")

    response = await client.put(
        f"{api_base.rstrip('/')}/applications/{application_id}/commands",
        headers={"Authorization": f"Bot {bot_token}"},
        json=APPLICATION_COMMANDS,
    )
    if not response.is_success:
        logger.error("Command registration failed: %s %s", response.status_code, response.text)
    response.raise_for_status()
    registered = response.json()
    logger.info("Registered %d command(s)", len(registered))
    return registered


async def _main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level, settings.environment)
    async with httpx.AsyncClient(timeout=httpx.Timeout(10.0)) as client:
        await register_commands(
            client,
            settings.discord_application_id,
            settings.discord_bot_token,
            settings.discord_api_base,
        )


if __name__ == "__main__":
    asyncio.run(_main())
