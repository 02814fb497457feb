"""Discord ingress: signature verification, interaction dispatch, and follow-ups."""

from dictbot.discord.handlers import COMMANDS, handle_interaction
from dictbot.discord.notifier import DeliveryMode, FollowupNotifier
from dictbot.discord.router import router
from dictbot.discord.verification import verify_discord_request, verify_signature

__all__ = [
    "COMMANDS",
    "DeliveryMode",
    "FollowupNotifier",
    "handle_interaction",
    "router",
    "verify_discord_request",
    "verify_signature",
]
