"""Discord interaction payload and response models."""

from enum import IntEnum

from pydantic import BaseModel, ConfigDict


class InteractionType(IntEnum):
    """Inbound interaction types handled by the webhook."""

    PING = 1
    APPLICATION_COMMAND = 2


class InteractionResponseType(IntEnum):
    """Callback types the webhook answers with."""

    PONG = 1
    CHANNEL_MESSAGE_WITH_SOURCE = 4
    DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE = 5


class InteractionUser(BaseModel):
    """The invoking Discord user (only the fields we read)."""

    model_config = ConfigDict(extra="ignore")

    id: str
    username: str = ""


class InteractionMember(BaseModel):
    """Guild member wrapper; present instead of `user` for guild invocations."""

    model_config = ConfigDict(extra="ignore")

    user: InteractionUser | None = None


class InteractionData(BaseModel):
    """Command data for an application command interaction."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""


class Interaction(BaseModel):
    """A parsed inbound interaction. Raw body and signature headers are never stored here."""

    model_config = ConfigDict(extra="ignore")

    type: int
    application_id: str = ""
    token: str = ""
    data: InteractionData | None = None
    user: InteractionUser | None = None
    member: InteractionMember | None = None

    @property
    def command_name(self) -> str:
        return self.data.name if self.data else ""

    @property
    def invoker(self) -> InteractionUser | None:
        """Guild invocations carry the user under `member`, DMs under `user`."""
        if self.member and self.member.user:
            return self.member.user
        return self.user


def message_response(content: str) -> dict:
    """Build an immediate channel-message callback body."""
    return {
        "type": InteractionResponseType.CHANNEL_MESSAGE_WITH_SOURCE,
        "data": {"content": content},
    }
