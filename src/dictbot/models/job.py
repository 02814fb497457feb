"""Queue job descriptor and delivery metadata models."""

from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class JobDescriptor(BaseModel):
    """The message body enqueued for one get-dictionary invocation.

    Serialized as ``{applicationId, token, userId, timestamp}``. ``enqueuedAt``
    is accepted on input as an alias of ``timestamp``.
    """

    model_config = ConfigDict(populate_by_name=True)

    application_id: str = Field(alias="applicationId")
    token: str
    user_id: str = Field(alias="userId")
    enqueued_at: str = Field(
        alias="timestamp",
        validation_alias=AliasChoices("timestamp", "enqueuedAt"),
    )

    @classmethod
    def create(cls, application_id: str, token: str, user_id: str) -> "JobDescriptor":
        """Build a descriptor stamped with the current UTC time (ISO-8601)."""
        return cls(
            application_id=application_id,
            token=token,
            user_id=user_id,
            enqueued_at=datetime.now(timezone.utc).isoformat(),
        )

    @property
    def logical_key(self) -> str:
        """Identity of the user request, independent of physical redelivery."""
        return f"{self.user_id}:{self.enqueued_at}"

    def to_message_body(self) -> str:
        return self.model_dump_json(by_alias=True)


class QueueRecord(BaseModel):
    """One physical delivery of a queue message."""

    message_id: str
    body: str
    receive_count: int = 1

    @classmethod
    def from_sqs(cls, record: dict) -> "QueueRecord":
        """Build from a Lambda SQS event record."""
        attributes = record.get("attributes") or {}
        try:
            receive_count = int(attributes.get("ApproximateReceiveCount", "1"))
        except (TypeError, ValueError):
            receive_count = 1
        return cls(
            message_id=record.get("messageId", ""),
            body=record.get("body", ""),
            receive_count=receive_count,
        )
