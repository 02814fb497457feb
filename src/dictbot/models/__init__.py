"""Data models for interactions, queue jobs, and job artifacts."""

from dictbot.models.artifact import Artifact, DictionaryArtifact, VariantKind
from dictbot.models.interaction import (
    Interaction,
    InteractionResponseType,
    InteractionType,
    InteractionUser,
    message_response,
)
from dictbot.models.job import JobDescriptor, QueueRecord

__all__ = [
    "Artifact",
    "DictionaryArtifact",
    "VariantKind",
    "Interaction",
    "InteractionResponseType",
    "InteractionType",
    "InteractionUser",
    "message_response",
    "JobDescriptor",
    "QueueRecord",
]
