"""Ephemeral files produced by one dictionary job."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel


class VariantKind(str, Enum):
    """Derived text variants, in delivery order."""

    BY_SOURCE = "by_source"  # head words kept, gloss annotation stripped
    BY_TARGET = "by_target"  # gloss kept, head-word bracket stripped


class Artifact(BaseModel):
    """A single file on local scratch storage."""

    label: str
    path: Path
    size_bytes: int


class DictionaryArtifact(BaseModel):
    """Everything the pipeline produced for one job."""

    archive: Artifact
    original: Artifact
    variants: list[Artifact] = []

    def all_files(self) -> list[Artifact]:
        return [self.archive, self.original, *self.variants]
