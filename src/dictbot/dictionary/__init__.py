"""Dictionary retrieval and transformation.

Public API:
    run_pipeline(client, workspace, codec, settings) -> DictionaryArtifact
        Download the archive, extract its first entry, and derive the
        filtered text variants inside a per-job workspace.
"""

from dictbot.dictionary.archive import extract_first_entry
from dictbot.dictionary.codec import get_codec, select_codec
from dictbot.dictionary.fetch import fetch_archive
from dictbot.dictionary.pipeline import run_pipeline
from dictbot.dictionary.transform import derive_variant
from dictbot.dictionary.workspace import JobWorkspace

__all__ = [
    "JobWorkspace",
    "derive_variant",
    "extract_first_entry",
    "fetch_archive",
    "get_codec",
    "run_pipeline",
    "select_codec",
]
