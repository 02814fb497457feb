"""Dictionary job pipeline: download -> extract -> derive variants."""

import logging

import httpx

from dictbot.config import DICTIONARY_URL, Settings
from dictbot.dictionary.archive import extract_first_entry
from dictbot.dictionary.codec import TextCodec
from dictbot.dictionary.fetch import fetch_archive
from dictbot.dictionary.transform import derive_variant
from dictbot.dictionary.workspace import JobWorkspace
from dictbot.models.artifact import Artifact, DictionaryArtifact, VariantKind

logger = logging.getLogger(__name__)

VARIANT_LABELS: dict[VariantKind, str] = {
    VariantKind.BY_SOURCE: "Grouped by source language",
    VariantKind.BY_TARGET: "Grouped by target language",
}


async def run_pipeline(
    client: httpx.AsyncClient,
    workspace: JobWorkspace,
    codec: TextCodec,
    settings: Settings,
    url: str = DICTIONARY_URL,
) -> DictionaryArtifact:
    """Produce the archive, the extracted entry, and every derived variant.

    All files land inside ``workspace``; the caller owns cleanup. Errors from
    any stage propagate unchanged.
    """
    archive_path = await fetch_archive(
        client, url, workspace.archive_path, settings.download_timeout_seconds
    )
    extracted_path = await extract_first_entry(archive_path, workspace.extracted_path)

    variants: list[Artifact] = []
    for kind in VariantKind:
        path = await derive_variant(
            extracted_path,
            kind,
            workspace.variant_path(kind),
            codec,
            batch_lines=settings.transcode_batch_lines,
            progress_interval=settings.progress_interval_lines,
        )
        variants.append(_artifact(VARIANT_LABELS[kind], path))

    artifact = DictionaryArtifact(
        archive=_artifact("Archive", archive_path),
        original=_artifact("Original text", extracted_path),
        variants=variants,
    )
    logger.info(
        "Pipeline produced %d file(s) in %s", len(artifact.all_files()), workspace.root
    )
    return artifact


def _artifact(label: str, path) -> Artifact:
    return Artifact(label=label, path=path, size_bytes=path.stat().st_size)
