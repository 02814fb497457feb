"""Per-job scratch directory for ephemeral dictionary files."""

import logging
import shutil
import tempfile
from pathlib import Path

from dictbot.models.artifact import VariantKind

logger = logging.getLogger(__name__)


class JobWorkspace:
    """A unique directory holding every file one job creates.

    Paths are fixed names inside a per-job directory, so concurrent jobs on
    the same host never collide. ``cleanup()`` removes the files and the
    directory and is safe to call more than once.
    """

    def __init__(self, root: Path):
        self.root = root

    @classmethod
    def create(cls, base_dir: str | None = None, prefix: str = "dictjob-") -> "JobWorkspace":
        root = Path(tempfile.mkdtemp(prefix=prefix, dir=base_dir or None))
        logger.debug("Created job workspace %s", root)
        return cls(root)

    @property
    def archive_path(self) -> Path:
        return self.root / "dictionary.zip"

    @property
    def extracted_path(self) -> Path:
        return self.root / "dictionary.txt"

    def variant_path(self, kind: VariantKind) -> Path:
        return self.root / f"dictionary_{kind.value}.txt"

    def cleanup(self) -> None:
        """Delete all files created for this job.

        Removal errors are logged, not raised.
        """
        if not self.root.exists():
            return
        removed = 0
        try:
            for path in self.root.iterdir():
                if path.is_file():
                    path.unlink(missing_ok=True)
                    removed += 1
        except OSError:
            logger.warning("Failed to remove files in %s", self.root, exc_info=True)
        shutil.rmtree(self.root, ignore_errors=True)
        logger.info("Cleaned up %d file(s) in %s", removed, self.root)

    def __enter__(self) -> "JobWorkspace":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cleanup()
