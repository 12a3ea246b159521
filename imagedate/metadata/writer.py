import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import List, Sequence

from tqdm import tqdm

from .. import config
from ..exceptions import MetadataWriteError
from ..models import ImageEntry
from ..scanning.filesystem import normalize_directory
from ..sequencer import format_exif_datetime

# Stage names, reported in MetadataWriteError
ALL_DATES_BASE = "all-dates baseline"
ALL_DATES_SEQUENCE = "all-dates sequence"
DIGITIZED_COPY = "digitized date copy"
METADATA_DATE_COPY = "metadata date copy"


class MetadataWriter:
    """
    Drives 'exiftool' to write the sequence into embedded metadata.
    Must be installed and on the system PATH.

    Every call overwrites in place (-overwrite_original, no backups) and
    preserves the file modification time set earlier (-P).
    """

    BASE_ARGS = ["-overwrite_original", "-P"]

    def __init__(self, exiftool: str = config.EXIFTOOL, timeout: int = config.EXIFTOOL_TIMEOUT):
        self.exiftool = exiftool
        self.timeout = timeout

    def apply(self, directory: Path, entries: Sequence[ImageEntry], timestamps: Sequence[datetime]):
        """
        Runs the four exiftool stages in order. The first failure aborts;
        nothing already written is rolled back.
        """
        if not entries:
            logging.info("No images found. Nothing to write.")
            return

        self.set_baseline(entries, timestamps[0])
        self.set_sequence(entries, timestamps)
        self.copy_create_date(directory, config.DIGITIZED_TAG, DIGITIZED_COPY)
        self.copy_create_date(directory, config.METADATA_DATE_TAG, METADATA_DATE_COPY)

    def set_baseline(self, entries: Sequence[ImageEntry], base: datetime):
        """Gives every entry the same base date so each file has a complete set of dates."""
        value = format_exif_datetime(base)
        logging.info(f"Setting all dates to {value} on {len(entries)} files...")
        self._run(ALL_DATES_BASE,
                  [f"-{config.ALL_DATES_TAG}={value}"] + [_path_arg(e.path) for e in entries])

    def set_sequence(self, entries: Sequence[ImageEntry], timestamps: Sequence[datetime]):
        """Writes each entry's own timestamp, one exiftool call per file."""
        for entry in tqdm(entries, desc="Writing dates", leave=False, disable=None):
            value = format_exif_datetime(timestamps[entry.rank])
            logging.debug(f"{entry.path.name} -> {value}")
            self._run(ALL_DATES_SEQUENCE,
                      [f"-{config.ALL_DATES_TAG}={value}", _path_arg(entry.path)])

    def copy_create_date(self, directory: Path, target_tag: str, stage: str):
        """
        Copies CreateDate into `target_tag`. Recurses into subdirectories,
        unlike the ranking, which only looks at the top level.
        """
        logging.info(f"Copying {config.CREATE_DATE_TAG} to {target_tag}...")
        self._run(stage, ["-r", f"-{target_tag}<{config.CREATE_DATE_TAG}", _path_arg(directory)])

    def _run(self, stage: str, args: List[str]):
        cmd = [self.exiftool] + self.BASE_ARGS + args
        logging.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, capture_output=True, text=True, timeout=self.timeout)
        except FileNotFoundError:
            raise MetadataWriteError(stage, f"'{self.exiftool}' not found on PATH") from None
        except subprocess.TimeoutExpired:
            raise MetadataWriteError(stage, f"timed out after {self.timeout}s") from None

        if result.returncode != 0:
            detail = (result.stderr or "").strip().splitlines()
            raise MetadataWriteError(
                stage,
                detail[-1] if detail else f"exit status {result.returncode}",
            )
        return result


def _path_arg(path: Path) -> str:
    """Keeps relative paths starting with './' so exiftool never reads them as options."""
    return normalize_directory(str(path))
