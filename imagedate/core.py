import logging
from pathlib import Path
from typing import Optional, Union

from .exceptions import ConfigurationError
from .models import RunSummary, SequenceConfig
from .scanning.filesystem import DirectoryScanner
from .sequencer import format_exif_datetime, sequence_timestamps
from .organization.touch import FileTimestamper
from .metadata.writer import MetadataWriter
from .metadata.extract import MetadataExtractor, verify_entries


class ImageDateApp:
    def __init__(self,
                 scanner: Optional[DirectoryScanner] = None,
                 timestamper: Optional[FileTimestamper] = None,
                 writer: Optional[MetadataWriter] = None,
                 extractor: Optional[MetadataExtractor] = None):
        self.scanner = scanner or DirectoryScanner()
        self.timestamper = timestamper or FileTimestamper()
        self.writer = writer or MetadataWriter()
        self.extractor = extractor or MetadataExtractor()

    def run(self, directory: Union[str, Path], seq_config: SequenceConfig, verify: bool = False) -> RunSummary:
        """
        Executes the dating pipeline.
        1. Resolve (rank images by filename)
        2. Sequence (base + rank * interval)
        3. Touch (file-system times in rank order)
        4. Write (embedded metadata via exiftool)
        5. Verify (optional read-back)
        """
        root = Path(directory)

        # --- Step 1: Resolve ---
        entries = self.scanner.resolve(root)

        # --- Step 2: Sequence ---
        # Fails before anything is touched if the last date is past year 9999
        try:
            timestamps = sequence_timestamps(seq_config, entries)
        except OverflowError:
            raise ConfigurationError(
                f"{len(entries)} images starting at {format_exif_datetime(seq_config.base_datetime)} "
                f"every {seq_config.interval} run past the last representable date"
            ) from None
        summary = RunSummary(directory=root, entries=entries, timestamps=timestamps)

        if not entries:
            logging.info(f"No images found in {root}.")
            return summary

        logging.info(
            f"Dating {len(entries)} images from {format_exif_datetime(timestamps[0])} "
            f"every {seq_config.interval}..."
        )

        # --- Step 3: File-system times ---
        self.timestamper.apply(entries)

        # --- Step 4: Embedded metadata ---
        self.writer.apply(root, entries, timestamps)

        # --- Step 5: Verify ---
        if verify:
            verify_entries(entries, timestamps, self.extractor)
            summary.verified = True

        logging.info(f"Last image dated {format_exif_datetime(timestamps[-1])}.")
        return summary
