import json
import logging
import subprocess
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

import exifread

from .. import config
from ..exceptions import VerificationError
from ..models import EmbeddedDates, ImageEntry
from ..sequencer import format_exif_datetime


class MetadataExtractor:
    """
    Reads embedded dates back out of an image.

    Strategies:
      - EXIF dates: 'exifread' (fast, Python-native).
      - XMP dates: 'exiftool' JSON output (exifread does not parse XMP).
    """

    def __init__(self, exiftool: str = config.EXIFTOOL):
        self.exiftool = exiftool

    def read_dates(self, path: Path) -> EmbeddedDates:
        dates = EmbeddedDates(**self.get_exif_dates(path))
        xmp = self.get_xmp_dates(path)
        dates.digitized = xmp.get('digitized')
        dates.metadata_date = xmp.get('metadata_date')
        return dates

    def get_exif_dates(self, path: Path) -> Dict[str, Optional[datetime]]:
        """Returns the AllDates trio (original, create, modify) from EXIF."""
        result: Dict[str, Optional[datetime]] = {k: None for k in config.EXIF_DATE_TAGS}
        try:
            with path.open('rb') as f:
                # details=False skips makernotes and thumbnails
                tags = exifread.process_file(f, details=False)
        except OSError as e:
            logging.warning(f"ExifRead failed for {path}: {e}")
            return result

        for key, tag in config.EXIF_DATE_TAGS.items():
            if tag in tags:
                result[key] = self._parse_exif_date(str(tags[tag]))
        return result

    def get_xmp_dates(self, path: Path) -> Dict[str, Optional[datetime]]:
        """
        Wraps 'exiftool -j -G1' to fetch the XMP digitized and metadata dates.
        """
        cmd = [
            self.exiftool, "-j", "-G1",
            f"-{config.DIGITIZED_TAG}",
            f"-{config.METADATA_DATE_TAG}",
            str(path),
        ]
        try:
            out = subprocess.check_output(cmd, stderr=subprocess.DEVNULL, text=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise VerificationError(f"Could not read XMP dates from {path}: {e}") from e
        data_list = json.loads(out)

        data: Dict[str, Any] = {'digitized': None, 'metadata_date': None}
        if not data_list:
            return data

        tags = data_list[0]
        data['digitized'] = self._parse_exif_date(tags.get(config.DIGITIZED_TAG))
        data['metadata_date'] = self._parse_exif_date(tags.get(config.METADATA_DATE_TAG))
        return data

    def _parse_exif_date(self, value) -> Optional[datetime]:
        """
        Parses "YYYY:MM:DD HH:MM:SS", ignoring sub-seconds and any time zone
        suffix exiftool may append.
        """
        if not value:
            return None
        try:
            return datetime.strptime(str(value).strip()[:19], config.EXIF_DATETIME_FORMAT)
        except ValueError:
            return None


def verify_entries(entries: Sequence[ImageEntry],
                   timestamps: Sequence[datetime],
                   extractor: Optional[MetadataExtractor] = None):
    """
    Checks that creation and original dates equal the assigned timestamp and
    that the digitized and metadata dates mirror the creation date.
    """
    extractor = extractor or MetadataExtractor()

    for entry in entries:
        expected = timestamps[entry.rank]
        dates = extractor.read_dates(entry.path)

        checks = [
            ("CreateDate", dates.create_date, expected),
            ("DateTimeOriginal", dates.date_time_original, expected),
            (config.DIGITIZED_TAG, dates.digitized, dates.create_date),
            (config.METADATA_DATE_TAG, dates.metadata_date, dates.create_date),
        ]
        for name, actual, wanted in checks:
            if actual != wanted:
                shown = format_exif_datetime(actual) if actual else "missing"
                target = format_exif_datetime(wanted) if wanted else "missing"
                raise VerificationError(f"{entry.path}: {name} is {shown}, expected {target}")

    logging.info(f"Verified embedded dates on {len(entries)} files.")
