"""
Turns an alphabetical ranking into a sequence of capture dates.
"""
from datetime import datetime
from typing import List, Sequence

from . import config
from .models import ImageEntry, SequenceConfig


def sequence_timestamps(seq_config: SequenceConfig, entries: Sequence[ImageEntry]) -> List[datetime]:
    """
    Returns one timestamp per entry: base + rank * interval.

    Plain datetime arithmetic carries seconds into minutes, hours, days,
    months and years, so rollovers need no special handling.
    """
    base = seq_config.base_datetime
    return [base + i * seq_config.interval for i in range(len(entries))]


def format_exif_datetime(dt: datetime) -> str:
    """Formats as 'YYYY:MM:DD HH:MM:SS', the form exiftool expects."""
    return dt.strftime(config.EXIF_DATETIME_FORMAT)
