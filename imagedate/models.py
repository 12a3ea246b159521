from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import List, Optional

from . import config
from .exceptions import ConfigurationError


@dataclass(frozen=True)
class ImageEntry:
    """
    One image file and its position in the alphabetical listing.
    """
    path: Path
    rank: int


@dataclass(frozen=True)
class SequenceConfig:
    """
    Where the sequence starts and how far apart consecutive images are.
    Built once per run and never mutated.
    """
    base_date: date = date(2000, 1, 1)
    base_time: time = time(0, 0, 0)
    interval: timedelta = timedelta(minutes=config.DEFAULT_INTERVAL_MINUTES)

    def __post_init__(self):
        if self.interval <= timedelta(0):
            raise ConfigurationError(f"Interval must be positive, got {self.interval}")
        # EXIF dates carry whole seconds only
        if self.interval % timedelta(seconds=1):
            raise ConfigurationError(f"Interval must be a whole number of seconds, got {self.interval}")

    @property
    def base_datetime(self) -> datetime:
        return datetime.combine(self.base_date, self.base_time)

    @classmethod
    def from_strings(cls,
                     date_str: Optional[str] = None,
                     time_str: Optional[str] = None,
                     interval_minutes: float = config.DEFAULT_INTERVAL_MINUTES) -> "SequenceConfig":
        """
        Builds a config from EXIF-style strings ("YYYY:MM:DD", "HH:MM:SS").
        Empty or missing strings fall back to the defaults.
        """
        date_str = (date_str or "").strip() or config.DEFAULT_BASE_DATE
        time_str = (time_str or "").strip() or config.DEFAULT_BASE_TIME

        try:
            base_date = datetime.strptime(date_str, config.EXIF_DATE_FORMAT).date()
        except ValueError:
            raise ConfigurationError(f"Invalid base date '{date_str}' (expected YYYY:MM:DD)") from None

        try:
            base_time = datetime.strptime(time_str, config.EXIF_TIME_FORMAT).time()
        except ValueError:
            raise ConfigurationError(f"Invalid base time '{time_str}' (expected HH:MM:SS)") from None

        try:
            interval = timedelta(minutes=interval_minutes)
        except (ValueError, OverflowError):
            raise ConfigurationError(f"Invalid interval '{interval_minutes}' minutes") from None

        return cls(base_date=base_date, base_time=base_time, interval=interval)


@dataclass
class EmbeddedDates:
    """Dates read back from a single file after writing."""
    date_time_original: Optional[datetime] = None
    create_date: Optional[datetime] = None
    modify_date: Optional[datetime] = None
    digitized: Optional[datetime] = None
    metadata_date: Optional[datetime] = None


@dataclass
class RunSummary:
    directory: Path
    entries: List[ImageEntry] = field(default_factory=list)
    timestamps: List[datetime] = field(default_factory=list)
    verified: bool = False
