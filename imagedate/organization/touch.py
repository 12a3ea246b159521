import os
import time
import logging
from typing import Sequence

from tqdm import tqdm

from .. import config
from ..exceptions import TimestampWriteError
from ..models import ImageEntry


class FileTimestamper:
    """
    Makes file-system mtime/atime order match alphabetical order.

    Some photo software falls back to file times when embedded dates look
    ambiguous, so these must agree with the embedded sequence too.
    """

    def __init__(self, pause: float = config.TOUCH_PAUSE, offset=config.TOUCH_OFFSET):
        self.pause = pause
        self.offset_ns = int(offset.total_seconds() * 1_000_000_000)

    def apply(self, entries: Sequence[ImageEntry]):
        if not entries:
            logging.info("No files to touch.")
            return

        # Pass 1: stamp "now" in alphabetical order, spaced by a short pause.
        for entry in tqdm(entries, desc="Touching", leave=False, disable=None):
            try:
                os.utime(entry.path)
            except OSError as e:
                raise TimestampWriteError(entry.path, e) from e
            time.sleep(self.pause)

        # Pass 2: move each stamp an hour back, keeping the relative order.
        # Coarse kernel clocks can hand out equal stamps, so never step back.
        step_ns = max(int(self.pause * 1_000_000_000), 1_000)
        previous = None
        for entry in entries:
            try:
                st = os.stat(entry.path)
                shifted = st.st_mtime_ns + self.offset_ns
                if previous is not None and shifted <= previous:
                    shifted = previous + step_ns
                os.utime(entry.path, ns=(shifted, shifted))
                previous = shifted
            except OSError as e:
                raise TimestampWriteError(entry.path, e) from e

        logging.info(f"Updated file times on {len(entries)} files.")
