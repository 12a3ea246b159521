import os
import logging
from pathlib import Path
from typing import List, Union

from .. import config
from ..exceptions import DirectoryNotFoundError
from ..models import ImageEntry


def normalize_directory(arg: str) -> str:
    """Prefixes bare relative paths with './' (so 'photos' becomes './photos')."""
    if arg.startswith(".") or arg.startswith("/"):
        return arg
    return f"./{arg}"


class DirectoryScanner:
    def __init__(self, image_exts=None):
        self.image_exts = image_exts if image_exts is not None else config.IMAGE_EXTS

    def resolve(self, directory: Union[str, Path]) -> List[ImageEntry]:
        """
        Lists the images directly inside `directory` and ranks them by filename.

        Single level only: subdirectories are never ranked. Names are compared
        by codepoint, so the order does not depend on the current locale.
        Dot files are kept as long as they carry an image extension.
        """
        root = Path(directory)
        if not root.is_dir():
            raise DirectoryNotFoundError(directory)

        with os.scandir(root) as it:
            names = [e.name for e in it if e.is_file() and self._is_image(e.name)]

        names.sort()
        logging.debug(f"Found {len(names)} images in {root}")

        return [ImageEntry(path=root / name, rank=i) for i, name in enumerate(names)]

    def _is_image(self, name: str) -> bool:
        return os.path.splitext(name)[1].lower() in self.image_exts
