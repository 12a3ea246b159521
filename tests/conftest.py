import subprocess

import pytest
from PIL import Image

import imagedate.metadata.writer as writer_module


class FakeExifTool:
    """Stands in for subprocess.run and records every exiftool command line."""

    def __init__(self):
        self.calls = []
        self.fail_when = None

    def __call__(self, cmd, **kwargs):
        self.calls.append(list(cmd))
        if self.fail_when and self.fail_when(cmd):
            return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="Warning: x\nError: boom\n")
        return subprocess.CompletedProcess(cmd, 0, stdout="    1 image files updated\n", stderr="")


def make_jpeg(path, exif_datetime=None):
    img = Image.new("RGB", (8, 8), color=(200, 100, 50))
    if exif_datetime:
        exif = Image.Exif()
        exif[306] = exif_datetime  # 306 - DateTime
        img.save(path, format="JPEG", exif=exif)
    else:
        img.save(path, format="JPEG")
    return path


@pytest.fixture
def fake_exiftool(monkeypatch):
    fake = FakeExifTool()
    monkeypatch.setattr(writer_module.subprocess, "run", fake)
    return fake


@pytest.fixture
def image_dir(tmp_path):
    """A directory holding c.jpg, a.jpg, b.jpg (created out of order)."""
    root = tmp_path / "photos"
    root.mkdir()
    for name in ("c.jpg", "a.jpg", "b.jpg"):
        make_jpeg(root / name)
    return root


@pytest.fixture
def jpeg_factory():
    return make_jpeg
