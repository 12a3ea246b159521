import os
import shutil
import pytest
from datetime import datetime

from imagedate.core import ImageDateApp
from imagedate.metadata.extract import MetadataExtractor
from imagedate.exceptions import ConfigurationError, DirectoryNotFoundError, VerificationError
from imagedate.models import EmbeddedDates, SequenceConfig
from imagedate.organization.touch import FileTimestamper
from imagedate.sequencer import format_exif_datetime


def _app(**kwargs):
    return ImageDateApp(timestamper=FileTimestamper(pause=0), **kwargs)


def _sequence_calls(calls):
    """(value, filename) for each per-file AllDates call."""
    out = []
    for cmd in calls:
        if len(cmd) == 5 and cmd[3].startswith("-AllDates="):
            out.append((cmd[3].split("=", 1)[1], os.path.basename(cmd[4])))
    return out


def test_quiet_defaults_scenario(image_dir, fake_exiftool):
    summary = _app().run(image_dir, SequenceConfig())

    assert [e.path.name for e in summary.entries] == ["a.jpg", "b.jpg", "c.jpg"]
    assert [format_exif_datetime(t) for t in summary.timestamps] == [
        "2000:01:01 00:00:00",
        "2000:01:01 00:05:00",
        "2000:01:01 00:10:00",
    ]
    assert _sequence_calls(fake_exiftool.calls) == [
        ("2000:01:01 00:00:00", "a.jpg"),
        ("2000:01:01 00:05:00", "b.jpg"),
        ("2000:01:01 00:10:00", "c.jpg"),
    ]
    assert summary.verified is False


def test_file_times_touched_before_metadata(image_dir):
    order = []

    class RecordingTimestamper(FileTimestamper):
        def apply(self, entries):
            order.append("touch")

    class RecordingWriter:
        def apply(self, directory, entries, timestamps):
            order.append("write")

    ImageDateApp(timestamper=RecordingTimestamper(), writer=RecordingWriter()).run(
        image_dir, SequenceConfig())

    assert order == ["touch", "write"]


def test_rerun_is_stable(image_dir, fake_exiftool):
    app = _app()
    app.run(image_dir, SequenceConfig.from_strings("2021:03:04", "05:06:07"))
    first = _sequence_calls(fake_exiftool.calls)
    fake_exiftool.calls.clear()

    app.run(image_dir, SequenceConfig.from_strings("2021:03:04", "05:06:07"))
    assert _sequence_calls(fake_exiftool.calls) == first


def test_rename_changes_rank(image_dir, fake_exiftool):
    (image_dir / "a.jpg").rename(image_dir / "d.jpg")

    _app().run(image_dir, SequenceConfig())

    assert [name for _, name in _sequence_calls(fake_exiftool.calls)] == ["b.jpg", "c.jpg", "d.jpg"]


def test_no_images_writes_nothing(tmp_path, fake_exiftool):
    (tmp_path / "readme.txt").write_text("not an image")
    os.utime(tmp_path / "readme.txt", (1_000_000, 1_000_000))

    summary = _app().run(tmp_path, SequenceConfig())

    assert summary.entries == []
    assert fake_exiftool.calls == []
    assert (tmp_path / "readme.txt").stat().st_mtime == 1_000_000


def test_missing_directory_writes_nothing(tmp_path, fake_exiftool):
    with pytest.raises(DirectoryNotFoundError):
        _app().run(tmp_path / "missing", SequenceConfig())
    assert fake_exiftool.calls == []


class StubExtractor:
    def __init__(self, shift=None):
        self.shift = shift

    def read_dates(self, path):
        # Mirrors what exiftool would have written for a..c
        dt = datetime(2000, 1, 1, 0, 5 * "abc".index(path.name[0]))
        if self.shift and path.name == self.shift:
            dt = datetime(1999, 1, 1)
        return EmbeddedDates(date_time_original=dt, create_date=dt, modify_date=dt,
                             digitized=dt, metadata_date=dt)


def test_verify_after_write(image_dir, fake_exiftool):
    summary = _app(extractor=StubExtractor()).run(image_dir, SequenceConfig(), verify=True)
    assert summary.verified is True


def test_verify_failure_aborts(image_dir, fake_exiftool):
    with pytest.raises(VerificationError, match="c.jpg"):
        _app(extractor=StubExtractor(shift="c.jpg")).run(image_dir, SequenceConfig(), verify=True)


def test_sequence_past_year_9999_fails_before_touching(image_dir, fake_exiftool):
    for p in image_dir.iterdir():
        os.utime(p, (1_000_000, 1_000_000))
    cfg = SequenceConfig.from_strings("9999:12:31", "23:58:00")

    with pytest.raises(ConfigurationError, match="past the last representable date"):
        _app().run(image_dir, cfg)

    assert fake_exiftool.calls == []
    assert all(p.stat().st_mtime == 1_000_000 for p in image_dir.iterdir())


@pytest.mark.skipif(shutil.which("exiftool") is None, reason="exiftool not installed")
def test_real_exiftool_fields_agree(image_dir):
    summary = ImageDateApp().run(image_dir, SequenceConfig(), verify=True)

    assert summary.verified is True
    extractor = MetadataExtractor()
    for entry, expected in zip(summary.entries, summary.timestamps):
        dates = extractor.read_dates(entry.path)
        assert dates.create_date == expected
        assert dates.date_time_original == expected
        assert dates.digitized == dates.create_date
        assert dates.metadata_date == dates.create_date

    assert [format_exif_datetime(t) for t in summary.timestamps] == [
        "2000:01:01 00:00:00",
        "2000:01:01 00:05:00",
        "2000:01:01 00:10:00",
    ]
