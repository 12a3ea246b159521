"""
Custom exception hierarchy for imagedate.

Every failure the run can hit maps to one of these types so the CLI can
decide between a clean exit and a fatal one.
"""
from pathlib import Path


class ImageDateError(Exception):
    """Base exception for all imagedate errors."""
    pass


class DirectoryNotFoundError(ImageDateError):
    """Raised when the target directory is missing or not a directory."""

    def __init__(self, directory):
        super().__init__(f"Directory '{directory}' not found.")
        self.directory = directory


class ConfigurationError(ImageDateError):
    """Raised when the base date, base time or interval cannot be used."""
    pass


class TimestampWriteError(ImageDateError):
    """Raised when a file-system timestamp update fails."""

    def __init__(self, path: Path, reason: Exception):
        super().__init__(f"touch failed for '{path}': {reason}")
        self.path = path
        self.reason = reason


class MetadataWriteError(ImageDateError):
    """Raised when an exiftool call fails. Carries the failing stage."""

    def __init__(self, stage: str, detail: str):
        super().__init__(f"exiftool failed during {stage}: {detail}")
        self.stage = stage
        self.detail = detail


class VerificationError(ImageDateError):
    """Raised when embedded dates do not match the assigned sequence."""
    pass


class UserCancelled(ImageDateError):
    """Raised when the user declines the confirmation prompt."""
    pass


class ProgramInterruptedError(ImageDateError):
    """Raised from the SIGINT handler."""
    pass


class TerminatedError(ImageDateError):
    """Raised from the SIGTERM handler."""

    def __init__(self, signum: int):
        super().__init__("Program terminated")
        self.signum = signum
