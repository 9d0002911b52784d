"""Failure taxonomy for manifest assembly.

Every failure is fatal for the invocation: the CLI maps any
``ManifestError`` to exit code 1 before anything is written.
"""

from __future__ import annotations

from pathlib import Path


class ManifestError(RuntimeError):
    """Base class for all manifest assembly failures."""


class MissingInputError(ManifestError):
    """A required file, flag, or record is absent."""


class ChecksumsNotFoundError(MissingInputError):
    """No checksum listing exists in the expected location."""

    def __init__(self, directory: Path, pattern: str) -> None:
        self.directory = directory
        self.pattern = pattern
        super().__init__(
            f"checksums file not found in {directory} (expected pattern: {pattern})"
        )


class ChecksumReadError(ManifestError):
    """The checksum listing exists but could not be read."""


class IntegrityError(ManifestError):
    """A digest is missing from the trusted checksum source."""


class DecodeError(ManifestError):
    """A fragment is not valid JSON for its expected shape.

    ``raw`` keeps the offending text so the caller can dump it for diagnosis.
    """

    def __init__(self, label: str, raw: str, reason: str) -> None:
        self.label = label
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid JSON in {label}: {reason}")


class EmptyManifestError(ManifestError):
    """The binaries fragment has no version, so its stage never produced output."""
