"""Checksum index — filename to verified SHA-256, read from a checksum listing.

Listing format, one record per line::

    <hex-sha256>  <filename>
    <hex-sha256>  *<filename>      # binary-mode marker

The listing is the release's source of truth for asset digests.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import Path

from relmanifest.core.errors import ChecksumReadError, ChecksumsNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_CHECKSUMS_PATTERN = "*checksums.txt"


def parse_checksum_lines(text: str) -> dict[str, str]:
    """Parse listing text into ``{filename: lowercase hex digest}``.

    Lines that do not split into exactly two fields are skipped. When a
    filename repeats, the last occurrence wins.
    """
    digests: dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        parts = line.split()
        if len(parts) != 2:
            logger.debug("Skipping malformed checksum line %d: %r", lineno, raw)
            continue
        digest, filename = parts
        digests[filename.removeprefix("*")] = digest.lower()
    return digests


class ChecksumIndex(Mapping[str, str]):
    """Read-only mapping from artifact filename to its listed digest.

    Parameters
    ----------
    digests:
        Filename to hex digest.
    source:
        Path of the listing the digests were read from, if any.
    """

    def __init__(self, digests: Mapping[str, str], source: Path | None = None) -> None:
        self._digests = dict(digests)
        self._source = Path(source) if source else None

    @classmethod
    def parse(cls, text: str, source: Path | None = None) -> ChecksumIndex:
        return cls(parse_checksum_lines(text), source=source)

    @classmethod
    def from_file(cls, path: Path) -> ChecksumIndex:
        """Load a listing from *path*.

        Raises ChecksumReadError if the file cannot be read as text.
        """
        path = Path(path)
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ChecksumReadError(
                f"failed to read checksums file {path}: {exc}"
            ) from exc
        index = cls.parse(text, source=path)
        logger.debug("Loaded %d checksums from %s", len(index), path)
        return index

    @classmethod
    def discover(
        cls, directory: Path, pattern: str = DEFAULT_CHECKSUMS_PATTERN
    ) -> ChecksumIndex:
        """Find the listing in *directory* by glob and load it.

        The first match in sorted order wins. Raises ChecksumsNotFoundError
        when nothing matches.
        """
        directory = Path(directory)
        matches = sorted(directory.glob(pattern))
        if not matches:
            raise ChecksumsNotFoundError(directory, pattern)
        return cls.from_file(matches[0])

    @property
    def source(self) -> Path | None:
        """Path of the listing, or None for an in-memory index."""
        return self._source

    def is_listing(self, path: Path) -> bool:
        """Whether *path* names the checksum listing this index was read from."""
        return self._source is not None and Path(path).name == self._source.name

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, filename: str) -> str:
        return self._digests[filename]

    def __iter__(self) -> Iterator[str]:
        return iter(self._digests)

    def __len__(self) -> int:
        return len(self._digests)

    def __repr__(self) -> str:
        return f"ChecksumIndex({len(self)} entries, source={self._source})"
