"""Image extractor — the ``{registry-key: Image}`` fragment from a digest file.

Digest file format, one record per line::

    <hex-sha256>  <registry-ref>

Only refs under a configured registry prefix are kept. For release
version ``0.1.98`` a ref ending in ``:0.1.98`` is the multi-architecture
index image; ``:0.1.98-<arch>`` is a per-architecture image, which the
index already resolves to and which is therefore not listed separately.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from relmanifest.core.errors import MissingInputError
from relmanifest.models.keys import RegistryKey
from relmanifest.models.manifest import Image

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_PREFIXES: dict[RegistryKey, str] = {
    RegistryKey.GHCR: "ghcr.io/conductorone/",
}


class DigestRecord(BaseModel):
    """One retained line of a digest file."""

    model_config = ConfigDict(frozen=True)

    registry: RegistryKey
    ref: str
    digest: str  # "sha256:<hex>"
    arch: str | None = None  # None for the index image

    @property
    def is_index(self) -> bool:
        return self.arch is None

    @property
    def repository(self) -> str:
        """The ref without its tag."""
        return self.ref.rpartition(":")[0]

    def to_image(self, tag: str) -> Image:
        return Image(
            ref=self.ref,
            digest=self.digest,
            tag=tag,
            uri=f"{self.repository}@{self.digest}",
            is_index=self.is_index,
        )


def release_version(tag: str) -> str:
    """``v0.1.98`` -> ``0.1.98``; tags without the prefix pass through."""
    return tag.removeprefix("v")


def default_digest_file(asset_dir: Path, repo_name: str, version: str) -> Path:
    return Path(asset_dir) / f"{repo_name}_{version}_digests.txt"


def parse_digest_line(
    line: str,
    version: str,
    registries: Mapping[RegistryKey, str] = DEFAULT_REGISTRY_PREFIXES,
) -> DigestRecord | None:
    """Classify one digest line, or return None if it is not retained."""
    parts = line.split()
    if len(parts) != 2:
        return None
    digest_hex, ref = parts

    registry = next(
        (key for key, prefix in registries.items() if prefix and ref.startswith(prefix)),
        None,
    )
    if registry is None:
        return None

    _, sep, ref_tag = ref.rpartition(":")
    if not sep:
        return None
    arch: str | None = None
    if ref_tag != version:
        arch = ref_tag.removeprefix(f"{version}-")
        if arch == ref_tag or not arch:
            return None

    return DigestRecord(
        registry=registry,
        ref=ref,
        digest=f"sha256:{digest_hex.lower()}",
        arch=arch,
    )


def extract_images(
    text: str,
    tag: str,
    registries: Mapping[RegistryKey, str] = DEFAULT_REGISTRY_PREFIXES,
    source: str = "digest file",
) -> dict[RegistryKey, Image]:
    """Build the images fragment: the index image of each registry.

    Raises MissingInputError when no configured registry has an index line.
    """
    version = release_version(tag)
    images: dict[RegistryKey, Image] = {}
    for line in text.splitlines():
        record = parse_digest_line(line, version, registries)
        if record is None:
            continue
        if not record.is_index:
            logger.debug("Per-architecture image %s (%s)", record.ref, record.arch)
            continue
        if record.registry in images:
            logger.warning(
                "Duplicate index image for %s; keeping %s",
                record.registry.value, record.ref,
            )
        images[record.registry] = record.to_image(tag)

    if not images:
        raise MissingInputError(
            f"Could not find index line for any configured registry in {source}:\n{text}"
        )
    logger.info("Extracted %d index images", len(images))
    return images


def extract_images_from_file(
    digest_file: Path,
    tag: str,
    registries: Mapping[RegistryKey, str] = DEFAULT_REGISTRY_PREFIXES,
) -> dict[RegistryKey, Image]:
    digest_file = Path(digest_file)
    try:
        text = digest_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MissingInputError(f"Digest file not found: {digest_file}") from exc
    return extract_images(text, tag, registries, source=str(digest_file))
