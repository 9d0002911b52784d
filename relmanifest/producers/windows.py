"""Windows producer — the ``{platform-key: Asset}`` fragment for Windows builds.

The zip archive is keyed ``windows-amd64`` and the MSI installer
``windows-amd64-msi``. Signatures, certificates and attestation bundles
sit next to each artifact in the dist root.
"""

from __future__ import annotations

import logging
from pathlib import Path

from relmanifest.core.asset_builder import build_asset, join_url
from relmanifest.core.checksums import DEFAULT_CHECKSUMS_PATTERN, ChecksumIndex
from relmanifest.models.keys import PlatformKey
from relmanifest.models.manifest import Asset

logger = logging.getLogger(__name__)

ZIP_MEDIA_TYPE = "application/zip"
MSI_MEDIA_TYPE = "application/x-msi"


def windows_base_url(cdn_base_url: str, s3_directory: str) -> str:
    return join_url(cdn_base_url, s3_directory.strip("/"))


def generate_windows_fragment(
    dist_dir: Path,
    base_url: str,
    *,
    checksums_pattern: str = DEFAULT_CHECKSUMS_PATTERN,
) -> dict[PlatformKey, Asset]:
    """Build the Windows asset fragment from *dist_dir*.

    An empty fragment is valid: it means the Windows job produced nothing.
    """
    dist_dir = Path(dist_dir)
    checksums = ChecksumIndex.discover(dist_dir, checksums_pattern)
    assets: dict[PlatformKey, Asset] = {}

    zips = [p for p in sorted(dist_dir.glob("*.zip")) if "checksums" not in p.name]
    if zips:
        assets[PlatformKey.WINDOWS_AMD64] = build_asset(
            zips[0], ZIP_MEDIA_TYPE, base_url, checksums
        )
        logger.info("Added zip asset: %s -> %s", PlatformKey.WINDOWS_AMD64.value, zips[0].name)

    msis = sorted(dist_dir.glob("*.msi"))
    if msis:
        assets[PlatformKey.WINDOWS_AMD64_MSI] = build_asset(
            msis[0], MSI_MEDIA_TYPE, base_url, checksums
        )
        logger.info("Added MSI asset: %s -> %s", PlatformKey.WINDOWS_AMD64_MSI.value, msis[0].name)

    logger.info("Generated Windows fragment with %d assets", len(assets))
    return assets
