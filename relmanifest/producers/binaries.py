"""Binaries producer — builds the base release Manifest from an asset directory.

Artifacts are located by naming convention, one per platform key; the
first match in sorted order wins and a missing platform is skipped.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from relmanifest.core.asset_builder import build_asset, join_url
from relmanifest.core.checksums import DEFAULT_CHECKSUMS_PATTERN, ChecksumIndex
from relmanifest.models.keys import PlatformKey
from relmanifest.models.manifest import CURRENT_SCHEMA_VERSION, Asset, Manifest

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"

# Platform key -> (glob pattern, media type)
ASSET_PATTERNS: dict[PlatformKey, tuple[str, str]] = {
    PlatformKey.DARWIN_ARM64: ("*darwin-arm64.zip", "application/zip"),
    PlatformKey.DARWIN_AMD64: ("*darwin-amd64.zip", "application/zip"),
    PlatformKey.LINUX_ARM64: ("*linux-arm64.tar.gz", "application/gzip"),
    PlatformKey.LINUX_AMD64: ("*linux-amd64.tar.gz", "application/gzip"),
    PlatformKey.WINDOWS_AMD64: ("*windows-amd64.zip", "application/zip"),
    PlatformKey.CHECKSUMS: (DEFAULT_CHECKSUMS_PATTERN, "text/plain"),
}


def collect_assets(
    asset_dir: Path,
    base_url: str,
    checksums: ChecksumIndex,
    patterns: dict[PlatformKey, tuple[str, str]] = ASSET_PATTERNS,
) -> dict[PlatformKey, Asset]:
    """Glob *asset_dir* for each platform pattern and build its Asset."""
    asset_dir = Path(asset_dir)
    assets: dict[PlatformKey, Asset] = {}
    for key, (pattern, media_type) in patterns.items():
        matches = sorted(p for p in asset_dir.glob(pattern) if p.is_file())
        if not matches:
            logger.debug("No artifact for %s (pattern %s)", key.value, pattern)
            continue
        assets[key] = build_asset(matches[0], media_type, base_url, checksums)
    return assets


def generate_manifest(
    asset_dir: Path,
    name: str,
    org: str,
    tag: str,
    base_url: str,
    *,
    checksums_pattern: str = DEFAULT_CHECKSUMS_PATTERN,
    released_at: datetime | None = None,
) -> Manifest:
    """Build the binaries Manifest for one release.

    Raises ChecksumsNotFoundError when *asset_dir* holds no checksum
    listing, and IntegrityError when a located artifact is not listed.
    """
    checksums = ChecksumIndex.discover(asset_dir, checksums_pattern)
    patterns = dict(ASSET_PATTERNS)
    patterns[PlatformKey.CHECKSUMS] = (checksums_pattern, "text/plain")
    assets = collect_assets(asset_dir, base_url, checksums, patterns)
    logger.info("Collected %d binary assets from %s", len(assets), asset_dir)

    manifest_href = join_url(base_url, MANIFEST_FILENAME)
    return Manifest(
        version=CURRENT_SCHEMA_VERSION,
        name=name,
        org=org,
        semver=tag,
        released_at=released_at or datetime.now(timezone.utc),
        assets=assets,
        signature_href=f"{manifest_href}.sig",
        certificate_href=f"{manifest_href}.cert",
    )
