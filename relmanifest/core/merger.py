"""Manifest merger — combines per-stage fragments into the release manifest.

Inputs:
    - the binaries fragment: a complete Manifest (mandatory, non-empty version)
    - an images fragment: ``{registry-key: Image}`` (optional)
    - platform asset fragments, e.g. Windows: ``{platform-key: Asset}`` (optional)

Later fragments overwrite earlier entries with the same key, so applying
the same fragment twice yields the same manifest. An optional fragment
given as ``""`` or ``{}`` means its stage was skipped.

Every fragment is decoded before anything is merged; one malformed
fragment fails the whole merge.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from relmanifest.core.codec import (
    decode_asset_fragment,
    decode_image_fragment,
    decode_manifest,
)
from relmanifest.core.errors import EmptyManifestError
from relmanifest.models.keys import PlatformKey, RegistryKey
from relmanifest.models.manifest import (
    KNOWN_SCHEMA_VERSIONS,
    Asset,
    Image,
    Manifest,
    in_toto_provenance,
)

logger = logging.getLogger(__name__)

EMPTY_FRAGMENT = "{}"


def is_absent_fragment(text: str | None) -> bool:
    """True for the skipped-stage sentinels: None, empty, or ``{}``."""
    return text is None or text.strip() in ("", EMPTY_FRAGMENT)


class ManifestMerger:
    """Accumulates fragments on top of the binaries manifest.

    Manifests are frozen; each merge replaces the working copy.

    Parameters
    ----------
    binaries:
        The decoded binaries fragment. Raises EmptyManifestError when its
        version is empty.
    """

    def __init__(self, binaries: Manifest) -> None:
        if binaries.is_empty:
            raise EmptyManifestError(
                "Binaries manifest is empty: the binaries stage did not run "
                "or produced malformed output"
            )
        if binaries.version not in KNOWN_SCHEMA_VERSIONS:
            logger.warning(
                "Binaries manifest has unrecognised schema version %r; "
                "unknown fields were dropped",
                binaries.version,
            )
        self._manifest = binaries

    @property
    def manifest(self) -> Manifest:
        """The working manifest, without the asset attestation summary."""
        return self._manifest

    def merge_images(self, images: Mapping[RegistryKey, Image]) -> None:
        """Merge images by registry key and mark the manifest as image-attested.

        Images publish attestations through registry referrers, so the
        manifest-level descriptor carries no bundle href.
        """
        merged = {**self._manifest.images, **images}
        update: dict[str, object] = {"images": merged}
        if merged:
            update["image_attestation"] = in_toto_provenance()
        self._manifest = self._manifest.model_copy(update=update)
        logger.info("Added %d images to manifest", len(images))

    def merge_assets(
        self, assets: Mapping[PlatformKey, Asset], source: str = "platform"
    ) -> None:
        """Merge assets by platform key."""
        merged = {**self._manifest.assets, **assets}
        self._manifest = self._manifest.model_copy(update={"assets": merged})
        for key in assets:
            logger.info("Added %s asset: %s", source, key.value)
        logger.info("Added %d %s artifacts to manifest", len(assets), source)

    def build(self) -> Manifest:
        """Return the final manifest with the asset attestation summary set.

        The summary only says that at least one asset is attested; the
        per-asset descriptors hold the bundle locations.
        """
        manifest = self._manifest
        if manifest.has_asset_attestations:
            manifest = manifest.model_copy(
                update={"asset_attestation": in_toto_provenance()}
            )
            logger.info("Set asset attestation descriptor")
        return manifest


def merge_fragments(
    binaries: str,
    images: str | None = None,
    asset_fragments: Mapping[str, str | None] | None = None,
) -> Manifest:
    """Decode and merge raw JSON fragments into the release manifest.

    Parameters
    ----------
    binaries:
        JSON of the full binaries Manifest.
    images:
        JSON of the ``{registry-key: Image}`` fragment, or a sentinel.
    asset_fragments:
        Source name (e.g. ``"windows"``) to JSON of a
        ``{platform-key: Asset}`` fragment, or a sentinel. Applied in order.
    """
    merger = ManifestMerger(decode_manifest(binaries, label="binaries manifest"))

    decoded_images: dict[RegistryKey, Image] | None = None
    if is_absent_fragment(images):
        logger.info(
            "No images to add to manifest "
            "(image stage may have been skipped if there is no Dockerfile)"
        )
    else:
        decoded_images = decode_image_fragment(images, label="images manifest")

    decoded_assets: list[tuple[str, dict[PlatformKey, Asset]]] = []
    for source, text in (asset_fragments or {}).items():
        if is_absent_fragment(text):
            logger.info("No %s artifacts to add to manifest", source)
            continue
        decoded_assets.append(
            (source, decode_asset_fragment(text, label=f"{source} manifest"))
        )

    if decoded_images is not None:
        merger.merge_images(decoded_images)
    for source, assets in decoded_assets:
        merger.merge_assets(assets, source=source)

    manifest = merger.build()
    logger.info("Merged manifest complete")
    return manifest
