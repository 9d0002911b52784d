"""Asset descriptor builder — one Asset record per located artifact file.

The digest is looked up in the checksum index. Optional evidence is
discovered by probing for sibling files named ``<artifact><suffix>``::

    .sig                       -> signature_href
    .cert                      -> certificate_href
    .sbom.json                 -> sbom_href
    .provenance.sigstore.json  -> attestation (in-toto, SLSA provenance)
    .sbom.sigstore.json        -> attestation (in-toto, SPDX document)

A missing sibling leaves the field empty.
"""

from __future__ import annotations

import logging
from pathlib import Path

from relmanifest.core.checksums import ChecksumIndex
from relmanifest.core.errors import IntegrityError, MissingInputError
from relmanifest.core.hasher import sha256_file
from relmanifest.models.manifest import (
    ATTESTATION_TYPE_IN_TOTO_V1,
    PREDICATE_TYPE_SLSA_PROVENANCE_V1,
    PREDICATE_TYPE_SPDX,
    Asset,
    AttestationDescriptor,
)

logger = logging.getLogger(__name__)

SIGNATURE_SUFFIX = ".sig"
CERTIFICATE_SUFFIX = ".cert"
SBOM_SUFFIX = ".sbom.json"
PROVENANCE_BUNDLE_SUFFIX = ".provenance.sigstore.json"
SBOM_BUNDLE_SUFFIX = ".sbom.sigstore.json"

# Bundle suffix -> predicate type, in the order attestations are listed
ATTESTATION_BUNDLES: tuple[tuple[str, str], ...] = (
    (PROVENANCE_BUNDLE_SUFFIX, PREDICATE_TYPE_SLSA_PROVENANCE_V1),
    (SBOM_BUNDLE_SUFFIX, PREDICATE_TYPE_SPDX),
)


def join_url(base_url: str, name: str) -> str:
    return f"{base_url.rstrip('/')}/{name}"


def resolve_digest(path: Path, checksums: ChecksumIndex) -> str:
    """Return the trusted digest for *path*.

    The checksum listing is the only file whose digest is computed here,
    since it cannot list itself. Anything else missing from the index
    raises IntegrityError.
    """
    filename = path.name
    digest = checksums.get(filename)
    if digest is not None:
        return digest
    if checksums.is_listing(path):
        logger.debug("Hashing checksum listing %s directly", filename)
        return sha256_file(path)
    raise IntegrityError(
        f"SHA256 hash not found in checksums file for {filename}; "
        "digest must come from the verified checksum source, "
        "not be recomputed independently"
    )


def build_asset(
    path: Path,
    media_type: str,
    base_url: str,
    checksums: ChecksumIndex,
) -> Asset:
    """Build the Asset record for the artifact at *path*.

    Parameters
    ----------
    path:
        Location of the artifact; sibling evidence files are looked up in
        the same directory.
    media_type:
        Declared media type, e.g. ``application/zip``.
    base_url:
        Download location prefix; the artifact href is ``<base_url>/<filename>``.
    checksums:
        Trusted digests for the release.
    """
    path = Path(path)
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise MissingInputError(f"failed to stat {path}: {exc}") from exc

    filename = path.name
    digest = resolve_digest(path, checksums)
    href = join_url(base_url, filename)

    def sibling_href(suffix: str) -> str | None:
        if path.with_name(filename + suffix).is_file():
            return href + suffix
        return None

    attestations: list[AttestationDescriptor] = []
    for suffix, predicate_type in ATTESTATION_BUNDLES:
        bundle_href = sibling_href(suffix)
        if bundle_href is not None:
            attestations.append(
                AttestationDescriptor(
                    attestation_type=ATTESTATION_TYPE_IN_TOTO_V1,
                    predicate_type=predicate_type,
                    bundle_href=bundle_href,
                )
            )

    asset = Asset(
        filename=filename,
        media_type=media_type,
        size_bytes=size,
        sha256=digest,
        href=href,
        signature_href=sibling_href(SIGNATURE_SUFFIX),
        certificate_href=sibling_href(CERTIFICATE_SUFFIX),
        sbom_href=sibling_href(SBOM_SUFFIX),
        attestations=attestations,
    )
    logger.debug(
        "Built asset %s (%d bytes, %d attestations)",
        filename, size, len(attestations),
    )
    return asset
