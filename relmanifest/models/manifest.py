"""Release manifest models — all Pydantic v2, all frozen.

JSON uses lowerCamelCase field names; Python code uses snake_case. Both
spellings are accepted on input, and unknown fields are dropped so that
documents written by older or newer pipeline stages still load.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from relmanifest.models.keys import PlatformKey, RegistryKey

# Envelope and predicate identifiers
ATTESTATION_TYPE_IN_TOTO_V1 = "https://in-toto.io/Statement/v1"
PREDICATE_TYPE_SLSA_PROVENANCE_V1 = "https://slsa.dev/provenance/v1"
PREDICATE_TYPE_SPDX = "https://spdx.dev/Document"

SCHEMA_VERSION_V1 = "1"
SCHEMA_VERSION_V2 = "2"  # adds attestation descriptors
CURRENT_SCHEMA_VERSION = SCHEMA_VERSION_V2
KNOWN_SCHEMA_VERSIONS = frozenset({SCHEMA_VERSION_V1, SCHEMA_VERSION_V2})


class _ManifestModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class AttestationDescriptor(_ManifestModel):
    """A class of provenance or SBOM evidence.

    ``bundle_href`` is None when the evidence is found through registry
    referrers rather than a sidecar bundle.
    """

    attestation_type: str
    predicate_type: str
    bundle_href: str | None = None


class Asset(_ManifestModel):
    """One distributable artifact.

    ``sha256`` always comes from the release's checksum listing; the only
    exception is the listing itself.
    """

    filename: str
    media_type: str
    size_bytes: int = 0
    sha256: str
    href: str
    signature_href: str | None = None
    certificate_href: str | None = None
    sbom_href: str | None = None
    attestations: list[AttestationDescriptor] = []


class Image(_ManifestModel):
    """One container image reference."""

    ref: str
    digest: str  # "sha256:<hex>"
    tag: str | None = None
    uri: str | None = None  # "<repository>@sha256:<hex>"
    is_index: bool = False


class Manifest(_ManifestModel):
    """Root release document.

    Every field defaults to empty so a partial or empty document still
    decodes; an empty ``version`` means the producing stage never ran.
    """

    version: str = ""
    name: str = ""
    org: str = ""
    semver: str = ""
    released_at: datetime | None = None
    # Typed read-only; merges build new maps through model_copy.
    assets: Mapping[PlatformKey, Asset] = {}
    images: Mapping[RegistryKey, Image] = {}
    signature_href: str = ""
    certificate_href: str = ""
    asset_attestation: AttestationDescriptor | None = None
    image_attestation: AttestationDescriptor | None = None

    @property
    def is_empty(self) -> bool:
        return not self.version

    @property
    def has_asset_attestations(self) -> bool:
        """Whether at least one asset carries an attestation descriptor."""
        return any(asset.attestations for asset in self.assets.values())


def in_toto_provenance() -> AttestationDescriptor:
    """Manifest-level summary descriptor: in-toto statement, SLSA provenance, no bundle."""
    return AttestationDescriptor(
        attestation_type=ATTESTATION_TYPE_IN_TOTO_V1,
        predicate_type=PREDICATE_TYPE_SLSA_PROVENANCE_V1,
    )
