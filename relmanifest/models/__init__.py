"""Release manifest data models — all Pydantic v2, all frozen (immutable)."""

from relmanifest.models.keys import PlatformKey, RegistryKey
from relmanifest.models.manifest import (
    ATTESTATION_TYPE_IN_TOTO_V1,
    CURRENT_SCHEMA_VERSION,
    KNOWN_SCHEMA_VERSIONS,
    PREDICATE_TYPE_SLSA_PROVENANCE_V1,
    PREDICATE_TYPE_SPDX,
    Asset,
    AttestationDescriptor,
    Image,
    Manifest,
    in_toto_provenance,
)

__all__ = [
    # keys
    "PlatformKey",
    "RegistryKey",
    # records
    "AttestationDescriptor",
    "Asset",
    "Image",
    "Manifest",
    "in_toto_provenance",
    # constants
    "ATTESTATION_TYPE_IN_TOTO_V1",
    "PREDICATE_TYPE_SLSA_PROVENANCE_V1",
    "PREDICATE_TYPE_SPDX",
    "CURRENT_SCHEMA_VERSION",
    "KNOWN_SCHEMA_VERSIONS",
]
