"""relmanifest: release manifest assembly for multi-stage build pipelines.

Builds a verifiable JSON manifest of a release's binaries, container
images and Windows installers:
  - Asset digests taken only from the release checksum listing
  - Signature, certificate, SBOM and attestation links found by sibling files
  - Per-stage fragments merged into one manifest with attestation summaries
  - Deterministic, field-complete JSON that tolerates schema skew
"""

__version__ = "0.2.0"

from relmanifest.core.merger import ManifestMerger, merge_fragments
from relmanifest.models.manifest import Asset, AttestationDescriptor, Image, Manifest

__all__ = [
    "Asset",
    "AttestationDescriptor",
    "Image",
    "Manifest",
    "ManifestMerger",
    "merge_fragments",
    "__version__",
]
