"""Shared test fixtures for relmanifest."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

import pytest

from relmanifest.core.checksums import ChecksumIndex
from relmanifest.models.keys import PlatformKey, RegistryKey
from relmanifest.models.manifest import (
    ATTESTATION_TYPE_IN_TOTO_V1,
    PREDICATE_TYPE_SLSA_PROVENANCE_V1,
    Asset,
    AttestationDescriptor,
    Image,
    Manifest,
)

BASE_URL = "https://cdn.example/v1"
RELEASED_AT = datetime(2026, 10, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep CI variables and stray .env files out of every test."""
    for var in ("GITHUB_OUTPUT", "GITHUB_ACTIONS"):
        monkeypatch.delenv(var, raising=False)
    for var in (
        "RELMANIFEST_LOG_LEVEL",
        "RELMANIFEST_CHECKSUMS_PATTERN",
        "RELMANIFEST_GHCR_PREFIX",
        "RELMANIFEST_ECR_PUBLIC_PREFIX",
        "RELMANIFEST_GITHUB_OUTPUT",
        "RELMANIFEST_GITHUB_ACTIONS",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def dist_dir(tmp_path: Path) -> Path:
    """An empty artifact directory."""
    path = tmp_path / "dist"
    path.mkdir()
    return path


@pytest.fixture
def make_release_dir(dist_dir: Path) -> Callable[..., Path]:
    """Factory fixture: write artifacts plus a checksum listing into *dist_dir*.

    ``files`` maps filename to content; every file is listed in
    ``tool_checksums.txt`` with a fake digest derived from its name unless
    named in ``unlisted``. ``siblings`` are written without being listed.
    """

    def _factory(
        files: dict[str, bytes],
        *,
        siblings: tuple[str, ...] = (),
        unlisted: tuple[str, ...] = (),
        listing_name: str = "tool_checksums.txt",
    ) -> Path:
        lines = []
        for name, content in files.items():
            (dist_dir / name).write_bytes(content)
            if name not in unlisted:
                lines.append(f"{fake_digest(name)}  {name}")
        for name in siblings:
            (dist_dir / name).write_bytes(b"evidence")
        (dist_dir / listing_name).write_text("\n".join(lines) + "\n")
        return dist_dir

    return _factory


def fake_digest(name: str) -> str:
    """A stable 64-hex stand-in digest for *name*."""
    return (name.encode().hex() * 64)[:64]


@pytest.fixture
def digest_of() -> Callable[[str], str]:
    """The digest ``make_release_dir`` lists for a filename."""
    return fake_digest


@pytest.fixture
def checksums() -> ChecksumIndex:
    return ChecksumIndex({"tool_darwin-arm64.zip": "abc123"})


@pytest.fixture
def attested_asset() -> Asset:
    return Asset(
        filename="tool_linux-amd64.tar.gz",
        media_type="application/gzip",
        size_bytes=2048,
        sha256="f" * 64,
        href=f"{BASE_URL}/tool_linux-amd64.tar.gz",
        signature_href=f"{BASE_URL}/tool_linux-amd64.tar.gz.sig",
        attestations=[
            AttestationDescriptor(
                attestation_type=ATTESTATION_TYPE_IN_TOTO_V1,
                predicate_type=PREDICATE_TYPE_SLSA_PROVENANCE_V1,
                bundle_href=f"{BASE_URL}/tool_linux-amd64.tar.gz.provenance.sigstore.json",
            )
        ],
    )


@pytest.fixture
def plain_asset() -> Asset:
    return Asset(
        filename="tool_darwin-arm64.zip",
        media_type="application/zip",
        size_bytes=1024,
        sha256="abc123",
        href=f"{BASE_URL}/tool_darwin-arm64.zip",
    )


@pytest.fixture
def binaries_manifest(plain_asset: Asset) -> Manifest:
    """A binaries fragment with one unattested asset."""
    return Manifest(
        version="2",
        name="baton-ukg",
        org="conductorone",
        semver="v0.1.98",
        released_at=RELEASED_AT,
        assets={PlatformKey.DARWIN_ARM64: plain_asset},
        signature_href=f"{BASE_URL}/manifest.json.sig",
        certificate_href=f"{BASE_URL}/manifest.json.cert",
    )


@pytest.fixture
def ghcr_image() -> Image:
    return Image(
        ref="ghcr.io/conductorone/baton-ukg:0.1.98",
        digest="sha256:deadbeef",
        tag="v0.1.98",
        uri="ghcr.io/conductorone/baton-ukg@sha256:deadbeef",
        is_index=True,
    )


@pytest.fixture
def images_fragment(ghcr_image: Image) -> dict[RegistryKey, Image]:
    return {RegistryKey.GHCR: ghcr_image}
