"""Tests for the manifest codec — field completeness, determinism, skew tolerance."""

from __future__ import annotations

import json
import logging

import pytest

from relmanifest.core.codec import (
    decode_asset_fragment,
    decode_image_fragment,
    decode_manifest,
    encode_fragment,
    encode_manifest,
)
from relmanifest.core.errors import DecodeError
from relmanifest.models.keys import PlatformKey, RegistryKey
from relmanifest.models.manifest import Asset, Image, Manifest, in_toto_provenance

MANIFEST_KEYS = [
    "version",
    "name",
    "org",
    "semver",
    "releasedAt",
    "assets",
    "images",
    "signatureHref",
    "certificateHref",
    "assetAttestation",
    "imageAttestation",
]


class TestEncodeManifest:
    def test_every_field_emitted_in_order(self):
        payload = json.loads(encode_manifest(Manifest()))
        assert list(payload) == MANIFEST_KEYS
        assert payload["assets"] == {}
        assert payload["assetAttestation"] is None

    def test_asset_fields_complete(self, binaries_manifest: Manifest):
        asset = json.loads(encode_manifest(binaries_manifest))["assets"]["darwin-arm64"]
        assert list(asset) == [
            "filename",
            "mediaType",
            "sizeBytes",
            "sha256",
            "href",
            "signatureHref",
            "certificateHref",
            "sbomHref",
            "attestations",
        ]
        assert asset["sbomHref"] is None
        assert asset["sizeBytes"] == 1024

    def test_pretty_printed(self, binaries_manifest: Manifest):
        text = encode_manifest(binaries_manifest)
        assert text.startswith("{\n  \"version\": \"2\"")

    def test_timestamp_utc(self, binaries_manifest: Manifest):
        payload = json.loads(encode_manifest(binaries_manifest))
        assert payload["releasedAt"] == "2026-10-01T12:00:00Z"

    def test_deterministic_key_order(self, plain_asset: Asset, attested_asset: Asset):
        a = Manifest(
            version="2",
            assets={PlatformKey.LINUX_AMD64: attested_asset, PlatformKey.DARWIN_ARM64: plain_asset},
        )
        b = Manifest(
            version="2",
            assets={PlatformKey.DARWIN_ARM64: plain_asset, PlatformKey.LINUX_AMD64: attested_asset},
        )
        assert encode_manifest(a) == encode_manifest(b)
        assert list(json.loads(encode_manifest(a))["assets"]) == ["darwin-arm64", "linux-amd64"]

    def test_image_attestation_has_null_bundle(self, binaries_manifest: Manifest):
        manifest = binaries_manifest.model_copy(update={"image_attestation": in_toto_provenance()})
        payload = json.loads(encode_manifest(manifest))
        assert payload["imageAttestation"] == {
            "attestationType": "https://in-toto.io/Statement/v1",
            "predicateType": "https://slsa.dev/provenance/v1",
            "bundleHref": None,
        }


class TestFragments:
    def test_fragment_element_matches_manifest_element(
        self, binaries_manifest: Manifest, images_fragment: dict[RegistryKey, Image]
    ):
        manifest = binaries_manifest.model_copy(update={"images": images_fragment})
        full = json.loads(encode_manifest(manifest))
        assert json.loads(encode_fragment(images_fragment))["ghcr"] == full["images"]["ghcr"]
        assert (
            json.loads(encode_fragment(binaries_manifest.assets))["darwin-arm64"]
            == full["assets"]["darwin-arm64"]
        )

    def test_image_fragment_roundtrip(self, images_fragment: dict[RegistryKey, Image]):
        assert decode_image_fragment(encode_fragment(images_fragment)) == images_fragment

    def test_asset_fragment_keys_typed(self, attested_asset: Asset):
        decoded = decode_asset_fragment(
            encode_fragment({PlatformKey.WINDOWS_AMD64_MSI: attested_asset})
        )
        assert list(decoded) == [PlatformKey.WINDOWS_AMD64_MSI]
        assert decoded[PlatformKey.WINDOWS_AMD64_MSI] == attested_asset

    def test_unknown_key_rejected(self, plain_asset: Asset):
        text = json.dumps({"solaris-sparc": json.loads(plain_asset.model_dump_json(by_alias=True))})
        with pytest.raises(DecodeError):
            decode_asset_fragment(text)

    def test_empty_fragment(self):
        assert decode_image_fragment("{}") == {}


class TestDecode:
    def test_roundtrip(self, binaries_manifest: Manifest, images_fragment, attested_asset: Asset):
        manifest = binaries_manifest.model_copy(
            update={
                "images": images_fragment,
                "assets": {**binaries_manifest.assets, PlatformKey.LINUX_AMD64: attested_asset},
                "image_attestation": in_toto_provenance(),
                "asset_attestation": in_toto_provenance(),
            }
        )
        assert decode_manifest(encode_manifest(manifest)) == manifest

    def test_unknown_fields_discarded(self):
        text = json.dumps({
            "version": "3",
            "name": "tool",
            "futureField": {"nested": True},
            "assets": {
                "checksums": {
                    "filename": "checksums.txt",
                    "mediaType": "text/plain",
                    "sha256": "abc",
                    "href": "https://cdn.example/checksums.txt",
                    "rekorEntry": "ignored",
                }
            },
        })
        manifest = decode_manifest(text)
        assert manifest.version == "3"
        assert manifest.assets[PlatformKey.CHECKSUMS].filename == "checksums.txt"

    def test_version_one_manifest_loads(self):
        text = json.dumps({
            "version": "1",
            "name": "tool",
            "org": "acme",
            "semver": "v0.0.8",
            "releasedAt": "2025-01-02T03:04:05Z",
            "assets": {},
            "signatureHref": "https://cdn.example/manifest.json.sig",
            "certificateHref": "https://cdn.example/manifest.json.cert",
        })
        manifest = decode_manifest(text)
        assert manifest.version == "1"
        assert manifest.asset_attestation is None
        assert manifest.images == {}

    def test_version_one_legacy_image_keys(self, caplog):
        text = json.dumps({
            "version": "1",
            "name": "x",
            "images": {
                "index": {"ref": "ghcr.io/conductorone/x:1.0", "digest": "sha256:ab"},
                "linux-amd64": {
                    "ref": "ghcr.io/conductorone/x:1.0-amd64",
                    "digest": "sha256:cd",
                },
            },
        })
        with caplog.at_level(logging.WARNING, logger="relmanifest"):
            manifest = decode_manifest(text)
        assert list(manifest.images) == [RegistryKey.GHCR]
        image = manifest.images[RegistryKey.GHCR]
        assert image.ref == "ghcr.io/conductorone/x:1.0"
        assert image.digest == "sha256:ab"
        assert image.is_index is True
        assert "linux-amd64" in caplog.text

    def test_legacy_image_keys_rejected_in_current_schema(self):
        text = json.dumps({
            "version": "2",
            "images": {"index": {"ref": "r", "digest": "sha256:ab"}},
        })
        with pytest.raises(DecodeError):
            decode_manifest(text)

    def test_protojson_int64_size_accepted(self):
        text = json.dumps({
            "filename": "a.zip",
            "mediaType": "application/zip",
            "sizeBytes": "4096",
            "sha256": "abc",
            "href": "https://cdn.example/a.zip",
        })
        fragment = decode_asset_fragment(f'{{"windows-amd64": {text}}}')
        assert fragment[PlatformKey.WINDOWS_AMD64].size_bytes == 4096

    def test_snake_case_accepted(self):
        manifest = decode_manifest('{"version": "2", "signature_href": "x"}')
        assert manifest.signature_href == "x"

    def test_invalid_json(self):
        with pytest.raises(DecodeError) as excinfo:
            decode_manifest("{not json", label="binaries manifest")
        assert excinfo.value.raw == "{not json"
        assert "binaries manifest" in str(excinfo.value)

    def test_non_object(self):
        with pytest.raises(DecodeError, match="expected a JSON object"):
            decode_image_fragment("[]")

    def test_wrong_shape(self):
        with pytest.raises(DecodeError):
            decode_image_fragment('{"ghcr": {"ref": 7}}')
