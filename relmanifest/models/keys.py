"""Closed key sets for the manifest's asset and image maps."""

from __future__ import annotations

from enum import Enum


class PlatformKey(str, Enum):
    """Asset map keys — one per distributable platform artifact."""

    DARWIN_ARM64 = "darwin-arm64"
    DARWIN_AMD64 = "darwin-amd64"
    LINUX_ARM64 = "linux-arm64"
    LINUX_AMD64 = "linux-amd64"
    WINDOWS_AMD64 = "windows-amd64"
    WINDOWS_AMD64_MSI = "windows-amd64-msi"
    CHECKSUMS = "checksums"


class RegistryKey(str, Enum):
    """Image map keys — at most one index image per registry per release."""

    GHCR = "ghcr"
    ECR_PUBLIC = "ecrPublic"
