"""Process configuration — env-driven, read only at the CLI boundary.

Centralized settings using pydantic-settings. Reads from a .env file and
RELMANIFEST_* environment variables; the CI step-output path and the
GitHub Actions marker are also read from their standard variables.
Core functions never read this module; the CLI passes values in.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from relmanifest.models.keys import RegistryKey


class ManifestSettings(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export RELMANIFEST_LOG_LEVEL=DEBUG
        export RELMANIFEST_ECR_PUBLIC_PREFIX=public.ecr.aws/conductorone/

    Or via .env file::

        RELMANIFEST_CHECKSUMS_PATTERN=*_checksums.txt
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="RELMANIFEST_",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    log_level: str = "INFO"

    # Artifact discovery
    checksums_pattern: str = "*checksums.txt"

    # Registry prefixes for image extraction; empty disables a registry
    ghcr_prefix: str = "ghcr.io/conductorone/"
    ecr_public_prefix: str = ""

    # CI integration
    github_output: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("RELMANIFEST_GITHUB_OUTPUT", "GITHUB_OUTPUT"),
    )
    github_actions: bool = Field(
        default=False,
        validation_alias=AliasChoices("RELMANIFEST_GITHUB_ACTIONS", "GITHUB_ACTIONS"),
    )

    @property
    def registry_prefixes(self) -> dict[RegistryKey, str]:
        """Configured registry prefixes, disabled registries left out."""
        prefixes = {
            RegistryKey.GHCR: self.ghcr_prefix,
            RegistryKey.ECR_PUBLIC: self.ecr_public_prefix,
        }
        return {key: prefix for key, prefix in prefixes.items() if prefix}
