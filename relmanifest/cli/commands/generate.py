"""``relmanifest generate`` — build the binaries manifest from an asset directory.

Writes the manifest to ``--output`` and, when a step-output file is
configured, appends it there as ``binaries_manifest``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

import typer

from relmanifest.cli._console import emit, fail
from relmanifest.config import ManifestSettings
from relmanifest.core.codec import encode_manifest
from relmanifest.core.errors import ManifestError, MissingInputError
from relmanifest.producers.binaries import generate_manifest

logger = logging.getLogger(__name__)

STEP_OUTPUT_KEY = "binaries_manifest"


def generate_cmd(
    ctx: typer.Context,
    asset_dir: Path = typer.Option(
        Path("."), "--asset-dir", help="Directory containing distribution artifacts."
    ),
    repo_name: str = typer.Option("", "--repo-name", help="Repository name."),
    org_name: str = typer.Option("", "--org-name", help="Organization name."),
    tag: str = typer.Option("", "--tag", help="Release tag (e.g. v0.0.8)."),
    base_url: str = typer.Option(
        "", "--base-url", help="Base URL for artifact downloads."
    ),
    output: Path = typer.Option(
        Path("manifest.json"), "--output", "-o", help="Output file path."
    ),
    github_output: Path = typer.Option(
        None,
        "--github-output",
        help="Step-output file to append binaries_manifest to "
        "(defaults to $GITHUB_OUTPUT).",
    ),
    released_at: datetime = typer.Option(
        None,
        "--released-at",
        formats=["%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%dT%H:%M:%S"],
        help="Release timestamp (UTC if no offset); defaults to now.",
    ),
) -> None:
    """Generate the binaries release manifest."""
    settings: ManifestSettings = ctx.obj
    if released_at is not None and released_at.tzinfo is None:
        released_at = released_at.replace(tzinfo=timezone.utc)

    try:
        if not (repo_name and org_name and tag and base_url):
            raise MissingInputError(
                "--repo-name, --org-name, --tag and --base-url are required"
            )
        manifest = generate_manifest(
            asset_dir,
            name=repo_name,
            org=org_name,
            tag=tag,
            base_url=base_url,
            checksums_pattern=settings.checksums_pattern,
            released_at=released_at,
        )
        emit(
            encode_manifest(manifest),
            output=output,
            step_output=github_output or settings.github_output,
            step_key=STEP_OUTPUT_KEY,
            to_stdout=False,
        )
    except ManifestError as exc:
        fail("generate", exc, annotate=settings.github_actions)

    logger.info("Generated manifest: %s", output)
