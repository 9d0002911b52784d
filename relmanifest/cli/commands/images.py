"""``relmanifest images`` — emit the container images fragment from a digest file."""

from __future__ import annotations

from pathlib import Path

import typer

from relmanifest.cli._console import emit, fail
from relmanifest.config import ManifestSettings
from relmanifest.core.codec import encode_fragment
from relmanifest.core.errors import ManifestError, MissingInputError
from relmanifest.producers.images import (
    default_digest_file,
    extract_images_from_file,
    release_version,
)

STEP_OUTPUT_KEY = "images_manifest"


def images_cmd(
    ctx: typer.Context,
    tag: str = typer.Option("", "--tag", help="Release tag (e.g. v0.1.65 or 0.1.65)."),
    asset_dir: Path = typer.Option(
        Path("dist"), "--asset-dir", help="Directory containing the digest file."
    ),
    digest_file: Path = typer.Option(
        None,
        "--digest-file",
        help="Digest file path; defaults to <asset-dir>/<repo>_<version>_digests.txt.",
    ),
    repo_name: str = typer.Option(
        None, "--repo-name", help="Repository name, used to locate the digest file."
    ),
    github_output: Path = typer.Option(
        None,
        "--github-output",
        help="Step-output file to append images_manifest to "
        "(defaults to $GITHUB_OUTPUT).",
    ),
) -> None:
    """Extract index image digests into the images fragment."""
    settings: ManifestSettings = ctx.obj
    try:
        if not tag:
            raise MissingInputError("--tag is required")
        if digest_file is None:
            if not repo_name:
                raise MissingInputError(
                    "either --digest-file or --repo-name must be provided"
                )
            digest_file = default_digest_file(
                asset_dir, repo_name, release_version(tag)
            )
        fragment = extract_images_from_file(
            digest_file, tag, settings.registry_prefixes
        )
        emit(
            encode_fragment(fragment),
            step_output=github_output or settings.github_output,
            step_key=STEP_OUTPUT_KEY,
        )
    except ManifestError as exc:
        fail("images", exc, annotate=settings.github_actions)
