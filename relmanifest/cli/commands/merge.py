"""``relmanifest merge`` — combine stage fragments into the release manifest.

Each fragment argument is inline JSON or a path to a JSON file. The images
and Windows fragments may be omitted, empty, or ``{}`` when their stage
was skipped. The merged manifest is printed to stdout.
"""

from __future__ import annotations

from pathlib import Path

import typer

from relmanifest.cli._console import emit, fail
from relmanifest.config import ManifestSettings
from relmanifest.core.codec import encode_manifest
from relmanifest.core.errors import ManifestError, MissingInputError
from relmanifest.core.merger import merge_fragments
from relmanifest.core.output import read_fragment

STEP_OUTPUT_KEY = "manifest"


def merge_cmd(
    ctx: typer.Context,
    binaries_manifest: str = typer.Option(
        "", "--binaries-manifest", help="Binaries manifest JSON or file path."
    ),
    images_manifest: str = typer.Option(
        "", "--images-manifest", help="Images fragment JSON or file path (optional)."
    ),
    windows_manifest: str = typer.Option(
        "", "--windows-manifest", help="Windows fragment JSON or file path (optional)."
    ),
    output: Path = typer.Option(
        None, "--output", "-o", help="Also write the manifest to this file."
    ),
    github_output: Path = typer.Option(
        None,
        "--github-output",
        help="Step-output file to append the merged manifest to.",
    ),
) -> None:
    """Merge binaries, images and Windows fragments into one manifest."""
    settings: ManifestSettings = ctx.obj
    try:
        if not binaries_manifest.strip():
            raise MissingInputError("--binaries-manifest is required")
        manifest = merge_fragments(
            read_fragment(binaries_manifest),
            images=read_fragment(images_manifest),
            asset_fragments={"windows": read_fragment(windows_manifest)},
        )
        emit(
            encode_manifest(manifest),
            output=output,
            step_output=github_output,
            step_key=STEP_OUTPUT_KEY,
        )
    except ManifestError as exc:
        fail("merge", exc, annotate=settings.github_actions)
