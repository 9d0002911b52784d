"""``relmanifest windows`` — emit the Windows asset fragment as JSON on stdout."""

from __future__ import annotations

from pathlib import Path

import typer

from relmanifest.cli._console import emit, fail
from relmanifest.config import ManifestSettings
from relmanifest.core.codec import encode_fragment
from relmanifest.core.errors import ManifestError, MissingInputError
from relmanifest.producers.windows import generate_windows_fragment, windows_base_url

STEP_OUTPUT_KEY = "windows_manifest"


def windows_cmd(
    ctx: typer.Context,
    dist_dir: Path = typer.Option(
        None,
        "--dist-dir",
        help="Dist directory holding the Windows artifacts and a checksums.txt listing them.",
    ),
    cdn_base_url: str = typer.Option(
        None, "--cdn-base-url", help="CDN base URL for artifact links."
    ),
    s3_directory: str = typer.Option(
        None, "--s3-directory", help="Directory under the CDN base URL."
    ),
    output: Path = typer.Option(
        None, "--output", "-o", help="Also write the fragment to this file."
    ),
    github_output: Path = typer.Option(
        None,
        "--github-output",
        help="Step-output file to append windows_manifest to.",
    ),
) -> None:
    """Generate the Windows asset fragment (zip and MSI).

    Digests come from the checksums.txt listing in the dist directory, so
    the MSI must be added to that listing after it is built.
    """
    settings: ManifestSettings = ctx.obj
    try:
        if dist_dir is None or not cdn_base_url or not s3_directory:
            raise MissingInputError(
                "--dist-dir, --cdn-base-url and --s3-directory are all required"
            )
        fragment = generate_windows_fragment(
            dist_dir,
            windows_base_url(cdn_base_url, s3_directory),
            checksums_pattern=settings.checksums_pattern,
        )
        emit(
            encode_fragment(fragment),
            output=output,
            step_output=github_output,
            step_key=STEP_OUTPUT_KEY,
        )
    except ManifestError as exc:
        fail("windows", exc, annotate=settings.github_actions)
