"""Main Typer application — imports and registers all CLI commands.

Entry point: ``relmanifest`` (configured via pyproject.toml scripts).

Commands: generate, windows, images, merge.
"""

from __future__ import annotations

import typer

from relmanifest.cli._console import configure_logging
from relmanifest.cli.commands.generate import generate_cmd
from relmanifest.cli.commands.images import images_cmd
from relmanifest.cli.commands.merge import merge_cmd
from relmanifest.cli.commands.windows import windows_cmd
from relmanifest.config import ManifestSettings

app = typer.Typer(
    name="relmanifest",
    help="relmanifest: assemble and merge signed release manifests.",
    no_args_is_help=True,
    add_completion=False,
)


@app.callback()
def main_callback(
    ctx: typer.Context,
    log_level: str = typer.Option(
        None, "--log-level", help="Log level (defaults to $RELMANIFEST_LOG_LEVEL or INFO)."
    ),
) -> None:
    """Load settings once per invocation and hand them to the subcommand."""
    settings = ManifestSettings()
    configure_logging(log_level or settings.log_level)
    ctx.obj = settings


# Register subcommands
app.command(name="generate", help="Generate the binaries manifest.")(generate_cmd)
app.command(name="windows", help="Generate the Windows asset fragment.")(windows_cmd)
app.command(name="images", help="Extract the container images fragment.")(images_cmd)
app.command(name="merge", help="Merge fragments into the release manifest.")(merge_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
