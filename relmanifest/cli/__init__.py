"""relmanifest CLI — Typer-based command-line interface.

Provides the ``relmanifest`` command with subcommands that produce the
binaries manifest, the Windows and images fragments, and the merged
release manifest. Progress is logged to stderr through Rich.
"""
