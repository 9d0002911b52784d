"""Fragment producers — the build-stage collaborators that feed the merger.

Each producer turns one stage's outputs (an asset directory, a Windows
dist directory, a container digest file) into a Manifest or fragment.
"""
