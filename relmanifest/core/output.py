"""Reading fragment inputs and writing encoded documents.

CI step outputs use the multi-line heredoc convention::

    <key><<EOF
    <document>
    EOF
"""

from __future__ import annotations

import logging
from pathlib import Path

from relmanifest.core.errors import ManifestError, MissingInputError

logger = logging.getLogger(__name__)

HEREDOC_DELIMITER = "EOF"


def read_fragment(value: str | None) -> str | None:
    """Resolve a fragment argument to its JSON text.

    A value naming an existing file is replaced by the file's content.
    Anything else (inline JSON, empty values, stray text from a failed
    stage) is returned as given and left for the decoder to judge.
    """
    if value is None:
        return None
    stripped = value.strip()
    if not stripped or stripped.startswith("{"):
        return value
    path = Path(stripped)
    try:
        is_file = path.is_file()
    except (OSError, ValueError):
        # e.g. longer than the filesystem's name limit
        is_file = False
    if not is_file:
        logger.debug("Fragment argument is not a file; decoding it as inline text")
        return value
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise MissingInputError(f"failed to read fragment file {path}: {exc}") from exc


def write_document(path: Path, document: str) -> None:
    """Write *document* to *path*, replacing any previous content."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"writing {path}: {exc}") from exc
    logger.debug("Wrote %d bytes to %s", len(document), path)


def format_step_output(key: str, document: str) -> str:
    return f"{key}<<{HEREDOC_DELIMITER}\n{document}\n{HEREDOC_DELIMITER}\n"


def append_step_output(path: Path, key: str, document: str) -> None:
    """Append *document* under *key* to a CI step-output file."""
    path = Path(path)
    try:
        with path.open("a", encoding="utf-8") as fh:
            fh.write(format_step_output(key, document))
    except OSError as exc:
        raise ManifestError(f"opening step output {path}: {exc}") from exc
    logger.debug("Appended %s to step output %s", key, path)
