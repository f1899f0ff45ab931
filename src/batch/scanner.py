# src/batch/scanner.py - v2
"""Folder scanner: discover and load lease documents from a directory.

Only the top level of the folder is read. JSON files are parsed and
re-serialized so their content reaches the capability as text; a JSON file
that fails to parse is passed through verbatim.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from leaseorganizer.batch.models import ScanError, ScanResult, SourceDocument

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS: tuple[str, ...] = (".json", ".txt", ".md", ".text")


def _to_text(raw: str, extension: str) -> str:
    if extension != ".json":
        return raw
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        return raw
    return parsed if isinstance(parsed, str) else json.dumps(parsed)


def scan_folder(
    folder: str | Path,
    extensions: list[str] | None = None,
) -> ScanResult:
    """Read every supported document in a folder.

    Args:
        folder: Directory to read.
        extensions: Subset of SUPPORTED_EXTENSIONS to include (default: all).

    Returns:
        ScanResult with documents sorted by filename. A missing folder
        yields no documents and a single error instead of raising.
    """
    root = Path(folder)
    if not root.exists():
        return ScanResult(errors=[ScanError(filename=str(folder), error=f"Folder not found: {folder}")])
    if not root.is_dir():
        return ScanResult(errors=[ScanError(filename=str(folder), error="Path is not a directory")])

    allowed = {e.lower() for e in extensions} if extensions else set(SUPPORTED_EXTENSIONS)
    allowed &= set(SUPPORTED_EXTENSIONS)

    documents: list[SourceDocument] = []
    errors: list[ScanError] = []
    for path in sorted(root.iterdir(), key=lambda p: p.name):
        ext = path.suffix.lower()
        if not path.is_file() or ext not in allowed:
            continue
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", path.name, e)
            errors.append(ScanError(filename=path.name, error=str(e)))
            continue
        documents.append(
            SourceDocument(
                id=path.stem,
                filename=path.name,
                extension=path.suffix,
                content=_to_text(raw, ext),
            )
        )

    logger.info("Scanned %s: found %d documents", root, len(documents))
    return ScanResult(documents=documents, errors=errors)
