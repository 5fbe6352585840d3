"""Path and filename utilities.

Provides the output-name helpers used by the exporter and the CLI.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Optional


def output_filename(
    name: Optional[str],
    default: str,
    extension: str = ".pdf",
) -> str:
    """Build the output file name for an export.

    Falls back to ``default`` for an empty name, replaces characters that
    are unsafe in file names, and appends ``extension`` unless the name
    already ends with it.

    Args:
        name: Caller-supplied name, may be None.
        default: Name used when ``name`` is empty.
        extension: Format extension including the dot.

    Returns:
        Safe file name with extension.

    Examples:
        >>> output_filename(None, "master_document")
        'master_document.pdf'
        >>> output_filename("Q3 report.PDF", "x")
        'Q3 report.PDF'
        >>> output_filename("a/b:c", "x")
        'a_b_c.pdf'
    """
    stem = (name or "").strip() or default
    stem = re.sub(r'[\\/:*?"<>|\x00-\x1f]+', "_", stem).strip(" .") or default
    if not stem.lower().endswith(extension.lower()):
        stem = f"{stem}{extension}"
    return stem


def unique_path(path: Path) -> Path:
    """Return ``path`` or a ``name (n).ext`` sibling that doesn't exist yet.

    Examples:
        >>> unique_path(Path("/tmp/does-not-exist.pdf"))
        PosixPath('/tmp/does-not-exist.pdf')
    """
    if not path.exists():
        return path
    suffix = 1
    while True:
        candidate = path.with_name(f"{path.stem} ({suffix}){path.suffix}")
        if not candidate.exists():
            return candidate
        suffix += 1
