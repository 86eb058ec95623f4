"""Loading of the per-project ignore list (.ndignore)."""

from pathlib import Path
from typing import Set

from .error_handling import IgnoreFileError

IGNORE_FILE_NAME = ".ndignore"


def parse_ignore_text(text: str) -> Set[str]:
    """One dependency name per line; blank lines are skipped, case is kept."""
    return {line.strip() for line in text.splitlines() if line.strip()}


def load_ignore_set(root: Path, file_name: str = IGNORE_FILE_NAME) -> Set[str]:
    """
    Read the ignore file at the project root.

    A missing file means nothing is ignored.

    Raises:
        IgnoreFileError: If the file exists but cannot be read
    """
    ignore_path = root / file_name
    if not ignore_path.is_file():
        return set()

    try:
        text = ignore_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise IgnoreFileError(f"Cannot read ignore file {ignore_path}: {e}", ignore_path)

    return parse_ignore_text(text)
