"""Manifest discovery: walk a project tree and yield package manifests."""

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Set

from .error_handling import ErrorHandler, RootFolderError, log_filesystem_error

MANIFEST_NAME = "package.json"
EXCLUDED_DIRS = frozenset({"node_modules", ".git", ".venv"})


def validate_root(root: Path) -> Path:
    """
    Check that root is a readable directory.

    Raises:
        RootFolderError: If root is missing, not a directory, or unreadable
    """
    if not root.exists():
        raise RootFolderError(f"Folder does not exist: {root}", root)
    if not root.is_dir():
        raise RootFolderError(f"Path is not a directory: {root}", root)
    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise RootFolderError(f"Cannot read folder {root}: {e.strerror or e}", root)
    return root


def iter_manifests(
    root: Path,
    manifest_name: str = MANIFEST_NAME,
    excluded_dirs: Iterable[str] = EXCLUDED_DIRS,
    follow_symlinks: bool = False,
    error_handler: Optional[ErrorHandler] = None,
) -> Iterator[Path]:
    """
    Yield manifest paths under root in a deterministic depth-first order.

    The root is validated before the generator is returned, so a missing
    folder fails immediately rather than on first iteration. Excluded
    directories (dependency install folders) are never entered. Unreadable
    subdirectories are reported and skipped.
    """
    validate_root(root)
    return _walk(root, manifest_name, frozenset(excluded_dirs), follow_symlinks, error_handler)


def _walk(
    root: Path,
    manifest_name: str,
    excluded: frozenset,
    follow_symlinks: bool,
    error_handler: Optional[ErrorHandler],
) -> Iterator[Path]:
    def on_error(error: OSError) -> None:
        log_filesystem_error(
            f"Skipping unreadable directory: {error.strerror or error}",
            "locator",
            "iter_manifests",
            path=Path(error.filename) if error.filename else None,
            exception=error,
            error_handler=error_handler,
        )

    visited: Set[str] = set()

    for dirpath, dirnames, filenames in os.walk(
        root, onerror=on_error, followlinks=follow_symlinks
    ):
        if follow_symlinks:
            real = os.path.realpath(dirpath)
            if real in visited:
                dirnames[:] = []
                continue
            visited.add(real)

        dirnames[:] = sorted(d for d in dirnames if d not in excluded)

        if manifest_name in filenames:
            candidate = Path(dirpath) / manifest_name
            if candidate.is_file():
                yield candidate


def discover_manifests(root: Path, **kwargs) -> List[Path]:
    """Collect every manifest under root into a list."""
    return list(iter_manifests(root, **kwargs))
