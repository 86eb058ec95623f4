import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .dependency import ManifestEntry, ParseOutcome
from .error_handling import (
    ErrorCategory,
    ErrorHandler,
    ManifestIOError,
    ManifestParseError,
    NpmDupesError,
    ScanIOError,
    get_error_handler,
    log_filesystem_error,
    log_parsing_error,
)

DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024

DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")


def _read_manifest_text(path: Path, max_file_size_bytes: int) -> str:
    """
    Read a manifest fully, enforcing the size limit.

    Raises:
        ManifestIOError: If the file cannot be read or is too large
        ManifestParseError: If the file is not valid UTF-8
    """
    try:
        file_size = path.stat().st_size
    except OSError as e:
        raise ManifestIOError(f"Cannot access file: {e.strerror or e}", path)

    if file_size > max_file_size_bytes:
        raise ManifestIOError(
            f"File too large: {file_size} bytes (max: {max_file_size_bytes})", path
        )

    try:
        with open(path, encoding="utf-8-sig") as f:
            return f.read()
    except UnicodeDecodeError:
        raise ManifestParseError("File contains invalid UTF-8 characters", path)
    except PermissionError:
        raise ManifestIOError("Permission denied reading file", path)
    except OSError as e:
        raise ManifestIOError(f"Error reading file: {e.strerror or e}", path)


def _extract_section(
    data: Dict[str, Any],
    section: str,
    path: Path,
    error_handler: ErrorHandler,
) -> Dict[str, str]:
    section_deps = data.get(section)
    if section_deps is None:
        return {}

    if not isinstance(section_deps, dict):
        error_handler.warning(
            ErrorCategory.PARSING,
            f"Ignoring '{section}': expected an object, got {type(section_deps).__name__}",
            "parsers",
            "parse_package_json",
            details={"file_path": str(path)},
        )
        return {}

    deps: Dict[str, str] = {}
    for package, version in section_deps.items():
        if not isinstance(version, str):
            error_handler.warning(
                ErrorCategory.PARSING,
                f"Ignoring '{package}' in {section}: version is not a string",
                "parsers",
                "parse_package_json",
                details={"file_path": str(path)},
            )
            continue
        deps[package] = version

    return deps


def parse_package_json(
    path: Path,
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES,
    error_handler: Optional[ErrorHandler] = None,
) -> ManifestEntry:
    """
    Parse a package.json file into a ManifestEntry.

    Extracts the ``dependencies`` and ``devDependencies`` sections. Missing
    sections are empty; constraint strings are kept exactly as written.

    Args:
        path: Path to the package.json file
        max_file_size_bytes: Files larger than this are refused
        error_handler: Receives warnings about ignored entries

    Returns:
        ManifestEntry: The manifest's declared dependencies

    Raises:
        ManifestIOError: If the file cannot be read
        ManifestParseError: If the file is not a JSON object
    """
    error_handler = error_handler or get_error_handler()
    content = _read_manifest_text(path, max_file_size_bytes)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"Invalid JSON format: {e}", path)
    except RecursionError:
        raise ManifestParseError("JSON nested too deeply", path)

    if not isinstance(data, dict):
        raise ManifestParseError(
            f"package.json must contain a JSON object, got {type(data).__name__}", path
        )

    dependencies, dev_dependencies = (
        _extract_section(data, section, path, error_handler)
        for section in DEPENDENCY_SECTIONS
    )
    return ManifestEntry(
        path=path, dependencies=dependencies, dev_dependencies=dev_dependencies
    )


def load_manifest(
    path: Path,
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES,
    error_handler: Optional[ErrorHandler] = None,
) -> ParseOutcome:
    """
    Parse one manifest without raising.

    A manifest that cannot be read or parsed becomes a failed outcome and is
    reported as a warning, so the caller can carry on with the others.
    """
    try:
        entry = parse_package_json(path, max_file_size_bytes, error_handler)
    except NpmDupesError as e:
        reason = f"{path}: {e}"
        report = log_filesystem_error if isinstance(e, ScanIOError) else log_parsing_error
        report(
            f"Skipping manifest: {e}",
            "parsers",
            "load_manifest",
            path,
            exception=e,
            error_handler=error_handler,
        )
        return ParseOutcome(path=path, error=reason)

    return ParseOutcome(path=path, entry=entry)


def read_manifests(
    paths: Iterable[Path],
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES,
    error_handler: Optional[ErrorHandler] = None,
) -> Tuple[List[ManifestEntry], List[str]]:
    """Parse every manifest, splitting the results into entries and warnings."""
    entries: List[ManifestEntry] = []
    warnings: List[str] = []

    for path in paths:
        outcome = load_manifest(path, max_file_size_bytes, error_handler)
        if outcome.ok:
            entries.append(outcome.entry)
        else:
            warnings.append(outcome.error)

    return entries, warnings
