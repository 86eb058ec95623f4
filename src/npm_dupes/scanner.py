"""
Scan orchestration.

Runs the whole pipeline for one folder: locate manifests, parse them,
aggregate declarations by name, subtract the ignore list and collect the
dependencies that are declared with more than one version constraint.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .aggregator import aggregate, find_duplicates
from .config import AppConfig
from .dependency import DependencyRecord
from .error_handling import ErrorHandler
from .ignore_list import load_ignore_set
from .locator import iter_manifests
from .parsers import read_manifests
from .structured_logging import ScanLogger, log_scan_complete, log_scan_start


@dataclass(frozen=True)
class ScanResult:
    """Complete results of scanning one folder."""

    root: Path
    manifests_found: int
    manifests_parsed: int
    duplicates: List[DependencyRecord]
    scan_duration_ms: int
    warnings: List[str] = field(default_factory=list)
    ignored: List[str] = field(default_factory=list)
    error_stats: Dict[str, int] = field(default_factory=dict)

    @property
    def has_duplicates(self) -> bool:
        return len(self.duplicates) > 0

    @property
    def duplicate_names(self) -> List[str]:
        return [record.name for record in self.duplicates]


def scan_folder(
    folder: Path,
    config: Optional[AppConfig] = None,
    error_handler: Optional[ErrorHandler] = None,
) -> ScanResult:
    """
    Scan a folder for dependencies declared with conflicting constraints.

    Args:
        folder: Project root to scan
        config: Resolved configuration; defaults are used when omitted
        error_handler: Receives per-manifest warnings; a fresh one is used
            when omitted so statistics only cover this scan

    Returns:
        ScanResult: Duplicates sorted by name, plus skipped-manifest warnings

    Raises:
        RootFolderError: If the folder is missing or unreadable
        IgnoreFileError: If the ignore file exists but cannot be read
    """
    config = config or AppConfig()
    scan_config = config.scan
    if error_handler is None:
        error_handler = ErrorHandler(
            log_level=getattr(logging, config.logging.log_level.upper(), logging.WARNING)
        )
    logger = ScanLogger()
    start_time = time.monotonic()

    manifest_paths = iter_manifests(
        folder,
        manifest_name=scan_config.manifest_name,
        excluded_dirs=scan_config.excluded_dirs,
        follow_symlinks=scan_config.follow_symlinks,
        error_handler=error_handler,
    )
    ignore_set = load_ignore_set(folder, scan_config.ignore_file_name)

    log_scan_start(logger, str(folder.resolve()), scan_config.manifest_name)

    paths = list(manifest_paths)
    for path in paths:
        logger.debug("manifest_discovered", path=str(path))

    entries, warnings = read_manifests(
        paths, scan_config.max_file_size_bytes, error_handler
    )
    for warning in warnings:
        logger.debug("manifest_skipped", reason=warning)

    records = aggregate(entries)
    duplicates = find_duplicates(records, ignore_set)
    ignored = sorted(
        name for name in ignore_set if name in records and records[name].is_duplicate
    )

    duration_ms = int((time.monotonic() - start_time) * 1000)
    log_scan_complete(
        logger, duration_ms, len(paths), len(entries), len(duplicates), len(ignored)
    )

    return ScanResult(
        root=folder,
        manifests_found=len(paths),
        manifests_parsed=len(entries),
        duplicates=duplicates,
        scan_duration_ms=duration_ms,
        warnings=warnings,
        ignored=ignored,
        error_stats=error_handler.get_error_stats(),
    )
