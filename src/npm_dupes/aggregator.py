"""Grouping of declared dependencies by name and duplicate detection."""

from typing import AbstractSet, Dict, Iterable, List

from .dependency import DependencyRecord, ManifestEntry


def aggregate(entries: Iterable[ManifestEntry]) -> Dict[str, DependencyRecord]:
    """
    Build one record per dependency name.

    Runtime and dev dependencies are merged: a name declared in both sections
    of one manifest contributes two occurrences to the same record. Records
    and their occurrences keep discovery order.
    """
    records: Dict[str, DependencyRecord] = {}

    for entry in entries:
        for deps in (entry.dependencies, entry.dev_dependencies):
            for name, version_constraint in deps.items():
                record = records.get(name)
                if record is None:
                    record = records[name] = DependencyRecord(name)
                record.add(version_constraint, entry.path)

    return records


def find_duplicates(
    records: Dict[str, DependencyRecord], ignore_set: AbstractSet[str] = frozenset()
) -> List[DependencyRecord]:
    """Records with two or more distinct constraints, not ignored, sorted by name."""
    return sorted(
        (
            record
            for name, record in records.items()
            if name not in ignore_set and record.is_duplicate
        ),
        key=lambda record: record.name,
    )
