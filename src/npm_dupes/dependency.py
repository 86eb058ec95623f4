# In src/npm_dupes/dependency.py
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(frozen=True)
class ManifestEntry:
    """Dependencies declared by a single manifest file."""

    path: Path
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class Occurrence:
    """One declaration of a dependency: the constraint and where it came from."""

    version_constraint: str
    source_path: Path


@dataclass
class DependencyRecord:
    """All declarations of one dependency name across a scan."""

    name: str
    occurrences: List[Occurrence] = field(default_factory=list)

    def add(self, version_constraint: str, source_path: Path) -> None:
        self.occurrences.append(Occurrence(version_constraint, source_path))

    @property
    def distinct_constraints(self) -> List[str]:
        """Distinct constraint strings in the order they were first seen."""
        return list(dict.fromkeys(o.version_constraint for o in self.occurrences))

    def paths_for(self, version_constraint: str) -> List[Path]:
        """Manifests declaring the given constraint, each listed once."""
        return list(
            dict.fromkeys(
                o.source_path
                for o in self.occurrences
                if o.version_constraint == version_constraint
            )
        )

    @property
    def is_duplicate(self) -> bool:
        return len(self.distinct_constraints) > 1


@dataclass(frozen=True)
class ParseOutcome:
    """Result of reading one manifest: either an entry or the reason it failed."""

    path: Path
    entry: Optional[ManifestEntry] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.entry is not None
