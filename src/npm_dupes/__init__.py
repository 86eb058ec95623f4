"""
npm-dupes: find dependencies declared with conflicting version constraints
across the package.json manifests of a project tree.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
