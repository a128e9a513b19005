"""
Root build file locator.

A multi-module Android project has one ``build.gradle`` at its root and
one more per module, deeper in the tree. The root ones are the matches
with the fewest path components. When several sit at that depth (two
sibling build roots), the first in sorted order wins and a warning is
recorded: a best-effort choice, not an error.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from wrapper_step.core.errors import DiscoveryError

logger = logging.getLogger(__name__)

BUILD_FILE_NAMES = ("build.gradle", "build.gradle.kts")

# Never descended into while listing
_SKIP_DIRS = frozenset({".git"})


@dataclass
class RootBuildFileResult:
    """The chosen root build file and how it was chosen."""

    path: Path
    candidates: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def ambiguous(self) -> bool:
        return len(self.candidates) > 1

    @property
    def gradlew_path(self) -> Path:
        """Where the wrapper script belongs: next to the root build file."""
        return self.path.parent / "gradlew"

    def to_dict(self) -> dict:
        return {
            "root_build_file": str(self.path),
            "candidates": [str(p) for p in self.candidates],
            "warnings": self.warnings,
        }


def _sort_key(path: Path) -> tuple[int, tuple[str, ...]]:
    return len(path.parts), path.parts


def list_paths_sorted_by_components(root: Path) -> list[Path]:
    """Every file and directory below ``root``, shallowest first.

    Ties in depth are broken by comparing path components in order,
    which makes the listing deterministic across filesystems.
    """
    root = root.resolve()
    paths: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [d for d in dirnames if d not in _SKIP_DIRS]
        base = Path(dirpath)
        paths.extend(base / d for d in dirnames)
        paths.extend(base / f for f in filenames)
    return sorted(paths, key=_sort_key)


def filter_root_build_files(paths: list[Path]) -> list[Path]:
    """Keep the build files at the minimal depth among all build files.

    Input order is preserved, so a sorted listing yields sorted output.
    """
    build_files = [p for p in paths if p.name in BUILD_FILE_NAMES]
    if not build_files:
        return []
    min_depth = min(len(p.parts) for p in build_files)
    return [p for p in build_files if len(p.parts) == min_depth]


def locate_root_build_file(project_root: Path) -> RootBuildFileResult:
    """Find the build file that anchors the project's build tree.

    Raises:
        DiscoveryError: If the project contains no build file at all.
    """
    logger.info("Search for root build.gradle file in %s", project_root)

    try:
        listing = list_paths_sorted_by_components(project_root)
    except OSError as e:
        raise DiscoveryError(f"Failed to search for files in ({project_root}), error: {e}") from e

    candidates = filter_root_build_files(listing)
    if not candidates:
        raise DiscoveryError("No root build.gradle file found")

    result = RootBuildFileResult(path=candidates[0], candidates=candidates)

    if result.ambiguous:
        logger.warning("Multiple root build.gradle file found:")
        for pth in candidates:
            logger.warning("- %s", pth)
        result.warnings.append(
            "Multiple root build.gradle files found: "
            + ", ".join(str(p) for p in candidates)
            + f". Using {result.path}"
        )

    logger.info("root build.gradle path: %s", result.path)
    return result
