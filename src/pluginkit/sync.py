from __future__ import annotations

import filecmp
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from pluginkit.errors import PreconditionError

logger = logging.getLogger(__name__)

SYNC_DIRS: tuple[str, ...] = ("skills", "agents", "commands", "scripts/hooks", "scripts/lib", "hooks")

# project-specific content that is never expected upstream
SYNC_EXCLUDES: tuple[str, ...] = (
    "golang-patterns",
    "golang-testing",
    "postgres-patterns",
    "continuous-learning-v2",
    "database-reviewer.md",
    "go-build-resolver.md",
    "go-reviewer.md",
    "go-build.md",
    "go-review.md",
    "go-test.md",
    "instinct-export.md",
    "instinct-import.md",
    "instinct-status.md",
    "evolve.md",
    ".gitkeep",
)

UPSTREAM_ONLY = "upstream-only"
BASE_ONLY = "base-only"
DIFFER = "differ"

STATUS_OK = "ok"
STATUS_MISSING = "missing"
STATUS_CHANGED = "changed"


@dataclass(frozen=True, slots=True)
class Difference:
    kind: str
    path: str


@dataclass(slots=True)
class DirReport:
    name: str
    status: str
    differences: list[Difference] = field(default_factory=list)


def compare_trees(upstream: Path, base: Path, excludes: Iterable[str] = SYNC_EXCLUDES) -> list[Difference]:
    """Recursively compare two directories by content, ignoring excluded names."""
    out: list[Difference] = []
    _walk(filecmp.dircmp(upstream, base, ignore=list(excludes)), "", out)
    return out


def _walk(cmp: filecmp.dircmp, prefix: str, out: list[Difference]) -> None:
    for name in sorted(cmp.left_only):
        out.append(Difference(UPSTREAM_ONLY, prefix + name))
    for name in sorted(cmp.right_only):
        out.append(Difference(BASE_ONLY, prefix + name))
    for name in sorted(cmp.common_files):
        left = Path(cmp.left) / name
        right = Path(cmp.right) / name
        if not filecmp.cmp(left, right, shallow=False):
            out.append(Difference(DIFFER, prefix + name))
    for name in sorted(cmp.common_funny):
        out.append(Difference(DIFFER, prefix + name))
    for name, sub in sorted(cmp.subdirs.items()):
        _walk(sub, f"{prefix}{name}/", out)


def sync_check(
    base: Path,
    upstream: Path,
    dirs: Iterable[str] = SYNC_DIRS,
    excludes: Iterable[str] = SYNC_EXCLUDES,
) -> list[DirReport]:
    if not upstream.is_dir():
        raise PreconditionError(f"Upstream directory not found: {upstream}")
    excludes = tuple(excludes)
    reports: list[DirReport] = []
    for name in dirs:
        upstream_dir = upstream / name
        base_dir = base / name
        if not upstream_dir.is_dir():
            logger.debug("skipping %s: not present upstream", name)
            continue
        if not base_dir.is_dir():
            reports.append(DirReport(name, STATUS_MISSING))
            continue
        differences = compare_trees(upstream_dir, base_dir, excludes)
        reports.append(DirReport(name, STATUS_CHANGED if differences else STATUS_OK, differences))
    return reports
