from pathlib import Path

import pytest

from pluginkit.errors import PreconditionError
from pluginkit.sync import (
    BASE_ONLY,
    DIFFER,
    STATUS_CHANGED,
    STATUS_MISSING,
    STATUS_OK,
    UPSTREAM_ONLY,
    Difference,
    compare_trees,
    sync_check,
)


def _touch(path: Path, text: str = "x") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_compare_trees_reports_each_kind(tmp_path: Path):
    up, base = tmp_path / "up", tmp_path / "base"
    _touch(up / "same.md")
    _touch(base / "same.md")
    _touch(up / "new.md")
    _touch(base / "local.md")
    _touch(up / "nested" / "a.md", "one")
    _touch(base / "nested" / "a.md", "two")

    assert compare_trees(up, base, excludes=()) == [
        Difference(UPSTREAM_ONLY, "new.md"),
        Difference(BASE_ONLY, "local.md"),
        Difference(DIFFER, "nested/a.md"),
    ]


def test_compare_trees_compares_content_not_stat(tmp_path: Path):
    up, base = tmp_path / "up", tmp_path / "base"
    _touch(up / "f.md", "aaaa")
    _touch(base / "f.md", "bbbb")
    assert compare_trees(up, base, excludes=()) == [Difference(DIFFER, "f.md")]


def test_excluded_names_are_ignored(tmp_path: Path):
    up, base = tmp_path / "up", tmp_path / "base"
    _touch(up / "golang-patterns" / "SKILL.md")
    _touch(up / "evolve.md")
    base.mkdir()
    assert compare_trees(up, base) == []


def test_sync_check_statuses(tmp_path: Path):
    up, base = tmp_path / "up", tmp_path / "base"
    _touch(up / "skills" / "s.md")
    _touch(base / "skills" / "s.md")
    _touch(up / "agents" / "a.md")
    _touch(up / "commands" / "c.md")
    _touch(base / "commands" / "c.md", "changed")

    reports = {r.name: r for r in sync_check(base, up)}
    assert reports["skills"].status == STATUS_OK
    assert reports["agents"].status == STATUS_MISSING
    assert reports["commands"].status == STATUS_CHANGED
    assert "hooks" not in reports


def test_sync_check_requires_upstream(tmp_path: Path):
    with pytest.raises(PreconditionError, match="Upstream directory not found"):
        sync_check(tmp_path, tmp_path / "nowhere")
