# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for gitignore-style ignore and include filters."""

from __future__ import annotations

from pathlib import Path

from fast_cv.discovery.filters import IgnoreFilter, IncludeFilter, load_ignore_file


def test_hardcoded_layers_apply_without_project_files(tmp_path: Path) -> None:
    flt = IgnoreFilter.for_directory(tmp_path)

    assert flt.ignores("node_modules/pkg/index.js")
    assert flt.ignores("src/__pycache__/mod.pyc")
    assert flt.ignores("package-lock.json")
    assert not flt.ignores("src/app.py")


def test_layers_are_unioned(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("build/\n# comment\n\n*.gen.py\n", encoding="utf-8")
    (tmp_path / ".fcvignore").write_text("legacy/\n", encoding="utf-8")

    flt = IgnoreFilter.for_directory(tmp_path, exclude=["scratch/*.py"])

    assert flt.ignores("build/out.py")
    assert flt.ignores("pkg/models.gen.py")
    assert flt.ignores("legacy/old.py")
    assert flt.ignores("scratch/tmp.py")
    assert not flt.ignores("pkg/models.py")


def test_only_first_project_ignore_file_is_used(tmp_path: Path) -> None:
    (tmp_path / ".gitignore").write_text("from_gitignore/\n", encoding="utf-8")
    (tmp_path / ".ignore").write_text("from_ignore/\n", encoding="utf-8")

    flt = IgnoreFilter.for_directory(tmp_path)

    assert flt.ignores("from_gitignore/a.py")
    assert not flt.ignores("from_ignore/a.py")


def test_unreadable_ignore_file_is_treated_as_empty(tmp_path: Path) -> None:
    # a directory named like an ignore file cannot be read as text
    (tmp_path / ".fcvignore").mkdir()

    assert load_ignore_file(tmp_path / ".fcvignore") == ()
    assert load_ignore_file(tmp_path / "missing") == ()


def test_negation_re_includes_a_path() -> None:
    flt = IgnoreFilter(["*.py", "!keep.py"])

    assert flt.ignores("drop.py")
    assert not flt.ignores("keep.py")


def test_paths_outside_the_root_are_never_ignored() -> None:
    flt = IgnoreFilter(["*"])

    assert not flt.ignores("../elsewhere/file.py")


def test_include_filter_matches_literals_and_globs() -> None:
    flt = IncludeFilter(["src/app.py", "lib/**/*.ts"])

    assert flt.includes("src/app.py")
    assert flt.includes(Path("lib/a/b/c.ts"))
    assert not flt.includes("src/other.py")


def test_include_filter_absent_without_patterns() -> None:
    assert IncludeFilter.from_patterns([]) is None
    assert IncludeFilter.from_patterns(None) is None
    assert IncludeFilter.from_patterns(["  "]) is None
