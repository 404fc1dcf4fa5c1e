"""Shared pytest fixtures for the typegen test suite."""

from __future__ import annotations

import pytest


@pytest.fixture
def tmp_project(tmp_path):
    """Create a minimal typegen project in a temp dir."""
    (tmp_path / "typegen.toml").write_text(
        '[package]\nname = "testproj"\nversion = "1.0.0"\n'
        '[output]\ntop_name = "root"\nline_width = 80\n'
        "[style]\ncolor = false\n"
    )
    src = tmp_path / "src"
    src.mkdir()
    (src / "list.tyd").write_text("params a\nrec list { Nil, Cons: a * list }\n")
    nested = src / "nested"
    nested.mkdir()
    (nested / "pair.tyd").write_text("unit * (unit + unit)\n")
    return tmp_path
