"""Project scaffolding for `typegen new`."""

from __future__ import annotations

from pathlib import Path

_TYPEGEN_TOML_TEMPLATE = """\
[package]
name = "{name}"
version = "0.1.0"

[output]
top_name = "t"
emit_top = true
line_width = 80
out_dir = "build"

[style]
color = true
"""

_MAIN_TYD_TEMPLATE = """\
// A list of elements of type a.
params a
rec list { Nil, Cons: a * list }
"""

_GITIGNORE = """\
build/
__pycache__/
"""

_README_TEMPLATE = """\
# {name}

Type descriptions compiled to ReasonML by typegen.

## Build

```bash
typegen build
```
"""


def scaffold(name: str, parent: Path | None = None) -> Path:
    """Create a new typegen project directory. Returns the project path."""
    base = parent or Path.cwd()
    project_dir = base / name

    if project_dir.exists():
        raise FileExistsError(f"Directory '{name}' already exists")

    src_dir = project_dir / "src"
    src_dir.mkdir(parents=True)

    (project_dir / "typegen.toml").write_text(_TYPEGEN_TOML_TEMPLATE.format(name=name))
    (src_dir / "main.tyd").write_text(_MAIN_TYD_TEMPLATE)
    (project_dir / ".gitignore").write_text(_GITIGNORE)
    (project_dir / "README.md").write_text(_README_TEMPLATE.format(name=name))

    return project_dir
