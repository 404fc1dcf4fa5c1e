"""TOML config loading for typegen.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "typegen.toml"


@dataclass
class PackageConfig:
    name: str = "untitled"
    version: str = "0.0.0"


@dataclass
class OutputConfig:
    top_name: str = "t"
    emit_top: bool = True
    line_width: int = 80
    out_dir: str = "build"


@dataclass
class StyleConfig:
    color: bool = True


@dataclass
class TypegenConfig:
    package: PackageConfig = field(default_factory=PackageConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    style: StyleConfig = field(default_factory=StyleConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find typegen.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> TypegenConfig:
    """Parse a typegen.toml file into a TypegenConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = TypegenConfig()

    if "package" in data:
        pkg = data["package"]
        config.package = PackageConfig(
            name=pkg.get("name", "untitled"),
            version=pkg.get("version", "0.0.0"),
        )

    if "output" in data:
        out = data["output"]
        config.output = OutputConfig(
            top_name=out.get("top_name", "t"),
            emit_top=out.get("emit_top", True),
            line_width=out.get("line_width", 80),
            out_dir=out.get("out_dir", "build"),
        )

    if "style" in data:
        config.style = StyleConfig(color=data["style"].get("color", True))

    return config


def config_for(path: Path) -> TypegenConfig:
    """Config governing *path*, or the defaults when there is none."""
    try:
        return load_config(find_config(path))
    except FileNotFoundError:
        return TypegenConfig()
