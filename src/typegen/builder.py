"""Full build pipeline: .tyd sources -> .re files."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from typegen.config import TypegenConfig
from typegen.errors import CompileError, Diagnostic, Severity
from typegen.parser import parse_source
from typegen.reason_emitter import ReasonEmitter


@dataclass
class BuildResult:
    """Outcome of a build."""

    ok: bool
    outputs: list[Path] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: str | None = None


def source_files(project_dir: Path) -> tuple[Path, list[Path]]:
    """The source root (``src/`` or the project itself) and its .tyd files."""
    src_dir = project_dir / "src"
    if not src_dir.is_dir():
        src_dir = project_dir
    return src_dir, sorted(src_dir.rglob("*.tyd"))


def compile_source(source: str, filename: str, config: TypegenConfig) -> tuple[str, list[Diagnostic]]:
    """Parse and emit one description. Raises CompileError on errors."""
    desc, warnings = parse_source(source, filename)
    text = ReasonEmitter(
        desc,
        top_name=config.output.top_name,
        emit_top=config.output.emit_top,
        line_width=config.output.line_width,
    ).emit()
    return text, warnings


def build_project(project_dir: Path, config: TypegenConfig) -> BuildResult:
    """Run the pipeline on every source: discover -> lex -> parse -> emit -> write.

    Outputs mirror the source tree under ``out_dir``. Nothing is written
    when any source has errors.
    """
    src_dir, tyd_files = source_files(project_dir)
    if not tyd_files:
        return BuildResult(ok=False, error="no .tyd files found")

    all_diags: list[Diagnostic] = []
    generated: list[tuple[Path, str]] = []

    for tyd_file in tyd_files:
        try:
            text, warnings = compile_source(tyd_file.read_text(), str(tyd_file), config)
        except CompileError as e:
            all_diags.extend(e.diagnostics)
            continue
        all_diags.extend(warnings)
        target = project_dir / config.output.out_dir / tyd_file.relative_to(src_dir)
        generated.append((target.with_suffix(".re"), text))

    if any(d.severity == Severity.ERROR for d in all_diags):
        return BuildResult(ok=False, diagnostics=all_diags)

    outputs: list[Path] = []
    for target, text in generated:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text)
        outputs.append(target)

    return BuildResult(ok=True, outputs=outputs, diagnostics=all_diags)
