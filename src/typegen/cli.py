"""typegen command line interface."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from typegen import __version__
from typegen.builder import compile_source, source_files
from typegen.config import CONFIG_NAME, config_for, find_config, load_config
from typegen.errors import CompileError, Diagnostic, DiagnosticRenderer, Severity
from typegen.parser import parse_source
from typegen.project import scaffold


def _report(diags: list[Diagnostic], *, color: bool, sources: dict[str, str] | None = None) -> bool:
    """Echo diagnostics to stderr. Returns True if any of them is an error."""
    renderer = DiagnosticRenderer(color=color, sources=sources)
    had_errors = False
    for diag in diags:
        click.echo(renderer.render(diag), err=True)
        if diag.severity == Severity.ERROR:
            had_errors = True
    return had_errors


def _check_files(tyd_files: list[Path], *, color: bool) -> bool:
    """Lex and parse every file. Returns True if all are free of errors."""
    had_errors = False
    for tyd_file in tyd_files:
        try:
            _, warnings = parse_source(tyd_file.read_text(), str(tyd_file))
        except CompileError as e:
            _report(e.diagnostics, color=color)
            had_errors = True
            continue
        _report(warnings, color=color)
    return not had_errors


@click.group()
@click.version_option(__version__, prog_name="typegen")
def main() -> None:
    """Compile algebraic type descriptions to ReasonML."""


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write to a file instead of stdout.")
@click.option("--top-name", default=None, help="Name of the trailing top-level alias.")
@click.option("--no-top", is_flag=True, help="Do not emit the top-level alias.")
@click.option("--width", type=int, default=None, help="Line width for breaking variants.")
@click.option("--color/--no-color", default=None, help="Highlight the output.")
def gen(
    file: str, output: str | None, top_name: str | None, no_top: bool,
    width: int | None, color: bool | None,
) -> None:
    """Generate Reason declarations for one description file."""
    config = config_for(Path(file))
    if top_name is not None:
        config.output.top_name = top_name
    if no_top:
        config.output.emit_top = False
    if width is not None:
        config.output.line_width = width
    use_color = config.style.color if color is None else color

    source = Path(file).read_text()
    try:
        text, warnings = compile_source(source, file, config)
    except CompileError as e:
        _report(e.diagnostics, color=use_color, sources={file: source})
        raise SystemExit(1)
    _report(warnings, color=use_color, sources={file: source})

    if output:
        Path(output).write_text(text)
        click.echo(f"wrote {output}")
    elif use_color and sys.stdout.isatty():
        from typegen.highlight import highlight_reason

        click.echo(highlight_reason(text), nl=False)
    else:
        click.echo(text, nl=False)


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True))
def check(path: str) -> None:
    """Check description files without generating code."""
    target = Path(path)
    if target.is_dir():
        _, tyd_files = source_files(target)
    else:
        tyd_files = [target]
    if not tyd_files:
        click.echo("warning: no .tyd files found", err=True)
        return

    color = config_for(target).style.color
    if _check_files(tyd_files, color=color):
        click.echo(f"checked {len(tyd_files)} file(s) — no errors")
    else:
        raise SystemExit(1)


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True))
def build(path: str) -> None:
    """Generate .re files for every description in a project."""
    from typegen.builder import build_project

    try:
        config_path = find_config(Path(path))
    except FileNotFoundError:
        click.echo(f"error: no {CONFIG_NAME} found", err=True)
        raise SystemExit(1)

    config = load_config(config_path)
    click.echo(f"building {config.package.name}...")
    result = build_project(config_path.parent, config)
    _report(result.diagnostics, color=config.style.color)

    if not result.ok:
        if result.error:
            click.echo(f"error: {result.error}", err=True)
        raise SystemExit(1)
    for out in result.outputs:
        click.echo(f"  wrote {out}")
    click.echo(f"built {config.package.name} — {len(result.outputs)} file(s)")


@main.command()
@click.argument("name")
def new(name: str) -> None:
    """Create a new typegen project."""
    try:
        project_dir = scaffold(name)
        click.echo(f"created project '{name}' at {project_dir}")
    except FileExistsError as e:
        click.echo(f"error: {e}", err=True)
        raise SystemExit(1)


@main.command(name="format")
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option("--check", is_flag=True, help="Check formatting without modifying files.")
@click.option("--stdin", "use_stdin", is_flag=True, help="Read from stdin, write to stdout.")
def format_cmd(path: str, check: bool, use_stdin: bool) -> None:
    """Format description files."""
    from typegen.formatter import DescriptionFormatter

    config = config_for(Path(path))
    formatter = DescriptionFormatter(line_width=config.output.line_width)

    if use_stdin:
        source = sys.stdin.read()
        try:
            desc, _ = parse_source(source, "<stdin>")
        except CompileError as e:
            _report(e.diagnostics, color=config.style.color)
            raise SystemExit(1)
        formatted = formatter.format(desc)
        if check:
            if formatted != source:
                raise SystemExit(1)
        else:
            sys.stdout.write(formatted)
        return

    target = Path(path)
    tyd_files = sorted(target.rglob("*.tyd")) if target.is_dir() else [target]
    if not tyd_files:
        click.echo("no .tyd files found", err=True)
        return

    needs_formatting = False
    for tyd_file in tyd_files:
        source = tyd_file.read_text()
        filename = str(tyd_file)
        try:
            desc, _ = parse_source(source, filename)
        except CompileError as e:
            _report(e.diagnostics, color=config.style.color)
            continue

        formatted = formatter.format(desc)
        if formatted != source:
            if check:
                click.echo(f"would reformat {filename}")
                needs_formatting = True
            else:
                tyd_file.write_text(formatted)
                click.echo(f"formatted {filename}")

    if check and needs_formatting:
        raise SystemExit(1)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def view(file: str) -> None:
    """Dump the parsed type algebra of a description file."""
    source = Path(file).read_text()
    try:
        desc, _ = parse_source(source, file)
    except CompileError as e:
        _report(e.diagnostics, color=config_for(Path(file)).style.color)
        raise SystemExit(1)

    if desc.params:
        click.echo(f"params: {', '.join(desc.params)}")
    _dump_expr(desc.body, 0)


@main.command()
def lsp() -> None:
    """Start the typegen language server."""
    from typegen.lsp import main as lsp_main

    lsp_main()


def _dump_expr(node: object, depth: int) -> None:
    """Print a readable tree of a type expression."""
    indent = "  " * depth
    name = type(node).__name__

    if not hasattr(node, "__dataclass_fields__"):
        click.echo(f"{indent}{name}: {node!r}")
        return

    fields = node.__dataclass_fields__  # type: ignore[union-attr]
    scalars = [
        f"{f}={getattr(node, f)!r}" for f in fields
        if isinstance(getattr(node, f), (str, int))
    ]
    click.echo(f"{indent}{name}" + (f" {' '.join(scalars)}" if scalars else ""))
    for field_name in fields:
        value = getattr(node, field_name)
        if field_name == "constructors":
            for ctor, body in value:
                click.echo(f"{indent}  {ctor}:")
                _dump_expr(body, depth + 2)
        elif isinstance(value, tuple):
            for item in value:
                _dump_expr(item, depth + 1)
        elif hasattr(value, "__dataclass_fields__"):
            _dump_expr(value, depth + 1)
