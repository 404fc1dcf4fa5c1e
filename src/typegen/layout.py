"""Small text-layout helpers shared by the renderers.

Everything works on plain strings; a multi-line block is a string with
embedded newlines.
"""

from __future__ import annotations

from collections.abc import Iterable


def hsep(*parts: str) -> str:
    """Join the non-empty parts with single spaces."""
    return " ".join(p for p in parts if p)


def comma_list(items: Iterable[str]) -> str:
    return ", ".join(items)


def parens(inner: str) -> str:
    return f"({inner})"


def indent(text: str, spaces: int = 2) -> str:
    prefix = " " * spaces
    return "\n".join(prefix + line if line else line for line in text.splitlines())


def vcat(blocks: Iterable[str]) -> str:
    """Stack blocks vertically with a blank line between each."""
    return "\n\n".join(b for b in blocks if b)


def fits(text: str, width: int) -> bool:
    return "\n" not in text and len(text) <= width


def group(
    head: str, items: list[str], sep: str, tail: str = "", *, width: int = 80,
) -> str:
    """Lay out ``head item sep item ... tail`` on one line if it fits.

    Otherwise the head stays on its own line and every item goes on a
    separate indented line led by *sep*::

        head
          | item
          | item tail
    """
    flat = hsep(head, f" {sep} ".join(items)) + tail
    if fits(flat, width):
        return flat
    lines = [head]
    lines.extend(indent(f"{sep} {item}") for item in items)
    return "\n".join(lines) + tail
