"""Indentation-aware text writer used for tree dumps.

The dump is a diagnostic aid: it lets the command line tool and the tests show
a region before and after cleanup in a compact, Rust-like notation.  The writer
only tracks indentation and collects lines; nodes in :mod:`reloopclean.tree`
decide what to write.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List


class SourceWriter:
    """Incremental pretty printer with block indentation."""

    def __init__(self, indent: str = "    ") -> None:
        self._indent = 0
        self._indent_unit = indent
        self._lines: List[str] = []

    # ------------------------------------------------------------------
    # basic line emission helpers
    # ------------------------------------------------------------------
    def write_line(self, text: str) -> None:
        """Append ``text`` at the current indentation level."""

        self._lines.append(f"{self._indent_unit * self._indent}{text}")

    # ------------------------------------------------------------------
    # indentation helpers
    # ------------------------------------------------------------------
    @contextmanager
    def indented(self) -> Iterator[None]:
        """Context manager that increases indentation within the ``with`` body."""

        self.indent()
        try:
            yield
        finally:
            self.dedent()

    def indent(self) -> None:
        self._indent += 1

    def dedent(self) -> None:
        if self._indent == 0:
            raise ValueError("indentation underflow")
        self._indent -= 1

    # ------------------------------------------------------------------
    # rendering helpers
    # ------------------------------------------------------------------
    @property
    def lines(self) -> List[str]:
        return list(self._lines)

    def render(self) -> str:
        """Return the accumulated text."""

        if not self._lines:
            return ""
        return "\n".join(self._lines).rstrip() + "\n"


__all__ = ["SourceWriter"]
