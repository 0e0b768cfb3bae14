"""Indentation-aware line buffer used by the code emitter."""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

INDENT = "    "


@dataclass
class CodeBlock:
    """Accumulates lines of Python source at the current indentation."""

    indent_level: int = 0
    lines: list[str] = field(default_factory=list)

    @contextmanager
    def block(self, header: str) -> Iterator[None]:
        """Context manager for an indented suite opened by ``header``.

        A suite that received no statements gets a ``pass``.
        """
        self.add_line(f"{header}:")
        self.indent_level += 1
        start = len(self.lines)
        try:
            yield
        finally:
            if not any(self.lines[start:]):
                del self.lines[start:]
                self.add_line("pass")
            self.indent_level -= 1

    def add_line(self, line: str = "") -> None:
        """Add line with proper indentation.

        Blank lines are never indented and never doubled.
        """
        if not line:
            self.separate(1)
            return
        self.lines.append(f"{INDENT * self.indent_level}{line}")

    def add_lines(self, lines: list[str]) -> None:
        for line in lines:
            self.add_line(line)

    def separate(self, count: int) -> None:
        """Make the buffer end with at least ``count`` blank lines."""
        if not self.lines:
            return
        trailing = 0
        while trailing < len(self.lines) and not self.lines[-1 - trailing]:
            trailing += 1
        self.lines.extend([""] * (count - trailing))

    def render(self) -> str:
        """Joined source text, always ending with exactly one newline."""
        while self.lines and not self.lines[-1]:
            self.lines.pop()
        return "\n".join(self.lines) + "\n"
