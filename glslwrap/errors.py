"""
Exceptions raised while compiling, introspecting and wrapping shader programs.

Run-time errors raised by generated wrappers live in
:mod:`glslwrap.runtime.exceptions`; everything here is raised by the
compiler side before any wrapper exists.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glslwrap.compiler.models import StageKind, StageOutcome


class GlslWrapError(Exception):
    """Base class for every error raised by the wrapper compiler."""


class ArgParseError(GlslWrapError):
    """A command line argument could not be parsed.

    Recovered locally by the argument parser: the argument is logged and
    skipped, the remaining arguments are still processed.
    """

    def __init__(self, argument: str, reason: str):
        self.argument = argument
        self.reason = reason
        super().__init__(f"Invalid argument '{argument}': {reason}")


class MixedStageKindError(GlslWrapError):
    """A compute stage was combined with a non-compute stage in one program."""

    def __init__(self, previous: StageKind, current: StageKind):
        self.previous = previous
        self.current = current
        super().__init__(
            "Compute shaders cannot be compiled with other shader types "
            f"(got {current.name.lower()} after {previous.name.lower()})."
        )


class StageCompileError(GlslWrapError):
    """One or more stages failed to compile.

    Attributes:
        failures: Outcome of every stage that failed, in input order
    """

    def __init__(self, failures: list[StageOutcome]):
        self.failures = failures
        logs = "\n".join(
            f"{failure.stage.path}:\n{failure.diagnostic_log.rstrip()}"
            for failure in failures
        )
        super().__init__(
            f"{len(failures)} shader stage(s) failed to compile. Info log:\n{logs}"
        )


class LinkError(GlslWrapError):
    """The program failed to link."""

    def __init__(self, link_log: str):
        self.link_log = link_log
        super().__init__(f"Shader failed to link. Info log:\n{link_log.rstrip()}")


class UnsupportedUniformType(GlslWrapError):
    """A uniform's native type has no logical counterpart.

    Raised for image-unit and atomic-counter uniforms, and for tags that are
    not OpenGL uniform types at all.
    """

    def __init__(self, tag: int, name: str | None = None):
        self.tag = tag
        self.name = name
        label = getattr(tag, "name", None) or f"0x{int(tag):04X}"
        where = f" (uniform '{name}')" if name else ""
        super().__init__(f"Type: {label}{where} is not supported at this time.")


class GLContextError(GlslWrapError):
    """The OpenGL context could not be created."""


class GLVersionError(GLContextError):
    """The created context is older than the requested version.

    Attributes:
        version: Version the driver actually provided
        expected: Version that was requested
    """

    def __init__(self, version: tuple[int, int], expected: tuple[int, int]):
        self.version = version
        self.expected = expected
        super().__init__(
            "OpenGL version is not high enough. Expected OpenGL version "
            f"{expected[0]}.{expected[1]} or greater, "
            f"got version {version[0]}.{version[1]}."
        )
