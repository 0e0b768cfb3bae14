"""Native OpenGL calls used by the stage compiler and introspector.

The compiler never talks to OpenGL directly: it goes through a
:class:`GLBackend`, so that the compile / link / introspect orchestration can
run against an in-memory backend in tests. :class:`PyOpenGLBackend` is the
real implementation and requires a current OpenGL context.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from glslwrap.compiler.models import StageKind


class GLBackend(Protocol):
    """The subset of OpenGL the wrapper compiler needs."""

    def create_program(self) -> int: ...

    def delete_program(self, program: int) -> None: ...

    def create_shader(self, kind: StageKind) -> int: ...

    def shader_source(self, shader: int, text: str) -> None: ...

    def compile_shader(self, shader: int) -> None: ...

    def compile_status(self, shader: int) -> bool: ...

    def shader_info_log(self, shader: int) -> str: ...

    def attach_shader(self, program: int, shader: int) -> None: ...

    def detach_shader(self, program: int, shader: int) -> None: ...

    def delete_shader(self, shader: int) -> None: ...

    def link_program(self, program: int) -> None: ...

    def link_status(self, program: int) -> bool: ...

    def program_info_log(self, program: int) -> str: ...

    def active_attribute_count(self, program: int) -> int: ...

    def active_attribute(
        self, program: int, index: int, max_length: int
    ) -> tuple[str, int]:
        """Return ``(name, type tag)`` of the attribute at ``index``."""
        ...

    def active_uniform_count(self, program: int) -> int: ...

    def active_uniform(
        self, program: int, index: int, max_length: int
    ) -> tuple[str, int]:
        """Return ``(name, type tag)`` of the uniform at ``index``."""
        ...


def _decode(value: bytes | str) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


class PyOpenGLBackend:
    """:class:`GLBackend` implemented with PyOpenGL.

    PyOpenGL is imported on construction, after the platform bootstrap in
    :mod:`glslwrap.runtime.gl` has selected the windowing backend.
    """

    def __init__(self) -> None:
        from glslwrap.runtime import gl

        self.gl = gl.load()

    def create_program(self) -> int:
        return int(self.gl.glCreateProgram())

    def delete_program(self, program: int) -> None:
        self.gl.glDeleteProgram(program)

    def create_shader(self, kind: StageKind) -> int:
        return int(self.gl.glCreateShader(getattr(self.gl, kind.gl_constant)))

    def shader_source(self, shader: int, text: str) -> None:
        self.gl.glShaderSource(shader, text)

    def compile_shader(self, shader: int) -> None:
        self.gl.glCompileShader(shader)

    def compile_status(self, shader: int) -> bool:
        return bool(self.gl.glGetShaderiv(shader, self.gl.GL_COMPILE_STATUS))

    def shader_info_log(self, shader: int) -> str:
        return _decode(self.gl.glGetShaderInfoLog(shader) or b"")

    def attach_shader(self, program: int, shader: int) -> None:
        self.gl.glAttachShader(program, shader)

    def detach_shader(self, program: int, shader: int) -> None:
        self.gl.glDetachShader(program, shader)

    def delete_shader(self, shader: int) -> None:
        self.gl.glDeleteShader(shader)

    def link_program(self, program: int) -> None:
        self.gl.glLinkProgram(program)

    def link_status(self, program: int) -> bool:
        return bool(self.gl.glGetProgramiv(program, self.gl.GL_LINK_STATUS))

    def program_info_log(self, program: int) -> str:
        return _decode(self.gl.glGetProgramInfoLog(program) or b"")

    def active_attribute_count(self, program: int) -> int:
        return int(self.gl.glGetProgramiv(program, self.gl.GL_ACTIVE_ATTRIBUTES))

    def active_attribute(
        self, program: int, index: int, max_length: int
    ) -> tuple[str, int]:
        # bufSize includes the terminating NUL
        name, _size, tag = self.gl.glGetActiveAttrib(program, index, max_length)
        return _decode(name), int(tag)

    def active_uniform_count(self, program: int) -> int:
        return int(self.gl.glGetProgramiv(program, self.gl.GL_ACTIVE_UNIFORMS))

    def active_uniform(
        self, program: int, index: int, max_length: int
    ) -> tuple[str, int]:
        name, _size, tag = self.gl.glGetActiveUniform(program, index, max_length)
        return _decode(name), int(tag)
