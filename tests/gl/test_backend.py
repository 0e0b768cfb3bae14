"""Tests for the PyOpenGL backend against a recording OpenGL namespace."""

import pytest

from glslwrap.gl.backend import PyOpenGLBackend


class ActiveVariableGL:
    """Answers the active variable queries the way PyOpenGL does.

    Names come back as bytes, cut to ``bufSize - 1`` characters.
    """

    def __init__(self, name: bytes, tag: int):
        self.name = name
        self.tag = tag
        self.buffer_sizes: list[int | None] = []

    def _active(self, program, index, bufSize=None):
        self.buffer_sizes.append(bufSize)
        name = self.name if bufSize is None else self.name[: bufSize - 1]
        return name, 1, self.tag

    glGetActiveAttrib = _active
    glGetActiveUniform = _active

    def glGetProgramInfoLog(self, program):
        return b"linked with warnings\n"


@pytest.fixture
def make_backend(monkeypatch):
    def make(gl) -> PyOpenGLBackend:
        monkeypatch.setattr("glslwrap.runtime.gl.load", lambda: gl)
        return PyOpenGLBackend()

    return make


class TestPyOpenGLBackend:
    """Test suite for PyOpenGLBackend."""

    @pytest.mark.parametrize("method", ["active_attribute", "active_uniform"])
    def test_max_length_is_the_buffer_size(self, make_backend, method):
        gl = ActiveVariableGL(b"u_projection", 0x8B5C)
        backend = make_backend(gl)

        name, tag = getattr(backend, method)(3, 0, 5)

        assert gl.buffer_sizes == [5]
        assert (name, tag) == ("u_pr", 0x8B5C)

    def test_names_are_decoded(self, make_backend):
        backend = make_backend(ActiveVariableGL(b"lights[0].color", 0x8B51))

        assert backend.active_uniform(3, 0, 64) == ("lights[0].color", 0x8B51)

    def test_program_info_log_is_text(self, make_backend):
        backend = make_backend(ActiveVariableGL(b"", 0))

        assert backend.program_info_log(3) == "linked with warnings\n"
