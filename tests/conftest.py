"""Fixtures and configuration for pytest.

Nothing here needs an OpenGL context: the compiler runs against
:class:`FakeBackend` and generated wrappers are executed against
:class:`FakeGL`, both of which record every native call.
"""

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from glslwrap.compiler.models import StageKind, StageSource
from glslwrap.compiler.type_mapper import NativeType


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "gpu: mark test as requiring a GPU")


@dataclass
class FakeShader:
    kind: StageKind
    source: str = ""
    compiled: bool = False


@dataclass
class FakeBackend:
    """In-memory :class:`~glslwrap.gl.backend.GLBackend`.

    Attributes:
        compile_errors: Source text -> info log of stages that fail to compile
        link_ok: Whether linking succeeds
        link_log: Program info log reported after linking
        uniforms: ``(name, tag)`` of the active uniforms, in native order
        attributes: ``(name, tag)`` of the active attributes, in native order
    """

    compile_errors: dict[str, str] = field(default_factory=dict)
    link_ok: bool = True
    link_log: str = ""
    uniforms: list[tuple[str, int]] = field(default_factory=list)
    attributes: list[tuple[str, int]] = field(default_factory=list)

    programs: set[int] = field(default_factory=set)
    shaders: dict[int, FakeShader] = field(default_factory=dict)
    attached: dict[int, list[int]] = field(default_factory=dict)
    linked: set[int] = field(default_factory=set)
    calls: list[tuple] = field(default_factory=list)
    _next_id: int = 1

    def _new_id(self) -> int:
        handle = self._next_id
        self._next_id += 1
        return handle

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def create_program(self) -> int:
        program = self._new_id()
        self.programs.add(program)
        self.attached[program] = []
        self.calls.append(("create_program", program))
        return program

    def delete_program(self, program: int) -> None:
        self.calls.append(("delete_program", program))
        self.programs.discard(program)

    def create_shader(self, kind: StageKind) -> int:
        shader = self._new_id()
        self.shaders[shader] = FakeShader(kind)
        self.calls.append(("create_shader", shader, kind))
        return shader

    def shader_source(self, shader: int, text: str) -> None:
        self.calls.append(("shader_source", shader))
        self.shaders[shader].source = text

    def compile_shader(self, shader: int) -> None:
        self.calls.append(("compile_shader", shader))
        fake = self.shaders[shader]
        fake.compiled = fake.source not in self.compile_errors

    def compile_status(self, shader: int) -> bool:
        return self.shaders[shader].compiled

    def shader_info_log(self, shader: int) -> str:
        return self.compile_errors.get(self.shaders[shader].source, "")

    def attach_shader(self, program: int, shader: int) -> None:
        self.calls.append(("attach_shader", program, shader))
        self.attached[program].append(shader)

    def detach_shader(self, program: int, shader: int) -> None:
        self.calls.append(("detach_shader", program, shader))
        self.attached[program].remove(shader)

    def delete_shader(self, shader: int) -> None:
        self.calls.append(("delete_shader", shader))
        del self.shaders[shader]

    def link_program(self, program: int) -> None:
        self.calls.append(("link_program", program))
        if self.link_ok:
            self.linked.add(program)

    def link_status(self, program: int) -> bool:
        return program in self.linked

    def program_info_log(self, program: int) -> str:
        return self.link_log

    def active_attribute_count(self, program: int) -> int:
        return len(self.attributes)

    def active_attribute(
        self, program: int, index: int, max_length: int
    ) -> tuple[str, int]:
        name, tag = self.attributes[index]
        return name[: max_length - 1], tag

    def active_uniform_count(self, program: int) -> int:
        return len(self.uniforms)

    def active_uniform(
        self, program: int, index: int, max_length: int
    ) -> tuple[str, int]:
        name, tag = self.uniforms[index]
        return name[: max_length - 1], tag


class FakeGL:
    """Stand-in for ``OpenGL.GL`` inside executed wrapper modules.

    Functions without an explicit implementation below are recorded in
    ``calls`` and return ``None``.
    """

    GL_VERTEX_SHADER = 0x8B31
    GL_FRAGMENT_SHADER = 0x8B30
    GL_GEOMETRY_SHADER = 0x8DD9
    GL_TESS_EVALUATION_SHADER = 0x8E87
    GL_TESS_CONTROL_SHADER = 0x8E88
    GL_COMPUTE_SHADER = 0x91B9
    GL_TEXTURE0 = 0x84C0
    GL_TEXTURE_2D = 0x0DE1
    GL_VERSION = 0x1F02
    GL_MAJOR_VERSION = 0x821B
    GL_MINOR_VERSION = 0x821C

    def __init__(self, version: bytes | None = b"4.6.0 FakeGL", major_minor=(4, 6)):
        self.version = version
        self.major_minor = major_minor
        self.calls: list[tuple] = []
        self.locations: dict[str, int] = {}
        self.live_programs: set[int] = set()
        self.link_log: bytes = b""
        self._next_id = 100

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def _location(self, name: str) -> int:
        return self.locations.setdefault(name, len(self.locations))

    def named(self, name: str) -> list[tuple]:
        """Arguments of every recorded call to ``name``."""
        return [call[1:] for call in self.calls if call[0] == name]

    def names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def glCreateProgram(self) -> int:
        program = self._new_id()
        self.live_programs.add(program)
        self.calls.append(("glCreateProgram", program))
        return program

    def glDeleteProgram(self, program: int) -> None:
        self.calls.append(("glDeleteProgram", program))
        self.live_programs.discard(program)

    def glCreateShader(self, kind: int) -> int:
        shader = self._new_id()
        self.calls.append(("glCreateShader", kind, shader))
        return shader

    def glGetUniformLocation(self, program: int, name: str) -> int:
        self.calls.append(("glGetUniformLocation", program, name))
        return self._location(name)

    def glGetAttribLocation(self, program: int, name: str) -> int:
        self.calls.append(("glGetAttribLocation", program, name))
        return self._location(name)

    def glGetProgramInfoLog(self, program: int) -> bytes:
        return self.link_log

    def glGetString(self, name: int) -> bytes | None:
        return self.version

    def glGetIntegerv(self, name: int) -> int:
        return self.major_minor[0] if name == self.GL_MAJOR_VERSION else self.major_minor[1]

    def glGenTextures(self, count: int) -> int:
        texture = self._new_id()
        self.calls.append(("glGenTextures", count, texture))
        return texture

    def __getattr__(self, name: str):
        if not name.startswith("gl"):
            raise AttributeError(name)

        def record(*args):
            self.calls.append((name, *args))

        return record


def load_wrapper(source: str, gl: FakeGL) -> dict:
    """Execute a generated module with ``GL`` replaced by ``gl``."""
    namespace: dict = {"__name__": "generated_wrapper"}
    exec(compile(source, "<generated>", "exec"), namespace)
    namespace["GL"] = gl
    return namespace


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def backend_factory():
    """Build further, independent fake backends."""
    return FakeBackend


@pytest.fixture
def fake_gl(monkeypatch):
    """A :class:`FakeGL` also installed for the runtime support modules."""
    gl = FakeGL()
    monkeypatch.setattr("glslwrap.runtime.support.GL", gl)
    monkeypatch.setattr("glslwrap.runtime.texture.GL", gl)
    return gl


@pytest.fixture
def load_generated(fake_gl):
    """Execute generated module source against the fake GL namespace."""

    def load(source: str) -> dict:
        return load_wrapper(source, fake_gl)

    return load


@pytest.fixture
def vertex_stage():
    return StageSource("shaders/simple.vert", StageKind.VERTEX, "void main() {}\n")


@pytest.fixture
def fragment_stage():
    return StageSource(
        "shaders/simple.frag", StageKind.FRAGMENT, "out vec4 c;\nvoid main() {}\n"
    )


@pytest.fixture
def compute_stage():
    return StageSource("shaders/blur.compute", StageKind.COMPUTE, "void main() {}\n")


@pytest.fixture
def shader_dir(tmp_path: Path) -> Path:
    """Directory holding a vertex and a fragment stage file."""
    (tmp_path / "simple.vert").write_text("void main() { gl_Position = vec4(0); }\n")
    (tmp_path / "simple.frag").write_text("out vec4 c;\nvoid main() { c = vec4(1); }\n")
    return tmp_path


@pytest.fixture
def typical_uniforms():
    """A uniform of every family, in the order a driver might report them."""
    return [
        ("time", NativeType.FLOAT),
        ("color", NativeType.FLOAT_VEC4),
        ("model", NativeType.FLOAT_MAT4),
        ("albedo", NativeType.SAMPLER_2D),
        ("enabled", NativeType.BOOL),
        ("shadow", NativeType.SAMPLER_2D_SHADOW),
    ]
