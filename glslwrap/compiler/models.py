"""
Data models shared by the stage compiler, introspector and code emitter.

Stage, descriptor and option types are plain dataclasses; everything that
feeds the code emitter is frozen so that two equal inputs always describe the
same generated module.
"""

import keyword
from dataclasses import dataclass, field
from enum import Enum

from glslwrap.compiler.type_mapper import LogicalType, logical_type_of

# Module-level names of every generated wrapper module; the generated class
# must not rebind any of them.
RESERVED_CLASS_NAMES = frozenset({"GL", "Iterator", "Path", "logger", "np", "runtime"})


class StageKind(Enum):
    """Shader pipeline stage.

    The value is the OpenGL shader-type constant name; ``stem`` is the
    identifier used for the stage in generated code.
    """

    VERTEX = "GL_VERTEX_SHADER"
    FRAGMENT = "GL_FRAGMENT_SHADER"
    GEOMETRY = "GL_GEOMETRY_SHADER"
    TESS_EVAL = "GL_TESS_EVALUATION_SHADER"
    TESS_CONTROL = "GL_TESS_CONTROL_SHADER"
    COMPUTE = "GL_COMPUTE_SHADER"

    @property
    def gl_constant(self) -> str:
        return self.value

    @property
    def stem(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class StageSource:
    """One shader stage as read from disk.

    Attributes:
        path: File the stage was read from, as given on the command line
        kind: Pipeline stage the source is compiled as
        text: Full GLSL source text
    """

    path: str
    kind: StageKind
    text: str


@dataclass(frozen=True)
class StageOutcome:
    """Result of compiling a single stage."""

    stage: StageSource
    succeeded: bool
    diagnostic_log: str = ""


@dataclass
class CompileOutcome:
    """Result of compiling and linking a program.

    Attributes:
        program: Native program handle, owned by the caller once returned
        stages: Per-stage outcomes in input order
        linked: Whether linking was attempted and succeeded
        link_log: Program info log (empty when linking was skipped)
    """

    program: int
    stages: list[StageOutcome] = field(default_factory=list)
    linked: bool = False
    link_log: str = ""

    @property
    def compiled(self) -> bool:
        return all(outcome.succeeded for outcome in self.stages)

    @property
    def succeeded(self) -> bool:
        return self.compiled and self.linked

    @property
    def failures(self) -> list[StageOutcome]:
        return [outcome for outcome in self.stages if not outcome.succeeded]


@dataclass(frozen=True)
class UniformDescriptor:
    """An active uniform reported by the linked program."""

    name: str
    native_type: int

    @property
    def logical_type(self) -> LogicalType:
        return logical_type_of(self.native_type, self.name)


@dataclass(frozen=True)
class AttributeDescriptor:
    """An active vertex attribute reported by the linked program."""

    name: str
    native_type: int


@dataclass(frozen=True)
class GenerationOptions:
    """How the wrapper module is generated.

    Attributes:
        namespace: Dotted package name the generated class belongs to
        class_name: Name of the generated class
        recompile_from_file: Re-read stage files on every compile instead of
            embedding their sources
        default_transpose_matrix: Initial value of each instance's
            ``transpose_matrix`` flag
    """

    namespace: str = "Shaders"
    class_name: str = "Shader"
    recompile_from_file: bool = False
    default_transpose_matrix: bool = False

    def __post_init__(self) -> None:
        """Validate the generated names."""
        if not _is_identifier(self.class_name):
            raise ValueError(f"Invalid class name: {self.class_name!r}")
        if self.class_name in RESERVED_CLASS_NAMES:
            raise ValueError(
                f"Invalid class name: {self.class_name!r} shadows a name "
                "imported by the generated module"
            )
        if not all(_is_identifier(part) for part in self.namespace.split(".")):
            raise ValueError(f"Invalid namespace: {self.namespace!r}")


@dataclass(frozen=True)
class WrapperSpec:
    """Everything the code emitter needs to produce one wrapper module."""

    options: GenerationOptions
    stages: tuple[StageSource, ...]
    uniforms: tuple[UniformDescriptor, ...] = ()
    attributes: tuple[AttributeDescriptor, ...] = ()


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)
