"""Base class and helpers shared by every generated shader wrapper."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

from glslwrap.runtime.exceptions import (
    InvalidIdentifierError,
    InvalidParameterTypeError,
)

T = TypeVar("T", bound=type)


@dataclass(frozen=True)
class GeneratedCode:
    """Provenance of a generated wrapper class."""

    tool: str
    version: str
    namespace: str | None = None


def generated_code(
    tool: str, version: str, namespace: str | None = None
) -> Callable[[T], T]:
    """Class decorator recording which tool generated a wrapper.

    The record is stored as ``__generated_code__`` on the class.
    """

    def decorator(cls: T) -> T:
        cls.__generated_code__ = GeneratedCode(tool, version, namespace)
        return cls

    return decorator


class GLShader(ABC):
    """Interface implemented by every generated shader wrapper.

    A wrapper can be used as a context manager: entering compiles (or
    acquires the already compiled program), leaving disposes of it.
    """

    transpose_matrix: bool

    @abstractmethod
    def compile(self) -> None:
        """Compile the shared program if needed and acquire a reference."""

    @abstractmethod
    def recompile(self) -> None:
        """Delete the shared program and compile it again."""

    @abstractmethod
    def set_parameter(self, name: str, value: Any) -> None:
        """Store ``value`` for the uniform ``name``."""

    @abstractmethod
    def get_parameter(self, name: str, expected_type: type | None = None) -> Any:
        """Return the stored value of the uniform ``name``."""

    @abstractmethod
    def get_parameter_location(self, name: str) -> int:
        """Return the resolved location of a uniform or attribute."""

    @abstractmethod
    def pass_uniforms(self) -> None:
        """Upload every stored uniform value to the bound program."""

    @abstractmethod
    def use_shader(self) -> None:
        """Bind the program, its textures and its vertex attributes."""

    @abstractmethod
    def get_shader_id(self) -> int:
        """Return the native program handle."""

    @abstractmethod
    def dispose(self) -> None:
        """Release this instance's reference to the shared program."""

    @property
    @abstractmethod
    def is_supported(self) -> bool:
        """Whether the current context supports shaders."""

    @abstractmethod
    def get_uniform_names(self) -> Iterator[str]:
        """Iterate over the uniform names in introspection order."""

    def __enter__(self):
        self.compile()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()


def set_parameter_safe(shader: GLShader, name: str, value: Any) -> bool:
    """Set a uniform, ignoring unknown names and unconvertible values.

    Returns:
        Whether the value was stored
    """
    try:
        shader.set_parameter(name, value)
    except (InvalidIdentifierError, InvalidParameterTypeError):
        return False
    return True


def get_parameter_location_safe(shader: GLShader, name: str) -> int:
    """Location of ``name``, or -1 if the shader has no such parameter."""
    try:
        return shader.get_parameter_location(name)
    except InvalidIdentifierError:
        return -1


class ShaderProxy:
    """Attribute-style access to the uniforms of a shader.

    ``ShaderProxy(shader).color = (1, 0, 0, 1)`` is ``shader.set_parameter(
    "color", (1, 0, 0, 1))``. Uniform names that are not Python identifiers
    are reachable through item access: ``proxy["lights[0].color"]``.
    """

    __slots__ = ("_shader",)

    def __init__(self, shader: GLShader):
        object.__setattr__(self, "_shader", shader)

    @property
    def shader(self) -> GLShader:
        return self._shader

    def __getattr__(self, name: str) -> Any:
        if name.startswith("__"):
            raise AttributeError(name)
        try:
            return self._shader.get_parameter(name)
        except InvalidIdentifierError as e:
            raise AttributeError(str(e)) from None

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            self._shader.set_parameter(name, value)
        except InvalidIdentifierError as e:
            raise AttributeError(str(e)) from None

    def __getitem__(self, name: str) -> Any:
        return self._shader.get_parameter(name)

    def __setitem__(self, name: str, value: Any) -> None:
        self._shader.set_parameter(name, value)

    def __contains__(self, name: object) -> bool:
        return name in set(self._shader.get_uniform_names())

    def __iter__(self) -> Iterator[str]:
        return iter(self._shader.get_uniform_names())

    def __dir__(self) -> list[str]:
        return sorted(name for name in self if name.isidentifier())
