"""OpenGL context management."""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

import glfw
import moderngl
from loguru import logger

from glslwrap.errors import GLContextError, GLVersionError

MINIMUM_VERSION = (3, 0)
MAXIMUM_VERSION = (4, 6)
# Core profiles only exist from 3.2 on
CORE_PROFILE_VERSION = (3, 2)


@dataclass
class GLConfig:
    """OpenGL context configuration.

    Requested versions below 3.0 are raised to 3.0.
    """

    major_version: int = MINIMUM_VERSION[0]
    minor_version: int = MINIMUM_VERSION[1]

    def __post_init__(self) -> None:
        """Validate and clamp the OpenGL version."""
        if self.major_version < 0 or self.minor_version < 0:
            raise GLContextError(
                f"Invalid OpenGL version: {self.major_version}.{self.minor_version}"
            )
        if self.version > MAXIMUM_VERSION:
            raise GLContextError(
                f"Unsupported OpenGL version: {self.major_version}.{self.minor_version}"
            )
        if self.version < MINIMUM_VERSION:
            self.major_version, self.minor_version = MINIMUM_VERSION

    @property
    def version(self) -> tuple[int, int]:
        return self.major_version, self.minor_version

    @classmethod
    def for_version(cls, version: tuple[int, int]) -> "GLConfig":
        return cls(major_version=version[0], minor_version=version[1])


def context_version(ctx: moderngl.Context) -> tuple[int, int]:
    """``(major, minor)`` of a context, from moderngl's version code (e.g. 330)."""
    code = ctx.version_code
    return code // 100, code % 100 // 10


@contextmanager
def create_context(*, config: GLConfig | None = None) -> Iterator[moderngl.Context]:
    """Create a hidden-window OpenGL context and make it current.

    Raises:
        GLContextError: If GLFW, the window or the context cannot be created
        GLVersionError: If the driver provides an older version than requested
    """
    if not glfw.init():
        raise GLContextError("Failed to initialize GLFW")

    window = None
    try:
        cfg = config or GLConfig()

        # Configure context
        glfw.window_hint(glfw.VISIBLE, False)
        glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, cfg.major_version)
        glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, cfg.minor_version)
        glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, True)
        if cfg.version >= CORE_PROFILE_VERSION:
            glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)

        # Create hidden window
        window = glfw.create_window(1, 1, "", None, None)
        if not window:
            raise GLContextError("Failed to create GLFW window")

        glfw.make_context_current(window)

        ctx = moderngl.create_context()
        actual = context_version(ctx)
        logger.info(
            f"Created OpenGL {actual[0]}.{actual[1]} context "
            f"({ctx.info.get('GL_RENDERER', 'unknown renderer')})"
        )
        if actual < cfg.version:
            raise GLVersionError(actual, cfg.version)
        yield ctx

    finally:
        if window:
            glfw.destroy_window(window)
        glfw.terminate()
