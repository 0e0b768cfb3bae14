"""OpenGL version queries used by generated wrappers."""

import re

from loguru import logger

from glslwrap.runtime import gl as GL
from glslwrap.runtime.exceptions import ShaderNotSupportedError

SHADER_VERSION = (2, 0)

_VERSION = re.compile(r"(\d+)\.(\d+)")


def as_text(value: str | bytes | None) -> str:
    """Decode a string returned by PyOpenGL, which hands out ``bytes``."""
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def parse_version(version: str | bytes | None) -> tuple[int, int] | None:
    """Extract ``(major, minor)`` from a ``GL_VERSION`` string.

    Handles both desktop (``"4.6.0 NVIDIA 535.54"``) and ES
    (``"OpenGL ES 3.2 Mesa"``) formats.
    """
    if not version:
        return None
    match = _VERSION.search(as_text(version))
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def context_version() -> tuple[int, int]:
    """Version of the current context.

    ``GL_VERSION`` is parsed first; if the driver returns something
    unparseable the ``GL_MAJOR_VERSION`` / ``GL_MINOR_VERSION`` integers are
    queried instead.
    """
    version = parse_version(GL.glGetString(GL.GL_VERSION))
    if version is not None:
        return version
    logger.debug("GL_VERSION unparseable, querying GL_MAJOR_VERSION")
    return (
        int(GL.glGetIntegerv(GL.GL_MAJOR_VERSION)),
        int(GL.glGetIntegerv(GL.GL_MINOR_VERSION)),
    )


def supports_shaders() -> bool:
    """Whether the current context can run programmable shaders (2.0+)."""
    return context_version() >= SHADER_VERSION


def require_shader_support() -> None:
    """Raise :class:`ShaderNotSupportedError` if the context predates 2.0."""
    version = context_version()
    if version < SHADER_VERSION:
        raise ShaderNotSupportedError(
            f"OpenGL {version[0]}.{version[1]} does not support shaders, "
            f"{SHADER_VERSION[0]}.{SHADER_VERSION[1]} or greater is required."
        )
