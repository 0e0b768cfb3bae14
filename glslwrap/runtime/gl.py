"""Lazily imported PyOpenGL namespace used by generated wrappers.

Generated modules do ``from glslwrap.runtime import gl as GL`` and call
``GL.glUniform1f(...)``. ``OpenGL.GL`` itself is only imported on the first
attribute access, so a wrapper module can be imported before a context
exists, and the ``PYOPENGL_PLATFORM`` selection below always happens before
PyOpenGL resolves its platform.

On Linux without an X11/Wayland display, PyOpenGL is pointed at the EGL
backend. A ``PYOPENGL_PLATFORM`` set by the user is always respected.
"""

import importlib
import os
import sys
from types import ModuleType
from typing import Any

if "PYOPENGL_PLATFORM" not in os.environ and sys.platform == "linux":
    if not os.environ.get("DISPLAY") and not os.environ.get("WAYLAND_DISPLAY"):
        os.environ["PYOPENGL_PLATFORM"] = "egl"


def load() -> ModuleType:
    """Import and return ``OpenGL.GL``."""
    return importlib.import_module("OpenGL.GL")


def __getattr__(name: str) -> Any:
    if name.startswith("__"):
        raise AttributeError(name)
    return getattr(load(), name)
