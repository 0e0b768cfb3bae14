"""Generate typed Python wrappers for OpenGL shader programs."""

__version__ = "0.1.0"
