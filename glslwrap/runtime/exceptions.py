"""Exceptions raised by generated shader wrappers at run time."""


class ShaderRuntimeError(Exception):
    """Base class for errors raised by generated wrappers."""


class InvalidIdentifierError(ShaderRuntimeError, KeyError):
    """The shader has no uniform or attribute with the requested name."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class InvalidParameterTypeError(ShaderRuntimeError, TypeError):
    """A value cannot be stored in, or read back as, a uniform's type."""


class ShaderNotInitializedError(ShaderRuntimeError):
    """The shader program has not been compiled yet."""


class ShaderNotSupportedError(ShaderRuntimeError):
    """The current OpenGL implementation does not support shaders."""
