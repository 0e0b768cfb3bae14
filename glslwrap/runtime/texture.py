"""Texture handle bound to sampler uniforms."""

from dataclasses import dataclass

from glslwrap.runtime import gl as GL


@dataclass
class Texture:
    """An OpenGL texture object and the target it is bound to.

    The default instance (id 0, target 0) is the "no texture" value every
    sampler uniform starts with.
    """

    texture_id: int = 0
    target: int = 0

    @property
    def is_valid(self) -> bool:
        return self.texture_id != 0

    def bind(self) -> None:
        """Bind the texture to its target on the active texture unit."""
        GL.glBindTexture(self.target, self.texture_id)

    def delete(self) -> None:
        """Delete the native texture object and reset the handle."""
        if self.is_valid:
            GL.glDeleteTextures([self.texture_id])
        self.texture_id = 0

    @classmethod
    def generate(cls, target: int) -> "Texture":
        """Create a new native texture object for ``target``."""
        return cls(int(GL.glGenTextures(1)), target)
