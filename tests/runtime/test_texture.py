"""Tests for the texture handle."""

from glslwrap.runtime import Texture


class TestTexture:
    """Test texture handles against the fake GL namespace."""

    def test_default_is_invalid(self):
        texture = Texture()

        assert not texture.is_valid
        assert (texture.texture_id, texture.target) == (0, 0)

    def test_generate(self, fake_gl):
        texture = Texture.generate(fake_gl.GL_TEXTURE_2D)

        assert texture.is_valid
        assert texture.target == fake_gl.GL_TEXTURE_2D
        assert fake_gl.named("glGenTextures") == [(1, texture.texture_id)]

    def test_bind(self, fake_gl):
        Texture(5, fake_gl.GL_TEXTURE_2D).bind()

        assert fake_gl.calls == [("glBindTexture", fake_gl.GL_TEXTURE_2D, 5)]

    def test_delete(self, fake_gl):
        texture = Texture(5, fake_gl.GL_TEXTURE_2D)

        texture.delete()
        texture.delete()

        assert fake_gl.calls == [("glDeleteTextures", [5])]
        assert not texture.is_valid
