"""Tests for OpenGL context management."""

import pytest

from glslwrap.errors import GLContextError
from glslwrap.gl.context import (
    MINIMUM_VERSION,
    GLConfig,
    context_version,
    create_context,
)


class TestGLConfig:
    """Test GLConfig class."""

    def test_defaults(self):
        """Test default configuration."""
        config = GLConfig()
        assert config.version == MINIMUM_VERSION

    @pytest.mark.parametrize("version", [(3, 3), (4, 1), (4, 6)])
    def test_supported_versions(self, version):
        assert GLConfig.for_version(version).version == version

    @pytest.mark.parametrize("version", [(2, 1), (1, 0), (0, 0)])
    def test_low_versions_are_raised(self, version):
        assert GLConfig.for_version(version).version == MINIMUM_VERSION

    @pytest.mark.parametrize("version", [(4, 7), (5, 0), (-1, 0), (3, -1)])
    def test_invalid_versions(self, version):
        with pytest.raises(GLContextError):
            GLConfig.for_version(version)


class FakeContext:
    def __init__(self, version_code):
        self.version_code = version_code


@pytest.mark.parametrize(
    "code,expected", [(300, (3, 0)), (330, (3, 3)), (410, (4, 1)), (460, (4, 6))]
)
def test_context_version(code, expected):
    assert context_version(FakeContext(code)) == expected


@pytest.mark.gpu
def test_create_context():
    """Create a real hidden-window context."""
    try:
        with create_context(config=GLConfig(3, 3)) as ctx:
            assert context_version(ctx) >= (3, 3)
    except GLContextError as e:
        pytest.skip(f"No OpenGL 3.3 context available: {e}")
