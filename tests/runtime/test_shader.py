"""Tests for the wrapper base class and its helpers."""

import pytest

from glslwrap import runtime
from glslwrap.runtime import (
    GLShader,
    InvalidIdentifierError,
    InvalidParameterTypeError,
    ShaderProxy,
    generated_code,
    get_parameter_location_safe,
    set_parameter_safe,
)


class DictShader(GLShader):
    """Minimal in-memory shader with a float and a vec-like uniform."""

    def __init__(self):
        self.transpose_matrix = False
        self.values = {"time": 0.0, "lights[0].color": (0, 0, 0)}
        self.events = []

    def compile(self):
        self.events.append("compile")

    def recompile(self):
        self.events.append("recompile")

    def set_parameter(self, name, value):
        if name not in self.values:
            raise InvalidIdentifierError(f"There is no uniform variable named {name} in this shader.")
        if isinstance(value, str):
            raise InvalidParameterTypeError(name)
        self.values[name] = value

    def get_parameter(self, name, expected_type=None):
        if name not in self.values:
            raise InvalidIdentifierError(f"There is no uniform variable named {name} in this shader.")
        return self.values[name]

    def get_parameter_location(self, name):
        if name not in self.values:
            raise InvalidIdentifierError(f"There is no parameter named {name}.")
        return list(self.values).index(name)

    def pass_uniforms(self):
        pass

    def use_shader(self):
        pass

    def get_shader_id(self):
        return 1

    def dispose(self):
        self.events.append("dispose")

    @property
    def is_supported(self):
        return True

    def get_uniform_names(self):
        yield from self.values


class TestGLShader:
    """Test the abstract base class."""

    def test_cannot_instantiate_incomplete(self):
        class Partial(GLShader):
            def compile(self):
                pass

        with pytest.raises(TypeError):
            Partial()

    def test_context_manager(self):
        shader = DictShader()

        with shader as entered:
            assert entered is shader

        assert shader.events == ["compile", "dispose"]

    def test_context_manager_disposes_on_error(self):
        shader = DictShader()

        with pytest.raises(RuntimeError):
            with shader:
                raise RuntimeError("draw failed")

        assert shader.events == ["compile", "dispose"]


class TestGeneratedCode:
    def test_decorator_records_provenance(self):
        @generated_code("glslwrap", "1.2.3", namespace="fx")
        class Wrapped:
            pass

        assert Wrapped.__generated_code__ == runtime.GeneratedCode("glslwrap", "1.2.3", "fx")


class TestSafeHelpers:
    """Test the non-raising helpers."""

    def test_set_parameter_safe(self):
        shader = DictShader()

        assert set_parameter_safe(shader, "time", 1.0)
        assert not set_parameter_safe(shader, "nope", 1.0)
        assert not set_parameter_safe(shader, "time", "fast")
        assert shader.values["time"] == 1.0

    def test_get_parameter_location_safe(self):
        shader = DictShader()

        assert get_parameter_location_safe(shader, "time") == 0
        assert get_parameter_location_safe(shader, "nope") == -1


class TestShaderProxy:
    """Test attribute-style uniform access."""

    def test_attribute_access(self):
        shader = DictShader()
        proxy = ShaderProxy(shader)

        proxy.time = 2.5

        assert shader.values["time"] == 2.5
        assert proxy.time == 2.5
        assert proxy.shader is shader

    def test_unknown_attribute(self):
        proxy = ShaderProxy(DictShader())

        with pytest.raises(AttributeError, match="nope"):
            proxy.nope
        with pytest.raises(AttributeError):
            proxy.nope = 1.0

    def test_item_access(self):
        proxy = ShaderProxy(DictShader())

        proxy["lights[0].color"] = (1, 1, 1)

        assert proxy["lights[0].color"] == (1, 1, 1)
        with pytest.raises(KeyError):
            proxy["nope"]

    def test_membership_and_iteration(self):
        proxy = ShaderProxy(DictShader())

        assert "time" in proxy
        assert "nope" not in proxy
        assert list(proxy) == ["time", "lights[0].color"]
        assert dir(proxy) == ["time"]
