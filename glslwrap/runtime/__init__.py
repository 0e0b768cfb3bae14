"""Run-time support library imported by generated shader wrappers."""

from glslwrap.runtime.counter import Counter
from glslwrap.runtime.exceptions import (
    InvalidIdentifierError,
    InvalidParameterTypeError,
    ShaderNotInitializedError,
    ShaderNotSupportedError,
    ShaderRuntimeError,
)
from glslwrap.runtime.shader import (
    GeneratedCode,
    GLShader,
    ShaderProxy,
    generated_code,
    get_parameter_location_safe,
    set_parameter_safe,
)
from glslwrap.runtime.support import (
    as_text,
    context_version,
    require_shader_support,
    supports_shaders,
)
from glslwrap.runtime.texture import Texture
from glslwrap.runtime.values import (
    UniformSlot,
    array_of,
    to_bool,
    to_float,
    to_int,
    to_texture,
    to_uint,
)

__all__ = [
    "Counter",
    "GLShader",
    "GeneratedCode",
    "InvalidIdentifierError",
    "InvalidParameterTypeError",
    "ShaderNotInitializedError",
    "ShaderNotSupportedError",
    "ShaderProxy",
    "ShaderRuntimeError",
    "Texture",
    "UniformSlot",
    "array_of",
    "as_text",
    "context_version",
    "generated_code",
    "get_parameter_location_safe",
    "require_shader_support",
    "set_parameter_safe",
    "supports_shaders",
    "to_bool",
    "to_float",
    "to_int",
    "to_texture",
    "to_uint",
]
