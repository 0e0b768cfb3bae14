"""OpenGL uniform type mappings.

Every OpenGL active-uniform type tag is mapped onto a small closed set of
logical types, and every logical type onto the Python text the code emitter
needs: the annotation of its backing field, the field's initial value, the
converter that validates assigned values and the draw-time ``glUniform*``
call. All mappings are lookup tables; the functions below only index them.
"""

from dataclasses import dataclass
from enum import Enum, IntEnum

from glslwrap.errors import UnsupportedUniformType


class NativeType(IntEnum):
    """OpenGL active uniform / attribute type tags (raw GLenum values)."""

    # Scalars
    INT = 0x1404
    UNSIGNED_INT = 0x1405
    FLOAT = 0x1406
    DOUBLE = 0x140A
    BOOL = 0x8B56

    # Vectors
    FLOAT_VEC2 = 0x8B50
    FLOAT_VEC3 = 0x8B51
    FLOAT_VEC4 = 0x8B52
    INT_VEC2 = 0x8B53
    INT_VEC3 = 0x8B54
    INT_VEC4 = 0x8B55
    BOOL_VEC2 = 0x8B57
    BOOL_VEC3 = 0x8B58
    BOOL_VEC4 = 0x8B59
    UNSIGNED_INT_VEC2 = 0x8DC6
    UNSIGNED_INT_VEC3 = 0x8DC7
    UNSIGNED_INT_VEC4 = 0x8DC8
    DOUBLE_VEC2 = 0x8FFC
    DOUBLE_VEC3 = 0x8FFD
    DOUBLE_VEC4 = 0x8FFE

    # Matrices
    FLOAT_MAT2 = 0x8B5A
    FLOAT_MAT3 = 0x8B5B
    FLOAT_MAT4 = 0x8B5C
    FLOAT_MAT2x3 = 0x8B65
    FLOAT_MAT2x4 = 0x8B66
    FLOAT_MAT3x2 = 0x8B67
    FLOAT_MAT3x4 = 0x8B68
    FLOAT_MAT4x2 = 0x8B69
    FLOAT_MAT4x3 = 0x8B6A
    DOUBLE_MAT2 = 0x8F46
    DOUBLE_MAT3 = 0x8F47
    DOUBLE_MAT4 = 0x8F48
    DOUBLE_MAT2x3 = 0x8F49
    DOUBLE_MAT2x4 = 0x8F4A
    DOUBLE_MAT3x2 = 0x8F4B
    DOUBLE_MAT3x4 = 0x8F4C
    DOUBLE_MAT4x2 = 0x8F4D
    DOUBLE_MAT4x3 = 0x8F4E

    # Float samplers
    SAMPLER_1D = 0x8B5D
    SAMPLER_2D = 0x8B5E
    SAMPLER_3D = 0x8B5F
    SAMPLER_CUBE = 0x8B60
    SAMPLER_1D_SHADOW = 0x8B61
    SAMPLER_2D_SHADOW = 0x8B62
    SAMPLER_2D_RECT = 0x8B63
    SAMPLER_2D_RECT_SHADOW = 0x8B64
    SAMPLER_1D_ARRAY = 0x8DC0
    SAMPLER_2D_ARRAY = 0x8DC1
    SAMPLER_BUFFER = 0x8DC2
    SAMPLER_1D_ARRAY_SHADOW = 0x8DC3
    SAMPLER_2D_ARRAY_SHADOW = 0x8DC4
    SAMPLER_CUBE_SHADOW = 0x8DC5
    SAMPLER_CUBE_MAP_ARRAY = 0x900C
    SAMPLER_CUBE_MAP_ARRAY_SHADOW = 0x900D
    SAMPLER_2D_MULTISAMPLE = 0x9108
    SAMPLER_2D_MULTISAMPLE_ARRAY = 0x910B

    # Integer samplers
    INT_SAMPLER_1D = 0x8DC9
    INT_SAMPLER_2D = 0x8DCA
    INT_SAMPLER_3D = 0x8DCB
    INT_SAMPLER_CUBE = 0x8DCC
    INT_SAMPLER_2D_RECT = 0x8DCD
    INT_SAMPLER_1D_ARRAY = 0x8DCE
    INT_SAMPLER_2D_ARRAY = 0x8DCF
    INT_SAMPLER_BUFFER = 0x8DD0
    INT_SAMPLER_CUBE_MAP_ARRAY = 0x900E
    INT_SAMPLER_2D_MULTISAMPLE = 0x9109
    INT_SAMPLER_2D_MULTISAMPLE_ARRAY = 0x910C

    # Unsigned integer samplers
    UNSIGNED_INT_SAMPLER_1D = 0x8DD1
    UNSIGNED_INT_SAMPLER_2D = 0x8DD2
    UNSIGNED_INT_SAMPLER_3D = 0x8DD3
    UNSIGNED_INT_SAMPLER_CUBE = 0x8DD4
    UNSIGNED_INT_SAMPLER_2D_RECT = 0x8DD5
    UNSIGNED_INT_SAMPLER_1D_ARRAY = 0x8DD6
    UNSIGNED_INT_SAMPLER_2D_ARRAY = 0x8DD7
    UNSIGNED_INT_SAMPLER_BUFFER = 0x8DD8
    UNSIGNED_INT_SAMPLER_CUBE_MAP_ARRAY = 0x900F
    UNSIGNED_INT_SAMPLER_2D_MULTISAMPLE = 0x910A
    UNSIGNED_INT_SAMPLER_2D_MULTISAMPLE_ARRAY = 0x910D

    # Images
    IMAGE_1D = 0x904C
    IMAGE_2D = 0x904D
    IMAGE_3D = 0x904E
    IMAGE_2D_RECT = 0x904F
    IMAGE_CUBE = 0x9050
    IMAGE_BUFFER = 0x9051
    IMAGE_1D_ARRAY = 0x9052
    IMAGE_2D_ARRAY = 0x9053
    IMAGE_CUBE_MAP_ARRAY = 0x9054
    IMAGE_2D_MULTISAMPLE = 0x9055
    IMAGE_2D_MULTISAMPLE_ARRAY = 0x9056
    INT_IMAGE_1D = 0x9057
    INT_IMAGE_2D = 0x9058
    INT_IMAGE_3D = 0x9059
    INT_IMAGE_2D_RECT = 0x905A
    INT_IMAGE_CUBE = 0x905B
    INT_IMAGE_BUFFER = 0x905C
    INT_IMAGE_1D_ARRAY = 0x905D
    INT_IMAGE_2D_ARRAY = 0x905E
    INT_IMAGE_CUBE_MAP_ARRAY = 0x905F
    INT_IMAGE_2D_MULTISAMPLE = 0x9060
    INT_IMAGE_2D_MULTISAMPLE_ARRAY = 0x9061
    UNSIGNED_INT_IMAGE_1D = 0x9062
    UNSIGNED_INT_IMAGE_2D = 0x9063
    UNSIGNED_INT_IMAGE_3D = 0x9064
    UNSIGNED_INT_IMAGE_2D_RECT = 0x9065
    UNSIGNED_INT_IMAGE_CUBE = 0x9066
    UNSIGNED_INT_IMAGE_BUFFER = 0x9067
    UNSIGNED_INT_IMAGE_1D_ARRAY = 0x9068
    UNSIGNED_INT_IMAGE_2D_ARRAY = 0x9069
    UNSIGNED_INT_IMAGE_CUBE_MAP_ARRAY = 0x906A
    UNSIGNED_INT_IMAGE_2D_MULTISAMPLE = 0x906B
    UNSIGNED_INT_IMAGE_2D_MULTISAMPLE_ARRAY = 0x906C

    # Atomic counters
    UNSIGNED_INT_ATOMIC_COUNTER = 0x92DB


class TypeKind(Enum):
    """Kind of a logical type; scalar kinds double as element kinds."""

    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    DOUBLE = "double"
    VECTOR = "vector"
    MATRIX = "matrix"
    TEXTURE = "texture"


SCALAR_KINDS = (
    TypeKind.BOOL,
    TypeKind.INT,
    TypeKind.UINT,
    TypeKind.FLOAT,
    TypeKind.DOUBLE,
)


@dataclass(frozen=True)
class LogicalType:
    """A uniform type as seen by the generated wrapper.

    Attributes:
        kind: Scalar kind, ``VECTOR``, ``MATRIX`` or ``TEXTURE``
        elem: Element kind of vectors and matrices
        rows: Component count of vectors, row count of matrices
        cols: Column count of matrices
    """

    kind: TypeKind
    elem: TypeKind | None = None
    rows: int = 1
    cols: int = 1

    def __str__(self) -> str:
        prefix = _GLSL_PREFIXES.get(self.elem, "")
        match self.kind:
            case TypeKind.VECTOR:
                return f"{prefix}vec{self.rows}"
            case TypeKind.MATRIX if self.rows == self.cols:
                return f"{prefix}mat{self.rows}"
            case TypeKind.MATRIX:
                return f"{prefix}mat{self.rows}x{self.cols}"
            case _:
                return self.kind.value


def vector(dim: int, elem: TypeKind = TypeKind.FLOAT) -> LogicalType:
    return LogicalType(TypeKind.VECTOR, elem, dim)


def matrix(rows: int, cols: int, elem: TypeKind = TypeKind.FLOAT) -> LogicalType:
    return LogicalType(TypeKind.MATRIX, elem, rows, cols)


BOOL = LogicalType(TypeKind.BOOL)
INT = LogicalType(TypeKind.INT)
UINT = LogicalType(TypeKind.UINT)
FLOAT = LogicalType(TypeKind.FLOAT)
DOUBLE = LogicalType(TypeKind.DOUBLE)
TEXTURE = LogicalType(TypeKind.TEXTURE)

_GLSL_PREFIXES = {
    TypeKind.DOUBLE: "d",
    TypeKind.INT: "i",
    TypeKind.UINT: "u",
    TypeKind.BOOL: "b",
}

_DIMENSIONS = (2, 3, 4)
VECTOR_ELEMENTS = (
    TypeKind.FLOAT,
    TypeKind.DOUBLE,
    TypeKind.INT,
    TypeKind.UINT,
    TypeKind.BOOL,
)
MATRIX_ELEMENTS = (TypeKind.FLOAT, TypeKind.DOUBLE)

# Native tag name prefix of each vector / matrix element kind
_NATIVE_PREFIXES = {
    TypeKind.FLOAT: "FLOAT",
    TypeKind.DOUBLE: "DOUBLE",
    TypeKind.INT: "INT",
    TypeKind.UINT: "UNSIGNED_INT",
    TypeKind.BOOL: "BOOL",
}


def _matrix_tag(elem: TypeKind, rows: int, cols: int) -> NativeType:
    shape = f"{rows}" if rows == cols else f"{rows}x{cols}"
    return NativeType[f"{_NATIVE_PREFIXES[elem]}_MAT{shape}"]


SCALAR_TYPES: dict[NativeType, LogicalType] = {
    NativeType.BOOL: BOOL,
    NativeType.INT: INT,
    NativeType.UNSIGNED_INT: UINT,
    NativeType.FLOAT: FLOAT,
    NativeType.DOUBLE: DOUBLE,
}

VECTOR_TYPES: dict[NativeType, LogicalType] = {
    NativeType[f"{_NATIVE_PREFIXES[elem]}_VEC{dim}"]: vector(dim, elem)
    for elem in VECTOR_ELEMENTS
    for dim in _DIMENSIONS
}

MATRIX_TYPES: dict[NativeType, LogicalType] = {
    _matrix_tag(elem, rows, cols): matrix(rows, cols, elem)
    for elem in MATRIX_ELEMENTS
    for rows in _DIMENSIONS
    for cols in _DIMENSIONS
}

# Every sampler binds the same way (sequential texture unit), so the
# dimensionality, array, shadow and multisample variants all collapse.
SAMPLER_TYPES: frozenset[NativeType] = frozenset(
    tag for tag in NativeType if "SAMPLER" in tag.name
)

UNSUPPORTED_TYPES: frozenset[NativeType] = frozenset(
    tag for tag in NativeType if "IMAGE" in tag.name or "ATOMIC_COUNTER" in tag.name
)

NATIVE_TO_LOGICAL: dict[NativeType, LogicalType] = {
    **SCALAR_TYPES,
    **VECTOR_TYPES,
    **MATRIX_TYPES,
    **{tag: TEXTURE for tag in sorted(SAMPLER_TYPES)},
}

ALL_LOGICAL_TYPES: tuple[LogicalType, ...] = tuple(
    dict.fromkeys(NATIVE_TO_LOGICAL.values())
)


# Python side of each element kind: numpy dtype, glUniform suffix and the
# expression wrapping the stored value when it is passed to OpenGL.
@dataclass(frozen=True)
class _ElementInfo:
    python_type: str
    default: str
    converter: str
    dtype: str
    suffix: str
    array_value: str = "{value}"
    scalar_value: str = "{value}"


_ELEMENTS: dict[TypeKind, _ElementInfo] = {
    TypeKind.BOOL: _ElementInfo(
        "bool",
        "False",
        "runtime.to_bool",
        "np.bool_",
        "i",
        array_value="{value}.astype(np.int32)",
        scalar_value="int({value})",
    ),
    TypeKind.INT: _ElementInfo("int", "0", "runtime.to_int", "np.int32", "i"),
    TypeKind.UINT: _ElementInfo("int", "0", "runtime.to_uint", "np.uint32", "ui"),
    TypeKind.FLOAT: _ElementInfo("float", "0.0", "runtime.to_float", "np.float32", "f"),
    TypeKind.DOUBLE: _ElementInfo(
        "float", "0.0", "runtime.to_float", "np.float64", "d"
    ),
}

_LOCATION = "self._loc_{id}"
_VALUE = "self.uniform_{id}"


def _shape(logical_type: LogicalType) -> str:
    if logical_type.kind == TypeKind.VECTOR:
        return f"({logical_type.rows},)"
    return f"({logical_type.rows}, {logical_type.cols})"


def _matrix_function(logical_type: LogicalType) -> str:
    shape = str(logical_type.rows)
    if logical_type.rows != logical_type.cols:
        shape = f"{logical_type.rows}x{logical_type.cols}"
    suffix = _ELEMENTS[logical_type.elem].suffix
    return f"GL.glUniformMatrix{shape}{suffix}v"


PYTHON_TYPES: dict[LogicalType, str] = {
    **{LogicalType(kind): _ELEMENTS[kind].python_type for kind in SCALAR_KINDS},
    **{
        t: "np.ndarray"
        for t in ALL_LOGICAL_TYPES
        if t.kind in (TypeKind.VECTOR, TypeKind.MATRIX)
    },
    TEXTURE: "runtime.Texture",
}

DEFAULT_VALUES: dict[LogicalType, str] = {
    **{LogicalType(kind): _ELEMENTS[kind].default for kind in SCALAR_KINDS},
    **{
        t: f"np.zeros({_shape(t)}, dtype={_ELEMENTS[t.elem].dtype})"
        for t in ALL_LOGICAL_TYPES
        if t.kind in (TypeKind.VECTOR, TypeKind.MATRIX)
    },
    TEXTURE: "runtime.Texture()",
}

CONVERTERS: dict[LogicalType, str] = {
    **{LogicalType(kind): _ELEMENTS[kind].converter for kind in SCALAR_KINDS},
    **{
        t: f"runtime.array_of({_shape(t)}, {_ELEMENTS[t.elem].dtype})"
        for t in ALL_LOGICAL_TYPES
        if t.kind in (TypeKind.VECTOR, TypeKind.MATRIX)
    },
    TEXTURE: "runtime.to_texture",
}

DRAW_COMMANDS: dict[LogicalType, str] = {
    **{
        LogicalType(kind): (
            f"GL.glUniform1{_ELEMENTS[kind].suffix}({_LOCATION}, "
            f"{_ELEMENTS[kind].scalar_value.format(value=_VALUE)})"
        )
        for kind in SCALAR_KINDS
    },
    **{
        t: (
            f"GL.glUniform{t.rows}{_ELEMENTS[t.elem].suffix}v({_LOCATION}, 1, "
            f"{_ELEMENTS[t.elem].array_value.format(value=_VALUE)})"
        )
        for t in ALL_LOGICAL_TYPES
        if t.kind == TypeKind.VECTOR
    },
    **{
        t: f"{_matrix_function(t)}({_LOCATION}, 1, self.transpose_matrix, {_VALUE})"
        for t in ALL_LOGICAL_TYPES
        if t.kind == TypeKind.MATRIX
    },
}


def logical_type_of(tag: int, name: str | None = None) -> LogicalType:
    """Map a native uniform type tag onto its logical type.

    Args:
        tag: OpenGL type tag reported by ``glGetActiveUniform``
        name: Uniform name, only used in the error message

    Returns:
        The logical type of the uniform

    Raises:
        UnsupportedUniformType: For image and atomic-counter tags, and for
            integers that are not OpenGL uniform types
    """
    try:
        return NATIVE_TO_LOGICAL[NativeType(tag)]
    except (KeyError, ValueError):
        raise UnsupportedUniformType(_as_native(tag), name) from None


def python_type_of(logical_type: LogicalType) -> str:
    """Annotation text of the backing field holding a uniform's value."""
    return PYTHON_TYPES[logical_type]


def default_value_of(logical_type: LogicalType) -> str:
    """Initializer text of the backing field holding a uniform's value."""
    return DEFAULT_VALUES[logical_type]


def converter_of(logical_type: LogicalType) -> str:
    """Expression evaluating to the run-time converter of assigned values."""
    return CONVERTERS[logical_type]


def draw_command_for(logical_type: LogicalType, identifier: str) -> str:
    """Statement passing a uniform's value to OpenGL at draw time.

    Args:
        logical_type: Logical type of the uniform
        identifier: Python identifier derived from the uniform name; the
            statement reads ``self._loc_<identifier>`` and
            ``self.uniform_<identifier>``

    Raises:
        ValueError: For textures, which are bound through texture units
            instead of a single draw command
    """
    if logical_type == TEXTURE:
        raise ValueError("Texture uniforms are passed as texture unit indices")
    return DRAW_COMMANDS[logical_type].format(id=identifier)


def _as_native(tag: int) -> int:
    try:
        return NativeType(tag)
    except ValueError:
        return tag
