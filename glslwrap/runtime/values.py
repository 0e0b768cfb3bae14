"""Converters validating values assigned to generated uniform fields.

Each converter takes an arbitrary value and returns it in the exact form the
draw-time ``glUniform*`` call expects, or raises ``TypeError`` /
``ValueError``. :class:`UniformSlot` turns those into
:class:`~glslwrap.runtime.exceptions.InvalidParameterTypeError`.
"""

from collections.abc import Callable
from dataclasses import dataclass
from numbers import Integral, Real
from typing import Any

import numpy as np

from glslwrap.runtime.exceptions import InvalidParameterTypeError
from glslwrap.runtime.texture import Texture

Converter = Callable[[Any], Any]

_UINT_MAX = 2**32 - 1


def to_bool(value: Any) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, Integral) and value in (0, 1):
        return bool(value)
    raise TypeError(f"Expected bool, got {type(value).__name__}")


def to_int(value: Any) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Integral):
        raise TypeError(f"Expected int, got {type(value).__name__}")
    return int(value)


def to_uint(value: Any) -> int:
    value = to_int(value)
    if not 0 <= value <= _UINT_MAX:
        raise ValueError(f"{value} is out of range for an unsigned int")
    return value


def to_float(value: Any) -> float:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Real):
        raise TypeError(f"Expected float, got {type(value).__name__}")
    return float(value)


def to_texture(value: Any) -> Texture:
    if not isinstance(value, Texture):
        raise TypeError(f"Expected Texture, got {type(value).__name__}")
    return value


def array_of(shape: tuple[int, ...], dtype: Any) -> Converter:
    """Build a converter producing contiguous arrays of ``shape`` and ``dtype``.

    Any array-like with exactly ``shape`` elements laid out the same way is
    accepted: lists, tuples and arrays of another numeric dtype are copied
    into a new array. Matrices are stored row by row as given.
    """

    def convert(value: Any) -> np.ndarray:
        if isinstance(value, (str, bytes)):
            raise TypeError(f"Expected an array of shape {shape}, got a string")
        array = np.ascontiguousarray(value, dtype=dtype)
        if array.shape != shape:
            raise ValueError(f"Expected shape {shape}, got {array.shape}")
        return array

    convert.__name__ = f"array_of_{'x'.join(map(str, shape))}_{np.dtype(dtype).name}"
    return convert


@dataclass(frozen=True)
class UniformSlot:
    """Where a uniform's value lives on a wrapper instance.

    Attributes:
        field: Instance attribute holding the value (``uniform_<id>``)
        convert: Converter applied to every assigned value
    """

    field: str
    convert: Converter

    def store(self, shader: Any, name: str, value: Any) -> None:
        try:
            converted = self.convert(value)
        except (TypeError, ValueError) as e:
            raise InvalidParameterTypeError(
                f"Invalid parameter type: {name} is not convertible from the "
                f"type \"{type(value).__name__}\" ({e})."
            ) from e
        setattr(shader, self.field, converted)

    def load(self, shader: Any, name: str, expected_type: type | None = None) -> Any:
        value = getattr(shader, self.field)
        if expected_type is not None and not isinstance(value, expected_type):
            raise InvalidParameterTypeError(
                f"Invalid parameter type: {name} is not convertible to the "
                f"type \"{expected_type.__name__}\"."
            )
        return value
