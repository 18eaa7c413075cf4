# utils.py

import numpy as np
from numpy import asarray as np_asarray
from numpy import float64 as np_float64
from typing import Tuple


def as_float_array(value, shape: Tuple[int, ...], name: str = "value") -> np.ndarray:
    """
    Coerce `value` to a float64 array and check its shape.

    Args:
        value: Any array-like (list, tuple, ndarray).
        shape: The expected shape.
        name: Used in the error message.

    Returns:
        A float64 ndarray. Shares memory with `value` when no conversion is needed.

    Raises:
        ValueError: if the shape does not match.
    """
    array = np_asarray(value, dtype=np_float64)
    if array.shape != shape:
        raise ValueError(f"{name} must have shape {shape}, got {array.shape}")
    return array


def vector3(x, y=None, z=None, name: str = "vector") -> np.ndarray:
    """Accept either three scalars or one 3-element array-like; always returns a fresh array."""
    if y is None and z is None:
        return as_float_array(x, (3,), name).copy()
    if y is None or z is None:
        raise ValueError(f"{name} needs either one 3-element sequence or three scalars")
    return np.array([x, y, z], dtype=np_float64)


def read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view
