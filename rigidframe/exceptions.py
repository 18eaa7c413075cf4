"""Exception types raised by rigidframe."""

import numpy as np


class RigidFrameError(Exception):
    """Base exception for all rigidframe errors."""

    pass


def _format_matrix(matrix) -> str:
    return np.array2string(np.asarray(matrix, dtype=np.float64), precision=6, suppress_small=True)


class NotARotationMatrixException(RigidFrameError, ValueError):
    """A 3x3 block failed the orthonormality check of a validated setter."""

    def __init__(self, matrix):
        self.matrix = np.array(matrix, dtype=np.float64)
        super().__init__(f"The matrix is not a rotation matrix:\n{_format_matrix(matrix)}")


class NotARotationScaleMatrixException(RigidFrameError, ValueError):
    """A rotation-scale block is not a rotation times a strictly positive scale."""

    def __init__(self, matrix=None, scale=None):
        self.matrix = None if matrix is None else np.array(matrix, dtype=np.float64)
        self.scale = None if scale is None else np.array(scale, dtype=np.float64)
        if matrix is not None:
            message = f"The matrix is not a rotation-scale matrix:\n{_format_matrix(matrix)}"
        else:
            message = f"Mirroring or zero scale is not handled, scale values: {_format_matrix(scale)}"
        super().__init__(message)


class NotAMatrix2DException(RigidFrameError, ValueError):
    """A rotation is not confined to the XY plane while a 2D operation requires it."""

    def __init__(self, matrix):
        self.matrix = np.array(matrix, dtype=np.float64)
        super().__init__(f"The matrix is not in XY plane:\n{_format_matrix(matrix)}")


__all__ = [
    "RigidFrameError",
    "NotARotationMatrixException",
    "NotARotationScaleMatrixException",
    "NotAMatrix2DException",
]
