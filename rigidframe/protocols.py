"""
Protocol definitions for the read-only side of rigidframe types.

Each mutable class in the package implements one of these. Code that only
reads an orientation or a transform should accept the protocol rather than a
concrete class, which lets rotation matrices, quaternions, axis-angles,
rotation-scale matrices and whole transforms be used interchangeably as a
source of rotation.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class Orientation3DReadOnly(Protocol):
    """Anything that describes a 3D rotation."""

    def to_rotation_array(self) -> np.ndarray:
        """Return the rotation as a new 3x3 array."""
        ...

    def to_quaternion_array(self) -> np.ndarray:
        """Return the rotation as a new unit quaternion [x, y, z, s]."""
        ...

    def contains_nan(self) -> bool:
        ...


@runtime_checkable
class RotationScaleReadOnly(Orientation3DReadOnly, Protocol):
    """A rotation followed by a strictly positive per-axis scale."""

    def to_scale_array(self) -> np.ndarray:
        """Return the scale as a new 3-element array."""
        ...


@runtime_checkable
class TransformReadOnly(RotationScaleReadOnly, Protocol):
    """
    A transform x -> A x + t with A = R diag(s).

    Rigid and quaternion-based transforms report a unit scale.
    """

    @property
    def translation(self) -> np.ndarray:
        ...

    def get_element(self, row: int, column: int) -> float:
        ...
