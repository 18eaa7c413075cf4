"""
Tolerances used by rigidframe.

Centralizes the epsilons shared by the validated setters, the planarity guard
and the degenerate-input handling of the conversion kernels.
"""

# Orthonormality / determinant tolerance for validated rotation setters
EPS_CHECK_ROTATION = 1.0e-7

# Tolerance on the off-plane coefficients when a rotation is applied in 2D
EPS_CHECK_2D = 1.0e-8

# Per coefficient tolerance when comparing a matrix to the identity
EPS_CHECK_IDENTITY = 1.0e-7

# Below this sine the axis of a rotation matrix is considered undefined
EPS_ZERO_ROTATION = 1.0e-10

# Norms below this are treated as zero (degenerate quaternion or axis)
EPS_NORM = 1.0e-12

# cos(pitch) below this means yaw and roll are coupled (gimbal lock)
EPS_GIMBAL = 1.0e-12
