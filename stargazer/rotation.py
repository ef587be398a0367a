"""
Angle-axis rotation written against a generic scalar type.

The functions here only use +, -, *, / and sqrt/sin/cos taken from the
namespace returned by get_namespace(). Plain floats and numpy scalars are
evaluated with numpy; 0-d torch tensors are evaluated with torch so their
autograd history is preserved.
"""

from types import ModuleType
from typing import Any, Sequence, Tuple

import numpy as np
import torch

Vector3 = Tuple[Any, Any, Any]

# Below this squared angle the first order expansion is used
EPSILON = np.finfo(np.float64).eps


def get_namespace(*values: Any) -> ModuleType:
    """
    Return the math namespace able to evaluate the given scalars.

    torch if any of the values is a tensor, numpy otherwise.
    """
    for value in values:
        if torch.is_tensor(value):
            return torch
    return np


def dot(a: Sequence, b: Sequence) -> Any:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Sequence, b: Sequence) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def negate(angle_axis: Sequence) -> Vector3:
    """Inverse of a rotation vector."""
    return (-angle_axis[0], -angle_axis[1], -angle_axis[2])


def angle_axis_rotate_point(angle_axis: Sequence, point: Sequence) -> Vector3:
    """
    Rotate a 3D point by a rotation vector.

    The rotation angle is the norm of the vector and the axis its direction.
    Uses Rodrigues' formula:

        p' = p cos(t) + (w x p) sin(t) + w (w . p)(1 - cos(t))

    For angles whose square is below machine epsilon the first order
    expansion p' = p + aa x p is used instead, which is exact to machine
    precision there and keeps the derivative defined at the zero rotation.

    Args:
        angle_axis: Rotation vector (rx, ry, rz) in radians
        point: Point (x, y, z)

    Returns:
        Rotated point as a 3-tuple of the input scalar type
    """
    theta2 = dot(angle_axis, angle_axis)

    if theta2 > EPSILON:
        xp = get_namespace(*angle_axis)
        theta = xp.sqrt(theta2)
        cos_theta = xp.cos(theta)
        sin_theta = xp.sin(theta)
        theta_inverse = 1.0 / theta

        w = (
            angle_axis[0] * theta_inverse,
            angle_axis[1] * theta_inverse,
            angle_axis[2] * theta_inverse,
        )
        w_cross_pt = cross(w, point)
        tmp = dot(w, point) * (1.0 - cos_theta)

        return (
            point[0] * cos_theta + w_cross_pt[0] * sin_theta + w[0] * tmp,
            point[1] * cos_theta + w_cross_pt[1] * sin_theta + w[1] * tmp,
            point[2] * cos_theta + w_cross_pt[2] * sin_theta + w[2] * tmp,
        )

    w_cross_pt = cross(angle_axis, point)
    return (
        point[0] + w_cross_pt[0],
        point[1] + w_cross_pt[1],
        point[2] + w_cross_pt[2],
    )
