"""
Parameter layouts for landmark/camera poses and camera intrinsics.

External parameter storage (e.g. a bundle adjustment problem) keeps poses and
intrinsics as flat 6-element vectors. The slot order below is a fixed contract
with that storage; the structured records in this module are unpacked from
and packed back into those vectors at the boundary.

Pose layout:
    [X, Y, Z, Rx, Ry, Rz]
    translation followed by a rotation vector (axis-angle, Rodrigues form)

Intrinsics layout:
    [f, u0, v0, alpha, beta, theta]
    focal length, principal point, axis scale factors, skew angle
    (theta is carried but never applied; the projection assumes 90 degrees)
"""

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, NamedTuple, Sequence, Tuple

import numpy as np
from scipy.spatial.transform import Rotation as R_scipy


class PoseIndex(IntEnum):
    """Slot indices of a 6-element pose vector."""
    X = 0
    Y = 1
    Z = 2
    Rx = 3
    Ry = 4
    Rz = 5


class IntrinsicsIndex(IntEnum):
    """Slot indices of a 6-element intrinsics vector."""
    f = 0
    u0 = 1
    v0 = 2
    alpha = 3
    beta = 4
    theta = 5


POSE_SIZE = len(PoseIndex)
INTRINSICS_SIZE = len(IntrinsicsIndex)


class LandmarkPoint(NamedTuple):
    """Point in a landmark's local 2-D frame (z is implicitly zero)."""
    x: Any
    y: Any


class WorldPoint(NamedTuple):
    """Point in the shared world frame."""
    x: Any
    y: Any
    z: Any


class CameraPoint(NamedTuple):
    """Point in the camera frame, before projection."""
    x: Any
    y: Any
    z: Any


class ImagePoint(NamedTuple):
    """Normalized image-plane point after perspective division."""
    x: Any
    y: Any


def _check_length(values: Sequence, expected: int, what: str) -> None:
    if len(values) != expected:
        raise ValueError(
            f"{what} requires {expected} parameters, got {len(values)}"
        )


@dataclass
class Pose:
    """
    Six degree of freedom pose.

    For a landmark the pose maps landmark coordinates into the world frame.
    For a camera the translation is the camera position in world coordinates
    and the rotation vector takes camera axes to world axes.

    Scalars may be floats or 0-d torch tensors; nothing here converts them.

    Attributes:
        x, y, z: Translation
        rx, ry, rz: Rotation vector (direction = axis, norm = angle in radians)
    """
    x: Any = 0.0
    y: Any = 0.0
    z: Any = 0.0
    rx: Any = 0.0
    ry: Any = 0.0
    rz: Any = 0.0

    @classmethod
    def identity(cls) -> "Pose":
        return cls()

    @classmethod
    def from_array(cls, values: Sequence) -> "Pose":
        """
        Unpack a pose from a flat parameter vector in slot order.

        Args:
            values: Length-6 sequence, numpy array or torch tensor

        Returns:
            Pose whose fields reference the individual elements
            (tensor elements keep their autograd history)

        Raises:
            ValueError: If the vector does not have exactly 6 elements
        """
        _check_length(values, POSE_SIZE, "Pose")
        return cls(
            x=values[PoseIndex.X],
            y=values[PoseIndex.Y],
            z=values[PoseIndex.Z],
            rx=values[PoseIndex.Rx],
            ry=values[PoseIndex.Ry],
            rz=values[PoseIndex.Rz],
        )

    def to_array(self) -> np.ndarray:
        """Pack into a float64 vector in slot order."""
        packed = np.zeros(POSE_SIZE)
        packed[PoseIndex.X] = float(self.x)
        packed[PoseIndex.Y] = float(self.y)
        packed[PoseIndex.Z] = float(self.z)
        packed[PoseIndex.Rx] = float(self.rx)
        packed[PoseIndex.Ry] = float(self.ry)
        packed[PoseIndex.Rz] = float(self.rz)
        return packed

    @property
    def translation(self) -> Tuple[Any, Any, Any]:
        return (self.x, self.y, self.z)

    @property
    def angle_axis(self) -> Tuple[Any, Any, Any]:
        return (self.rx, self.ry, self.rz)

    def rotation(self) -> R_scipy:
        """Rotation as a scipy object (plain float poses only)."""
        return R_scipy.from_rotvec(self.to_array()[PoseIndex.Rx:PoseIndex.Rz + 1])


@dataclass
class CameraIntrinsics:
    """
    Camera intrinsic parameters of the projection model.

        i0 = f * alpha * X + u0 * Z
        i1 = f * beta  * Y + v0 * Z
        i2 = Z

    followed by perspective division. theta is the skew angle between the
    image axes. It is stored for compatibility with the parameter layout but
    the projection always assumes 90 degrees (no shear).
    """
    f: Any
    u0: Any
    v0: Any
    alpha: Any
    beta: Any
    theta: Any = math.pi / 2

    @classmethod
    def from_array(cls, values: Sequence) -> "CameraIntrinsics":
        """
        Unpack intrinsics from a flat parameter vector in slot order.

        Raises:
            ValueError: If the vector does not have exactly 6 elements
        """
        _check_length(values, INTRINSICS_SIZE, "CameraIntrinsics")
        return cls(
            f=values[IntrinsicsIndex.f],
            u0=values[IntrinsicsIndex.u0],
            v0=values[IntrinsicsIndex.v0],
            alpha=values[IntrinsicsIndex.alpha],
            beta=values[IntrinsicsIndex.beta],
            theta=values[IntrinsicsIndex.theta],
        )

    def to_array(self) -> np.ndarray:
        """Pack into a float64 vector in slot order."""
        packed = np.zeros(INTRINSICS_SIZE)
        packed[IntrinsicsIndex.f] = float(self.f)
        packed[IntrinsicsIndex.u0] = float(self.u0)
        packed[IntrinsicsIndex.v0] = float(self.v0)
        packed[IntrinsicsIndex.alpha] = float(self.alpha)
        packed[IntrinsicsIndex.beta] = float(self.beta)
        packed[IntrinsicsIndex.theta] = float(self.theta)
        return packed
