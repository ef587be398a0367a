"""
Stargazer Landmark Projection Package

A Python package to predict where points of planar landmarks appear in a
camera image, given landmark poses, a camera pose and camera intrinsics.
The predictions feed reprojection residuals of a pose estimation / bundle
adjustment problem.

Coordinate System Chain:
    Landmark (x, y, 0) → World → Camera → Image (x, y)

Conventions:
    - Poses: [X, Y, Z, Rx, Ry, Rz], translation followed by a rotation vector
    - Intrinsics: [f, u0, v0, alpha, beta, theta], theta assumed to be 90°
    - Degenerate projections (camera depth exactly zero) return None

All transforms accept plain floats or torch tensors, so the same code is used
for evaluation and for automatic differentiation.
"""

from .parameters import (
    PoseIndex,
    IntrinsicsIndex,
    POSE_SIZE,
    INTRINSICS_SIZE,
    Pose,
    CameraIntrinsics,
    LandmarkPoint,
    WorldPoint,
    CameraPoint,
    ImagePoint,
)
from .rotation import angle_axis_rotate_point
from .transforms import (
    transform_landmark_to_world,
    transform_world_to_camera,
    transform_world_to_image,
    transform_landmark_to_image,
    transform_landmark_points,
)
from .residuals import ReprojectionResidual, Observation, reprojection_error, evaluate_observations
from .autodiff import ProjectionJacobian, projection_jacobian
from .config import StargazerConfig

__version__ = "1.3.0"
__all__ = [
    "PoseIndex",
    "IntrinsicsIndex",
    "POSE_SIZE",
    "INTRINSICS_SIZE",
    "Pose",
    "CameraIntrinsics",
    "LandmarkPoint",
    "WorldPoint",
    "CameraPoint",
    "ImagePoint",
    "angle_axis_rotate_point",
    "transform_landmark_to_world",
    "transform_world_to_camera",
    "transform_world_to_image",
    "transform_landmark_to_image",
    "transform_landmark_points",
    "ReprojectionResidual",
    "Observation",
    "reprojection_error",
    "evaluate_observations",
    "ProjectionJacobian",
    "projection_jacobian",
    "StargazerConfig",
]
