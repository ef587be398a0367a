"""
Derivatives of the landmark-to-image projection.

The transforms are evaluated on float64 torch tensors and differentiated
with torch.autograd, giving the Jacobian of the image point with respect to
the landmark pose, the camera pose and the intrinsics.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import torch

from .parameters import (
    INTRINSICS_SIZE,
    POSE_SIZE,
    CameraIntrinsics,
    LandmarkPoint,
    Pose,
)
from .transforms import transform_landmark_to_image

logger = logging.getLogger(__name__)


@dataclass
class ProjectionJacobian:
    """
    Image point and its partial derivatives.

    Attributes:
        image_point: Projected (x, y)
        d_landmark_pose: 2x6 derivative w.r.t. [X, Y, Z, Rx, Ry, Rz] of the landmark
        d_camera_pose: 2x6 derivative w.r.t. [X, Y, Z, Rx, Ry, Rz] of the camera
        d_intrinsics: 2x6 derivative w.r.t. [f, u0, v0, alpha, beta, theta];
            the theta column is always zero
    """
    image_point: np.ndarray
    d_landmark_pose: np.ndarray
    d_camera_pose: np.ndarray
    d_intrinsics: np.ndarray


def projection_jacobian(
    landmark_point: LandmarkPoint,
    landmark_pose: Pose,
    camera_pose: Pose,
    intrinsics: CameraIntrinsics,
) -> Optional[ProjectionJacobian]:
    """
    Evaluate transform_landmark_to_image and its Jacobian.

    Args:
        landmark_point: Point in the landmark frame
        landmark_pose: Pose of the landmark (plain floats)
        camera_pose: Pose of the camera (plain floats)
        intrinsics: Camera intrinsic parameters (plain floats)

    Returns:
        ProjectionJacobian, or None if the projection is degenerate
    """
    point = (float(landmark_point[0]), float(landmark_point[1]))
    params = torch.from_numpy(np.concatenate([
        landmark_pose.to_array(),
        camera_pose.to_array(),
        intrinsics.to_array(),
    ]))

    image_point = _project(params, point)
    if image_point is None:
        return None

    J = torch.autograd.functional.jacobian(
        lambda p: _project(p, point), params
    ).numpy()

    cam_start = POSE_SIZE
    intr_start = 2 * POSE_SIZE

    logger.debug(f"Projection Jacobian evaluated at {image_point.tolist()}")

    return ProjectionJacobian(
        image_point=image_point.detach().numpy(),
        d_landmark_pose=J[:, :cam_start],
        d_camera_pose=J[:, cam_start:intr_start],
        d_intrinsics=J[:, intr_start:intr_start + INTRINSICS_SIZE],
    )


def _project(params: torch.Tensor, point) -> Optional[torch.Tensor]:
    """Project a landmark point given the stacked 18-element parameter vector."""
    landmark_pose = Pose.from_array(params[:POSE_SIZE])
    camera_pose = Pose.from_array(params[POSE_SIZE:2 * POSE_SIZE])
    intrinsics = CameraIntrinsics.from_array(params[2 * POSE_SIZE:])

    image_point = transform_landmark_to_image(
        LandmarkPoint(*point), landmark_pose, camera_pose, intrinsics
    )
    if image_point is None:
        return None

    return torch.stack([image_point.x, image_point.y])
