"""
Coordinate transformations between landmark, world and image frames.

Transformation chain:
    Landmark (x, y, 0) → World (x, y, z) → Camera (x, y, z) → Image (x, y)

Frame Definitions:
    - Landmark: local 2-D frame of a planar marker, z = 0 on the marker
    - World: shared frame in which landmark and camera poses are expressed
    - Camera: origin at the camera position, axes given by the camera rotation
    - Image: normalized image plane after perspective division

Pose Conventions:
    - Landmark pose: landmark → world (rotate, then translate)
    - Camera pose: camera → world, so world → camera subtracts the translation
      and rotates by the negated rotation vector

All scalar functions are generic over the scalar type (floats or torch
tensors) so they can be differentiated with torch.autograd.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from .parameters import (
    CameraIntrinsics,
    CameraPoint,
    ImagePoint,
    LandmarkPoint,
    Pose,
    WorldPoint,
)
from .rotation import angle_axis_rotate_point, negate

logger = logging.getLogger(__name__)


def transform_landmark_to_world(
    point: LandmarkPoint,
    landmark_pose: Pose,
) -> WorldPoint:
    """
    Transform a point given in landmark coordinates into world coordinates.

    Args:
        point: Point in the landmark frame (z is taken as 0)
        landmark_pose: Pose of the landmark in the world frame

    Returns:
        Point in world coordinates
    """
    p_lm = (point[0], point[1], 0.0)

    p_w = angle_axis_rotate_point(landmark_pose.angle_axis, p_lm)

    return WorldPoint(
        p_w[0] + landmark_pose.x,
        p_w[1] + landmark_pose.y,
        p_w[2] + landmark_pose.z,
    )


def transform_world_to_camera(
    point: WorldPoint,
    camera_pose: Pose,
) -> CameraPoint:
    """
    Express a world point in the camera frame.

    The camera translation is the camera position in world coordinates;
    negating the rotation vector inverts the camera-to-world rotation.
    """
    p_c = (
        point[0] - camera_pose.x,
        point[1] - camera_pose.y,
        point[2] - camera_pose.z,
    )
    return CameraPoint(*angle_axis_rotate_point(negate(camera_pose.angle_axis), p_c))


def transform_world_to_image(
    point: WorldPoint,
    camera_pose: Pose,
    intrinsics: CameraIntrinsics,
) -> Optional[ImagePoint]:
    """
    Transform a point given in world coordinates into image coordinates.

    Projection (theta assumed to be 90°, so there is no skew term):
        i0 = f * alpha * X + u0 * Z
        i1 = f * beta  * Y + v0 * Z
        i2 = Z
        (x, y) = (i0 / i2, i1 / i2)

    Args:
        point: Point in world coordinates
        camera_pose: Pose of the camera in the world frame
        intrinsics: Camera intrinsic parameters

    Returns:
        Image point, or None if the camera-relative depth is exactly zero.
        The depth is compared for exact equality with 0, not against a
        tolerance; no division is attempted in that case.
    """
    p_c = transform_world_to_camera(point, camera_pose)

    p_i0 = intrinsics.f * intrinsics.alpha * p_c.x + intrinsics.u0 * p_c.z
    p_i1 = intrinsics.f * intrinsics.beta * p_c.y + intrinsics.v0 * p_c.z
    p_i2 = p_c.z

    if p_i2 == 0:
        logger.warning("Attempt to divide by 0!")
        return None

    return ImagePoint(p_i0 / p_i2, p_i1 / p_i2)


def transform_landmark_to_image(
    point: LandmarkPoint,
    landmark_pose: Pose,
    camera_pose: Pose,
    intrinsics: CameraIntrinsics,
) -> Optional[ImagePoint]:
    """
    Transform a point given in landmark coordinates into image coordinates.

    Args:
        point: Point in the landmark frame
        landmark_pose: Pose of the landmark in the world frame
        camera_pose: Pose of the camera in the world frame
        intrinsics: Camera intrinsic parameters

    Returns:
        Image point, or None on degenerate depth (see transform_world_to_image)
    """
    p_w = transform_landmark_to_world(point, landmark_pose)
    return transform_world_to_image(p_w, camera_pose, intrinsics)


def transform_landmark_points(
    points: np.ndarray,
    landmark_pose: Pose,
    camera_pose: Pose,
    intrinsics: CameraIntrinsics,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Project multiple landmark points to image coordinates.

    Vectorized numpy counterpart of transform_landmark_to_image for plain
    float parameters.

    Args:
        points: Nx2 array of landmark coordinates
        landmark_pose: Pose of the landmark
        camera_pose: Pose of the camera
        intrinsics: Camera intrinsic parameters

    Returns:
        Tuple of:
            - image_points: Nx2 array (NaN rows where depth is zero)
            - valid: N-element boolean array
    """
    points = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    points_lm = np.column_stack([points, np.zeros(len(points))])

    points_w = landmark_pose.rotation().apply(points_lm) + np.array(
        landmark_pose.translation, dtype=np.float64
    )
    delta = points_w - np.array(camera_pose.translation, dtype=np.float64)
    points_c = camera_pose.rotation().inv().apply(delta)

    f, u0, v0, alpha, beta, _ = intrinsics.to_array()
    i0 = f * alpha * points_c[:, 0] + u0 * points_c[:, 2]
    i1 = f * beta * points_c[:, 1] + v0 * points_c[:, 2]
    i2 = points_c[:, 2]

    valid = i2 != 0
    image_points = np.full((len(points), 2), np.nan)
    image_points[valid, 0] = i0[valid] / i2[valid]
    image_points[valid, 1] = i1[valid] / i2[valid]

    n_invalid = int(np.count_nonzero(~valid))
    if n_invalid:
        logger.warning(f"Attempt to divide by 0 for {n_invalid} of {len(points)} points!")

    return image_points, valid
