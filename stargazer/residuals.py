"""
Reprojection residuals for landmark observations.

A residual is the predicted image point of a landmark point minus the point
where it was observed. An external optimizer evaluates one residual per
observation with candidate poses and intrinsics and minimizes their sum of
squares.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np

from .parameters import CameraIntrinsics, ImagePoint, LandmarkPoint, Pose
from .transforms import transform_landmark_to_image

logger = logging.getLogger(__name__)


class ReprojectionResidual:
    """
    Residual of a single observed landmark point.

    Holds the fixed data of the observation; the parameters being optimized
    are passed on each call and may be floats or torch tensors.
    """

    def __init__(self, landmark_point: LandmarkPoint, observed: ImagePoint):
        self.landmark_point = LandmarkPoint(*landmark_point)
        self.observed = ImagePoint(*observed)

    def __call__(
        self,
        landmark_pose: Pose,
        camera_pose: Pose,
        intrinsics: CameraIntrinsics,
    ) -> Optional[Tuple[Any, Any]]:
        """
        Evaluate predicted minus observed image coordinates.

        Returns:
            (dx, dy), or None if the projection is degenerate
        """
        predicted = transform_landmark_to_image(
            self.landmark_point, landmark_pose, camera_pose, intrinsics
        )
        if predicted is None:
            return None

        return (
            predicted.x - self.observed.x,
            predicted.y - self.observed.y,
        )

    def __repr__(self) -> str:
        return (
            f"ReprojectionResidual(landmark_point={tuple(self.landmark_point)}, "
            f"observed={tuple(self.observed)})"
        )


def reprojection_error(
    landmark_point: LandmarkPoint,
    observed: ImagePoint,
    landmark_pose: Pose,
    camera_pose: Pose,
    intrinsics: CameraIntrinsics,
) -> float:
    """
    Compute the reprojection error of a single observation.

    Returns:
        Euclidean distance between projected and observed point,
        inf if the projection is degenerate
    """
    residual = ReprojectionResidual(landmark_point, observed)(
        landmark_pose, camera_pose, intrinsics
    )
    if residual is None:
        return float('inf')

    return float(np.hypot(float(residual[0]), float(residual[1])))


@dataclass
class Observation:
    """A landmark point observed in the image."""
    landmark_id: int
    landmark_point: LandmarkPoint
    observed: ImagePoint


def evaluate_observations(
    observations: Sequence[Observation],
    landmark_poses: Dict[int, Pose],
    camera_pose: Pose,
    intrinsics: CameraIntrinsics,
) -> np.ndarray:
    """
    Compute reprojection errors for a set of observations.

    Args:
        observations: Observed landmark points
        landmark_poses: Landmark poses keyed by landmark ID
        camera_pose: Pose of the observing camera
        intrinsics: Camera intrinsic parameters

    Returns:
        N-element array of errors (inf for degenerate projections)

    Raises:
        KeyError: If an observation references an unknown landmark
    """
    errors = np.zeros(len(observations))

    for i, obs in enumerate(observations):
        if obs.landmark_id not in landmark_poses:
            raise KeyError(f"Unknown landmark ID: {obs.landmark_id}")

        errors[i] = reprojection_error(
            obs.landmark_point,
            obs.observed,
            landmark_poses[obs.landmark_id],
            camera_pose,
            intrinsics,
        )

    n_degenerate = int(np.count_nonzero(np.isinf(errors)))
    logger.debug(
        f"Evaluated {len(observations)} observations ({n_degenerate} degenerate)"
    )
    return errors
