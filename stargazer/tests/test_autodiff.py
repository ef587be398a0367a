"""
Tests for derivatives of the landmark-to-image projection.

The autograd Jacobian is compared with central differences of the plain
float transforms.
"""

import pytest
import numpy as np
import torch
from numpy.testing import assert_allclose

from stargazer.autodiff import ProjectionJacobian, projection_jacobian
from stargazer.parameters import (
    POSE_SIZE,
    CameraIntrinsics,
    IntrinsicsIndex,
    LandmarkPoint,
    Pose,
)
from stargazer.residuals import ReprojectionResidual
from stargazer.transforms import transform_landmark_to_image


CONFIGURATIONS = [
    # landmark point, landmark pose, camera pose, intrinsics
    (
        (0.1, 0.2),
        [1.0, 2.0, 0.5, 0.1, -0.2, 0.3],
        [0.5, 1.5, -4.0, 0.05, 0.1, -0.1],
        [800.0, 320.0, 240.0, 1.0, 1.1, np.pi / 2],
    ),
    (
        (-0.3, 0.4),
        [0.0, 0.0, 3.0, 0.0, 0.0, 0.0],
        [0.2, -0.1, 0.0, 0.0, 0.0, 0.0],
        [1.0, 0.0, 0.0, 1.0, 1.0, np.pi / 2],
    ),
    (
        (0.25, -0.4),
        [2.0, -1.0, 1.0, 2.9, 0.3, -0.2],
        [2.0, -1.0, 6.0, 3.0, 0.0, 0.1],
        [1.5, 0.1, -0.2, 0.9, 1.2, 1.4],
    ),
]


def _stack(landmark_pose, camera_pose, intrinsics):
    return np.concatenate([landmark_pose, camera_pose, intrinsics]).astype(np.float64)


def _project(params, point):
    image_point = transform_landmark_to_image(
        LandmarkPoint(*point),
        Pose.from_array(params[:POSE_SIZE]),
        Pose.from_array(params[POSE_SIZE:2 * POSE_SIZE]),
        CameraIntrinsics.from_array(params[2 * POSE_SIZE:]),
    )
    return np.array([float(image_point.x), float(image_point.y)])


def central_difference_jacobian(params, point, h=1e-6):
    """2x18 Jacobian by central differences."""
    J = np.zeros((2, len(params)))
    for i in range(len(params)):
        step = np.zeros_like(params)
        step[i] = h
        J[:, i] = (_project(params + step, point) - _project(params - step, point)) / (2 * h)
    return J


@pytest.fixture(params=CONFIGURATIONS)
def configuration(request):
    point, landmark_pose, camera_pose, intrinsics = request.param
    return (
        point,
        Pose.from_array(landmark_pose),
        Pose.from_array(camera_pose),
        CameraIntrinsics.from_array(intrinsics),
    )


class TestProjectionJacobian:
    """Tests for projection_jacobian."""

    def test_shapes(self, configuration):
        result = projection_jacobian(*configuration)

        assert isinstance(result, ProjectionJacobian)
        assert result.image_point.shape == (2,)
        assert result.d_landmark_pose.shape == (2, 6)
        assert result.d_camera_pose.shape == (2, 6)
        assert result.d_intrinsics.shape == (2, 6)

    def test_image_point_matches_float_evaluation(self, configuration):
        result = projection_jacobian(*configuration)
        expected = transform_landmark_to_image(*configuration)

        assert_allclose(result.image_point, expected, rtol=1e-12)

    def test_matches_central_differences(self, configuration):
        point, landmark_pose, camera_pose, intrinsics = configuration
        params = _stack(landmark_pose.to_array(), camera_pose.to_array(), intrinsics.to_array())

        expected = central_difference_jacobian(params, point)
        result = projection_jacobian(*configuration)
        J = np.hstack([result.d_landmark_pose, result.d_camera_pose, result.d_intrinsics])

        assert np.isfinite(J).all()
        scale = max(1.0, np.abs(expected).max())
        assert_allclose(J, expected, rtol=1e-5, atol=1e-6 * scale)

    def test_theta_column_is_zero(self, configuration):
        result = projection_jacobian(*configuration)
        assert_allclose(result.d_intrinsics[:, IntrinsicsIndex.theta], [0.0, 0.0])

    def test_principal_point_derivative(self, configuration):
        """x = f*alpha*X/Z + u0, so dx/du0 = 1 and dy/dv0 = 1."""
        result = projection_jacobian(*configuration)

        assert result.d_intrinsics[0, IntrinsicsIndex.u0] == pytest.approx(1.0)
        assert result.d_intrinsics[1, IntrinsicsIndex.v0] == pytest.approx(1.0)
        assert result.d_intrinsics[0, IntrinsicsIndex.v0] == pytest.approx(0.0)

    def test_degenerate_returns_none(self):
        intrinsics = CameraIntrinsics(f=1.0, u0=0.0, v0=0.0, alpha=1.0, beta=1.0)
        assert projection_jacobian((1.0, 1.0), Pose(), Pose(), intrinsics) is None


class TestResidualGradient:
    """Residuals evaluated on tensors can be back-propagated."""

    def test_backward_through_residual(self):
        landmark_params = torch.tensor(
            [0.0, 0.0, 2.0, 0.0, 0.0, 0.0], dtype=torch.float64, requires_grad=True
        )
        intrinsics = CameraIntrinsics(f=1.0, u0=0.0, v0=0.0, alpha=1.0, beta=1.0)
        residual = ReprojectionResidual((1.0, 0.5), (0.4, 0.25))

        dx, dy = residual(Pose.from_array(landmark_params), Pose(), intrinsics)
        (dx ** 2 + dy ** 2).backward()

        # x = (1 + X) / Z, residual dx = 0.1 at the current pose
        grad = landmark_params.grad.numpy()
        assert grad[0] == pytest.approx(2 * 0.1 * (1 / 2.0))
        assert grad[2] == pytest.approx(2 * 0.1 * (-1.0 / 4.0))
        assert np.isfinite(grad).all()
