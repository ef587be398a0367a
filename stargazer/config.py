"""
Configuration module for landmark projection.

Handles loading and saving of camera intrinsics, camera pose and landmark
poses from YAML files.
"""

import yaml
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, Any
import logging

from .parameters import CameraIntrinsics, IntrinsicsIndex, Pose

logger = logging.getLogger(__name__)


def _require(data: Dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing required key '{key}' in {where}")
    return data[key]


@dataclass
class StargazerConfig:
    """
    Projection setup: one camera and a map of landmarks.

    Attributes:
        intrinsics: Camera intrinsic parameters
        camera_pose: Camera pose in the world frame (identity if not given)
        landmarks: Landmark poses in the world frame keyed by landmark ID
    """
    intrinsics: CameraIntrinsics
    camera_pose: Pose = field(default_factory=Pose)
    landmarks: Dict[int, Pose] = field(default_factory=dict)

    @classmethod
    def from_yaml(cls, config_path: str) -> "StargazerConfig":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            StargazerConfig object with loaded parameters

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If a required key is missing or a pose is malformed

        Example YAML structure:
            camera_intrinsics:
              f: 800.0
              u0: 320.0
              v0: 240.0
              alpha: 1.0
              beta: 1.0
              theta: 1.5707963
            camera_pose: [0.0, 0.0, 0.0, 0.0, 0.0, 0.0]
            landmarks:
              12: [1.0, 2.0, 3.0, 0.0, 0.0, 0.0]
              27: [2.5, 2.0, 3.0, 0.0, 0.0, 1.57]
        """
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        logger.info(f"Loading configuration from {config_path}")

        intr_data = _require(data, 'camera_intrinsics', config_path)
        intrinsics = CameraIntrinsics(
            f=float(_require(intr_data, 'f', 'camera_intrinsics')),
            u0=float(_require(intr_data, 'u0', 'camera_intrinsics')),
            v0=float(_require(intr_data, 'v0', 'camera_intrinsics')),
            alpha=float(_require(intr_data, 'alpha', 'camera_intrinsics')),
            beta=float(_require(intr_data, 'beta', 'camera_intrinsics')),
            theta=float(intr_data.get('theta', CameraIntrinsics.theta)),
        )

        # Camera pose is optional
        pose_data = data.get('camera_pose')
        camera_pose = Pose.from_array([float(v) for v in pose_data]) if pose_data else Pose()

        landmarks = {
            int(lm_id): Pose.from_array([float(v) for v in values])
            for lm_id, values in (data.get('landmarks') or {}).items()
        }

        logger.debug(f"Loaded {len(landmarks)} landmarks")

        return cls(
            intrinsics=intrinsics,
            camera_pose=camera_pose,
            landmarks=landmarks,
        )

    def to_yaml(self, config_path: str) -> None:
        """Save configuration to a YAML file."""
        intr = self.intrinsics.to_array()
        data = {
            'camera_intrinsics': {
                index.name: float(intr[index]) for index in IntrinsicsIndex
            },
            'camera_pose': self.camera_pose.to_array().tolist(),
            'landmarks': {
                int(lm_id): pose.to_array().tolist()
                for lm_id, pose in sorted(self.landmarks.items())
            },
        }

        with open(config_path, 'w') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

        logger.info(f"Configuration saved to {config_path}")

    def get_landmark_pose(self, landmark_id: int) -> Pose:
        """
        Look up a landmark pose.

        Raises:
            KeyError: If the landmark is not part of the configuration
        """
        if landmark_id not in self.landmarks:
            raise KeyError(f"Unknown landmark ID: {landmark_id}")
        return self.landmarks[landmark_id]
