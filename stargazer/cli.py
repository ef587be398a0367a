"""
Command-line interface for landmark projection.

Usage:
    stargazer-project config.yaml --landmark ID --point X Y [--point X Y ...]
"""

import argparse
import logging
import sys
from typing import List, Optional

import numpy as np

from .config import StargazerConfig
from .parameters import Pose
from .transforms import transform_landmark_points


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description='Project landmark points into the image plane of a camera',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
    # Project the origin of landmark 12 using the camera pose from the config
    stargazer-project config.yaml --landmark 12 --point 0 0

    # Several points, overriding the camera pose
    stargazer-project config.yaml --landmark 12 --point 0 0 --point 0.1 0 \\
        --camera-pose 0 0 0 0 0 0
'''
    )

    parser.add_argument(
        'config',
        type=str,
        help='Path to YAML configuration file'
    )

    parser.add_argument(
        '--landmark', '-l',
        type=int,
        required=True,
        help='ID of the landmark the points belong to'
    )

    parser.add_argument(
        '--point', '-p',
        type=float,
        nargs=2,
        action='append',
        required=True,
        metavar=('X', 'Y'),
        help='Point in landmark coordinates (repeatable)'
    )

    parser.add_argument(
        '--camera-pose',
        type=float,
        nargs=6,
        default=None,
        metavar=('X', 'Y', 'Z', 'RX', 'RY', 'RZ'),
        help='Camera pose (default: camera_pose from the config file)'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose output'
    )

    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = StargazerConfig.from_yaml(args.config)
        landmark_pose = config.get_landmark_pose(args.landmark)

        if args.camera_pose is not None:
            camera_pose = Pose.from_array(args.camera_pose)
        else:
            camera_pose = config.camera_pose

        image_points, valid = transform_landmark_points(
            np.array(args.point),
            landmark_pose,
            camera_pose,
            config.intrinsics,
        )

        for (x, y), ok in zip(image_points, valid):
            if ok:
                print(f"{x:.6f} {y:.6f}")
            else:
                print("degenerate")

        return 0

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except KeyError as e:
        logger.error(f"Landmark error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        return 1


if __name__ == '__main__':
    sys.exit(main())
