"""
Tests for the stargazer-project command line.
"""

import pytest

from stargazer.cli import main


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "camera_intrinsics: {f: 1.0, u0: 0.0, v0: 0.0, alpha: 1.0, beta: 1.0}\n"
        "camera_pose: [0.0, 0.0, -2.0, 0.0, 0.0, 0.0]\n"
        "landmarks:\n"
        "  12: [0.0, 0.0, 0.0, 0.0, 0.0, 0.0]\n"
    )
    return path


def test_projects_points(config_file, capsys):
    exit_code = main([str(config_file), "--landmark", "12", "--point", "1", "0.5", "--point", "-1", "2"])

    assert exit_code == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == ["0.500000 0.250000", "-0.500000 1.000000"]


def test_camera_pose_override_degenerate(config_file, capsys):
    exit_code = main([
        str(config_file), "-l", "12", "-p", "1", "1",
        "--camera-pose", "0", "0", "0", "0", "0", "0",
    ])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "degenerate"


def test_unknown_landmark(config_file):
    assert main([str(config_file), "--landmark", "3", "--point", "0", "0"]) == 1


def test_missing_config(tmp_path):
    assert main([str(tmp_path / "nope.yaml"), "--landmark", "12", "--point", "0", "0"]) == 1
