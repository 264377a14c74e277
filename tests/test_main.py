"""
Tests for the command line entry point (main.py).

Tests:
- describe / nearest / snap / invert output
- Exit codes for bad scenes and arguments
- init-config
"""

import json

import numpy as np
import pytest

from hand_posing.geometry.vectors import UP
from hand_posing.orientation.rotation import Rotation3D
from hand_posing.project_config import CONFIG_FILENAME
from main import main


@pytest.fixture
def scene_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    payload = {
        "surface": {
            "variant": "cylinder",
            "version": 1,
            "start_point": [0.0, 0.0, -1.0],
            "end_point": [0.0, 2.0, -1.0],
            "angle": 90.0,
        },
        "grip_point": {"position": [0.0, 0.0, 1.0], "rotation": [0.0, 0.0, 0.0, 1.0]},
        "transform": None,
        "relative_to": None,
    }
    path = tmp_path / "scene.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return str(path)


def run_json(capsys, argv):
    assert main(argv) == 0
    return json.loads(capsys.readouterr().out)


class TestCommands:
    """Tests for the scene commands."""

    def test_describe(self, capsys, scene_file):
        result = run_json(capsys, ["describe", scene_file])

        assert result["variant"] == "cylinder"
        assert result["radius"] == pytest.approx(1.0)
        assert result["height"] == pytest.approx(2.0)
        assert np.allclose(result["direction"], UP)
        assert np.allclose(result["end_angle_dir"], [1, 0, 0])

    def test_nearest(self, capsys, scene_file):
        result = run_json(capsys, ["nearest", scene_file, "--point", "0", "5", "1"])
        assert np.allclose(result["point"], [0, 2, 1])

    def test_snap(self, capsys, scene_file):
        quat = Rotation3D.angle_axis(45, UP).as_quaternion()
        user = ["0", "1.5", "3", *map(str, quat)]
        snap = ["0", "0", "1", "0", "0", "0", "1"]

        result = run_json(capsys, ["snap", scene_file, "--user-pose", *user, "--snap-pose", *snap])

        half = np.sqrt(0.5)
        assert np.allclose(result["position"], [half, 1.5, half])
        assert Rotation3D.from_quaternion(result["rotation"]).is_close(Rotation3D.angle_axis(45, UP))

    def test_invert(self, capsys, scene_file):
        result = run_json(capsys, ["invert", scene_file, "--pose", "1", "2", "3", "0", "0", "0", "1"])

        assert np.allclose(result["position"], [1, 2, 3])
        expected = Rotation3D.angle_axis(180, [0, 0, 1])
        assert Rotation3D.from_quaternion(result["rotation"]).is_close(expected)

    def test_verbose_flag(self, capsys, scene_file):
        assert main(["--verbose", "describe", scene_file]) == 0
        assert "Starting: describe" in capsys.readouterr().err


class TestErrors:
    """Tests for failure exit codes."""

    def test_missing_scene(self, capsys, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert main(["describe", str(tmp_path / "missing.json")]) == 1
        assert "Scene file not found" in capsys.readouterr().err

    def test_zero_quaternion(self, capsys, scene_file):
        code = main(["invert", scene_file, "--pose", "0", "0", "0", "0", "0", "0", "0"])
        assert code == 1
        assert "Invalid argument" in capsys.readouterr().err

    def test_missing_command(self):
        with pytest.raises(SystemExit):
            main([])


class TestInitConfig:
    """Tests for init-config."""

    def test_writes_sample(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path / "home"))

        assert main(["init-config"]) == 0
        data = json.loads((tmp_path / CONFIG_FILENAME).read_text(encoding="utf-8"))
        assert data["geometry"]["epsilon"] == 1e-12
