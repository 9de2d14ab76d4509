"""End-to-end tests for the command line entry point."""

import cv2
import numpy as np

from app.multiband_blending.cli_main import main


def write_solid(path, bgr, size=(64, 48)):
    image = np.empty((size[1], size[0], 3), dtype=np.uint8)
    image[:, :] = bgr
    cv2.imwrite(str(path), image)
    return path


def test_blends_two_files(tmp_path):
    red = write_solid(tmp_path / "red.png", (0, 0, 255))
    blue = write_solid(tmp_path / "blue.png", (255, 0, 0))
    out = tmp_path / "out.png"
    levels_dir = tmp_path / "levels"

    code = main([str(red), str(blue), "-o", str(out), "--levels", "3", "--levels-dir", str(levels_dir)])

    assert code == 0
    result = cv2.cvtColor(cv2.imread(str(out)), cv2.COLOR_BGR2RGB).astype(int)
    assert result.shape == (48, 64, 3)
    assert result[24, 0, 2] > result[24, 0, 0]  # blue (image B) on the left
    assert result[24, 63, 0] > result[24, 63, 2]  # red (image A) on the right
    assert sorted(p.name for p in levels_dir.iterdir()) == [f"level_{k:02d}.png" for k in range(4)]


def test_config_file_and_mask_file(tmp_path):
    a = write_solid(tmp_path / "a.png", (10, 20, 30))
    b = write_solid(tmp_path / "b.png", (200, 200, 200))
    mask = tmp_path / "mask.png"
    cv2.imwrite(str(mask), np.full((48, 64), 255, dtype=np.uint8))
    config = tmp_path / "settings.yaml"
    config.write_text("levels: 2\nkernel: burt_adelson\n")
    out = tmp_path / "out.png"

    code = main([str(a), str(b), "-o", str(out), "--config", str(config), "--mask", str(mask)])

    assert code == 0
    result = cv2.imread(str(out)).astype(int)
    assert np.abs(result - np.array([10, 20, 30])).mean() < 2.0


def test_missing_source_exit_code(tmp_path):
    b = write_solid(tmp_path / "b.png", (0, 0, 0))
    code = main([str(tmp_path / "missing.png"), str(b), "-o", str(tmp_path / "out.png")])
    assert code == 2


def test_invalid_levels_exit_code(tmp_path):
    a = write_solid(tmp_path / "a.png", (0, 0, 0))
    code = main([str(a), str(a), "-o", str(tmp_path / "out.png"), "--levels", "-1"])
    assert code == 2
    assert not (tmp_path / "out.png").exists()


def test_wrong_typed_config_exit_code(tmp_path):
    a = write_solid(tmp_path / "a.png", (0, 0, 0))
    config = tmp_path / "settings.yaml"
    config.write_text("limit_dimension: x\n")

    code = main([str(a), str(a), "-o", str(tmp_path / "out.png"), "--config", str(config)])
    assert code == 2
    assert not (tmp_path / "out.png").exists()
