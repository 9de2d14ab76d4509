"""Tests for blend settings and YAML loading."""

import logging

import pytest

from app.multiband_blending.config import BlendConfig, load_config


def test_defaults():
    config = load_config()
    assert config == BlendConfig()
    assert config.levels == 4 and config.kernel == "blur" and config.clamp_alpha is True


def test_load_yaml(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("levels: 6\nkernel: burt_adelson\nmask_type: radial\nclamp_alpha: false\n")

    config = load_config(path)
    assert config.levels == 6
    assert config.kernel == "burt_adelson"
    assert config.mask_type == "radial"
    assert config.clamp_alpha is False
    assert config.sigma == BlendConfig().sigma


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_config(path) == BlendConfig()


def test_invalid_yaml_is_logged_and_ignored(tmp_path, caplog):
    path = tmp_path / "broken.yaml"
    path.write_text("levels: [1, 2\n")

    with caplog.at_level(logging.ERROR):
        config = load_config(path)
    assert config == BlendConfig()
    assert caplog.records


def test_unknown_key(tmp_path):
    path = tmp_path / "typo.yaml"
    path.write_text("level: 3\n")
    with pytest.raises(ValueError, match="level"):
        load_config(path)


def test_replace_ignores_none():
    config = BlendConfig().replace(levels=2, kernel=None, clamp_alpha=None)
    assert config.levels == 2 and config.kernel == "blur" and config.clamp_alpha is True


@pytest.mark.parametrize(
    "overrides",
    [
        {"levels": -1},
        {"levels": 2.5},
        {"kernel": "gauss"},
        {"sigma": 0.0},
        {"mask_type": "star"},
        {"limit_dimension": 1},
        {"sigma": "fast"},
        {"sigma": True},
        {"limit_dimension": "x"},
        {"clamp_alpha": "yes"},
    ],
)
def test_validate_rejects(overrides):
    with pytest.raises(ValueError):
        BlendConfig(**overrides).validate()


def test_wrong_typed_yaml_value(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("sigma: fast\n")
    with pytest.raises(ValueError, match="sigma"):
        load_config(path)
