# tests/test_viewer_config.py

import pytest
import yaml

from errors import InvalidConfiguration
from viewer_config import ViewerConfig
from viewtransform import FitMode, Transform


def test_defaults_are_valid():
    config = ViewerConfig().validate()
    assert config.fit_mode == "cover"
    assert config.quality_mode == "high_quality"
    assert (config.min_zoom, config.max_zoom, config.zoom_step) == (0.25, 2.5, 0.025)


def test_missing_file_gives_defaults(tmp_path):
    assert ViewerConfig.load(str(tmp_path / "nope.yaml")) == ViewerConfig()


def test_save_then_load(tmp_path):
    path = str(tmp_path / "viewer.yaml")
    config = ViewerConfig(fit_mode="contain", quality_mode="fast", max_zoom=8.0, hq_delay_ms=50)
    config.save(path)

    assert ViewerConfig.load(path) == config


def test_partial_file_keeps_other_defaults(tmp_path):
    path = tmp_path / "viewer.yaml"
    path.write_text(yaml.dump({"fit_mode": "original", "zoom_step": 0.1, "unknown_key": 1}))

    config = ViewerConfig.load(str(path))
    assert config.fit_mode == "original"
    assert config.zoom_step == 0.1
    assert config.max_zoom == 2.5


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "viewer.yaml"
    path.write_text("")
    assert ViewerConfig.load(str(path)) == ViewerConfig()


def test_non_mapping_file_rejected(tmp_path):
    path = tmp_path / "viewer.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(InvalidConfiguration):
        ViewerConfig.load(str(path))


def test_invalid_mode_in_file_rejected(tmp_path):
    path = tmp_path / "viewer.yaml"
    path.write_text(yaml.dump({"quality_mode": "bicubic"}))
    with pytest.raises(InvalidConfiguration):
        ViewerConfig.load(str(path))


@pytest.mark.parametrize("overrides", [
    {"fit_mode": "stretch"},
    {"quality_mode": "smooth"},
    {"min_zoom": 0},
    {"min_zoom": 3.0},
    {"zoom_step": 0},
    {"hq_delay_ms": -1},
    {"log_level": "LOUD"},
])
def test_validate_rejects(overrides):
    with pytest.raises(InvalidConfiguration):
        ViewerConfig(**overrides).validate()


def test_create_transform_uses_settings():
    t = ViewerConfig(fit_mode="contain", min_zoom=0.5, max_zoom=4.0, zoom_step=0.25).create_transform()
    assert t.fit_mode is FitMode.CONTAIN
    assert (t.min_zoom, t.max_zoom, t.zoom_step) == (0.5, 4.0, 0.25)


def test_apply_to_refits_existing_transform():
    t = ViewerConfig().create_transform()
    t.on_canvas_resized(200, 200)
    t.bind_image(object(), 100, 50)
    assert t.current_transform() == Transform(4.0, -100, 0)

    ViewerConfig(fit_mode="original", max_zoom=5.0).apply_to(t)
    assert t.max_zoom == 5.0
    assert t.current_transform() == Transform(1.0, 50, 75)


@pytest.mark.parametrize("overrides", [
    {"zoom_step": float("nan")},
    {"zoom_step": float("inf")},
    {"max_zoom": float("inf")},
    {"min_zoom": float("nan")},
    {"min_zoom": "0.5"},
])
def test_validate_rejects_non_finite_or_non_numeric(overrides):
    with pytest.raises(InvalidConfiguration):
        ViewerConfig(**overrides).validate()


@pytest.mark.parametrize("content", [
    "min_zoom: abc\n",
    "hq_delay_ms: null\n",
    "zoom_step: [1, 2]\n",
    "hq_delay_ms: .inf\n",
    "zoom_step: .nan\n",
])
def test_load_reports_bad_values_as_invalid_configuration(tmp_path, content):
    path = tmp_path / "viewer.yaml"
    path.write_text(content)
    with pytest.raises(InvalidConfiguration):
        ViewerConfig.load(str(path))
