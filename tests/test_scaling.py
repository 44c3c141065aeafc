# tests/test_scaling.py

import pytest
from PIL import Image

from errors import InvalidConfiguration
from scaling import FastScaler, HighQualityScaler, QualityMode, get_scaler


@pytest.fixture
def two_tone():
    """2x1 image: red pixel on the left, blue on the right"""
    img = Image.new("RGB", (2, 1))
    img.putpixel((0, 0), (255, 0, 0))
    img.putpixel((1, 0), (0, 0, 255))
    return img


@pytest.mark.parametrize("name, cls", [
    ("fast", FastScaler),
    ("FAST", FastScaler),
    ("high_quality", HighQualityScaler),
    ("high-quality", HighQualityScaler),
    (QualityMode.HIGH_QUALITY, HighQualityScaler),
])
def test_get_scaler_by_mode(name, cls):
    scaler = get_scaler(name)
    assert isinstance(scaler, cls)
    assert scaler.mode is QualityMode.parse(name)


@pytest.mark.parametrize("bad", ["bicubic", "", 8, None])
def test_unknown_quality_mode_rejected(bad):
    with pytest.raises(InvalidConfiguration):
        get_scaler(bad)


def test_fast_upscale_replicates_pixels(two_tone):
    out = FastScaler().scale(two_tone, 4, 2)
    assert out.size == (4, 2)
    assert out.getpixel((0, 0)) == (255, 0, 0)
    assert out.getpixel((1, 1)) == (255, 0, 0)
    assert out.getpixel((3, 1)) == (0, 0, 255)


def test_high_quality_downscale_size():
    img = Image.new("RGB", (400, 200), (10, 200, 30))
    out = HighQualityScaler().scale(img, 37, 19)
    assert out.size == (37, 19)
    # Flat colour survives area reduction + Lanczos
    r, g, b = out.getpixel((18, 9))
    assert abs(r - 10) <= 1 and abs(g - 200) <= 1 and abs(b - 30) <= 1


def test_high_quality_upscale_size(two_tone):
    out = HighQualityScaler().scale(two_tone, 20, 10)
    assert out.size == (20, 10)


@pytest.mark.parametrize("scaler", [FastScaler(), HighQualityScaler()])
def test_same_size_returns_input(scaler, two_tone):
    assert scaler.scale(two_tone, 2, 1) is two_tone


@pytest.mark.parametrize("scaler", [FastScaler(), HighQualityScaler()])
@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-5, 5)])
def test_empty_target_rejected(scaler, size, two_tone):
    with pytest.raises(InvalidConfiguration):
        scaler.scale(two_tone, *size)
