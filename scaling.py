# scaling.py
import enum
from abc import ABC, abstractmethod
from typing import Union

from PIL import Image

from errors import InvalidConfiguration


class QualityMode(enum.Enum):
    FAST = "fast"
    HIGH_QUALITY = "high_quality"

    @classmethod
    def parse(cls, value: Union["QualityMode", str]) -> "QualityMode":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_")
            if key in cls.__members__:
                return cls[key]
        raise InvalidConfiguration(f"Unknown quality mode: {value!r}")


def _check_target(width: int, height: int) -> None:
    if width < 1 or height < 1:
        raise InvalidConfiguration(f"Target size must be at least 1x1 (got {width}x{height})")


class ImageScaler(ABC):
    """Resamples a PIL image to a target size. Callers only pick the size."""

    mode: QualityMode

    @abstractmethod
    def scale(self, image: Image.Image, target_width: int, target_height: int) -> Image.Image:
        ...


class FastScaler(ImageScaler):
    """Nearest-neighbour resize: cheap, blocky when enlarged."""

    mode = QualityMode.FAST

    def scale(self, image, target_width, target_height):
        _check_target(target_width, target_height)
        if image.size == (target_width, target_height):
            return image
        return image.resize((target_width, target_height), resample=Image.NEAREST)


class HighQualityScaler(ImageScaler):
    """
    Lanczos resize. On downscale, Pillow first shrinks by an integer factor
    with box (area-averaging) reduction while the size stays at least
    `reducing_gap` times the target, then finishes with Lanczos.
    """

    mode = QualityMode.HIGH_QUALITY

    def __init__(self, reducing_gap: float = 2.0):
        self.reducing_gap = reducing_gap

    def scale(self, image, target_width, target_height):
        _check_target(target_width, target_height)
        if image.size == (target_width, target_height):
            return image

        downscale = target_width < image.width and target_height < image.height
        return image.resize(
            (target_width, target_height),
            resample=Image.LANCZOS,
            reducing_gap=self.reducing_gap if downscale else None,
        )


_SCALERS = {
    QualityMode.FAST: FastScaler,
    QualityMode.HIGH_QUALITY: HighQualityScaler,
}


def get_scaler(mode: Union[QualityMode, str]) -> ImageScaler:
    return _SCALERS[QualityMode.parse(mode)]()
