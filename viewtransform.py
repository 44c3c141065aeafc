# viewtransform.py
import enum
import logging
import math
from typing import Any, NamedTuple, Optional, Tuple, Union

from errors import InvalidConfiguration

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


class FitMode(enum.Enum):
    CONTAIN = "contain"
    COVER = "cover"
    ORIGINAL = "original"

    @classmethod
    def parse(cls, value: Union["FitMode", str]) -> "FitMode":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().upper()
            if key in cls.__members__:
                return cls[key]
        raise InvalidConfiguration(f"Unknown fit mode: {value!r}")


class Transform(NamedTuple):
    zoom: float
    offset_x: int
    offset_y: int


class DrawRect(NamedTuple):
    x: int
    y: int
    width: int
    height: int


# -----------------------------
# Pure helpers
# -----------------------------

def pan_by(start: Point, current: Point, base: Point) -> Point:
    """Offset after dragging from `start` to `current`, given the offset at drag start."""
    return (base[0] + (current[0] - start[0]), base[1] + (current[1] - start[1]))


def fit_transform(mode: FitMode, image_size: Point, canvas_size: Point) -> Optional[Transform]:
    """
    Zoom + centered offset for a fit mode, or None when either size is degenerate.

    The offset is computed on the truncated scaled size and truncated again
    after halving, so odd leftovers round toward zero.
    """
    iw, ih = image_size
    cw, ch = canvas_size
    if iw <= 0 or ih <= 0 or cw <= 0 or ch <= 0:
        return None

    if mode is FitMode.CONTAIN:
        zoom = min(cw / iw, ch / ih)
    elif mode is FitMode.COVER:
        zoom = max(cw / iw, ch / ih)
    else:
        zoom = 1.0

    ox = int((cw - int(iw * zoom)) / 2)
    oy = int((ch - int(ih * zoom)) / 2)
    return Transform(zoom, ox, oy)


def _is_positive(value) -> bool:
    """True for finite numbers above zero; NaN and infinities fail."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return False
    return 0 < v < math.inf


def _check_bounds(min_zoom: float, max_zoom: float) -> None:
    if not (_is_positive(min_zoom) and _is_positive(max_zoom) and float(min_zoom) < float(max_zoom)):
        raise InvalidConfiguration(
            f"Zoom bounds must be finite and satisfy 0 < min < max (got min={min_zoom}, max={max_zoom})"
        )


def _check_step(step: float) -> None:
    if not _is_positive(step):
        raise InvalidConfiguration(f"Zoom step must be positive and finite (got {step})")


class ViewportTransform:
    """
    Zoom/pan state of one displayed image and the math that moves it.

    Canvas point P maps to image point (P - offset) / zoom. Wheel zoom keeps
    the image point under the pointer fixed; drag shifts the offset; fit
    recompute resets both from the canvas and image sizes.

    Zoom bounds are checked *before* a step is applied, so one step can
    overshoot min/max, and a fit that lands above max_zoom blocks further
    zoom-in until the zoom is brought back under the bound.
    """

    def __init__(
        self,
        min_zoom: float = 0.25,
        max_zoom: float = 2.5,
        zoom_step: float = 0.025,
        fit_mode: Union[FitMode, str] = FitMode.COVER,
    ):
        _check_bounds(min_zoom, max_zoom)
        _check_step(zoom_step)

        self._min_zoom = float(min_zoom)
        self._max_zoom = float(max_zoom)
        self._zoom_step = float(zoom_step)
        self._fit_mode = FitMode.parse(fit_mode)

        self._zoom = 1.0
        self._offset: Point = (0, 0)

        self._image: Any = None
        self._image_size: Point = (0, 0)
        self._canvas_size: Point = (0, 0)

        # Drag gesture (start point, offset at start)
        self._drag_start: Optional[Point] = None
        self._drag_base: Point = (0, 0)

    # -----------------------------
    # State accessors
    # -----------------------------
    @property
    def zoom(self) -> float:
        return self._zoom

    @property
    def offset(self) -> Point:
        return self._offset

    @property
    def min_zoom(self) -> float:
        return self._min_zoom

    @property
    def max_zoom(self) -> float:
        return self._max_zoom

    @property
    def zoom_step(self) -> float:
        return self._zoom_step

    @property
    def fit_mode(self) -> FitMode:
        return self._fit_mode

    @property
    def image(self):
        return self._image

    @property
    def image_size(self) -> Point:
        return self._image_size

    @property
    def canvas_size(self) -> Point:
        return self._canvas_size

    @property
    def has_image(self) -> bool:
        return self._image is not None and self._image_size[0] > 0 and self._image_size[1] > 0

    @property
    def is_dragging(self) -> bool:
        return self._drag_start is not None

    # -----------------------------
    # Configuration
    # -----------------------------
    def set_zoom_bounds(self, min_zoom: float, max_zoom: float) -> None:
        _check_bounds(min_zoom, max_zoom)
        self._min_zoom = float(min_zoom)
        self._max_zoom = float(max_zoom)
        logger.debug("Zoom bounds set to [%s, %s]", self._min_zoom, self._max_zoom)

    def set_min_zoom(self, min_zoom: float) -> None:
        self.set_zoom_bounds(min_zoom, self._max_zoom)

    def set_max_zoom(self, max_zoom: float) -> None:
        self.set_zoom_bounds(self._min_zoom, max_zoom)

    def set_zoom_step(self, step: float) -> None:
        _check_step(step)
        self._zoom_step = float(step)

    def set_fit_mode(self, mode: Union[FitMode, str]) -> None:
        self._fit_mode = FitMode.parse(mode)
        logger.debug("Fit mode set to %s", self._fit_mode.name)
        self.recompute_fit()

    def bind_image(self, pixels, width: int, height: int) -> None:
        """Attach a new image (opaque to the engine) and refit it to the canvas."""
        if width < 0 or height < 0:
            raise InvalidConfiguration(f"Image size must not be negative (got {width}x{height})")
        if pixels is None and (width or height):
            raise InvalidConfiguration(f"No pixels given for a {width}x{height} image")
        self._image = pixels
        self._image_size = (int(width), int(height))
        self._drag_start = None
        self.recompute_fit()

    # -----------------------------
    # Zoom
    # -----------------------------
    def zoom_at_point(self, point: Point, direction: int) -> bool:
        """
        Step the zoom in (direction > 0) or out (direction < 0) around `point`.

        Returns True when the zoom changed.
        """
        old_z = self._zoom
        new_z = old_z
        if direction > 0:
            if old_z < self._max_zoom:
                new_z = old_z + self._zoom_step
        elif direction < 0:
            if old_z > self._min_zoom:
                new_z = old_z - self._zoom_step

        # A step larger than the zoom itself would flip the image
        if new_z == old_z or new_z <= 0:
            return False

        px, py = point
        ox, oy = self._offset
        rel_x = (px - ox) / old_z
        rel_y = (py - oy) / old_z

        self._zoom = new_z
        self._offset = (int(px - rel_x * new_z), int(py - rel_y * new_z))
        return True

    def set_zoom(self, zoom: float) -> None:
        """Absolute zoom (clamped to bounds), anchored on the canvas centre."""
        if not _is_positive(zoom):
            raise InvalidConfiguration(f"Zoom must be positive and finite (got {zoom})")
        new_z = max(self._min_zoom, min(self._max_zoom, float(zoom)))
        old_z = self._zoom
        if new_z == old_z:
            return

        cx = self._canvas_size[0] / 2.0
        cy = self._canvas_size[1] / 2.0
        ox, oy = self._offset
        rel_x = (cx - ox) / old_z
        rel_y = (cy - oy) / old_z

        self._zoom = new_z
        self._offset = (int(cx - rel_x * new_z), int(cy - rel_y * new_z))

    # -----------------------------
    # Pan
    # -----------------------------
    def on_drag_start(self, point: Point) -> None:
        self._drag_start = (int(point[0]), int(point[1]))
        self._drag_base = self._offset

    def on_drag_move(self, point: Point) -> bool:
        if self._drag_start is None:
            return False
        self._offset = pan_by(self._drag_start, point, self._drag_base)
        return True

    def on_drag_end(self) -> None:
        self._drag_start = None

    # -----------------------------
    # Fit
    # -----------------------------
    def recompute_fit(self) -> bool:
        """Reset zoom/offset from the current fit mode. No-op without an image or canvas area."""
        t = fit_transform(self._fit_mode, self._image_size, self._canvas_size)
        if t is None:
            return False
        self._zoom = t.zoom
        self._offset = (t.offset_x, t.offset_y)
        logger.debug(
            "Fit %s: image %sx%s in canvas %sx%s -> zoom=%.4f offset=%s",
            self._fit_mode.name, *self._image_size, *self._canvas_size, t.zoom, self._offset,
        )
        return True

    def on_canvas_resized(self, width: int, height: int) -> bool:
        self._canvas_size = (max(0, int(width)), max(0, int(height)))
        return self.recompute_fit()

    def on_wheel(self, point: Point, direction: int) -> bool:
        return self.zoom_at_point(point, direction)

    # -----------------------------
    # Queries
    # -----------------------------
    def current_transform(self) -> Transform:
        return Transform(self._zoom, self._offset[0], self._offset[1])

    def render_rect(self) -> Optional[DrawRect]:
        """Where and how large the scaled image is drawn, or None without an image."""
        if not self.has_image:
            return None
        iw, ih = self._image_size
        return DrawRect(
            self._offset[0], self._offset[1],
            int(iw * self._zoom), int(ih * self._zoom),
        )

    def canvas_to_image(self, point) -> Tuple[float, float]:
        return (
            (point[0] - self._offset[0]) / self._zoom,
            (point[1] - self._offset[1]) / self._zoom,
        )

    def image_to_canvas(self, point) -> Tuple[float, float]:
        return (
            self._offset[0] + point[0] * self._zoom,
            self._offset[1] + point[1] * self._zoom,
        )

    def visible_image_box(self, margin: int = 0) -> Optional[Tuple[int, int, int, int]]:
        """
        Image-space (left, top, right, bottom) covering the canvas grown by
        `margin` canvas pixels on each side, clipped to the image. None when
        nothing of the image falls inside that area.
        """
        if not self.has_image:
            return None
        cw, ch = self._canvas_size
        iw, ih = self._image_size
        ox, oy = self._offset
        z = self._zoom

        left = max(0, min(iw, math.floor((-margin - ox) / z)))
        top = max(0, min(ih, math.floor((-margin - oy) / z)))
        right = max(0, min(iw, math.ceil((cw + margin - ox) / z)))
        bottom = max(0, min(ih, math.ceil((ch + margin - oy) / z)))
        if right <= left or bottom <= top:
            return None
        return (left, top, right, bottom)
