# viewport.py
import logging
import time
import tkinter as tk
from tkinter import ttk
from typing import Optional, Tuple, Union

from PIL import Image, ImageTk

from scaling import FastScaler, ImageScaler, QualityMode, get_scaler
from viewtransform import DrawRect, FitMode, Transform, ViewportTransform

logger = logging.getLogger(__name__)

Box = Tuple[int, int, int, int]


def _now_ms() -> float:
    return time.perf_counter() * 1000.0


def _contains(outer: Box, inner: Box) -> bool:
    return (outer[0] <= inner[0] and outer[1] <= inner[1] and
            outer[2] >= inner[2] and outer[3] >= inner[3])


class ViewportCanvas(ttk.Frame):
    """
    Host canvas around a ViewportTransform.

    All zoom/pan/fit math lives in the transform; this widget only feeds it
    canvas sizes and input, asks a scaler for a bitmap of the size the
    transform wants, and blits it at the transform's offset.

    While the user is wheeling or dragging, frames are resampled with the
    fast scaler. When the configured quality is HIGH_QUALITY, a sharp
    redraw follows once input has been idle for `hq_delay_ms`.

    Small scaled images are resampled whole and reused while panning. Once
    the scaled image would exceed `max_full_pixels`, only a tile covering
    the canvas plus `tile_margin` pixels is cropped and resampled, and the
    tile is reused until the view leaves it.
    """

    def __init__(self, parent, transform: Optional[ViewportTransform] = None, *,
                 quality: Union[QualityMode, str] = QualityMode.HIGH_QUALITY,
                 background: str = "#202020", hq_delay_ms: int = 120,
                 max_full_pixels: int = 4096 * 4096, tile_margin: int = 256):
        super().__init__(parent)
        self.rowconfigure(0, weight=1)
        self.columnconfigure(0, weight=1)

        self.canvas = tk.Canvas(self, bg=background, highlightthickness=0)
        self.canvas.grid(row=0, column=0, sticky="nsew")

        self._init_view_state(
            transform, quality=quality, hq_delay_ms=hq_delay_ms,
            max_full_pixels=max_full_pixels, tile_margin=tile_margin,
        )

        self.canvas.bind("<Configure>", self._on_configure)

    def _init_view_state(self, transform, *, quality, hq_delay_ms,
                         max_full_pixels, tile_margin):
        self.transform = transform if transform is not None else ViewportTransform()

        self._scaler: ImageScaler = get_scaler(quality)
        self._fast_scaler = FastScaler()

        # Canvas image item + the PhotoImage keeping it alive
        self._canvas_image_id: Optional[int] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None

        # Last scaled bitmap: (image id, scaled size, quality, source box) -> PIL image
        self._scaled_key = None
        self._scaled: Optional[Image.Image] = None

        # Tiling for big scaled images: (scaled size, source box in image coords)
        self._max_full_pixels = max_full_pixels
        self._tile_margin = tile_margin
        self._tile: Optional[Tuple[Tuple[int, int], Box]] = None

        # Scheduling
        self._view_after_id = None
        self._hq_after_id = None
        self._hq_delay_ms = hq_delay_ms
        self._interacting = False
        self._last_was_preview = False
        self._last_draw_ms = 0.0

        # Listeners notified after every transform change (e.g. zoom readout)
        self._listeners = []

    # -----------------------------
    # Public API
    # -----------------------------
    @property
    def quality(self) -> QualityMode:
        return self._scaler.mode

    def set_quality(self, quality: Union[QualityMode, str]):
        self._scaler = get_scaler(quality)
        self._interacting = False
        self.invalidate_cache()
        self.schedule_redraw(0)

    def set_fit_mode(self, mode: Union[FitMode, str]):
        self.transform.set_fit_mode(mode)
        self._changed(interactive=False)

    def set_image(self, pil: Optional[Image.Image]):
        if pil is None:
            self.transform.bind_image(None, 0, 0)
        else:
            self.transform.bind_image(pil, pil.width, pil.height)
        self.invalidate_cache()
        self._changed(interactive=False)

    def set_zoom(self, z: float):
        self.transform.set_zoom(z)
        self._changed(interactive=False)

    def get_transform(self) -> Transform:
        return self.transform.current_transform()

    def zoom_fit(self):
        if self.transform.recompute_fit():
            self._changed(interactive=False)

    def add_listener(self, callback):
        self._listeners.append(callback)

    # -----------------------------
    # Input (called by InputController)
    # -----------------------------
    def wheel_zoom(self, x: int, y: int, direction: int):
        if self.transform.on_wheel((x, y), direction):
            self._changed(interactive=True)

    def pan_begin(self, x: int, y: int):
        if not self.transform.has_image:
            return
        self._cancel_hq()
        self.transform.on_drag_start((x, y))

    def pan_move(self, x: int, y: int):
        if self.transform.on_drag_move((x, y)):
            self._changed(interactive=True)

    def pan_end(self):
        if not self.transform.is_dragging:
            return
        self.transform.on_drag_end()
        self._schedule_hq()

    # -----------------------------
    # Scheduling
    # -----------------------------
    def _changed(self, *, interactive: bool):
        self._interacting = interactive
        if interactive and not self.transform.is_dragging:
            # Wheel input: sharp pass once the wheel goes quiet
            self._schedule_hq()
        self.schedule_redraw(0)
        for cb in self._listeners:
            cb(self.transform.current_transform())

    def invalidate_cache(self):
        self._scaled_key = None
        self._scaled = None
        self._tile = None

    def schedule_redraw(self, delay_ms: int = 0):
        if self._view_after_id is not None:
            self.after_cancel(self._view_after_id)
        self._view_after_id = self.after(delay_ms, self._do_redraw)

    def _do_redraw(self):
        self._view_after_id = None
        self._draw()

    def _schedule_hq(self):
        self._cancel_hq()
        if self._scaler.mode is QualityMode.HIGH_QUALITY:
            self._hq_after_id = self.after(self._hq_delay_ms, self._hq_redraw_now)

    def _cancel_hq(self):
        if self._hq_after_id is not None:
            self.after_cancel(self._hq_after_id)
            self._hq_after_id = None

    def _hq_redraw_now(self):
        self._hq_after_id = None
        if self.transform.is_dragging:
            return
        self._interacting = False
        if self._last_was_preview:
            self.schedule_redraw(0)

    def _on_configure(self, event):
        self.transform.on_canvas_resized(event.width, event.height)
        self._changed(interactive=False)

    # -----------------------------
    # Core render
    # -----------------------------
    def _source_box(self, rect: DrawRect) -> Optional[Box]:
        """Part of the image to resample: all of it, or a tile around the view."""
        iw, ih = self.transform.image_size
        if rect.width * rect.height <= self._max_full_pixels:
            self._tile = None
            return (0, 0, iw, ih)

        visible = self.transform.visible_image_box()
        if visible is None:
            return None

        size = (rect.width, rect.height)
        if self._tile is not None:
            tile_size, box = self._tile
            if tile_size == size and _contains(box, visible):
                return box

        box = self.transform.visible_image_box(margin=self._tile_margin)
        self._tile = (size, box)
        return box

    def _draw(self):
        rect = self.transform.render_rect()
        if rect is None or rect.width < 1 or rect.height < 1:
            self._clear()
            return

        box = self._source_box(rect)
        if box is None:
            self._clear()
            return

        pil = self.transform.image
        z = self.transform.zoom
        left, top, right, bottom = box

        # Scaled tile origin/size, snapped to the same grid as the full image
        x0 = rect.x + int(left * z)
        y0 = rect.y + int(top * z)
        target_w = max(1, int(right * z) - int(left * z))
        target_h = max(1, int(bottom * z) - int(top * z))

        scaler = self._fast_scaler if self._interacting else self._scaler

        key = (id(pil), rect.width, rect.height, scaler.mode, box)
        if key != self._scaled_key:
            start = _now_ms()
            src = pil if box == (0, 0, pil.width, pil.height) else pil.crop(box)
            self._scaled = scaler.scale(src, target_w, target_h)
            self._scaled_key = key
            self._tk_image = ImageTk.PhotoImage(self._scaled)
            self._last_draw_ms = _now_ms() - start
            logger.debug(
                "Scaled %s of %sx%s -> %sx%s (%s) in %.1f ms",
                box, pil.width, pil.height, target_w, target_h, scaler.mode.value, self._last_draw_ms,
            )

        self._last_was_preview = scaler.mode is not self._scaler.mode

        if self._canvas_image_id is None:
            self._canvas_image_id = self.canvas.create_image(
                x0, y0, anchor="nw", image=self._tk_image
            )
        else:
            self.canvas.coords(self._canvas_image_id, x0, y0)
            self.canvas.itemconfig(self._canvas_image_id, image=self._tk_image, state="normal")

    def _clear(self):
        if self._canvas_image_id is not None:
            self.canvas.itemconfig(self._canvas_image_id, state="hidden")
