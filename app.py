# app.py
import argparse
import logging
import os
import sys
import tkinter as tk
from tkinter import messagebox
from typing import Optional

import actions
import ui_controls
from errors import InvalidConfiguration
from input_controller import InputController
from logging_config import setup_logging
from viewer_config import ViewerConfig
from viewport import ViewportCanvas

logger = logging.getLogger(__name__)


class ImageViewerApp(tk.Tk):
    def __init__(self, config: Optional[ViewerConfig] = None):
        super().__init__()
        self.config_ = (config or ViewerConfig()).validate()
        self.title("Interactive Image Viewport")
        self.geometry(self.config_.geometry)
        self.minsize(400, 300)

        self.current_path: Optional[str] = None

        # Build UI (widgets + viewport)
        ui_controls.build_ui(self)
        self.viewport.add_listener(self._on_transform_changed)

        # Install input controller (all bindings live there)
        self.input = InputController(self, self.viewport)
        self.input.install()

    # -------------------------------------------------
    # Viewport creation hook (used by ui_controls)
    # -------------------------------------------------
    def _create_viewport(self, parent):
        return ViewportCanvas(
            parent,
            self.config_.create_transform(),
            quality=self.config_.quality_mode,
            background=self.config_.background,
            hq_delay_ms=self.config_.hq_delay_ms,
        )

    # -----------------------------
    # Actions (delegated)
    # -----------------------------
    def open_image(self, path: Optional[str] = None):
        actions.open_image(self, path)

    def zoom_fit(self):
        actions.reset_fit(self)

    def on_fit_mode(self):
        try:
            self.viewport.set_fit_mode(self.fit_var.get())
        except InvalidConfiguration as e:
            messagebox.showerror("Invalid fit mode", str(e))

    def on_quality_mode(self):
        try:
            self.viewport.set_quality(self.quality_var.get())
        except InvalidConfiguration as e:
            messagebox.showerror("Invalid quality mode", str(e))

    # -----------------------------
    # Status helpers
    # -----------------------------
    def _on_transform_changed(self, t):
        self.zoom_label_var.set(f"{t.zoom * 100:.0f}%")
        self.set_status()

    def set_status(self):
        if self.current_path is None or not self.viewport.transform.has_image:
            self.info_var.set("Open an image to begin.")
            return
        t = self.viewport.get_transform()
        iw, ih = self.viewport.transform.image_size
        base = os.path.basename(self.current_path)
        self.info_var.set(
            f"{base} | {iw}×{ih} | zoom {t.zoom:.3f} | offset ({t.offset_x}, {t.offset_y})"
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive image viewport (wheel zoom, drag pan, fit modes)")
    parser.add_argument('image', nargs='?', help='Image file to open')
    parser.add_argument('-c', '--config', default='viewer.yaml', help='YAML config file')
    parser.add_argument('--fit', choices=['contain', 'cover', 'original'], help='Fit mode')
    parser.add_argument('--quality', choices=['fast', 'high_quality'], help='Resampling quality')
    parser.add_argument('--min-zoom', type=float, help='Minimum zoom factor')
    parser.add_argument('--max-zoom', type=float, help='Maximum zoom factor')
    parser.add_argument('--zoom-step', type=float, help='Zoom change per wheel notch')
    parser.add_argument('--log-level', help='Logging level (DEBUG, INFO, ...)')
    parser.add_argument('--log-file', help='Also write a rotating debug log here')
    return parser


def config_from_args(args) -> ViewerConfig:
    config = ViewerConfig.load(args.config)
    if args.fit:
        config.fit_mode = args.fit
    if args.quality:
        config.quality_mode = args.quality
    if args.min_zoom is not None:
        config.min_zoom = args.min_zoom
    if args.max_zoom is not None:
        config.max_zoom = args.max_zoom
    if args.zoom_step is not None:
        config.zoom_step = args.zoom_step
    if args.log_level:
        config.log_level = args.log_level
    return config.validate()


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except InvalidConfiguration as e:
        parser.error(str(e))

    setup_logging(config.log_level, args.log_file)
    logger.debug("Starting with %s", config)

    app = ImageViewerApp(config)
    if args.image:
        # Wait for the first <Configure> so the fit sees the real canvas size
        app.after_idle(lambda: app.open_image(args.image))
    app.mainloop()


if __name__ == "__main__":
    sys.exit(main())
