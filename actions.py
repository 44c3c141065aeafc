# actions.py
import logging
import os
from tkinter import filedialog, messagebox

from PIL import Image

logger = logging.getLogger(__name__)

IMAGE_FILETYPES = [
    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tif *.tiff *.webp"),
    ("All files", "*.*"),
]


def load_image(path: str) -> Image.Image:
    """Open and fully decode an image so the file handle is released."""
    with Image.open(path) as im:
        im.load()
        if im.mode not in ("RGB", "RGBA"):
            im = im.convert("RGBA")
        else:
            im = im.copy()
    return im


def open_image(app, path: str = None):
    if path is None:
        path = filedialog.askopenfilename(title="Open Image", filetypes=IMAGE_FILETYPES)
        if not path:
            return

    try:
        pil = load_image(path)
    except OSError as e:
        logger.warning("Could not open %s: %s", path, e)
        messagebox.showerror("Open failed", f"{os.path.basename(path)}:\n{e}")
        return

    logger.info("Opened %s (%sx%s, %s)", path, pil.width, pil.height, pil.mode)
    app.current_path = path
    app.viewport.set_image(pil)
    app.set_status()


def reset_fit(app):
    if not app.viewport.transform.has_image:
        messagebox.showinfo("No image", "Open an image first.")
        return
    app.viewport.zoom_fit()
