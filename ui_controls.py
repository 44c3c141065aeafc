# ui_controls.py
import tkinter as tk
from tkinter import ttk

from scaling import QualityMode
from viewtransform import FitMode


def build_ui(app):
    app.columnconfigure(0, weight=1)
    app.rowconfigure(1, weight=1)

    # Top bar
    topbar = ttk.Frame(app, padding=(8, 8, 8, 0))
    topbar.grid(row=0, column=0, sticky="ew")
    topbar.columnconfigure(6, weight=1)

    ttk.Button(topbar, text="Open Image…", command=app.open_image).grid(row=0, column=0, sticky="w", padx=(0, 12))

    ttk.Label(topbar, text="Fit").grid(row=0, column=1, sticky="e")
    app.fit_var = tk.StringVar(value=app.config_.fit_mode.lower())
    fit_box = ttk.Combobox(
        topbar, width=10, textvariable=app.fit_var,
        values=[m.value for m in FitMode], state="readonly",
    )
    fit_box.grid(row=0, column=2, padx=(4, 12))
    fit_box.bind("<<ComboboxSelected>>", lambda _e: app.on_fit_mode())

    ttk.Label(topbar, text="Quality").grid(row=0, column=3, sticky="e")
    app.quality_var = tk.StringVar(value=app.config_.quality_mode.lower())
    quality_box = ttk.Combobox(
        topbar, width=12, textvariable=app.quality_var,
        values=[m.value for m in QualityMode], state="readonly",
    )
    quality_box.grid(row=0, column=4, padx=(4, 12))
    quality_box.bind("<<ComboboxSelected>>", lambda _e: app.on_quality_mode())

    ttk.Button(topbar, text="Fit", command=app.zoom_fit).grid(row=0, column=5, sticky="w")

    app.zoom_label_var = tk.StringVar(value="100%")
    ttk.Label(topbar, textvariable=app.zoom_label_var, width=8, anchor="e").grid(row=0, column=7, sticky="e")

    # Viewport
    app.viewport = app._create_viewport(app)
    app.viewport.grid(row=1, column=0, sticky="nsew", padx=8, pady=8)

    # Status line
    app.info_var = tk.StringVar(value="Open an image to begin.")
    ttk.Label(app, textvariable=app.info_var, padding=(8, 0, 8, 8)).grid(row=2, column=0, sticky="ew")
