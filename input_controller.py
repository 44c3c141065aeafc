# input_controller.py


def wheel_direction(delta) -> int:
    """Sign of a <MouseWheel> delta: +1 wheel up (zoom in), -1 wheel down, 0 none."""
    try:
        d = float(delta)
    except (TypeError, ValueError):
        return 0
    if d > 0:
        return 1
    if d < 0:
        return -1
    return 0


class InputController:
    """
    Dumb input layer:
      - Binds raw canvas events
      - Forwards them to ViewportCanvas methods as points + wheel direction

    No math here. All pan/zoom behavior is in viewtransform.py.
    """

    def __init__(self, app, viewport):
        self.app = app
        self.viewport = viewport
        self.canvas = viewport.canvas

        self._pan_active = False

    def install(self):
        # Mouse drag panning
        self.canvas.bind("<ButtonPress-1>", self._on_pan_press)
        self.canvas.bind("<B1-Motion>", self._on_pan_move)
        self.canvas.bind("<ButtonRelease-1>", self._on_pan_release)

        # Wheel zoom
        self.canvas.bind("<MouseWheel>", self._on_mousewheel_zoom)  # Windows/macOS
        self.canvas.bind("<Button-4>", self._on_linux_wheel_up)     # Linux
        self.canvas.bind("<Button-5>", self._on_linux_wheel_down)   # Linux

        # Make sure canvas can receive events
        self.canvas.bind("<Enter>", lambda e: self.canvas.focus_set())

        self.canvas.configure(cursor="fleur")

    # -----------------------------
    # Panning
    # -----------------------------
    def _on_pan_press(self, e):
        self._pan_active = True
        self.viewport.pan_begin(e.x, e.y)

    def _on_pan_move(self, e):
        if not self._pan_active:
            return
        self.viewport.pan_move(e.x, e.y)

    def _on_pan_release(self, _e):
        self._pan_active = False
        self.viewport.pan_end()

    # -----------------------------
    # Wheel zoom
    # -----------------------------
    def _on_linux_wheel_up(self, e):
        self.viewport.wheel_zoom(e.x, e.y, +1)

    def _on_linux_wheel_down(self, e):
        self.viewport.wheel_zoom(e.x, e.y, -1)

    def _on_mousewheel_zoom(self, e):
        # e.delta is typically +/-120 on Windows, small on macOS trackpads;
        # each event is one zoom step regardless of magnitude
        direction = wheel_direction(e.delta)
        if direction:
            self.viewport.wheel_zoom(e.x, e.y, direction)
