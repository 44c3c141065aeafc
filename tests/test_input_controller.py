# tests/test_input_controller.py

from types import SimpleNamespace

import pytest

from input_controller import InputController, wheel_direction


class FakeCanvas:
    def __init__(self):
        self.bindings = {}
        self.options = {}

    def bind(self, sequence, func, add=None):
        self.bindings[sequence] = func

    def configure(self, **kwargs):
        self.options.update(kwargs)

    def focus_set(self):
        pass


class FakeViewport:
    def __init__(self):
        self.canvas = FakeCanvas()
        self.calls = []

    def wheel_zoom(self, x, y, direction):
        self.calls.append(("wheel", x, y, direction))

    def pan_begin(self, x, y):
        self.calls.append(("begin", x, y))

    def pan_move(self, x, y):
        self.calls.append(("move", x, y))

    def pan_end(self):
        self.calls.append(("end",))


@pytest.fixture
def controller():
    viewport = FakeViewport()
    ctl = InputController(app=None, viewport=viewport)
    ctl.install()
    return ctl


def fire(ctl, sequence, **attrs):
    ctl.canvas.bindings[sequence](SimpleNamespace(**attrs))


@pytest.mark.parametrize("delta, expected", [
    (120, 1), (-120, -1), (3, 1), (-0.5, -1), (0, 0), ("junk", 0), (None, 0),
])
def test_wheel_direction(delta, expected):
    assert wheel_direction(delta) == expected


def test_install_binds_wheel_and_drag(controller):
    for seq in ("<ButtonPress-1>", "<B1-Motion>", "<ButtonRelease-1>",
                "<MouseWheel>", "<Button-4>", "<Button-5>"):
        assert seq in controller.canvas.bindings


def test_mousewheel_forwards_one_step(controller):
    fire(controller, "<MouseWheel>", x=10, y=20, delta=240)
    fire(controller, "<MouseWheel>", x=11, y=21, delta=-120)
    fire(controller, "<MouseWheel>", x=12, y=22, delta=0)
    assert controller.viewport.calls == [("wheel", 10, 20, 1), ("wheel", 11, 21, -1)]


def test_x11_buttons_map_to_direction(controller):
    fire(controller, "<Button-4>", x=1, y=2)
    fire(controller, "<Button-5>", x=3, y=4)
    assert controller.viewport.calls == [("wheel", 1, 2, 1), ("wheel", 3, 4, -1)]


def test_drag_sequence(controller):
    fire(controller, "<ButtonPress-1>", x=5, y=6)
    fire(controller, "<B1-Motion>", x=7, y=8)
    fire(controller, "<ButtonRelease-1>", x=7, y=8)
    assert controller.viewport.calls == [("begin", 5, 6), ("move", 7, 8), ("end",)]


def test_motion_without_press_ignored(controller):
    fire(controller, "<B1-Motion>", x=7, y=8)
    assert controller.viewport.calls == []
