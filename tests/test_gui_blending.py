"""Tests for the GUI's worker-side hand-off (no display needed)."""

import pytest

pytest.importorskip("tkinter")

from app.multiband_blending.evaluation import compute_q_abf  # noqa: E402
from app.multiband_blending.fusion import multiband_blend  # noqa: E402
from gui.gui_blending import BlendingGUI  # noqa: E402


class FakeRoot:
    def __init__(self):
        self.scheduled = []

    def after(self, delay, callback):
        self.scheduled.append((delay, callback))


class FakeGUI:
    def __init__(self):
        self.root = FakeRoot()
        self.shown = []

    def _show_result(self, req_id, result, score):
        self.shown.append((req_id, result, score))


def test_score_is_computed_before_handing_over(red64, blue64, horizontal_mask64):
    result = multiband_blend(red64, blue64, horizontal_mask64, 3)
    gui = FakeGUI()

    BlendingGUI._on_blend_done(gui, 7, result)

    # Nothing is drawn until the event loop runs the scheduled callback.
    assert gui.shown == []
    [(delay, callback)] = gui.root.scheduled
    assert delay == 0
    callback()
    [(req_id, shown, score)] = gui.shown
    assert req_id == 7 and shown is result
    assert score == pytest.approx(compute_q_abf(result.result, red64, blue64))
