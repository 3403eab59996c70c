"""Tests for codemaster.ui.map_widget – camera behaviour on focus requests."""

from __future__ import annotations

import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication  # noqa: E402

from codemaster.core.catalog import Entry  # noqa: E402
from codemaster.ui.map_widget import MapView  # noqa: E402

ABERDEEN = Entry("01224", "Aberdeen", 57.15, -2.09)


@pytest.fixture(scope="module")
def app() -> QApplication:
    return QApplication.instance() or QApplication([])


@pytest.fixture()
def view(app: QApplication) -> MapView:
    v = MapView(center=(54.0, -2.5), focus_zoom=10)
    v.resize(400, 300)
    return v


def _camera(view: MapView):
    return view.mapToScene(view.viewport().rect().center()), view.transform().m11()


# ---------------------------------------------------------------------------
# focus_on
# ---------------------------------------------------------------------------

class TestFocusOn:
    def test_without_animation_camera_stays(self, view: MapView):
        before = _camera(view)
        view.focus_on(ABERDEEN, animate=False)
        assert _camera(view) == before
        assert view._animation is None

    def test_with_animation_starts_fly_to(self, view: MapView):
        view.focus_on(ABERDEEN, animate=True)
        assert view._animation is not None
        view._animation.stop()
