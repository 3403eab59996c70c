"""Map surface: circle markers on a simple equirectangular projection."""

from __future__ import annotations

import math
from typing import Dict, Iterable, Optional, Tuple

from PySide6.QtCore import QEasingCurve, QPointF, Qt, QVariantAnimation, Signal
from PySide6.QtGui import QBrush, QColor, QPainter, QPen
from PySide6.QtWidgets import QGraphicsEllipseItem, QGraphicsItem, QGraphicsScene, QGraphicsView, QWidget

from codemaster.core.catalog import Entry
from codemaster.core.quiz import QuizDirection
from codemaster.ui.colors import HomeColors, MarkerStyle, blend_hex, marker_style
from codemaster.ui.models import EntryHints, Section, popup_lines

PIXELS_PER_DEGREE = 120.0
BASE_ZOOM = 6


def project(latitude: float, longitude: float, reference_latitude: float = 54.0) -> QPointF:
    """Scene position for a coordinate; longitude is shrunk by cos(reference latitude)."""
    x = longitude * math.cos(math.radians(reference_latitude)) * PIXELS_PER_DEGREE
    y = -latitude * PIXELS_PER_DEGREE
    return QPointF(x, y)


class MarkerItem(QGraphicsEllipseItem):
    """A circle marker that keeps its pixel size at every zoom level."""

    def __init__(self, entry: Entry, view: "MapView") -> None:
        super().__init__()
        self.entry = entry
        self._view = view
        self.setFlag(QGraphicsItem.GraphicsItemFlag.ItemIgnoresTransformations, True)
        self.setAcceptHoverEvents(True)
        self.setCursor(Qt.CursorShape.PointingHandCursor)

    def apply_style(self, style: MarkerStyle) -> None:
        r = style.radius
        self.setRect(-r, -r, 2 * r, 2 * r)
        fill = QColor(style.fill_color)
        fill.setAlphaF(style.opacity)
        self.setBrush(QBrush(fill))
        self.setPen(QPen(QColor(blend_hex(style.color, "#000000", 0.15)), style.weight))
        self.setZValue(style.radius)
        self.setVisible(style.visible)

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self._view.entry_clicked.emit(self.entry)
            event.accept()
            return
        super().mousePressEvent(event)

    def hoverEnterEvent(self, event) -> None:
        self._view.entry_hovered.emit(self.entry)
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event) -> None:
        self._view.entry_hovered.emit(None)
        super().hoverLeaveEvent(event)


class MapView(QGraphicsView):
    """Zoomable, pannable map of catalog markers."""

    entry_clicked = Signal(object)
    entry_hovered = Signal(object)  # Entry or None

    def __init__(
        self,
        center: Tuple[float, float] = (54.0, -2.5),
        focus_zoom: float = 10,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._reference_latitude = center[0]
        self._home_center = project(center[0], center[1], self._reference_latitude)
        self._focus_zoom = focus_zoom
        self._zoom = float(BASE_ZOOM)
        self._markers: Dict[str, MarkerItem] = {}
        self._animation: Optional[QVariantAnimation] = None

        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self.setRenderHint(QPainter.Antialiasing, True)
        self.setDragMode(QGraphicsView.DragMode.ScrollHandDrag)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setBackgroundBrush(QColor(HomeColors.MAP_BG))
        self._draw_graticule()
        self._apply_zoom(self._zoom)
        self.centerOn(self._home_center)

    def _draw_graticule(self) -> None:
        pen = QPen(QColor(HomeColors.MAP_GRID), 0)
        top_left = project(62.0, -11.0, self._reference_latitude)
        bottom_right = project(49.0, 3.0, self._reference_latitude)
        for lat in range(49, 63):
            p = project(lat, 0, self._reference_latitude)
            self._scene.addLine(top_left.x(), p.y(), bottom_right.x(), p.y(), pen)
        for lon in range(-11, 4):
            p = project(0, lon, self._reference_latitude)
            self._scene.addLine(p.x(), top_left.y(), p.x(), bottom_right.y(), pen)
        margin = PIXELS_PER_DEGREE * 4
        self._scene.setSceneRect(
            top_left.x() - margin,
            top_left.y() - margin,
            bottom_right.x() - top_left.x() + 2 * margin,
            bottom_right.y() - top_left.y() + 2 * margin,
        )

    def set_markers(
        self,
        hints: Iterable[EntryHints],
        section: Section,
        show_mastered: bool,
        direction: QuizDirection,
    ) -> None:
        """Create or restyle one marker per entry."""
        for hint in hints:
            item = self._markers.get(hint.entry.code)
            if item is None:
                item = MarkerItem(hint.entry, self)
                item.setPos(project(hint.entry.latitude, hint.entry.longitude, self._reference_latitude))
                self._scene.addItem(item)
                self._markers[hint.entry.code] = item
            item.apply_style(marker_style(hint, section, show_mastered))
            title, subtitle = popup_lines(hint, section, direction)
            item.setToolTip(f"<b>{title}</b><br>{subtitle}")

    def focus_on(self, entry: Entry, animate: bool) -> None:
        """Fly to an entry and zoom in. Without animate the camera stays put."""
        if not animate:
            return
        target = project(entry.latitude, entry.longitude, self._reference_latitude)
        if self._animation is not None:
            self._animation.stop()

        start_center = self.mapToScene(self.viewport().rect().center())
        start_zoom = self._zoom
        end_zoom = float(self._focus_zoom)

        anim = QVariantAnimation(self)
        anim.setStartValue(0.0)
        anim.setEndValue(1.0)
        anim.setDuration(1500)
        anim.setEasingCurve(QEasingCurve.Type.InOutCubic)

        def step(value) -> None:
            t = float(value)
            self._apply_zoom(start_zoom + (end_zoom - start_zoom) * t)
            self.centerOn(start_center + (target - start_center) * t)

        anim.valueChanged.connect(step)
        self._animation = anim
        anim.start()

    def reset_view(self) -> None:
        self._apply_zoom(float(BASE_ZOOM))
        self.centerOn(self._home_center)

    def _apply_zoom(self, zoom: float) -> None:
        self._zoom = max(4.0, min(14.0, zoom))
        factor = 2 ** (self._zoom - BASE_ZOOM) * 0.5
        self.resetTransform()
        self.scale(factor, factor)

    def wheelEvent(self, event) -> None:
        """Zoom in or out around the cursor."""
        steps = event.angleDelta().y() / 120.0
        if steps:
            old_anchor = self.transformationAnchor()
            self.setTransformationAnchor(QGraphicsView.ViewportAnchor.AnchorUnderMouse)
            before = self._zoom
            self._zoom = max(4.0, min(14.0, self._zoom + 0.5 * steps))
            ratio = 2 ** (self._zoom - before)
            self.scale(ratio, ratio)
            self.setTransformationAnchor(old_anchor)
        event.accept()
