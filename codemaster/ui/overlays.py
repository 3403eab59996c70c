"""In-window confirmation overlay for resetting game progress."""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import Qt, QEvent, Signal
from PySide6.QtGui import QColor
from PySide6.QtWidgets import (
    QFrame,
    QGraphicsDropShadowEffect,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from codemaster.ui.colors import HomeColors

RESET_MESSAGE = (
    "Are you sure? This will wipe GAME progress (green dots). "
    "Dictionary status will be kept."
)


def _card_container(object_name: str) -> QFrame:
    container = QFrame()
    container.setObjectName(object_name)
    container.setMinimumWidth(360)
    container.setMaximumWidth(440)
    container.setStyleSheet(
        f"""
        QFrame#{object_name} {{
            background: #ffffff;
            border: 1px solid #e0e0e0;
            border-radius: 16px;
        }}
        """
    )
    shadow = QGraphicsDropShadowEffect(container)
    shadow.setBlurRadius(20)
    shadow.setOffset(0, 6)
    shadow.setColor(QColor(0, 0, 0, 40))
    container.setGraphicsEffect(shadow)
    return container


def _overlay_background(parent: QWidget, on_click: Callable[[], None]) -> QWidget:
    overlay_bg = QWidget(parent)
    overlay_bg.setStyleSheet("background: rgba(0, 0, 0, 0.25);")
    overlay_bg.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
    overlay_bg.mousePressEvent = lambda e: on_click()
    return overlay_bg


def _button_style(background: str, color: str, border: str) -> str:
    return f"""
        QPushButton {{
            background: {background};
            color: {color};
            padding: 9px 14px;
            border: {border};
            border-radius: 8px;
            font-weight: 600;
            font-size: 13px;
        }}
    """


class ResetConfirmOverlay(QWidget):
    """Ask before wiping mastered, review and mistake progress."""

    closed = Signal(bool)  # True if the learner confirmed

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        main_layout = QGridLayout(self)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setRowStretch(0, 1)
        main_layout.setColumnStretch(0, 1)

        overlay_bg = _overlay_background(self, lambda: self._finish(False))
        main_layout.addWidget(overlay_bg, 0, 0)

        container = _card_container("resetContainer")
        content = QVBoxLayout(container)
        content.setContentsMargins(24, 20, 24, 20)
        content.setSpacing(16)

        title = QLabel("Reset Game Progress")
        title.setStyleSheet(f"color: {HomeColors.DANGER}; font-size: 17px; font-weight: 800;")
        content.addWidget(title)

        msg = QLabel(RESET_MESSAGE)
        msg.setStyleSheet(f"color: {HomeColors.TEXT_PRIMARY}; font-size: 13px;")
        msg.setWordWrap(True)
        content.addWidget(msg)

        btn_row = QHBoxLayout()
        btn_row.setSpacing(10)
        cancel_btn = QPushButton("Cancel")
        cancel_btn.setStyleSheet(_button_style("#fafafa", HomeColors.TEXT_PRIMARY, "1px solid #e0e0e0"))
        cancel_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        cancel_btn.clicked.connect(lambda: self._finish(False))
        btn_row.addWidget(cancel_btn, 1)

        confirm_btn = QPushButton("Reset")
        confirm_btn.setStyleSheet(_button_style(HomeColors.DANGER, "white", "none"))
        confirm_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        confirm_btn.clicked.connect(lambda: self._finish(True))
        btn_row.addWidget(confirm_btn, 1)
        content.addLayout(btn_row)

        main_layout.addWidget(container, 0, 0, 1, 1, Qt.AlignCenter)

    def _finish(self, confirmed: bool) -> None:
        self.hide()
        self.closed.emit(confirmed)

    def _update_geometry(self) -> None:
        parent = self.parentWidget()
        if parent is not None:
            self.setGeometry(parent.rect())

    def eventFilter(self, obj: QWidget, event: QEvent) -> bool:
        if obj is self.parentWidget() and event.type() == QEvent.Type.Resize:
            self._update_geometry()
        return super().eventFilter(obj, event)

    def showEvent(self, event) -> None:
        super().showEvent(event)
        self._update_geometry()
        parent = self.parentWidget()
        if parent is not None:
            parent.installEventFilter(self)

    def hideEvent(self, event) -> None:
        parent = self.parentWidget()
        if parent is not None:
            parent.removeEventFilter(self)
        super().hideEvent(event)
