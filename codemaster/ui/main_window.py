from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt, QTimer, QEventLoop, Signal
from PySide6.QtGui import QCloseEvent
from PySide6.QtWidgets import (
    QButtonGroup,
    QCheckBox,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QProgressBar,
    QPushButton,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from codemaster.core.catalog import Entry
from codemaster.core.config import AppConfig
from codemaster.core.dictionary import DictionaryStatus, DictionaryTracker
from codemaster.core.progress import ProgressStore
from codemaster.core.quiz import QuizDirection, QuizEngine, prompt_text
from codemaster.ui.colors import STATUS_COLORS, HomeColors, MarkerColors, blend_hex, status_text_color
from codemaster.ui.map_widget import MapView
from codemaster.ui.models import Section, build_entry_hints
from codemaster.ui.overlays import ResetConfirmOverlay

logger = logging.getLogger(__name__)

_TOGGLE_STYLE = f"""
    QPushButton {{
        background: #ecf0f1;
        color: {HomeColors.TEXT_PRIMARY};
        border: none;
        border-radius: 6px;
        padding: 8px;
        font-weight: 600;
    }}
    QPushButton:checked {{
        background: {HomeColors.ACCENT};
        color: white;
    }}
"""

_SECONDARY_STYLE = f"""
    QPushButton {{
        background: #ffffff;
        color: {HomeColors.TEXT_SECONDARY};
        border: 1px solid #cccccc;
        border-radius: 6px;
        padding: 6px 10px;
    }}
    QPushButton:hover {{ border-color: {HomeColors.ACCENT}; }}
"""


class DictionaryRow(QFrame):
    """One dictionary line: place and code, plus a status button.

    Clicking the row selects the entry; clicking the status button only
    cycles the status.
    """

    selected = Signal(object)
    hovered = Signal(object)  # Entry or None
    status_clicked = Signal(str)

    def __init__(self, entry: Entry, status: DictionaryStatus, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.entry = entry
        self.setObjectName("dictRow")
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self.setStyleSheet(
            f"""
            QFrame#dictRow {{ background: white; border-bottom: 1px solid #eeeeee; }}
            QFrame#dictRow:hover {{ background: {blend_hex(MarkerColors.HIGHLIGHT, "#ffffff", 0.8)}; }}
            """
        )
        row = QHBoxLayout(self)
        row.setContentsMargins(10, 6, 10, 6)

        info = QVBoxLayout()
        info.setSpacing(0)
        place = QLabel(entry.place)
        place.setStyleSheet(f"color: {HomeColors.TEXT_PRIMARY}; font-weight: 700;")
        code = QLabel(entry.code)
        code.setStyleSheet(f"color: {HomeColors.TEXT_MUTED}; font-size: 12px;")
        info.addWidget(place)
        info.addWidget(code)
        row.addLayout(info, 1)

        self._status_btn = QPushButton()
        self._status_btn.setFixedWidth(84)
        self._status_btn.setCursor(Qt.CursorShape.PointingHandCursor)
        self._status_btn.clicked.connect(lambda: self.status_clicked.emit(self.entry.code))
        row.addWidget(self._status_btn, 0)
        self.set_status(status)

    def set_status(self, status: DictionaryStatus) -> None:
        self._status_btn.setText(status.label)
        self._status_btn.setStyleSheet(
            f"""
            QPushButton {{
                background: {STATUS_COLORS[status]};
                color: {status_text_color(status)};
                border: none;
                border-radius: 10px;
                padding: 4px 8px;
                font-size: 12px;
            }}
            """
        )

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.MouseButton.LeftButton:
            self.selected.emit(self.entry)
        super().mousePressEvent(event)

    def enterEvent(self, event) -> None:
        self.hovered.emit(self.entry)
        super().enterEvent(event)

    def leaveEvent(self, event) -> None:
        self.hovered.emit(None)
        super().leaveEvent(event)


class MainWindow(QMainWindow):
    """Sidebar with the quiz and the dictionary next to the map."""

    def __init__(
        self,
        engine: QuizEngine,
        tracker: DictionaryTracker,
        progress_store: ProgressStore,
        config: AppConfig,
    ) -> None:
        super().__init__()
        self._engine = engine
        self._tracker = tracker
        self._progress_store = progress_store
        self._config = config
        self._section = Section.GAME
        self._highlight_code: Optional[str] = None
        self._search_query = ""
        self._shown_selection = -1
        self._dictionary_rows: dict[str, DictionaryRow] = {}

        self._map: Optional[MapView] = None
        self._sections: Optional[QStackedWidget] = None
        self._progress_label: Optional[QLabel] = None
        self._progress_bar: Optional[QProgressBar] = None
        self._mistakes_label: Optional[QLabel] = None
        self._prompt_label: Optional[QLabel] = None
        self._answer_input: Optional[QLineEdit] = None
        self._check_button: Optional[QPushButton] = None
        self._feedback_label: Optional[QLabel] = None
        self._complete_label: Optional[QLabel] = None
        self._skip_button: Optional[QPushButton] = None
        self._reveal_button: Optional[QPushButton] = None
        self._direction_buttons: dict[QuizDirection, QPushButton] = {}
        self._auto_advance_box: Optional[QCheckBox] = None
        self._show_mastered_box: Optional[QCheckBox] = None
        self._dictionary_list: Optional[QVBoxLayout] = None
        self._legend_label: Optional[QLabel] = None

        self._build_ui()
        self._engine.subscribe(self._refresh)
        if self._engine.current_question is None:
            self._engine.select_next_question()
        self._rebuild_dictionary_list()
        self._refresh()

    def _build_ui(self) -> None:
        """Construct the sidebar (game and dictionary panels), the map and the reset overlay."""
        self.setWindowTitle(self._config.title)
        self.setMinimumSize(1100, 720)
        self.setStyleSheet(f"QMainWindow {{ background: {HomeColors.BG}; }}")

        central = QWidget()
        root = QHBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        sidebar = QFrame()
        sidebar.setFixedWidth(360)
        sidebar.setStyleSheet(f"QFrame {{ background: {HomeColors.SIDEBAR_BG}; }}")
        side = QVBoxLayout(sidebar)
        side.setContentsMargins(18, 18, 18, 18)
        side.setSpacing(12)

        title = QLabel(f"🇬🇧 {self._config.title}")
        title.setStyleSheet(f"color: {HomeColors.PRIMARY}; font-size: 22px; font-weight: 900;")
        side.addWidget(title)

        nav = QHBoxLayout()
        nav_group = QButtonGroup(self)
        for section, label in ((Section.GAME, "🎮 Play"), (Section.DICTIONARY, "📖 Dictionary")):
            btn = QPushButton(label)
            btn.setCheckable(True)
            btn.setChecked(section is self._section)
            btn.setStyleSheet(_TOGGLE_STYLE)
            btn.clicked.connect(lambda _=False, s=section: self._show_section(s))
            nav_group.addButton(btn)
            nav.addWidget(btn)
        side.addLayout(nav)

        self._sections = QStackedWidget()
        self._sections.addWidget(self._build_game_panel())
        self._sections.addWidget(self._build_dictionary_panel())
        side.addWidget(self._sections, 1)
        root.addWidget(sidebar, 0)

        lat, lon = self._config.map_center
        self._map = MapView(center=(lat, lon), focus_zoom=self._config.focus_zoom)
        self._map.entry_clicked.connect(self._on_map_entry_clicked)
        self._map.entry_hovered.connect(self._on_entry_hovered)
        root.addWidget(self._map, 1)

        self.setCentralWidget(central)
        self._reset_overlay = ResetConfirmOverlay(central)
        self._reset_overlay.hide()

    def _build_game_panel(self) -> QWidget:
        panel = QWidget()
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(14)

        progress_row = QHBoxLayout()
        progress_row.addWidget(QLabel("Mastered"))
        progress_row.addStretch(1)
        self._progress_label = QLabel()
        progress_row.addWidget(self._progress_label)
        layout.addLayout(progress_row)

        self._progress_bar = QProgressBar()
        self._progress_bar.setTextVisible(False)
        self._progress_bar.setFixedHeight(10)
        layout.addWidget(self._progress_bar)

        self._mistakes_label = QLabel()
        self._mistakes_label.setAlignment(Qt.AlignRight)
        self._mistakes_label.setTextFormat(Qt.TextFormat.RichText)
        layout.addWidget(self._mistakes_label)

        mode_row = QHBoxLayout()
        mode_group = QButtonGroup(self)
        for direction, label in (
            (QuizDirection.PLACE_TO_CODE, "Place ➡️ Code"),
            (QuizDirection.CODE_TO_PLACE, "Code ➡️ Place"),
        ):
            btn = QPushButton(label)
            btn.setCheckable(True)
            btn.setStyleSheet(_TOGGLE_STYLE)
            btn.clicked.connect(lambda _=False, d=direction: self._engine.set_direction(d))
            mode_group.addButton(btn)
            mode_row.addWidget(btn)
            self._direction_buttons[direction] = btn
        layout.addLayout(mode_row)

        quiz_box = QFrame()
        quiz_box.setStyleSheet("QFrame { background: #f8f9fa; border-radius: 8px; }")
        quiz = QVBoxLayout(quiz_box)
        quiz.setContentsMargins(14, 14, 14, 14)
        quiz.setSpacing(10)

        self._prompt_label = QLabel()
        self._prompt_label.setWordWrap(True)
        self._prompt_label.setStyleSheet(f"color: {HomeColors.TEXT_PRIMARY}; font-size: 17px; font-weight: 800;")
        quiz.addWidget(self._prompt_label)

        self._answer_input = QLineEdit()
        self._answer_input.setPlaceholderText("Type here...")
        self._answer_input.returnPressed.connect(self._submit_answer)
        quiz.addWidget(self._answer_input)

        self._check_button = QPushButton("Check Answer")
        self._check_button.setStyleSheet(
            f"QPushButton {{ background: {HomeColors.ACCENT}; color: white; border: none;"
            " border-radius: 6px; padding: 8px; font-weight: 700; }"
        )
        self._check_button.clicked.connect(self._submit_answer)
        quiz.addWidget(self._check_button)

        self._complete_label = QLabel("🏆 Map Complete!")
        self._complete_label.setAlignment(Qt.AlignCenter)
        self._complete_label.setStyleSheet("color: green; font-weight: bold;")
        quiz.addWidget(self._complete_label)

        self._feedback_label = QLabel()
        self._feedback_label.setWordWrap(True)
        self._feedback_label.setAlignment(Qt.AlignCenter)
        quiz.addWidget(self._feedback_label)

        actions = QHBoxLayout()
        self._skip_button = QPushButton("Skip")
        self._skip_button.setStyleSheet(_SECONDARY_STYLE)
        self._skip_button.clicked.connect(lambda: self._engine.skip())
        actions.addWidget(self._skip_button)
        self._reveal_button = QPushButton("Give Up && Reveal")
        self._reveal_button.setStyleSheet(_SECONDARY_STYLE)
        self._reveal_button.clicked.connect(lambda: self._engine.reveal_answer())
        actions.addWidget(self._reveal_button)
        quiz.addLayout(actions)
        layout.addWidget(quiz_box)

        settings_title = QLabel("Settings")
        settings_title.setStyleSheet("font-weight: 800;")
        layout.addWidget(settings_title)

        self._auto_advance_box = QCheckBox("Auto-Next (Random Jump)")
        self._auto_advance_box.toggled.connect(self._engine.set_auto_advance)
        layout.addWidget(self._auto_advance_box)

        self._show_mastered_box = QCheckBox("Show Mastered (Green)")
        self._show_mastered_box.toggled.connect(self._engine.set_show_mastered)
        layout.addWidget(self._show_mastered_box)

        reset_btn = QPushButton("Reset Game Progress")
        reset_btn.setStyleSheet(
            f"QPushButton {{ background: white; color: {HomeColors.DANGER};"
            f" border: 1px solid {HomeColors.DANGER}; border-radius: 6px; padding: 6px; }}"
        )
        reset_btn.clicked.connect(self._reset_progress)
        layout.addWidget(reset_btn)

        layout.addStretch(1)
        if self._config.data_credit_url:
            credit = QLabel(f'Data sourced from <a href="{self._config.data_credit_url}">doogal.co.uk</a>')
            credit.setOpenExternalLinks(True)
            credit.setAlignment(Qt.AlignCenter)
            credit.setStyleSheet(f"color: {HomeColors.TEXT_MUTED}; font-size: 11px;")
            layout.addWidget(credit)
        return panel

    def _build_dictionary_panel(self) -> QWidget:
        panel = QWidget()
        layout = QVBoxLayout(panel)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(10)

        search = QLineEdit()
        search.setPlaceholderText("Search Place or Code...")
        search.textChanged.connect(self._set_search_query)
        layout.addWidget(search)

        self._legend_label = QLabel()
        self._legend_label.setTextFormat(Qt.TextFormat.RichText)
        layout.addWidget(self._legend_label)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        container = QWidget()
        self._dictionary_list = QVBoxLayout(container)
        self._dictionary_list.setContentsMargins(0, 0, 0, 0)
        self._dictionary_list.setSpacing(0)
        self._dictionary_list.addStretch(1)
        scroll.setWidget(container)
        layout.addWidget(scroll, 1)
        return panel

    # ---- actions ----
    def _show_section(self, section: Section) -> None:
        self._section = section
        self._sections.setCurrentIndex(0 if section is Section.GAME else 1)
        if section is Section.GAME and self._engine.current_question is None and not self._engine.state.complete:
            self._engine.select_next_question()
        self._refresh()

    def _submit_answer(self) -> None:
        self._engine.submit(self._answer_input.text())

    def _on_map_entry_clicked(self, entry: Entry) -> None:
        self._engine.select_entry(entry)

    def _on_entry_hovered(self, entry: Optional[Entry]) -> None:
        if self._section is not Section.DICTIONARY:
            return
        self._highlight_code = entry.code if entry is not None else None
        self._refresh_map()

    def _on_dictionary_row_selected(self, entry: Entry) -> None:
        self._engine.jump_to_entry(entry)

    def _cycle_status(self, code: str) -> None:
        status = self._tracker.cycle_status(code)
        row = self._dictionary_rows.get(code)
        if row is not None:
            row.set_status(status)
        self._refresh()

    def _set_search_query(self, text: str) -> None:
        self._search_query = text
        self._rebuild_dictionary_list()

    def _rebuild_dictionary_list(self) -> None:
        layout = self._dictionary_list
        while layout.count() > 1:
            item = layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.deleteLater()
        self._dictionary_rows = {}
        matches = self._tracker.filter_catalog(self._engine.catalog, self._search_query)
        for entry in matches:
            row = DictionaryRow(entry, self._tracker.status(entry.code))
            row.selected.connect(self._on_dictionary_row_selected)
            row.hovered.connect(self._on_entry_hovered)
            row.status_clicked.connect(self._cycle_status)
            layout.insertWidget(layout.count() - 1, row)
            self._dictionary_rows[entry.code] = row

    def _reset_progress(self) -> None:
        """Show the confirmation overlay and, if confirmed, wipe game progress."""
        overlay = self._reset_overlay
        overlay.setGeometry(self.centralWidget().rect())
        overlay.raise_()
        overlay.show()
        confirmed = [False]

        def on_closed(ok: bool) -> None:
            confirmed[0] = ok
            loop.quit()

        loop = QEventLoop()
        overlay.closed.connect(on_closed)
        loop.exec()
        overlay.closed.disconnect(on_closed)

        if confirmed[0]:
            self._engine.reset_progress()

    # ---- rendering ----
    def _refresh(self) -> None:
        engine = self._engine
        state = engine.state
        total = len(engine.catalog)
        mastered = engine.mastered_count

        self._progress_label.setText(f"{mastered} / {total}")
        self._progress_bar.setRange(0, max(total, 1))
        self._progress_bar.setValue(mastered)
        fill = HomeColors.PROGRESS_COMPLETE if total and mastered == total else HomeColors.PROGRESS_FILL
        self._progress_bar.setStyleSheet(
            f"QProgressBar {{ background: {HomeColors.PROGRESS_TRACK}; border: none; border-radius: 5px; }}"
            f"QProgressBar::chunk {{ background: {fill}; border-radius: 5px; }}"
        )
        self._mistakes_label.setText(
            f'<span style="color:{HomeColors.TEXT_MUTED}; font-size:12px;">Mistakes: '
            f'<span style="color:red;">{engine.mistakes}</span></span>'
        )

        for direction, btn in self._direction_buttons.items():
            btn.setChecked(direction is state.direction)
        self._set_checked_silently(self._auto_advance_box, state.auto_advance)
        self._set_checked_silently(self._show_mastered_box, state.show_mastered)

        question = state.current_question
        has_question = question is not None
        self._prompt_label.setVisible(has_question)
        self._answer_input.setVisible(has_question)
        self._check_button.setVisible(has_question)
        self._complete_label.setVisible(not has_question)
        self._skip_button.setVisible(has_question and state.auto_advance)
        self._reveal_button.setVisible(has_question)
        if has_question:
            self._prompt_label.setText(prompt_text(question, state.direction))
        if state.selection_count != self._shown_selection:
            self._answer_input.setText(state.answer_text)
            self._shown_selection = state.selection_count
        self._feedback_label.setText(state.feedback)
        if state.focus_input and has_question:
            state.focus_input = False
            QTimer.singleShot(50, self._answer_input.setFocus)

        counts = self._tracker.status_counts(engine.catalog)
        dots = " ".join(
            f'<span style="color:{STATUS_COLORS[s] if s is not DictionaryStatus.NEW else "#bbbbbb"};">●</span>'
            f" {s.label} ({counts[s]})"
            for s in DictionaryStatus
        )
        self._legend_label.setText(dots)

        self._refresh_map()
        request = engine.take_focus_request()
        if request is not None:
            self._map.focus_on(request.entry, request.animate)

    def _refresh_map(self) -> None:
        hints = build_entry_hints(self._engine, self._tracker, self._section, self._highlight_code)
        self._map.set_markers(hints, self._section, self._engine.state.show_mastered, self._engine.direction)

    @staticmethod
    def _set_checked_silently(box: QCheckBox, checked: bool) -> None:
        if box.isChecked() == checked:
            return
        box.blockSignals(True)
        box.setChecked(checked)
        box.blockSignals(False)

    def closeEvent(self, event: QCloseEvent) -> None:
        """Persist progress when closing the app."""
        if self._progress_store is not None:
            self._progress_store.save()
            logger.info("Progress saved to %s", self._progress_store.file_path)
        super().closeEvent(event)
