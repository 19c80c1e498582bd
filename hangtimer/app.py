"""Main application window for HangTimer."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt, QTimer
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QTabWidget,
    QStatusBar, QMessageBox, QPushButton, QScrollArea, QStackedWidget,
    QDialog,
)
from sqlalchemy.exc import SQLAlchemyError

from .audio.sounds import SoundManager
from .history import delete_record, record_session
from .protocols.catalog import BUILTIN_PROTOCOLS
from .protocols.model import Protocol
from .protocols.store import (
    create_custom, delete_custom, find_protocol, get_custom, list_custom,
    update_custom,
)
from .settings import Settings, load_settings, save_settings
from .timer.engine import TimerEngine, SessionResult, Phase
from .ui.history_widget import HistoryWidget
from .ui.protocol_dialog import ProtocolDialog
from .ui.protocol_list import ProtocolListWidget
from .ui.settings_dialog import SettingsDialog
from .ui.styles import build_stylesheet
from .ui.timer_widget import TimerWidget

logger = logging.getLogger(__name__)

_PAGE_LIST = 0
_PAGE_TIMER = 1


def _scrollable(widget: QWidget, parent: QWidget) -> QScrollArea:
    area = QScrollArea(parent)
    area.setWidgetResizable(True)
    area.setWidget(widget)
    return area


class HangTimerApp(QMainWindow):
    """Main application window.

    Owns at most one ``TimerEngine``; opening a protocol throws the
    previous session away.
    """

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        sound_manager: SoundManager | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle("HangTimer")
        self.setMinimumSize(420, 640)

        # ── geometry save timer ───────────────────────────────────────
        self._geometry_save_timer = QTimer(self)
        self._geometry_save_timer.setSingleShot(True)
        self._geometry_save_timer.setInterval(500)
        self._geometry_save_timer.timeout.connect(self._save_geometry)

        # ── settings ──────────────────────────────────────────────────
        self._settings: Settings = settings or load_settings()

        # ── sound manager ─────────────────────────────────────────────
        self._sound_manager = sound_manager or SoundManager(parent=self)
        self._sound_manager.set_volume(self._settings.sound_volume)
        self._sound_manager.set_enabled(self._settings.sound_enabled)

        # ── session ───────────────────────────────────────────────────
        self._engine: TimerEngine | None = None

        self.setStyleSheet(build_stylesheet())

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        root_layout = QVBoxLayout(central)
        root_layout.setContentsMargins(16, 12, 16, 12)
        root_layout.setSpacing(8)

        self._tabs = QTabWidget(central)
        root_layout.addWidget(self._tabs)

        # Timer tab: protocol picker, swapped for the timer screen
        self._timer_stack = QStackedWidget(self._tabs)

        picker = QWidget()
        picker_layout = QVBoxLayout(picker)
        picker_layout.setContentsMargins(0, 0, 0, 0)
        self._builtin_list = ProtocolListWidget("Protocols", picker)
        self._builtin_list.protocol_selected.connect(self.open_session)
        picker_layout.addWidget(self._builtin_list)
        self._custom_picker = ProtocolListWidget("Your Workouts", picker)
        self._custom_picker.protocol_selected.connect(self.open_session)
        picker_layout.addWidget(self._custom_picker)
        picker_layout.addStretch()
        self._timer_stack.addWidget(_scrollable(picker, self._timer_stack))

        self._timer_widget = TimerWidget(self._timer_stack)
        self._timer_widget.close_requested.connect(self._on_close_requested)
        self._timer_widget.stop_requested.connect(self._on_stop_requested)
        self._timer_widget.done_requested.connect(self._on_done_requested)
        self._timer_stack.addWidget(self._timer_widget)

        self._tabs.addTab(self._timer_stack, "Timer")

        # Custom tab
        custom_page = QWidget()
        custom_layout = QVBoxLayout(custom_page)
        custom_layout.setContentsMargins(0, 0, 0, 0)
        add_row = QHBoxLayout()
        add_row.addStretch()
        self._add_btn = QPushButton("+ New Workout", custom_page)
        self._add_btn.setObjectName("primaryButton")
        self._add_btn.clicked.connect(self._on_add_custom)
        add_row.addWidget(self._add_btn)
        custom_layout.addLayout(add_row)
        self._custom_manage = ProtocolListWidget(
            "Custom Workouts", custom_page,
            show_actions=True,
            empty_text="No custom workouts.\nCreate your own workout protocol.",
        )
        self._custom_manage.protocol_selected.connect(self.open_session)
        self._custom_manage.edit_requested.connect(self._on_edit_custom)
        self._custom_manage.delete_requested.connect(self._on_delete_custom)
        custom_layout.addWidget(self._custom_manage)
        custom_layout.addStretch()
        self._tabs.addTab(_scrollable(custom_page, self._tabs), "Custom")

        # History tab
        self._history_widget = HistoryWidget()
        self._history_widget.delete_requested.connect(self._on_delete_history)
        self._tabs.addTab(_scrollable(self._history_widget, self._tabs), "History")

        # Status bar
        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Pick a protocol to start.")

        self._build_menu_bar()
        self._tabs.currentChanged.connect(self._on_tab_changed)

        self.refresh_protocols()
        self._refresh_history()
        self._restore_geometry()

    # ══════════════════════════════════════════════════════════════════
    #  MENU
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu = self.menuBar().addMenu("HangTimer")

        settings_action = QAction("Settings…", self)
        settings_action.setShortcut(QKeySequence("Ctrl+,"))
        settings_action.triggered.connect(self._open_settings)
        menu.addAction(settings_action)

        new_action = QAction("New Workout…", self)
        new_action.setShortcut(QKeySequence("Ctrl+N"))
        new_action.triggered.connect(self._on_add_custom)
        menu.addAction(new_action)

    # ══════════════════════════════════════════════════════════════════
    #  PROTOCOLS
    # ══════════════════════════════════════════════════════════════════

    def refresh_protocols(self) -> None:
        try:
            custom = list_custom()
        except SQLAlchemyError as exc:
            logger.warning("Could not load custom workouts: %s", exc)
            self._status_bar.showMessage("Custom workouts are unavailable.")
            custom = []
        self._builtin_list.set_protocols(list(BUILTIN_PROTOCOLS))
        self._custom_picker.set_protocols(custom)
        self._custom_picker.setVisible(bool(custom))
        self._custom_manage.set_protocols(custom)

    def _run_protocol_dialog(self, protocol: Protocol | None) -> ProtocolDialog | None:
        """Show the create/edit dialog; ``None`` if the user cancelled."""
        dialog = ProtocolDialog(protocol, self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return None
        return dialog

    def _on_add_custom(self) -> None:
        dialog = self._run_protocol_dialog(None)
        if dialog is None:
            return
        try:
            protocol = create_custom(**dialog.values())
        except SQLAlchemyError as exc:
            logger.warning("Could not save custom workout: %s", exc)
            self._status_bar.showMessage("Could not save the workout.")
            return
        self._status_bar.showMessage(f"Created “{protocol.name}”.")
        self.refresh_protocols()

    def _on_edit_custom(self, protocol_id: str) -> None:
        try:
            protocol = get_custom(protocol_id)
        except SQLAlchemyError as exc:
            logger.warning("Could not load custom workout %s: %s", protocol_id, exc)
            self._status_bar.showMessage("Could not load the workout.")
            return
        if protocol is None:
            return
        dialog = self._run_protocol_dialog(protocol)
        if dialog is None:
            return
        try:
            update_custom(dialog.edited_protocol())
        except SQLAlchemyError as exc:
            logger.warning("Could not update custom workout %s: %s", protocol_id, exc)
            self._status_bar.showMessage("Could not save the workout.")
            return
        self.refresh_protocols()

    def _on_delete_custom(self, protocol_id: str) -> None:
        if not self._ask_yes_no("Delete workout?", "Delete this workout?"):
            return
        try:
            delete_custom(protocol_id)
        except SQLAlchemyError as exc:
            logger.warning("Could not delete custom workout %s: %s", protocol_id, exc)
            self._status_bar.showMessage("Could not delete the workout.")
            return
        self.refresh_protocols()

    # ══════════════════════════════════════════════════════════════════
    #  SESSION
    # ══════════════════════════════════════════════════════════════════

    @property
    def engine(self) -> TimerEngine | None:
        return self._engine

    def open_session(self, protocol_id: str) -> TimerEngine | None:
        """Bind a fresh engine to *protocol_id* and show the timer screen."""
        try:
            protocol = find_protocol(protocol_id)
        except SQLAlchemyError as exc:
            logger.warning("Could not load protocol %s: %s", protocol_id, exc)
            self._status_bar.showMessage("Could not load the workout.")
            return None
        if protocol is None:
            logger.warning("Unknown protocol id %r", protocol_id)
            return None

        self._discard_session()
        engine = TimerEngine(
            protocol, self, prepare_seconds=self._settings.prepare_seconds,
        )
        engine.cue.connect(self._sound_manager.play_cue)
        engine.finished.connect(self._on_session_finished)
        self._engine = engine

        self._timer_widget.bind(engine)
        self._timer_stack.setCurrentIndex(_PAGE_TIMER)
        self._tabs.setCurrentIndex(0)
        self._status_bar.showMessage(f"{protocol.name}: press Start when ready.")
        return engine

    def _discard_session(self) -> None:
        if self._engine is None:
            return
        engine = self._engine
        self._engine = None
        self._timer_widget.unbind()
        engine.stop()
        engine.deleteLater()

    def _close_timer_screen(self) -> None:
        self._discard_session()
        self._timer_stack.setCurrentIndex(_PAGE_LIST)

    def _record(self, result: SessionResult) -> None:
        _, saved = record_session(result)
        self._refresh_history()
        if saved:
            self._status_bar.showMessage(
                "Workout saved." if result.completed else "Workout stopped and saved."
            )
        else:
            self._status_bar.showMessage("Workout finished, but history could not be saved.")

    def _confirm_exit(self) -> bool:
        return self._ask_yes_no(
            "End workout?",
            "Your progress will be saved to history.",
        )

    def _ask_yes_no(self, title: str, text: str) -> bool:
        reply = QMessageBox.question(
            self,
            title,
            text,
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        return reply == QMessageBox.StandardButton.Yes

    def _abort_with_confirm(self) -> None:
        """Pause, ask, then either record + close or carry on."""
        engine = self._engine
        if engine is None or not engine.request_abort():
            return
        if self._confirm_exit():
            result = engine.confirm_abort()
            if result is not None:
                self._record(result)
            self._close_timer_screen()
        else:
            engine.cancel_abort()

    # ── timer screen slots ────────────────────────────────────────────

    def _on_close_requested(self) -> None:
        if self._engine is None or not self._engine.has_progress:
            self._close_timer_screen()
            return
        self._abort_with_confirm()

    def _on_stop_requested(self) -> None:
        self._abort_with_confirm()

    def _on_done_requested(self) -> None:
        engine = self._engine
        if engine is None or engine.phase is not Phase.FINISHED:
            return
        self._record(engine.stop())
        self._close_timer_screen()

    def _on_session_finished(self, result: SessionResult) -> None:
        self._status_bar.showMessage(
            f"{result.protocol_name} complete. Nice work!"
        )

    # ══════════════════════════════════════════════════════════════════
    #  HISTORY
    # ══════════════════════════════════════════════════════════════════

    def _refresh_history(self) -> None:
        try:
            self._history_widget.refresh()
        except SQLAlchemyError as exc:
            logger.warning("Could not load history: %s", exc)
            self._status_bar.showMessage("History is unavailable.")

    def _on_delete_history(self, record_id: str) -> None:
        try:
            delete_record(record_id)
        except SQLAlchemyError as exc:
            logger.warning("Could not delete history record %s: %s", record_id, exc)
            self._status_bar.showMessage("Could not delete the record.")
            return
        self._refresh_history()

    def _on_tab_changed(self, index: int) -> None:
        if self._tabs.tabText(index) == "History":
            self._refresh_history()

    # ══════════════════════════════════════════════════════════════════
    #  SETTINGS
    # ══════════════════════════════════════════════════════════════════

    def _open_settings(self) -> None:
        dialog = SettingsDialog(
            self._settings, self,
            sound_preview_callback=self._sound_manager.play_tick_cue,
        )
        dialog.exec()
        self._apply_settings()

    def _apply_settings(self) -> None:
        self._sound_manager.set_volume(self._settings.sound_volume)
        self._sound_manager.set_enabled(self._settings.sound_enabled)

    # ══════════════════════════════════════════════════════════════════
    #  KEYBOARD + WINDOW
    # ══════════════════════════════════════════════════════════════════

    def _on_space(self) -> None:
        """Start, pause, or resume the session on screen."""
        engine = self._engine
        if engine is None or engine.abort_pending:
            return
        if not engine.is_started:
            engine.start()
        elif engine.is_paused:
            engine.resume()
        elif engine.is_running:
            engine.pause()

    def _restore_geometry(self) -> None:
        s = self._settings
        if s.window_x is not None and s.window_y is not None:
            self.move(s.window_x, s.window_y)
        if s.window_width and s.window_height:
            self.resize(s.window_width, s.window_height)

    def _save_geometry(self) -> None:
        if not self.isVisible():
            return
        pos = self.pos()
        size = self.size()
        self._settings.window_x = pos.x()
        self._settings.window_y = pos.y()
        self._settings.window_width = size.width()
        self._settings.window_height = size.height()
        try:
            save_settings(self._settings)
        except OSError as exc:
            logger.warning("Could not save window geometry: %s", exc)

    def closeEvent(self, event) -> None:  # type: ignore[override]
        self._save_geometry()
        self._discard_session()
        event.accept()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._geometry_save_timer.start()

    def moveEvent(self, event) -> None:  # type: ignore[override]
        super().moveEvent(event)
        self._geometry_save_timer.start()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        if event.key() == Qt.Key.Key_Space and not event.modifiers():
            self._on_space()
            event.accept()
            return
        super().keyPressEvent(event)
