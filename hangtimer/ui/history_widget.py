"""History tab: every recorded session, newest first.

Each row shows the protocol name, a Done / Stopped badge, when it ran
and how long it took.  Deleting emits ``delete_requested(record_id)``;
the main window removes the record and refreshes.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame, QPushButton,
)

from ..history import HistoryRecord, history_summary, load_history
from ..protocols.model import format_time


class HistoryWidget(QWidget):
    """Displays the history log."""

    delete_requested = pyqtSignal(str)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._row_widgets: list[QWidget] = []
        self._build_ui()

    # ── build ─────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)
        layout.setSpacing(6)

        self._summary_label = QLabel("", self)
        self._summary_label.setObjectName("cardMeta")
        self._summary_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._summary_label)

        self._rows_container = QVBoxLayout()
        self._rows_container.setSpacing(6)
        layout.addLayout(self._rows_container)

        self._empty_label = QLabel(
            "No workout history yet.\nComplete a workout to see it here.", self,
        )
        self._empty_label.setObjectName("cardMeta")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._empty_label)

        layout.addStretch()

    # ── refresh ───────────────────────────────────────────────────────

    def refresh(self) -> None:
        """Reload the history log from the database."""
        self.set_records(load_history())

    def set_records(self, records: list[HistoryRecord]) -> None:
        for w in self._row_widgets:
            w.setParent(None)
            w.deleteLater()
        self._row_widgets.clear()

        summary = history_summary(records)
        self._summary_label.setText(
            f"{summary.completed}/{summary.sessions} completed · "
            f"{format_time(summary.total_seconds)} trained"
            if records else ""
        )
        self._empty_label.setVisible(not records)

        for record in records:
            row = self._make_row(record)
            self._rows_container.addWidget(row)
            self._row_widgets.append(row)

    @property
    def row_count(self) -> int:
        return len(self._row_widgets)

    # ── row builder ───────────────────────────────────────────────────

    def _make_row(self, record: HistoryRecord) -> QWidget:
        frame = QFrame(self)
        frame.setObjectName("card")
        col = QVBoxLayout(frame)
        col.setContentsMargins(14, 10, 14, 10)
        col.setSpacing(4)

        top = QHBoxLayout()
        name_lbl = QLabel(record.protocol_name, frame)
        name_lbl.setObjectName("cardTitle")
        badge = QLabel("Done" if record.completed else "Stopped", frame)
        badge.setObjectName("badgeDone" if record.completed else "badgeStopped")
        delete_btn = QPushButton("Delete", frame)
        delete_btn.setObjectName("secondaryButton")
        delete_btn.clicked.connect(
            lambda _checked=False, rid=record.id: self.delete_requested.emit(rid)
        )
        top.addWidget(name_lbl)
        top.addStretch()
        top.addWidget(badge)
        top.addWidget(delete_btn)
        col.addLayout(top)

        bottom = QHBoxLayout()
        local = record.date.astimezone()
        when_lbl = QLabel(local.strftime("%Y-%m-%d %H:%M"), frame)
        when_lbl.setObjectName("cardMeta")
        dur_lbl = QLabel(format_time(record.duration), frame)
        dur_lbl.setObjectName("cardMeta")
        dur_lbl.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        bottom.addWidget(when_lbl)
        bottom.addStretch()
        bottom.addWidget(dur_lbl)
        col.addLayout(bottom)

        return frame
