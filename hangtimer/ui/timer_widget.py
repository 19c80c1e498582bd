"""Timer screen: runs one session.

Layout (top → bottom):
    - Protocol name + close button
    - Phase label ("HANG", "REST" …) and the big countdown
    - Set / rep progress and total elapsed time
    - Control buttons (Start / Pause / Resume / Stop / Done)

The widget drives the engine's start / pause / resume directly.  Stop,
Done and Close go through the main window, which owns the abort
confirmation and the history log.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
    QProgressBar,
)

from ..protocols.model import format_time
from ..timer.engine import TimerEngine, TimerSnapshot, Phase
from .styles import PHASE_LABELS, phase_stylesheet


class TimerWidget(QWidget):
    """The session screen shown in the Timer tab."""

    close_requested = pyqtSignal()
    stop_requested = pyqtSignal()
    done_requested = pyqtSignal()

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine: TimerEngine | None = None
        self._build_ui()
        self._connect_buttons()

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)

        self._screen = QFrame(self)
        self._screen.setObjectName("timerScreen")
        root.addWidget(self._screen)

        layout = QVBoxLayout(self._screen)
        layout.setContentsMargins(24, 16, 24, 24)
        layout.setSpacing(10)

        # ── header ───────────────────────────────────────────────────
        header = QHBoxLayout()
        self._name_label = QLabel("", self._screen)
        self._name_label.setObjectName("cardTitle")
        self._close_btn = QPushButton("✕", self._screen)
        self._close_btn.setObjectName("secondaryButton")
        self._close_btn.setFixedWidth(44)
        header.addWidget(self._name_label)
        header.addStretch()
        header.addWidget(self._close_btn)
        layout.addLayout(header)

        layout.addStretch()

        # ── phase + countdown ────────────────────────────────────────
        self._phase_label = QLabel("", self._screen)
        self._phase_label.setObjectName("phaseLabel")
        self._phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._phase_label)

        self._countdown_label = QLabel("00:00", self._screen)
        self._countdown_label.setObjectName("countdownLabel")
        self._countdown_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._countdown_label)

        # ── set / rep / total ────────────────────────────────────────
        info_row = QHBoxLayout()
        self._set_label = QLabel("", self._screen)
        self._rep_label = QLabel("", self._screen)
        self._total_label = QLabel("", self._screen)
        for lbl in (self._set_label, self._rep_label, self._total_label):
            lbl.setObjectName("progressLabel")
            lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
            info_row.addWidget(lbl)
        layout.addLayout(info_row)

        self._progress = QProgressBar(self._screen)
        self._progress.setRange(0, 1000)
        self._progress.setTextVisible(False)
        self._progress.setFixedHeight(6)
        layout.addWidget(self._progress)

        layout.addStretch()

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._stop_btn = QPushButton("Stop", self._screen)
        self._stop_btn.setObjectName("dangerButton")
        self._start_btn = QPushButton("Start", self._screen)
        self._start_btn.setObjectName("primaryButton")
        self._pause_btn = QPushButton("Pause", self._screen)
        self._pause_btn.setObjectName("primaryButton")
        self._resume_btn = QPushButton("Resume", self._screen)
        self._resume_btn.setObjectName("primaryButton")
        self._done_btn = QPushButton("Done", self._screen)
        self._done_btn.setObjectName("primaryButton")

        for btn in (
            self._stop_btn, self._start_btn, self._pause_btn,
            self._resume_btn, self._done_btn,
        ):
            btn_row.addWidget(btn)
        layout.addLayout(btn_row)

    def _connect_buttons(self) -> None:
        self._start_btn.clicked.connect(self._on_start)
        self._pause_btn.clicked.connect(self._on_pause)
        self._resume_btn.clicked.connect(self._on_resume)
        self._stop_btn.clicked.connect(self.stop_requested.emit)
        self._done_btn.clicked.connect(self.done_requested.emit)
        self._close_btn.clicked.connect(self.close_requested.emit)

    # ── binding ───────────────────────────────────────────────────────────

    @property
    def engine(self) -> TimerEngine | None:
        return self._engine

    def bind(self, engine: TimerEngine) -> None:
        """Show *engine*'s session, dropping any previously bound one."""
        self.unbind()
        self._engine = engine
        engine.ticked.connect(self.render)
        engine.state_changed.connect(self.render)
        self._name_label.setText(engine.protocol_name)
        self.render(engine.snapshot())

    def unbind(self) -> None:
        if self._engine is None:
            return
        for signal, slot in (
            (self._engine.ticked, self.render),
            (self._engine.state_changed, self.render),
        ):
            try:
                signal.disconnect(slot)
            except TypeError:
                pass  # already disconnected
        self._engine = None

    # ── slots ─────────────────────────────────────────────────────────────

    def _on_start(self) -> None:
        if self._engine is not None:
            self._engine.start()

    def _on_pause(self) -> None:
        if self._engine is not None:
            self._engine.pause()

    def _on_resume(self) -> None:
        if self._engine is not None:
            self._engine.resume()

    # ── display ───────────────────────────────────────────────────────────

    def render(self, snap: TimerSnapshot) -> None:
        self._phase_label.setText(PHASE_LABELS[snap.phase])
        self._countdown_label.setText(format_time(snap.time_remaining))
        self._set_label.setText(f"Set {snap.current_set}/{snap.number_of_sets}")
        self._rep_label.setText(f"Rep {snap.current_rep}/{snap.reps_per_set}")
        self._total_label.setText(f"Total {format_time(snap.total_elapsed)}")
        self._progress.setValue(round(snap.percent_complete * 1000))
        self._screen.setStyleSheet(phase_stylesheet(snap.phase))
        self._update_buttons(snap)

    def _update_buttons(self, snap: TimerSnapshot) -> None:
        finished = snap.phase is Phase.FINISHED
        started = self._engine is not None and self._engine.is_started
        self._start_btn.setVisible(not started and not finished)
        self._pause_btn.setVisible(snap.running and not snap.paused)
        self._resume_btn.setVisible(snap.running and snap.paused)
        self._stop_btn.setVisible(snap.running)
        self._done_btn.setVisible(finished)

    @property
    def phase_text(self) -> str:
        return self._phase_label.text()

    @property
    def countdown_text(self) -> str:
        return self._countdown_label.text()
