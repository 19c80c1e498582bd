"""Create / edit dialog for custom protocols.

The estimated total duration updates live as the numbers change.  The
dialog only collects values; the caller decides whether they become a
new protocol or replace an existing one.
"""

from __future__ import annotations

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSpinBox, QLineEdit, QPushButton, QWidget,
)

from ..protocols.model import Protocol, estimate_duration, format_time


class ProtocolDialog(QDialog):
    """Modal form for a custom protocol."""

    def __init__(
        self,
        protocol: Protocol | None = None,
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._editing = protocol
        self.setWindowTitle("Edit Workout" if protocol else "Create Workout")
        self.setMinimumWidth(380)
        self.setModal(True)

        self._build_ui()
        self._populate()
        self._update_total()

    # ══════════════════════════════════════════════════════════════════
    #  BUILD UI
    # ══════════════════════════════════════════════════════════════════

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(24, 20, 24, 20)
        root.setSpacing(16)

        form = QFormLayout()
        form.setHorizontalSpacing(20)
        form.setVerticalSpacing(10)

        self._name_edit = QLineEdit()
        self._name_edit.setMaxLength(100)
        self._name_edit.setPlaceholderText("e.g. Half-crimp repeaters")
        self._name_edit.textChanged.connect(self._update_save_enabled)
        form.addRow("Name:", self._name_edit)

        self._hang_spin = self._spin(1, 600, " s")
        form.addRow("Hang time:", self._hang_spin)

        self._rest_spin = self._spin(0, 600, " s")
        form.addRow("Rest time:", self._rest_spin)

        self._reps_spin = self._spin(1, 50)
        form.addRow("Reps per set:", self._reps_spin)

        self._sets_spin = self._spin(1, 50)
        form.addRow("Number of sets:", self._sets_spin)

        self._set_rest_spin = self._spin(0, 3600, " s")
        form.addRow("Rest between sets:", self._set_rest_spin)

        root.addLayout(form)

        self._total_label = QLabel("")
        self._total_label.setStyleSheet("font-size: 15px; font-weight: 700;")
        root.addWidget(self._total_label)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        cancel_btn = QPushButton("Cancel")
        cancel_btn.setObjectName("secondaryButton")
        cancel_btn.clicked.connect(self.reject)
        self._save_btn = QPushButton("Save")
        self._save_btn.setObjectName("primaryButton")
        self._save_btn.clicked.connect(self.accept)
        btn_row.addWidget(cancel_btn)
        btn_row.addWidget(self._save_btn)
        root.addLayout(btn_row)

    def _spin(self, low: int, high: int, suffix: str = "") -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(low, high)
        if suffix:
            spin.setSuffix(suffix)
        spin.valueChanged.connect(self._update_total)
        return spin

    # ══════════════════════════════════════════════════════════════════
    #  POPULATE
    # ══════════════════════════════════════════════════════════════════

    def _populate(self) -> None:
        p = self._editing
        if p is None:
            self._hang_spin.setValue(10)
            self._rest_spin.setValue(5)
            self._reps_spin.setValue(5)
            self._sets_spin.setValue(3)
            self._set_rest_spin.setValue(120)
        else:
            self._name_edit.setText(p.name)
            self._hang_spin.setValue(p.hang_time)
            self._rest_spin.setValue(p.rest_time)
            self._reps_spin.setValue(p.reps_per_set)
            self._sets_spin.setValue(p.number_of_sets)
            self._set_rest_spin.setValue(p.rest_between_sets)
        self._update_save_enabled()

    # ══════════════════════════════════════════════════════════════════
    #  CHANGE HANDLERS
    # ══════════════════════════════════════════════════════════════════

    def _update_total(self) -> None:
        total = estimate_duration(
            self._hang_spin.value(),
            self._rest_spin.value(),
            self._reps_spin.value(),
            self._sets_spin.value(),
            self._set_rest_spin.value(),
        )
        self._total_label.setText(f"Total duration: {format_time(total)}")

    def _update_save_enabled(self) -> None:
        self._save_btn.setEnabled(bool(self._name_edit.text().strip()))

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC
    # ══════════════════════════════════════════════════════════════════

    @property
    def editing(self) -> Protocol | None:
        return self._editing

    @property
    def total_text(self) -> str:
        return self._total_label.text()

    def values(self) -> dict[str, object]:
        """Form values as ``create_custom`` keyword arguments."""
        return {
            "name": self._name_edit.text().strip(),
            "hang_time": self._hang_spin.value(),
            "rest_time": self._rest_spin.value(),
            "reps_per_set": self._reps_spin.value(),
            "rest_between_sets": self._set_rest_spin.value(),
            "number_of_sets": self._sets_spin.value(),
        }

    def edited_protocol(self) -> Protocol | None:
        """The edited protocol (same id), or ``None`` when creating."""
        if self._editing is None:
            return None
        return self._editing.with_changes(**self.values())
