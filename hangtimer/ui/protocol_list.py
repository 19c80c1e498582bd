"""Protocol cards.

Used twice: in the Timer tab (click a card to open the timer) and in
the Custom tab with edit / delete buttons on every card.
"""

from __future__ import annotations

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLabel, QFrame, QPushButton,
)

from ..protocols.model import Protocol, format_time


class ProtocolCard(QFrame):
    """One clickable protocol summary."""

    clicked = pyqtSignal(str)
    edit_clicked = pyqtSignal(str)
    delete_clicked = pyqtSignal(str)

    def __init__(
        self,
        protocol: Protocol,
        parent: QWidget | None = None,
        *,
        show_actions: bool = False,
    ) -> None:
        super().__init__(parent)
        self.setObjectName("card")
        self.setCursor(Qt.CursorShape.PointingHandCursor)
        self._protocol = protocol

        layout = QVBoxLayout(self)
        layout.setContentsMargins(16, 12, 16, 12)
        layout.setSpacing(4)

        header = QHBoxLayout()
        title = QLabel(protocol.name, self)
        title.setObjectName("cardTitle")
        header.addWidget(title)
        header.addStretch()

        self._edit_btn: QPushButton | None = None
        self._delete_btn: QPushButton | None = None
        if show_actions:
            self._edit_btn = QPushButton("Edit", self)
            self._edit_btn.setObjectName("secondaryButton")
            self._edit_btn.clicked.connect(
                lambda: self.edit_clicked.emit(self._protocol.id)
            )
            self._delete_btn = QPushButton("Delete", self)
            self._delete_btn.setObjectName("dangerButton")
            self._delete_btn.clicked.connect(
                lambda: self.delete_clicked.emit(self._protocol.id)
            )
            header.addWidget(self._edit_btn)
            header.addWidget(self._delete_btn)
        layout.addLayout(header)

        details = QLabel(protocol.describe(), self)
        details.setObjectName("cardMeta")
        layout.addWidget(details)

        total = QLabel(f"Total: {format_time(protocol.total_duration)}", self)
        total.setObjectName("cardMeta")
        layout.addWidget(total)

    @property
    def protocol(self) -> Protocol:
        return self._protocol

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            self.clicked.emit(self._protocol.id)
        super().mousePressEvent(event)


class ProtocolListWidget(QWidget):
    """A titled column of protocol cards."""

    protocol_selected = pyqtSignal(str)
    edit_requested = pyqtSignal(str)
    delete_requested = pyqtSignal(str)

    def __init__(
        self,
        title: str,
        parent: QWidget | None = None,
        *,
        show_actions: bool = False,
        empty_text: str = "",
    ) -> None:
        super().__init__(parent)
        self._show_actions = show_actions
        self._cards: list[ProtocolCard] = []

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 8, 0, 0)
        layout.setSpacing(8)

        self._header = QLabel(title, self)
        self._header.setObjectName("cardMeta")
        layout.addWidget(self._header)

        self._rows = QVBoxLayout()
        self._rows.setSpacing(8)
        layout.addLayout(self._rows)

        self._empty_label = QLabel(empty_text, self)
        self._empty_label.setObjectName("cardMeta")
        self._empty_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._empty_label.setVisible(bool(empty_text))
        layout.addWidget(self._empty_label)

    def set_protocols(self, protocols: list[Protocol]) -> None:
        for card in self._cards:
            card.setParent(None)
            card.deleteLater()
        self._cards.clear()

        for protocol in protocols:
            card = ProtocolCard(protocol, self, show_actions=self._show_actions)
            card.clicked.connect(self.protocol_selected.emit)
            card.edit_clicked.connect(self.edit_requested.emit)
            card.delete_clicked.connect(self.delete_requested.emit)
            self._rows.addWidget(card)
            self._cards.append(card)

        self._empty_label.setVisible(not protocols and bool(self._empty_label.text()))

    @property
    def cards(self) -> list[ProtocolCard]:
        return list(self._cards)
