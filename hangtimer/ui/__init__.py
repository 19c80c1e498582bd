"""UI package."""

from .timer_widget import TimerWidget
from .protocol_list import ProtocolCard, ProtocolListWidget
from .protocol_dialog import ProtocolDialog
from .history_widget import HistoryWidget

__all__ = [
    "TimerWidget",
    "ProtocolCard",
    "ProtocolListWidget",
    "ProtocolDialog",
    "HistoryWidget",
]
