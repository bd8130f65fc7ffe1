from __future__ import annotations

import logging
from typing import Optional

from PySide6.QtCore import Qt
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtWidgets import QMainWindow

from codetyper.core.controller import SessionController
from codetyper.core.events import Backspace, Char, DeleteWord, Event, Quit, Resize, Start
from codetyper.core.session import Running
from codetyper.ui.colors import classify
from codetyper.ui.typing_widgets import TypingTextWidget

logger = logging.getLogger(__name__)


def event_from_key(key: int, modifiers: Qt.KeyboardModifier, text: str) -> Optional[Event]:
    """Translate a key press into a session event, or None if it has no meaning."""
    ctrl = bool(modifiers & Qt.KeyboardModifier.ControlModifier)
    if ctrl and key == Qt.Key.Key_C:
        return Quit()
    if ctrl and key in (Qt.Key.Key_W, Qt.Key.Key_Backspace):
        return DeleteWord()
    if key == Qt.Key.Key_Backspace:
        return Backspace()
    if key in (Qt.Key.Key_Return, Qt.Key.Key_Enter):
        return Start()
    if not ctrl and len(text) == 1 and text.isprintable():
        return Char(text)
    return None


class MainWindow(QMainWindow):
    """Single-screen window: the text to type, and the results once finished."""

    def __init__(self, controller: SessionController) -> None:
        super().__init__()
        self._controller = controller
        self.setWindowTitle("codetyper")
        self.text_widget = TypingTextWidget(controller.config.theme, self)
        self.text_widget.setFocusPolicy(Qt.NoFocus)
        self.setCentralWidget(self.text_widget)
        self.setFocusPolicy(Qt.StrongFocus)
        self._render()

    def keyPressEvent(self, event: QKeyEvent) -> None:
        session_event = event_from_key(event.key(), event.modifiers(), event.text())
        if session_event is None:
            super().keyPressEvent(event)
            return
        self._controller.handle(session_event)
        if self._controller.should_quit:
            self.close()
            return
        self._render()

    def resizeEvent(self, event) -> None:
        super().resizeEvent(event)
        columns, rows = self.text_widget.grid()
        self._controller.handle(Resize(columns, rows))
        self._render()

    def closeEvent(self, event: QCloseEvent) -> None:
        logger.info("Closing")
        super().closeEvent(event)

    def _render(self) -> None:
        session = self._controller.session
        if isinstance(session.state, Running):
            self.text_widget.set_cells(classify(session.text, session.diff()))
        else:
            self.text_widget.set_lines(self._controller.status_lines())
