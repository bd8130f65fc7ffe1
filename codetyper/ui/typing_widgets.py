"""Monospace grid that paints the target text and status messages."""

from __future__ import annotations

from typing import List, Optional, Tuple

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QColor, QFont, QFontDatabase, QFontMetrics, QPainter
from PySide6.QtWidgets import QSizePolicy, QWidget

from codetyper.core.config import Theme
from codetyper.ui.colors import CharClass, colors_for

FONT_POINT_SIZE = 16


def monospace_font() -> QFont:
    font = QFontDatabase.systemFont(QFontDatabase.SystemFont.FixedFont)
    font.setPointSize(FONT_POINT_SIZE)
    return font


def grid_size(size: QSize, font: QFont) -> Tuple[int, int]:
    """Number of character cells (columns, rows) that fit in ``size``."""
    metrics = QFontMetrics(font)
    cell_w = max(metrics.horizontalAdvance("M"), 1)
    cell_h = max(metrics.height(), 1)
    return max(size.width() // cell_w, 1), max(size.height() // cell_h, 1)


class TypingTextWidget(QWidget):
    """Draws either the colored target text or centered status lines.

    Text shorter than one row is centered horizontally; longer text wraps at
    the last column and the block is centered vertically.
    """

    def __init__(self, theme: Theme, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self._theme = theme
        self._cells: List[Tuple[str, CharClass]] = []
        self._lines: List[str] = []
        self.setFont(monospace_font())
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setAutoFillBackground(True)
        palette = self.palette()
        palette.setColor(self.backgroundRole(), QColor(theme.background))
        self.setPalette(palette)

    def grid(self) -> Tuple[int, int]:
        return grid_size(self.size(), self.font())

    def set_cells(self, cells: List[Tuple[str, CharClass]]) -> None:
        self._cells = list(cells)
        self._lines = []
        self.update()

    def set_lines(self, lines: List[str]) -> None:
        self._lines = list(lines)
        self._cells = []
        self.update()

    def paintEvent(self, event) -> None:
        super().paintEvent(event)
        painter = QPainter(self)
        painter.setFont(self.font())
        metrics = QFontMetrics(self.font())
        cell_w = max(metrics.horizontalAdvance("M"), 1)
        cell_h = max(metrics.height(), 1)
        columns, rows = self.grid()
        if self._lines:
            self._paint_lines(painter, cell_w, cell_h, columns, rows)
        elif self._cells:
            self._paint_cells(painter, cell_w, cell_h, columns, rows)
        painter.end()

    def _paint_lines(self, painter: QPainter, cell_w: int, cell_h: int, columns: int, rows: int) -> None:
        width = max(len(line) for line in self._lines)
        x = max((columns - width) // 2, 0) * cell_w
        y = max(rows // 2 - len(self._lines) // 2, 0) * cell_h
        painter.setPen(QColor(self._theme.pending))
        for line in self._lines:
            painter.drawText(x, y, width * cell_w, cell_h, Qt.AlignLeft | Qt.AlignVCenter, line)
            y += cell_h

    def _paint_cells(self, painter: QPainter, cell_w: int, cell_h: int, columns: int, rows: int) -> None:
        count = len(self._cells)
        lines = count // columns
        col = 1 if lines > 0 else (columns - count) // 2
        row = max(rows // 2 - lines // 2, 0)
        for char, char_class in self._cells:
            foreground, background = colors_for(char_class, self._theme)
            x, y = col * cell_w, row * cell_h
            if background is not None:
                painter.fillRect(x, y, cell_w, cell_h, QColor(background))
            painter.setPen(QColor(foreground))
            painter.drawText(x, y, cell_w, cell_h, Qt.AlignCenter, char)
            col += 1
            if col >= columns:
                col = 1
                row += 1
