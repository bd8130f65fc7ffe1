"""Per-character color classes for the typing text."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence, Tuple

from codetyper.core.config import Theme


class CharClass(Enum):
    CORRECT = "correct"
    SKIPPED = "skipped"  # space typed over a non-space character
    EXTRA = "extra"  # wrong character typed over a space
    WRONG = "wrong"
    CURSOR = "cursor"
    PENDING = "pending"


def classify(text: str, diff: Sequence[Tuple[str, bool]]) -> List[Tuple[str, CharClass]]:
    """Return the character to draw at every target position and its class.

    Wrong characters typed where the target has a space are drawn as typed so
    the stray keystroke stays visible; everywhere else the target is drawn.
    """
    cells: List[Tuple[str, CharClass]] = []
    cursor = len(diff)
    for i, expected in enumerate(text):
        if i < cursor:
            typed, _ = diff[i]
            if typed == expected:
                cells.append((expected, CharClass.CORRECT))
            elif typed == " ":
                cells.append((expected, CharClass.SKIPPED))
            elif expected == " ":
                cells.append((typed, CharClass.EXTRA))
            else:
                cells.append((expected, CharClass.WRONG))
        elif i == cursor:
            cells.append((expected, CharClass.CURSOR))
        else:
            cells.append((expected, CharClass.PENDING))
    return cells


def colors_for(char_class: CharClass, theme: Theme) -> Tuple[str, Optional[str]]:
    """Foreground and optional background color for a character class."""
    if char_class is CharClass.CURSOR:
        return theme.cursor_foreground, theme.cursor_background
    foreground = {
        CharClass.CORRECT: theme.correct,
        CharClass.SKIPPED: theme.skipped,
        CharClass.EXTRA: theme.extra,
        CharClass.WRONG: theme.wrong,
        CharClass.PENDING: theme.pending,
    }[char_class]
    return foreground, None
