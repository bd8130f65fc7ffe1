from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, List, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

# Standard typing-test convention: one "word" is five characters.
CHARS_PER_WORD = 5


@dataclass(frozen=True)
class SessionStats:
    """Final statistics of a completed typing session."""

    elapsed: float
    wpm: int
    cpm: int
    mistakes: int
    word_count: int
    accuracy: float


@dataclass(frozen=True)
class Idle:
    """Waiting for the first keystroke or an explicit start."""


@dataclass(frozen=True)
class Running:
    started_at: float


@dataclass(frozen=True)
class Finished:
    stats: SessionStats


SessionState = Union[Idle, Running, Finished]


def compute_accuracy(mistakes: int, char_count: int) -> float:
    """Percentage of characters typed without a mistake, clamped to 0-100."""
    if char_count <= 0:
        return 100.0 if mistakes == 0 else 0.0
    accuracy = 100.0 - (mistakes / char_count) * 100.0
    return max(0.0, min(100.0, accuracy))


def characters_per_minute(char_count: int, elapsed: float) -> float:
    elapsed = max(elapsed, 1e-6)
    return char_count * (60.0 / elapsed)


def words_per_minute(char_count: int, elapsed: float) -> float:
    return characters_per_minute(char_count, elapsed) / CHARS_PER_WORD


class TypingSession:
    """Scores keystrokes, one at a time, against a fixed target text.

    The target is the sampled words joined by single spaces. Typed characters
    are kept in an input buffer that never outlives the target's length; each
    keystroke that does not match the target character at its position counts
    as one mistake, even if it is corrected later.

    In non-strict mode a space typed after the last character ends the session
    even when the text contains mistakes. With ``skip_word_on_space`` a space
    typed in the middle of a word jumps to the start of the next word and
    counts every skipped character as a mistake.

    The session starts running on construction unless ``start=False`` is
    passed, in which case it stays :class:`Idle` until :meth:`start` or the
    first keystroke.
    """

    def __init__(
        self,
        words: Sequence[str],
        strict: bool = False,
        skip_word_on_space: bool = False,
        clock: Clock = time.monotonic,
        start: bool = True,
    ) -> None:
        self._words = list(words)
        self._text = " ".join(self._words)
        self._strict = strict
        self._skip_word_on_space = skip_word_on_space
        self._clock = clock
        self._input: List[str] = []
        self._mistakes = 0
        self._state: SessionState = Running(clock()) if start else Idle()

    @property
    def text(self) -> str:
        """The target text the user has to type."""
        return self._text

    @property
    def word_count(self) -> int:
        return len(self._words)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def mistakes(self) -> int:
        """Mistakes counted so far; corrections do not lower this."""
        return self._mistakes

    @property
    def input(self) -> str:
        """Everything typed so far."""
        return "".join(self._input)

    def is_finished(self) -> bool:
        return isinstance(self._state, Finished)

    def diff(self) -> List[Tuple[str, bool]]:
        """Pair each typed character with whether it matches the target."""
        return [(typed, typed == expected) for typed, expected in zip(self._input, self._text)]

    def push(self, c: str) -> None:
        """Handle one typed character."""
        if self.is_finished():
            return
        if not self._input:
            self._state = Running(self._clock())

        text = self._text
        current_index = len(self._input)
        current = text[current_index] if current_index < len(text) else None

        if self._skip_word_on_space and c == " " and current is not None and current != " ":
            # A space at the start of a word is ignored rather than skipping it.
            if current_index == 0 or text[current_index - 1] == " ":
                return
            self._skip_word(current_index)
            return

        self._input.append(c)
        # Past the end, a keystroke is compared with the last target character.
        expected = text[min(current_index, len(text) - 1)] if text else None

        # A space one past the end ends a lenient session despite mistakes.
        should_quit = not self._strict and current_index + 1 > len(text) and c == " "

        if not should_quit and c != expected:
            self._mistakes += 1

        if should_quit or self._input == list(text):
            self.finish()

        if len(self._input) > len(text):
            self._input.pop()

    def _skip_word(self, current_index: int) -> None:
        text = self._text
        end = text.find(" ", current_index)
        remaining = (len(text) if end == -1 else end) - current_index
        # One more for the space keystroke itself.
        skipped = remaining + 1
        fill = min(skipped, len(text) - current_index)
        self._input.extend(" " * fill)
        self._mistakes += skipped

        if not self._strict and len(self._input) >= len(text):
            self.finish()

    def pop(self) -> None:
        """Remove the last typed character, or a whole trailing run of spaces."""
        if self.is_finished() or not self._input:
            return
        if self._input[-1] == " ":
            while self._input and self._input[-1] == " ":
                self._input.pop()
        else:
            self._input.pop()

    def pop_word(self) -> None:
        """Remove trailing spaces and then the word before them."""
        if self.is_finished():
            return
        while self._input and self._input[-1] == " ":
            self._input.pop()
        while self._input and self._input[-1] != " ":
            self._input.pop()

    def start(self) -> None:
        """Start (or restart) the timer.

        A finished session stays finished; build a new session to try again.
        """
        if self.is_finished():
            logger.debug("Ignoring start() on a finished session")
            return
        self._state = Running(self._clock())

    def finish(self) -> None:
        """Compute the final statistics. Only a running session can finish."""
        state = self._state
        if isinstance(state, (Idle, Finished)):
            return
        if not isinstance(state, Running):
            raise TypeError(f"unknown session state {state!r}")

        elapsed = max(self._clock() - state.started_at, 0.0)
        char_count = len(self._text)
        stats = SessionStats(
            elapsed=elapsed,
            wpm=int(words_per_minute(char_count, elapsed)),
            cpm=int(characters_per_minute(char_count, elapsed)),
            mistakes=self._mistakes,
            word_count=self.word_count,
            accuracy=compute_accuracy(self._mistakes, char_count),
        )
        self._state = Finished(stats)
        logger.debug(
            "Session finished: %.2fs, %d wpm, %d mistakes, %.2f%% accuracy",
            stats.elapsed,
            stats.wpm,
            stats.mistakes,
            stats.accuracy,
        )
