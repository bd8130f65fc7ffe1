from __future__ import annotations

import logging
import time
from typing import List, Optional

from codetyper.core.config import Config
from codetyper.core.errors import CodeTyperError
from codetyper.core.events import Backspace, Char, DeleteWord, Event, Quit, Resize, Start
from codetyper.core.session import Clock, Finished, Idle, Running, SessionStats, TypingSession
from codetyper.core.words import CorpusSampler

logger = logging.getLogger(__name__)

TRY_AGAIN_TEXT = "Try again? Y(es) | N(no) | R(etry same words)"
START_TEXT = "Press any key to start"


def format_result(stats: SessionStats, min_accuracy: Optional[float] = None) -> str:
    """One-line summary of a finished session, or a terse note if accuracy is too low."""
    if min_accuracy is not None and stats.accuracy < min_accuracy:
        return f"Accuracy too low ({stats.accuracy:.2f}%)"
    return (
        f"time: {int(stats.elapsed)} seconds | wpm: {stats.wpm} (cpm: {stats.cpm}) | "
        f"mistakes: {stats.mistakes} | accuracy: {stats.accuracy:.2f}% | "
        f"word count: {stats.word_count}"
    )


def _fit(text: str, columns: int) -> List[str]:
    if len(text) > columns:
        return [part.strip() for part in text.split("|")]
    return [text]


def result_lines(stats: SessionStats, min_accuracy: Optional[float], columns: int) -> List[str]:
    """Result text split on ``|`` when it is wider than ``columns``, then the retry prompt."""
    lines = _fit(format_result(stats, min_accuracy), columns)
    lines.append(" ")
    lines.extend(_fit(TRY_AGAIN_TEXT, columns))
    return lines


class SessionController:
    """Owns the configuration and the current session and reacts to key events.

    Retrying builds a new session on the same words; answering yes samples a
    fresh set of words first.
    """

    def __init__(
        self,
        config: Config,
        columns: int,
        rows: int,
        sampler: Optional[CorpusSampler] = None,
        clock: Clock = time.monotonic,
        wait_for_first_key: bool = False,
    ) -> None:
        self._config = config
        self._columns = columns
        self._rows = rows
        self._sampler = sampler if sampler is not None else CorpusSampler()
        self._clock = clock
        self._quit = False
        self.error: Optional[str] = None
        self._words = self._sampler.sample(config, self.max_chars)
        self._session = self._new_session(start=not wait_for_first_key)

    @property
    def config(self) -> Config:
        return self._config

    @property
    def session(self) -> TypingSession:
        return self._session

    @property
    def words(self) -> List[str]:
        return list(self._words)

    @property
    def max_chars(self) -> int:
        """Character budget for a sample: every cell of the text area."""
        return max(self._columns, 1) * max(self._rows, 1)

    @property
    def should_quit(self) -> bool:
        return self._quit

    def _new_session(self, start: bool = True) -> TypingSession:
        return TypingSession(
            self._words,
            strict=self._config.strict,
            skip_word_on_space=self._config.skip_word_on_space,
            clock=self._clock,
            start=start,
        )

    def retry(self) -> None:
        """Replace the session with a new one on the same words."""
        self._session = self._new_session()

    def resample(self) -> None:
        """Sample fresh words and start a new session on them.

        Sampling errors propagate and leave the current session in place.
        """
        words = self._sampler.sample(self._config, self.max_chars)
        self._words = words
        self._session = self._new_session()

    def handle(self, event: Event) -> None:
        """Apply one key event to the current session."""
        self.error = None
        session = self._session
        if isinstance(event, Quit):
            self._quit = True
        elif isinstance(event, Resize):
            self._columns, self._rows = event.columns, event.rows
        elif isinstance(event, Backspace):
            session.pop()
        elif isinstance(event, DeleteWord):
            session.pop_word()
        elif isinstance(event, Start):
            if isinstance(session.state, Idle):
                session.start()
        elif isinstance(event, Char):
            self._handle_char(event.char)
        else:
            raise TypeError(f"unknown event {event!r}")

    def _handle_char(self, c: str) -> None:
        state = self._session.state
        if isinstance(state, Finished):
            answer = c.lower()
            if answer == "y":
                try:
                    self.resample()
                except CodeTyperError as e:
                    logger.error("Could not sample new words: %s", e)
                    self.error = str(e)
            elif answer == "r":
                self.retry()
            elif answer == "n":
                self._quit = True
        elif isinstance(state, Running):
            self._session.push(c)
        elif isinstance(state, Idle):
            self._session.start()
        else:
            raise TypeError(f"unknown session state {state!r}")

    def status_lines(self) -> List[str]:
        """Text to show instead of the target text, or an empty list while typing."""
        state = self._session.state
        if isinstance(state, Finished):
            lines = result_lines(state.stats, self._config.min_accuracy, self._columns)
            if self.error:
                lines = [f"Error: {self.error}", " "] + lines
            return lines
        if isinstance(state, Idle):
            return [START_TEXT]
        if isinstance(state, Running):
            return []
        raise TypeError(f"unknown session state {state!r}")
