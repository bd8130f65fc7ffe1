"""Tests for codetyper.core.controller – event handling, retry and results."""

from __future__ import annotations

from pathlib import Path
from typing import List

import pytest

from codetyper.core.config import Config
from codetyper.core.controller import (
    START_TEXT,
    TRY_AGAIN_TEXT,
    SessionController,
    format_result,
    result_lines,
)
from codetyper.core.errors import NoFilesFound
from codetyper.core.events import Backspace, Char, DeleteWord, Quit, Resize, Start
from codetyper.core.session import Finished, Idle, Running, SessionStats


class FakeSampler:
    """Returns prepared word lists in order, or raises once they run out."""

    def __init__(self, *samples: List[str]) -> None:
        self._samples = list(samples)
        self.calls = []

    def sample(self, config, max_chars):
        self.calls.append(max_chars)
        if not self._samples:
            raise NoFilesFound()
        return self._samples.pop(0)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _type(controller: SessionController, text: str) -> None:
    for c in text:
        controller.handle(Char(c))


@pytest.fixture()
def config() -> Config:
    return Config(project_path=Path("/"), word_count=2)


def _controller(config, *samples, **kwargs) -> SessionController:
    return SessionController(config, 80, 24, sampler=FakeSampler(*samples), clock=FakeClock(), **kwargs)


STATS = SessionStats(elapsed=42.7, wpm=31, cpm=155, mistakes=3, word_count=10, accuracy=94.5)


# ---------------------------------------------------------------------------
# Result text
# ---------------------------------------------------------------------------

class TestResultText:
    def test_format(self):
        assert format_result(STATS) == (
            "time: 42 seconds | wpm: 31 (cpm: 155) | mistakes: 3 | "
            "accuracy: 94.50% | word count: 10"
        )

    def test_accuracy_too_low(self):
        assert format_result(STATS, min_accuracy=95.0) == "Accuracy too low (94.50%)"

    def test_accuracy_at_threshold_shows_stats(self):
        assert format_result(STATS, min_accuracy=94.5).startswith("time:")

    def test_wide_screen_keeps_lines_whole(self):
        lines = result_lines(STATS, None, 200)
        assert lines == [format_result(STATS), " ", TRY_AGAIN_TEXT]

    def test_narrow_screen_splits_on_pipes(self):
        lines = result_lines(STATS, None, 40)
        assert lines[:5] == [
            "time: 42 seconds",
            "wpm: 31 (cpm: 155)",
            "mistakes: 3",
            "accuracy: 94.50%",
            "word count: 10",
        ]
        assert lines[5] == " "
        assert lines[6:] == ["Try again? Y(es)", "N(no)", "R(etry same words)"]


# ---------------------------------------------------------------------------
# Event handling
# ---------------------------------------------------------------------------

class TestHandle:
    def test_samples_with_screen_budget(self, config):
        sampler = FakeSampler(["ab", "cd"])
        SessionController(config, 80, 24, sampler=sampler)
        assert sampler.calls == [80 * 24]

    def test_typing_reaches_session(self, config):
        c = _controller(config, ["ab", "cd"])
        _type(c, "ab c")
        assert c.session.input == "ab c"

    def test_backspace_and_delete_word(self, config):
        c = _controller(config, ["ab", "cd"])
        _type(c, "ab c")
        c.handle(Backspace())
        assert c.session.input == "ab "
        c.handle(DeleteWord())
        assert c.session.input == ""

    def test_quit(self, config):
        c = _controller(config, ["ab", "cd"])
        c.handle(Quit())
        assert c.should_quit

    def test_resize_changes_budget(self, config):
        sampler = FakeSampler(["ab", "cd"], ["ef", "gh"])
        c = SessionController(config, 80, 24, sampler=sampler, clock=FakeClock())
        c.handle(Resize(10, 5))
        _type(c, "ab cd")
        c.handle(Char("y"))
        assert sampler.calls == [80 * 24, 50]

    def test_waits_for_first_key(self, config):
        c = _controller(config, ["ab", "cd"], wait_for_first_key=True)
        assert isinstance(c.session.state, Idle)
        assert c.status_lines() == [START_TEXT]
        c.handle(Char("x"))
        assert isinstance(c.session.state, Running)
        assert c.session.input == ""

    def test_enter_starts_idle_session(self, config):
        c = _controller(config, ["ab", "cd"], wait_for_first_key=True)
        c.handle(Start())
        assert isinstance(c.session.state, Running)
        assert c.status_lines() == []


# ---------------------------------------------------------------------------
# Finished screen
# ---------------------------------------------------------------------------

class TestFinishedScreen:
    def _finished(self, config, *extra):
        c = _controller(config, ["ab", "cd"], *extra)
        _type(c, "ab cd")
        assert isinstance(c.session.state, Finished)
        return c

    def test_status_shows_results(self, config):
        c = self._finished(config)
        lines = c.status_lines()
        assert lines[0].startswith("time: 0 seconds")
        assert lines[-1] == TRY_AGAIN_TEXT

    def test_retry_same_words(self, config):
        c = self._finished(config)
        old = c.session
        c.handle(Char("r"))
        assert c.session is not old
        assert c.words == ["ab", "cd"]
        assert isinstance(c.session.state, Running)
        assert c.session.mistakes == 0

    def test_yes_resamples(self, config):
        c = self._finished(config, ["ef", "gh"])
        c.handle(Char("y"))
        assert c.words == ["ef", "gh"]
        assert c.session.text == "ef gh"
        assert isinstance(c.session.state, Running)

    def test_resampled_session_starts_once(self, config):
        clock = FakeClock()
        c = SessionController(config, 80, 24, sampler=FakeSampler(["ab", "cd"], ["ef", "gh"]), clock=clock)
        _type(c, "ab cd")
        clock.now = 7.0
        c.handle(Char("y"))
        assert c.session.state == Running(7.0)

    def test_resample_failure_keeps_results(self, config):
        c = self._finished(config)
        old = c.session
        c.handle(Char("y"))
        assert c.session is old
        assert c.error == "No code files found"
        assert c.status_lines()[0] == "Error: No code files found"

    def test_no_quits(self, config):
        c = self._finished(config)
        c.handle(Char("n"))
        assert c.should_quit

    def test_other_keys_ignored(self, config):
        c = self._finished(config)
        old = c.session
        c.handle(Char("x"))
        assert c.session is old
        assert not c.should_quit

    def test_min_accuracy_hides_results(self):
        config = Config(project_path=Path("/"), word_count=2, min_accuracy=99.0)
        c = _controller(config, ["ab", "cd"])
        _type(c, "xb cd ")
        assert c.status_lines()[0] == "Accuracy too low (80.00%)"
