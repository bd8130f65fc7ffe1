"""Sampling practice words from source files under a project directory."""

from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from codetyper.core.config import Config
from codetyper.core.errors import InsufficientWords, InvalidConfig, NoFilesFound

logger = logging.getLogger(__name__)

COMMENT_MARKER = "//"


@dataclass
class SourceFiles:
    """Files found under a project root, plus entries that could not be visited."""

    paths: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


def find_source_files(root: Path, extension: str) -> SourceFiles:
    """Recursively list regular files under ``root`` whose extension is ``extension``.

    The comparison is case-sensitive. Directories that cannot be listed are
    recorded in ``skipped`` and otherwise ignored. Symlinks are not followed.
    """
    if extension.startswith("."):
        extension = extension[1:]
    result = SourceFiles()
    root = Path(root)

    if root.is_file():
        # A single file is its own candidate list.
        if not root.is_symlink() and root.suffix and root.suffix[1:] == extension:
            result.paths.append(root)
        return result

    def _on_error(error: OSError) -> None:
        skipped = Path(error.filename) if error.filename else Path(root)
        logger.warning("Skipping %s: %s", skipped, error.strerror or error)
        result.skipped.append(skipped)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_error):
        dirnames.sort()
        for name in sorted(filenames):
            path = Path(dirpath) / name
            if path.is_symlink() or not path.is_file():
                continue
            if path.suffix and path.suffix[1:] == extension:
                result.paths.append(path)
    return result


def code_to_words(code: str) -> List[str]:
    """Split source text into whitespace-separated words, dropping ``//`` comments.

    Only the rest of the physical line after a ``//`` is removed; there is no
    awareness of block comments or string literals.
    """
    words: List[str] = []
    for line in code.split("\n"):
        pos = line.find(COMMENT_MARKER)
        if pos != -1:
            line = line[:pos]
        words.extend(line.split())
    return words


def choose_words(words: List[str], word_count: int, rng: random.Random) -> List[str]:
    """Pick a uniformly random contiguous run of ``word_count`` words."""
    if word_count > len(words):
        raise InsufficientWords()
    start = rng.randint(0, len(words) - word_count)
    return words[start:start + word_count]


class CorpusSampler:
    """Draws one session's worth of words from a randomly chosen source file.

    Files are tried without replacement, so sampling always terminates. Files
    that cannot be read are remembered in :attr:`skipped` together with the
    directories the walk could not enter.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self.skipped: List[Path] = []

    def sample(self, config: Config, max_chars: int) -> List[str]:
        if config.word_count < 1:
            raise InvalidConfig(f"word count must be positive, got {config.word_count}")

        found = find_source_files(config.project_path, config.file_extension)
        self.skipped = list(found.skipped)
        candidates = list(found.paths)
        if not candidates:
            raise NoFilesFound()
        logger.info(
            "Found %d .%s files under %s", len(candidates), config.file_extension, config.project_path
        )

        while candidates:
            path = candidates.pop(self._rng.randrange(len(candidates)))
            try:
                code = path.read_text(encoding="utf-8").strip()
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Could not read %s: %s", path, e)
                self.skipped.append(path)
                continue
            if len(code) > max_chars:
                code = code[:max(max_chars, 0)]

            words = code_to_words(code)
            if len(words) < config.word_count:
                logger.debug("%s has %d words, need %d", path, len(words), config.word_count)
                continue

            logger.info("Sampling %d words from %s", config.word_count, path)
            return choose_words(words, config.word_count, self._rng)

        raise InsufficientWords()


def sample_words(config: Config, max_chars: int, rng: Optional[random.Random] = None) -> List[str]:
    """Convenience wrapper around :meth:`CorpusSampler.sample`."""
    return CorpusSampler(rng).sample(config, max_chars)
