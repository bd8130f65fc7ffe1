from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from codetyper.core.errors import InvalidConfig, PathMissing, ZeroWordCount

logger = logging.getLogger(__name__)

DEFAULT_WORD_COUNT = 10
DEFAULT_EXTENSION = "rs"

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class Theme:
    """Colors used to paint the target text, as #RRGGBB strings."""

    background: str = "#1E1E1E"
    correct: str = "#4F8DF5"
    wrong: str = "#E05252"
    skipped: str = "#6B6B6B"
    extra: str = "#C9A227"
    pending: str = "#F0F0F0"
    cursor_foreground: str = "#1E1E1E"
    cursor_background: str = "#F0F0F0"

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, str) or not _HEX_COLOR.match(value):
                raise InvalidConfig(f"theme.{f.name}: expected #RRGGBB color, got {value!r}")


@dataclass(frozen=True)
class Config:
    """Validated settings for one run of the typing trainer."""

    project_path: Optional[Path]
    file_extension: str = DEFAULT_EXTENSION
    word_count: int = DEFAULT_WORD_COUNT
    strict: bool = False
    skip_word_on_space: bool = False
    min_accuracy: Optional[float] = None
    theme: Theme = field(default_factory=Theme)

    def __post_init__(self) -> None:
        if self.project_path is None or str(self.project_path) == "":
            raise PathMissing()
        object.__setattr__(self, "project_path", Path(self.project_path))
        if self.file_extension.startswith("."):
            object.__setattr__(self, "file_extension", self.file_extension[1:])
        if self.word_count == 0:
            raise ZeroWordCount()
        if self.word_count < 0:
            raise InvalidConfig(f"word count must be positive, got {self.word_count}")
        if self.min_accuracy is not None and not 0.0 <= self.min_accuracy <= 100.0:
            raise InvalidConfig(f"min accuracy must be between 0 and 100, got {self.min_accuracy}")

    def with_overrides(self, **overrides: Any) -> "Config":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def load_settings(path: Path) -> Dict[str, Any]:
    """Read a YAML settings file into keyword arguments for :class:`Config`.

    Unknown keys are ignored with a warning. ``project_path`` is not read from
    the file; it always comes from the command line.
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError) as e:
        raise InvalidConfig(f"{path.name}: could not read settings: {e}") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise InvalidConfig(f"{path.name}: expected a mapping of settings")

    settings: Dict[str, Any] = {}
    for key, value in raw.items():
        if key == "word_count":
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidConfig(f"{path.name}: 'word_count' must be an integer")
            settings[key] = value
        elif key == "file_extension":
            if not isinstance(value, str) or not value.strip():
                raise InvalidConfig(f"{path.name}: 'file_extension' must be a non-empty string")
            settings[key] = value.strip()
        elif key in ("strict", "skip_word_on_space"):
            if not isinstance(value, bool):
                raise InvalidConfig(f"{path.name}: '{key}' must be true or false")
            settings[key] = value
        elif key == "min_accuracy":
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                raise InvalidConfig(f"{path.name}: 'min_accuracy' must be a number")
            settings[key] = None if value is None else float(value)
        elif key == "theme":
            if not isinstance(value, dict):
                raise InvalidConfig(f"{path.name}: 'theme' must be a mapping of colors")
            known = {f.name for f in fields(Theme)}
            unknown = sorted(set(value) - known)
            if unknown:
                logger.warning("%s: ignoring unknown theme keys %s", path.name, ", ".join(unknown))
            settings[key] = Theme(**{k: v for k, v in value.items() if k in known})
        else:
            logger.warning("%s: ignoring unknown setting %r", path.name, key)
    return settings
