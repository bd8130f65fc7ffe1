"""Key events fed from the UI into the session controller."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Char:
    char: str


@dataclass(frozen=True)
class Backspace:
    pass


@dataclass(frozen=True)
class DeleteWord:
    pass


@dataclass(frozen=True)
class Resize:
    columns: int
    rows: int


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class Quit:
    pass


Event = Union[Char, Backspace, DeleteWord, Resize, Start, Quit]
