"""Application entry point and setup for codetyper."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from codetyper import __version__
from codetyper.core.config import DEFAULT_WORD_COUNT, Config, load_settings
from codetyper.core.controller import SessionController
from codetyper.core.errors import CodeTyperError
from codetyper.ui.main_window import MainWindow
from codetyper.ui.typing_widgets import grid_size, monospace_font


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _word_count(value: str) -> int:
    try:
        count = int(value)
    except ValueError:
        logging.warning(f"Invalid word count {value!r}, using {DEFAULT_WORD_COUNT}")
        return DEFAULT_WORD_COUNT
    if count < 0:
        logging.warning(f"Invalid word count {value!r}, using {DEFAULT_WORD_COUNT}")
        return DEFAULT_WORD_COUNT
    return count


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="codetyper",
        description="Practice typing on words sampled from the source files of a project.",
    )
    parser.add_argument("-p", "--path", type=Path, help="root directory of the project to sample from")
    parser.add_argument("-w", "--words", type=_word_count, help=f"number of words (default {DEFAULT_WORD_COUNT})")
    parser.add_argument("-t", "--type", dest="file_extension", help="file extension to sample, e.g. rs or .py")
    parser.add_argument("--strict", action="store_true", default=None, help="require an exact match to finish")
    parser.add_argument(
        "--skip-word",
        dest="skip_word_on_space",
        action="store_true",
        default=None,
        help="a space in the middle of a word skips to the next word",
    )
    parser.add_argument("--min-accuracy", type=float, help="hide results below this accuracy (0-100)")
    parser.add_argument("--config", type=Path, help="YAML settings file")
    parser.add_argument("--wait", action="store_true", help="wait for a key press before starting")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Merge the settings file (if any) and command-line flags into a Config."""
    settings: Dict[str, Any] = {}
    if args.config is not None:
        settings.update(load_settings(args.config))
    overrides = {
        "word_count": args.words,
        "file_extension": args.file_extension,
        "strict": args.strict,
        "skip_word_on_space": args.skip_word_on_space,
        "min_accuracy": args.min_accuracy,
    }
    return Config(project_path=args.path, **settings).with_overrides(**overrides)


def run(argv: Optional[List[str]] = None) -> None:
    """Parse arguments, sample the first words, and start the main window."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    app = QApplication(sys.argv[:1])
    app.setApplicationName("codetyper")
    app.setApplicationDisplayName("codetyper")

    screen = QGuiApplication.primaryScreen()
    geometry = screen.availableGeometry() if screen is not None else None
    if geometry is not None:
        columns, rows = grid_size(geometry.size(), monospace_font())
    else:
        columns, rows = 80, 24

    try:
        config = build_config(args)
        controller = SessionController(config, columns, rows, wait_for_first_key=args.wait)
    except CodeTyperError as e:
        parser.print_usage(sys.stderr)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    window = MainWindow(controller)
    if geometry is not None:
        window.setGeometry(geometry)
    window.show()

    sys.exit(app.exec())
