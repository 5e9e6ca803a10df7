from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

# Third-party loggers that only reach the console at WARNING and above.
_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "httpx", "httpcore")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the console readable:
    - allow every taskboard log
    - allow uvicorn's own startup/shutdown lines
    - everything else only at WARNING+
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == "taskboard" or name.startswith("taskboard."):
            return True
        if name.startswith("uvicorn.error"):
            return True
        return record.levelno >= logging.WARNING


def setup_logging(
    *,
    level: int = logging.INFO,
    log_file: Optional[str | Path] = None,
) -> None:
    """
    Configure logging with:
    - Console handler: filtered for interactive use
    - File handler (optional): everything at DEBUG

    Call this ONCE, before the app starts serving.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_file), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
