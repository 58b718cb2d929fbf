from __future__ import annotations

import logging
import os
from pathlib import Path

DEFAULT_LOG_PATH = "~/.local/state/ax-shell-installer/install.log"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
CONSOLE_FORMAT = "%(levelname)s %(message)s"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Attach the installer's two handlers to the root logger, once per process.

    The file handler keeps timestamps and logger names so a failed install can
    be traced command by command (`CMD ...` lines, DEBUG output included when
    `level` allows). The console handler prints only level and message, which
    is what the user watches during the run. An unwritable `log_path` falls
    back to `ax-shell-installer.log` in the working directory.

    Returns the log file actually in use.
    """

    root = logging.getLogger()
    root.setLevel(level)

    # Second call in the same process: handlers are already attached.
    if hasattr(root, "_axshell_log_path"):
        return getattr(root, "_axshell_log_path")

    requested = Path(os.path.expanduser(log_path))
    try:
        requested.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(requested)
        log_file = str(requested)
    except OSError:
        log_file = str(Path.cwd() / "ax-shell-installer.log")
        file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(
        logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
    )
    root.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        root.addHandler(console)

    setattr(root, "_axshell_log_path", log_file)
    logging.getLogger(__name__).info("Logging to %s (requested %s)", log_file, requested)
    return log_file
