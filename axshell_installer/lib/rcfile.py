from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShellProfile:
    """The shell rc file as a configuration surface: read it, append to it."""

    path: Path
    dry_run: bool = False

    def read(self) -> str:
        if not self.path.exists():
            return ""
        return self.path.read_text(encoding="utf-8", errors="replace")

    def contains(self, needle: str) -> bool:
        return needle in self.read()

    def ensure_line(self, line: str, *, marker: Optional[str] = None) -> bool:
        """Append `line` unless it (or `marker`) is already present.

        Returns True if the file changed.
        """

        line = line.rstrip("\n")
        text = self.read()
        present = line in text.splitlines() or (marker is not None and marker in text)
        if present:
            logger.info("%s already configures: %s", self.path, marker or line)
            return False

        if self.dry_run:
            logger.info("Would append to %s: %s", self.path, line)
            return True

        self.path.parent.mkdir(parents=True, exist_ok=True)
        prefix = "" if not text or text.endswith("\n") else "\n"
        with self.path.open("a", encoding="utf-8") as f:
            f.write(f"{prefix}{line}\n")
        logger.info("Appended to %s: %s", self.path, line)
        return True


def ensure_rc_line(path: Path, line: str, *, marker: Optional[str] = None, dry_run: bool = False) -> bool:
    return ShellProfile(path=path, dry_run=dry_run).ensure_line(line, marker=marker)
