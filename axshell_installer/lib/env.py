from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class InstallPaths:
    home: Path
    src_dir: Path
    bin_dir: Path
    fonts_dir: Path
    install_dir: Path
    venv_dir: Path
    rc_file: Path

    @classmethod
    def from_config(cls, raw: Mapping[str, str], *, home: Optional[Path] = None) -> "InstallPaths":
        """Build paths from the manifest's `paths` mapping.

        Values may use `~`; it expands against `home` (defaults to the real home).
        """

        h = Path(home) if home is not None else Path.home()

        def _p(key: str, default: str) -> Path:
            value = str(raw.get(key) or default)
            if value == "~" or value.startswith("~/"):
                return h / value[2:]
            return Path(value)

        return cls(
            home=h,
            src_dir=_p("src_dir", "~/.local/src"),
            bin_dir=_p("bin_dir", "~/.local/bin"),
            fonts_dir=_p("fonts_dir", "~/.local/share/fonts"),
            install_dir=_p("install_dir", "~/.config/Ax-Shell"),
            venv_dir=_p("venv_dir", "~/.ax-shell-venv"),
            rc_file=_p("rc_file", "~/.bashrc"),
        )

    @property
    def venv_python(self) -> Path:
        return self.venv_dir / "bin" / "python"

    @property
    def venv_pip(self) -> Path:
        return self.venv_dir / "bin" / "pip"

    def command_env(self) -> Dict[str, str]:
        """Environment overrides for child processes: bin_dir first on PATH."""

        current = os.environ.get("PATH", "")
        parts = [p for p in current.split(os.pathsep) if p]
        bin_dir = str(self.bin_dir)
        if bin_dir not in parts:
            parts.insert(0, bin_dir)
        return {"PATH": os.pathsep.join(parts)}
