from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, List, Set

from .command import run_cmd

logger = logging.getLogger(__name__)


def _normalize(name: str) -> str:
    return re.sub(r"[-_.]+", "-", name).lower()


def ensure_venv(venv_dir: Path, *, system_site_packages: bool = True, dry_run: bool = False) -> bool:
    """Create the virtual environment if it does not exist yet. Returns True if created."""

    if (venv_dir / "bin" / "python").exists():
        logger.info("Virtual environment present: %s", venv_dir)
        return False

    argv = ["python3", "-m", "venv", str(venv_dir)]
    if system_site_packages:
        # PyGObject comes from the distro (python3-gi), not from pip.
        argv.append("--system-site-packages")
    run_cmd(argv, dry_run=dry_run)
    return True


def pip_installed(venv_dir: Path, names: Iterable[str]) -> Set[str]:
    """Return the normalized names `pip show` reports as installed."""

    names = list(names)
    if not names:
        return set()
    r = run_cmd([str(venv_dir / "bin" / "pip"), "show", *names], check=False)
    found: set[str] = set()
    for line in r.stdout.splitlines():
        if line.startswith("Name:"):
            found.add(_normalize(line.split(":", 1)[1].strip()))
    return found


def missing_pip_packages(venv_dir: Path, names: Iterable[str]) -> List[str]:
    wanted = [str(n).strip() for n in names if str(n).strip()]
    have = pip_installed(venv_dir, wanted)
    return [n for n in wanted if _normalize(n) not in have]


def ensure_pip_packages(venv_dir: Path, names: Iterable[str], *, dry_run: bool = False) -> List[str]:
    """Install the pip packages not present in the venv. Returns what was installed."""

    wanted = [str(n).strip() for n in names if str(n).strip()]
    todo = wanted if dry_run else missing_pip_packages(venv_dir, wanted)
    if not todo:
        logger.info("All %d pip packages already installed", len(wanted))
        return []
    run_cmd([str(venv_dir / "bin" / "pip"), "install", *todo], dry_run=dry_run)
    return todo


def pip_install_requirements(venv_dir: Path, requirements: Path, *, dry_run: bool = False) -> None:
    run_cmd([str(venv_dir / "bin" / "pip"), "install", "-r", str(requirements)], dry_run=dry_run)


def python_ok(venv_dir: Path, code: str) -> bool:
    """Run `code` with the venv interpreter; True when it exits 0."""

    python = venv_dir / "bin" / "python"
    if not python.exists():
        return False
    return run_cmd([str(python), "-c", code], check=False).ok


def can_import(venv_dir: Path, module: str) -> bool:
    return python_ok(venv_dir, f"import {module}")
