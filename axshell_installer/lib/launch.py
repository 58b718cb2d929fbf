from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional

from .command import run_cmd, spawn_detached, which

logger = logging.getLogger(__name__)


def shell_argv(python: Path, install_dir: Path, *, env: Mapping[str, str] | None = None) -> List[str]:
    argv = [str(python), str(install_dir / "main.py")]
    if which("uwsm", env=env):
        # Let the session manager own the process (scope unit, env import).
        return ["uwsm", "app", "--", *argv]
    return argv


def run_first_time_config(python: Path, install_dir: Path, *, dry_run: bool = False) -> bool:
    """Run the shell's own config/config.py if it ships one. Returns False on failure."""

    script = install_dir / "config" / "config.py"
    if not script.is_file():
        logger.warning("Configuration script not found: %s", script)
        return False
    r = run_cmd([str(python), str(script)], check=False, cwd=str(install_dir), dry_run=dry_run)
    if not r.ok:
        logger.warning("Configuration script exited with %s", r.returncode)
    return r.ok


def launch_shell(
    python: Path,
    install_dir: Path,
    *,
    process_pattern: Optional[str] = None,
    env: Mapping[str, str] | None = None,
    dry_run: bool = False,
) -> Optional[int]:
    """Stop a running instance and start the shell detached. Returns the pid."""

    # Match on the script path so the installer itself (ax-shell-install) is never hit.
    pattern = process_pattern or str(install_dir / "main.py")
    run_cmd(["pkill", "-f", pattern], check=False, dry_run=dry_run)
    argv = shell_argv(python, install_dir, env=env)
    pid = spawn_detached(argv, env=env, cwd=str(install_dir), dry_run=dry_run)
    logger.info("Shell started%s (pid=%s)", " with uwsm" if argv[0] == "uwsm" else "", pid)
    return pid
