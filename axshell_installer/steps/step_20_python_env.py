from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.command import run_cmd
from ..lib.venv import ensure_pip_packages, ensure_venv, missing_pip_packages

logger = logging.getLogger(__name__)


class PythonEnvStep:
    """Virtual environment (with system site packages for PyGObject) plus pip dependencies."""

    step_id = "20_python_env"
    fatal = False

    def is_satisfied(self, ctx: InstallCtx) -> bool:
        if not ctx.paths.venv_python.exists():
            return False
        return not missing_pip_packages(ctx.paths.venv_dir, ctx.cfg.pip_packages)

    def apply(self, ctx: InstallCtx) -> None:
        created = ensure_venv(ctx.paths.venv_dir, dry_run=ctx.dry_run)
        if created:
            run_cmd([str(ctx.paths.venv_pip), "install", "--upgrade", "pip"], dry_run=ctx.dry_run)
            logger.info("Virtual environment created at %s", ctx.paths.venv_dir)
        installed = ensure_pip_packages(ctx.paths.venv_dir, ctx.cfg.pip_packages, dry_run=ctx.dry_run)
        if installed:
            logger.info("Installed pip packages: %s", ", ".join(installed))
