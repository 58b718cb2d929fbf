from __future__ import annotations

import logging

from ..context import InstallCtx
from ..errors import StepError
from ..lib.launch import launch_shell, run_first_time_config

logger = logging.getLogger(__name__)


class LaunchShellStep:
    step_id = "90_launch"
    fatal = False

    def is_satisfied(self, ctx: InstallCtx) -> bool:
        return False

    def apply(self, ctx: InstallCtx) -> None:
        install_dir = ctx.paths.install_dir
        if not ctx.dry_run and not (install_dir / "main.py").is_file():
            raise StepError(f"{install_dir / 'main.py'} missing; not launching")

        python = ctx.paths.venv_python
        run_first_time_config(python, install_dir, dry_run=ctx.dry_run)
        launch_shell(python, install_dir, env=ctx.env, dry_run=ctx.dry_run)
