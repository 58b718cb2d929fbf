from __future__ import annotations

import logging

from ..context import InstallCtx
from ..errors import CommandError
from ..lib.assets import copy_tree
from ..lib.git import ensure_repo
from ..lib.venv import pip_install_requirements

logger = logging.getLogger(__name__)


class InstallShellStep:
    """Ax-Shell checkout, its requirements.txt, and the fonts it bundles.

    Never reported as satisfied: an existing checkout is fast-forwarded on
    every run, and the sub-actions are idempotent.
    """

    step_id = "50_install_shell"
    fatal = False

    def is_satisfied(self, ctx: InstallCtx) -> bool:
        return False

    def apply(self, ctx: InstallCtx) -> None:
        install_dir = ctx.paths.install_dir
        how = ensure_repo(ctx.cfg.repo_url, install_dir, dry_run=ctx.dry_run)
        logger.info("Ax-Shell checkout %s: %s", how, install_dir)

        requirements = install_dir / "requirements.txt"
        if requirements.is_file():
            try:
                pip_install_requirements(ctx.paths.venv_dir, requirements, dry_run=ctx.dry_run)
            except CommandError as e:
                logger.warning("Some requirements failed to install: %s", e)
        else:
            logger.info("No requirements.txt in %s, using default dependencies", install_dir)

        bundled = install_dir / "assets" / "fonts"
        if bundled.is_dir():
            written = copy_tree(bundled, ctx.paths.fonts_dir, dry_run=ctx.dry_run)
            logger.info("Copied %d bundled font file(s)", written)
