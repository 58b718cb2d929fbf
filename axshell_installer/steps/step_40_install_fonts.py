from __future__ import annotations

import logging

from ..context import InstallCtx
from ..errors import StepError
from ..lib.fonts import ensure_fonts

logger = logging.getLogger(__name__)


class InstallFontsStep:
    step_id = "40_install_fonts"
    fatal = False

    def is_satisfied(self, ctx: InstallCtx) -> bool:
        return all(f.target.exists() for f in ctx.cfg.fonts(ctx.paths))

    def apply(self, ctx: InstallCtx) -> None:
        installed, failed = ensure_fonts(ctx.cfg.fonts(ctx.paths), dry_run=ctx.dry_run)
        if installed:
            logger.info("Fonts installed: %s", ", ".join(installed))
        if failed:
            raise StepError(f"font download failed: {', '.join(failed)}")
