from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.pkg import dpkg_missing, ensure_packages

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "10_install_packages"
    fatal = False

    def is_satisfied(self, ctx: InstallCtx) -> bool:
        return not dpkg_missing(ctx.cfg.packages)

    def apply(self, ctx: InstallCtx) -> None:
        failed = ensure_packages(ctx.cfg.packages, dry_run=ctx.dry_run)
        if failed:
            # Tolerated: dependent builds may still succeed without them.
            logger.warning("%d package(s) not installed: %s", len(failed), ", ".join(failed))
