from __future__ import annotations

import logging

from ..context import InstallCtx

logger = logging.getLogger(__name__)


class ConfigureEnvironmentStep:
    """PATH entry and the ax-shell alias in the user's shell rc file."""

    step_id = "70_configure_environment"
    fatal = False

    def is_satisfied(self, ctx: InstallCtx) -> bool:
        profile = ctx.shell_profile
        text = profile.read()
        for rc in ctx.cfg.rc_lines(ctx.paths):
            if rc.line in text.splitlines():
                continue
            if rc.marker and rc.marker in text:
                continue
            return False
        return True

    def apply(self, ctx: InstallCtx) -> None:
        profile = ctx.shell_profile
        changed = 0
        for rc in ctx.cfg.rc_lines(ctx.paths):
            if profile.ensure_line(rc.line, marker=rc.marker):
                changed += 1
        if changed:
            logger.info("Updated %s; run `source %s` or open a new terminal", profile.path, profile.path)
