from __future__ import annotations

import logging
from typing import List

from ..context import InstallCtx
from ..lib.build import ToolSpec, build_tool, is_installed

logger = logging.getLogger(__name__)


class BuildToolStep:
    """Clone or update one tool from source and build/install it."""

    fatal = False

    def __init__(self, spec: ToolSpec) -> None:
        self.spec = spec
        self.step_id = f"30_build_{spec.name}"

    def is_satisfied(self, ctx: InstallCtx) -> bool:
        return is_installed(self.spec, ctx.paths, env=ctx.env)

    def apply(self, ctx: InstallCtx) -> None:
        how = build_tool(self.spec, ctx.paths, env=ctx.env, dry_run=ctx.dry_run)
        if how == "fallback":
            logger.warning("%s installed from pre-built binary", self.spec.name)


def build_tool_steps(ctx: InstallCtx) -> List[BuildToolStep]:
    return [BuildToolStep(spec) for spec in ctx.cfg.tools(ctx.paths)]
