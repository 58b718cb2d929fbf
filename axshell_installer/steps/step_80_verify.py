from __future__ import annotations

import logging

from ..context import InstallCtx
from ..lib.build import is_installed
from ..lib.venv import can_import
from ..report import InstallationReport

logger = logging.getLogger(__name__)


def verify_and_report(ctx: InstallCtx) -> InstallationReport:
    """Re-check every expected component and record it in ctx.report."""

    report = ctx.report
    paths = ctx.paths

    report.record("venv", paths.venv_python.exists())
    for spec in ctx.cfg.tools(paths):
        report.record(spec.name, is_installed(spec, paths, env=ctx.env))
    for module in ctx.cfg.verify_imports:
        report.record(f"import {module}", can_import(paths.venv_dir, module))
    for font in ctx.cfg.fonts(paths):
        report.record(f"font {font.name}", font.target.exists())
    report.record("ax-shell", (paths.install_dir / "main.py").is_file())
    return report


class VerifyStep:
    step_id = "80_verify"
    fatal = False

    def is_satisfied(self, ctx: InstallCtx) -> bool:
        return False

    def apply(self, ctx: InstallCtx) -> None:
        report = verify_and_report(ctx)
        for line in report.render().splitlines():
            logger.info("%s", line)
        if report.failed:
            logger.warning("Missing components may need manual installation: %s", ", ".join(report.failed))
