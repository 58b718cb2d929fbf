from __future__ import annotations

import argparse
import logging
import os
from typing import List, Optional, Tuple

import yaml

from .context import InstallCtx
from .errors import FatalPreconditionError, InstallerError
from .install_config import load_install_config
from .lib.pkg import has_package_manager
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import PipelineResult, Step, run_pipeline
from .report import InstallationReport, save_report
from .steps import (
    ConfigureEnvironmentStep,
    ConfigureServicesStep,
    InstallFontsStep,
    InstallPackagesStep,
    InstallShellStep,
    LaunchShellStep,
    PythonEnvStep,
    VerifyStep,
    build_tool_steps,
)

logger = logging.getLogger(__name__)


def check_preconditions() -> None:
    """Fatal checks; nothing has been touched when these fail."""

    if hasattr(os, "geteuid") and os.geteuid() == 0:
        raise FatalPreconditionError(
            "Do not run the installer as root; it uses sudo where needed and installs into your home"
        )
    if not has_package_manager():
        raise FatalPreconditionError("No supported package manager found (apt-get/dpkg-query)")


def build_steps(ctx: InstallCtx, *, launch: bool = True) -> List[Step]:
    steps: List[Step] = [
        InstallPackagesStep(),
        PythonEnvStep(),
        *build_tool_steps(ctx),
        InstallFontsStep(),
        InstallShellStep(),
        ConfigureServicesStep(),
        ConfigureEnvironmentStep(),
        VerifyStep(),
    ]
    if launch:
        steps.append(LaunchShellStep())
    return steps


def _prepare_dirs(ctx: InstallCtx) -> None:
    if ctx.dry_run:
        return
    for p in (ctx.paths.src_dir, ctx.paths.bin_dir, ctx.paths.fonts_dir):
        p.mkdir(parents=True, exist_ok=True)


def run(
    *,
    config_path: Optional[str] = None,
    log_path: str = DEFAULT_LOG_PATH,
    report_path: Optional[str] = None,
    start_at: Optional[str] = None,
    stop_after: Optional[str] = None,
    force: bool = False,
    dry_run: bool = False,
    launch: bool = True,
) -> Tuple[PipelineResult, InstallationReport]:
    """Run the provisioning pipeline once, top to bottom."""

    actual_log_path = configure_logging(log_path=log_path)

    check_preconditions()

    try:
        cfg = load_install_config(config_path)
        paths = cfg.paths()
        cfg.validate(paths)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise FatalPreconditionError(f"Invalid install config: {e}") from e

    ctx = InstallCtx.create(cfg, paths, dry_run=dry_run, force=force)
    _prepare_dirs(ctx)

    logger.info("Installing Ax-Shell from %s into %s", cfg.repo_url, ctx.paths.install_dir)
    result = run_pipeline(
        ctx=ctx,
        steps=build_steps(ctx, launch=launch and cfg.launch),
        start_at=start_at,
        stop_after=stop_after,
    )

    logger.info(
        "Done: %d ran, %d skipped, %d failed%s",
        len(result.ran_steps),
        len(result.skipped_steps),
        len(result.failed_steps),
        f" ({', '.join(result.failed_steps)})" if result.failed_steps else "",
    )
    logger.info("Config: %s", ctx.paths.install_dir)
    logger.info("Virtual env: %s", ctx.paths.venv_dir)
    logger.info("Fonts: %s", ctx.paths.fonts_dir)
    logger.info("Log: %s", actual_log_path)

    if report_path:
        save_report(
            report_path,
            ctx.report,
            extra={"steps": {o.step_id: o.status.value for o in result.outcomes}},
        )
    return result, ctx.report


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="ax-shell-install")
    p.add_argument("--config", default=None, help="YAML file overriding the default manifest")
    p.add_argument("--log", default=DEFAULT_LOG_PATH, help="Path to installer log")
    p.add_argument("--report", default=None, help="Write the component report here (json|yaml)")
    p.add_argument("--start-at", default=None, help="Start at step_id (e.g. 40_install_fonts)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id")
    p.add_argument("--force", action="store_true", help="Run steps even if already satisfied")
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--no-launch", action="store_true", help="Do not start Ax-Shell at the end")

    args = p.parse_args(argv)

    try:
        run(
            config_path=args.config,
            log_path=args.log,
            report_path=args.report,
            start_at=args.start_at,
            stop_after=args.stop_after,
            force=bool(args.force),
            dry_run=bool(args.dry_run),
            launch=not args.no_launch,
        )
    except InstallerError as e:
        # Precondition failures and steps flagged fatal.
        logger.error("%s", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
