from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict

from .install_config import InstallConfig
from .lib.env import InstallPaths
from .lib.rcfile import ShellProfile
from .report import InstallationReport


@dataclass(frozen=True)
class InstallCtx:
    cfg: InstallConfig
    paths: InstallPaths
    dry_run: bool = False
    force: bool = False
    report: InstallationReport = field(default_factory=InstallationReport)
    # Overrides for child processes (PATH with bin_dir first).
    env: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(cls, cfg: InstallConfig, paths: InstallPaths, *, dry_run: bool = False, force: bool = False) -> "InstallCtx":
        return cls(cfg=cfg, paths=paths, dry_run=dry_run, force=force, env=paths.command_env())

    @property
    def shell_profile(self) -> ShellProfile:
        return ShellProfile(path=self.paths.rc_file, dry_run=self.dry_run)
