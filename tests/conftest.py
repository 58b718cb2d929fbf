from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Tuple

import pytest

from axshell_installer.errors import CommandError
from axshell_installer.install_config import InstallConfig
from axshell_installer.lib.command import CmdResult

# Every module that imports run_cmd / which / spawn_detached by name.
RUN_CMD_MODULES = [
    "axshell_installer.lib.pkg",
    "axshell_installer.lib.git",
    "axshell_installer.lib.build",
    "axshell_installer.lib.venv",
    "axshell_installer.lib.fonts",
    "axshell_installer.lib.systemd",
    "axshell_installer.lib.launch",
    "axshell_installer.steps.step_20_python_env",
]
WHICH_MODULES = [
    "axshell_installer.lib.pkg",
    "axshell_installer.lib.build",
    "axshell_installer.lib.launch",
]

Handler = Callable[[List[str], Optional[str]], Tuple[int, str]]


class FakeRunner:
    """Stands in for run_cmd: records argv and answers from registered handlers."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.cwds: List[Optional[str]] = []
        self._handlers: List[Tuple[Tuple[str, ...], Any]] = []
        self.binaries: set[str] = set()
        self.spawned: List[List[str]] = []

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", effect: Optional[Handler] = None) -> None:
        self._handlers.append((tuple(prefix), effect or (lambda argv, cwd: (returncode, stdout))))

    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Any = None,
        cwd: Optional[str] = None,
        input_text: Optional[str] = None,
        dry_run: bool = False,
    ) -> CmdResult:
        argv = list(argv)
        self.calls.append(argv)
        self.cwds.append(cwd)
        rc, out = 0, ""
        if not dry_run:
            # Later registrations win.
            for prefix, handler in reversed(self._handlers):
                if tuple(argv[: len(prefix)]) == prefix:
                    rc, out = handler(argv, cwd)
                    break
        result = CmdResult(argv=argv, returncode=rc, stdout=out, stderr="" if rc == 0 else "boom")
        if check and rc != 0:
            raise CommandError(f"Command failed ({rc})", result)
        return result

    def which(self, name: str, *, env: Any = None) -> Optional[str]:
        return f"/usr/bin/{name}" if name in self.binaries else None

    def spawn(self, argv: Sequence[str], **kwargs: Any) -> Optional[int]:
        self.spawned.append(list(argv))
        return 4242

    def commands(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if tuple(c[: len(prefix)]) == prefix]


@pytest.fixture
def fake_cmd(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    runner = FakeRunner()
    for mod in RUN_CMD_MODULES:
        monkeypatch.setattr(f"{mod}.run_cmd", runner)
    for mod in WHICH_MODULES:
        monkeypatch.setattr(f"{mod}.which", runner.which)
    monkeypatch.setattr("axshell_installer.lib.launch.spawn_detached", runner.spawn)
    return runner


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def small_config() -> InstallConfig:
    return InstallConfig(
        raw={
            "repo_url": "https://example.invalid/ax-shell.git",
            "paths": {},
            "packages": ["git", "cmake", "jq"],
            "pip_packages": ["psutil", "pywayland"],
            "tools": [
                {"name": "hyprpicker", "repo": "https://example.invalid/hyprpicker.git", "build": "cmake"},
                {"name": "hyprshot", "repo": "https://example.invalid/hyprshot.git", "build": "copy", "artifact": "hyprshot"},
            ],
            "fonts": [
                {"name": "Symbols", "url": "https://example.invalid/Symbols.ttf", "kind": "file"},
                {"name": "zed-sans", "url": "https://example.invalid/zed.zip", "kind": "zip"},
            ],
            "services": [
                {"name": "iwd", "enabled": False, "running": False},
                {"name": "NetworkManager", "enabled": True, "running": True},
            ],
            "rc_lines": [
                {"line": 'export PATH="$HOME/.local/bin:$PATH"', "marker": ".local/bin"},
                {"line": "alias ax-shell='{venv_python} {install_dir}/main.py'", "marker": "alias ax-shell="},
            ],
            "verify_imports": ["gi"],
        }
    )


class FakeSystemd:
    """Answers is-enabled/is-active and applies enable/disable/start/stop.

    units maps name -> [enabled, active]; absent names are unknown units.
    """

    def __init__(self) -> None:
        self.units: dict[str, list[bool]] = {}

    def install(self, runner: FakeRunner) -> None:
        runner.on("systemctl", "is-enabled", effect=self._is_enabled)
        runner.on("systemctl", "is-active", effect=self._is_active)
        runner.on("sudo", "systemctl", effect=self._toggle)

    def _is_enabled(self, argv: List[str], cwd: Optional[str]) -> Tuple[int, str]:
        u = self.units.get(argv[-1])
        if u is None:
            return 4, "not-found\n"
        return (0, "enabled\n") if u[0] else (1, "disabled\n")

    def _is_active(self, argv: List[str], cwd: Optional[str]) -> Tuple[int, str]:
        u = self.units.get(argv[-1])
        if u is None:
            return 4, "inactive\n"
        return (0, "active\n") if u[1] else (3, "inactive\n")

    def _toggle(self, argv: List[str], cwd: Optional[str]) -> Tuple[int, str]:
        verb, name = argv[2], argv[3]
        u = self.units[name]
        if verb in ("enable", "disable"):
            u[0] = verb == "enable"
        else:
            u[1] = verb == "start"
        return 0, ""


@pytest.fixture
def fake_systemd(fake_cmd: FakeRunner) -> FakeSystemd:
    sd = FakeSystemd()
    sd.install(fake_cmd)
    return sd
