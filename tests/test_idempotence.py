"""Two consecutive runs over a simulated system: the second must change nothing."""
from __future__ import annotations

import os
import shutil
from pathlib import Path

import pytest

from axshell_installer.context import InstallCtx
from axshell_installer.lib.env import InstallPaths
from axshell_installer.main import build_steps
from axshell_installer.pipeline import StepStatus, run_pipeline


class FakeHost:
    """Just enough of dpkg, pip, git, cmake, curl and unzip to drive a full run."""

    def __init__(self, fake_cmd, paths: InstallPaths) -> None:
        self.cmd = fake_cmd
        self.paths = paths
        self.debs: set[str] = set()
        self.wheels: set[str] = set()
        self.importable: set[str] = {"gi"}

        pip = str(paths.venv_pip)
        python = str(paths.venv_python)
        fake_cmd.on("dpkg-query", effect=self._dpkg_query)
        fake_cmd.on("apt-cache", "show", stdout="Package: x\n")
        fake_cmd.on("sudo", "DEBIAN_FRONTEND=noninteractive", effect=self._apt_install)
        fake_cmd.on("python3", "-m", "venv", effect=self._make_venv)
        fake_cmd.on(pip, "show", effect=self._pip_show)
        fake_cmd.on(pip, "install", effect=self._pip_install)
        fake_cmd.on(python, "-c", effect=self._python_import)
        fake_cmd.on("git", "clone", effect=self._clone)
        fake_cmd.on("sudo", "cmake", "--install", effect=self._cmake_install)
        fake_cmd.on("install", effect=self._install_file)
        fake_cmd.on("curl", effect=self._curl)
        fake_cmd.on("unzip", effect=self._unzip)

    def _dpkg_query(self, argv, cwd):
        lines = [f"{p}\tinstall ok installed" for p in argv[3:] if p in self.debs]
        return 0, "\n".join(lines) + "\n"

    def _apt_install(self, argv, cwd):
        self.debs.update(argv[5:])
        return 0, ""

    def _make_venv(self, argv, cwd):
        bindir = Path(argv[3]) / "bin"
        bindir.mkdir(parents=True)
        (bindir / "python").write_text("")
        (bindir / "pip").write_text("")
        return 0, ""

    def _pip_show(self, argv, cwd):
        found = [n for n in argv[2:] if n in self.wheels]
        return (0 if len(found) == len(argv) - 2 else 1), "".join(f"Name: {n}\n" for n in found)

    def _pip_install(self, argv, cwd):
        if argv[2:] == ["."]:
            self.importable.add(Path(cwd).name.replace("-", "_"))
        elif argv[2] not in ("-r", "--upgrade"):
            self.wheels.update(argv[2:])
        return 0, ""

    def _python_import(self, argv, cwd):
        return (0 if argv[2].split()[-1] in self.importable else 1), ""

    def _clone(self, argv, cwd):
        dest = Path(argv[-1])
        (dest / ".git").mkdir(parents=True)
        for name in ("CMakeLists.txt", "hyprshot", "main.py"):
            (dest / name).write_text("x\n")
        return 0, ""

    def _cmake_install(self, argv, cwd):
        self.cmd.binaries.add(Path(cwd).name)
        return 0, ""

    def _install_file(self, argv, cwd):
        src, dst = Path(argv[-2]), Path(argv[-1])
        dst.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dst)
        os.chmod(dst, 0o755)
        return 0, ""

    def _curl(self, argv, cwd):
        Path(argv[argv.index("-o") + 1]).write_bytes(b"font")
        return 0, ""

    def _unzip(self, argv, cwd):
        (Path(argv[argv.index("-d") + 1]) / "ZedSans-Regular.ttf").write_bytes(b"font")
        return 0, ""


@pytest.fixture
def host(fake_cmd, fake_systemd, home):
    paths = InstallPaths.from_config({}, home=home)
    fake_systemd.units.update({"iwd": [True, True], "NetworkManager": [False, False]})
    return FakeHost(fake_cmd, paths)


def _run(config, paths):
    ctx = InstallCtx.create(config, paths)
    result = run_pipeline(ctx=ctx, steps=build_steps(ctx, launch=False))
    return result, ctx.report


def test_second_run_is_a_noop(host, fake_cmd, fake_systemd, small_config):
    paths = host.paths

    first, report1 = _run(small_config, paths)

    assert first.failed_steps == []
    assert report1.all_ok, report1.render()
    assert fake_systemd.units == {"iwd": [False, False], "NetworkManager": [True, True]}
    rc_after_first = paths.rc_file.read_text()
    assert len(rc_after_first.splitlines()) == 2

    fake_cmd.calls.clear()
    second, report2 = _run(small_config, paths)

    assert report2.components == report1.components
    assert paths.rc_file.read_text() == rc_after_first
    assert fake_cmd.commands("git", "clone") == []
    assert fake_cmd.commands("sudo") == []
    assert fake_cmd.commands("python3", "-m", "venv") == []
    assert fake_cmd.commands("curl") == []
    # Everything but the always-refreshed checkout and the report is skipped.
    ran = {o.step_id for o in second.outcomes if o.status is StepStatus.SUCCEEDED}
    assert ran == {"50_install_shell", "80_verify"}


def test_broken_tool_does_not_stop_the_run(host, fake_cmd, small_config):
    fake_cmd.on("cmake", "--build", returncode=2)

    result, report = _run(small_config, host.paths)

    assert result.failed_steps == ["30_build_hyprpicker"]
    assert report.components["hyprpicker"] is False
    assert report.components["hyprshot"] is True
    assert "70_configure_environment" in result.ran_steps
