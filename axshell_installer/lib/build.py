from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from ..errors import CommandError, StepError
from .command import run_cmd, which
from .env import InstallPaths
from .git import ensure_repo
from .venv import can_import, python_ok

logger = logging.getLogger(__name__)


class BuildKind(str, enum.Enum):
    COPY = "copy"
    MAKE = "make"
    CMAKE = "cmake"
    MESON = "meson"
    PIP = "pip"


_BUILD_FILES = {
    BuildKind.MAKE: ("Makefile",),
    BuildKind.CMAKE: ("CMakeLists.txt",),
    BuildKind.MESON: ("meson.build",),
    BuildKind.PIP: ("pyproject.toml", "setup.py"),
}


@dataclass(frozen=True)
class ToolSpec:
    name: str
    repo_url: str
    checkout: Path
    kind: BuildKind
    prefix: str = "/usr/local"
    binary: Optional[str] = None
    artifact: Optional[str] = None
    module: Optional[str] = None
    fallback_binary: Optional[str] = None
    # Python run by the venv interpreter as the installed check, for tools
    # that install no executable (GObject libraries, for instance).
    check: Optional[str] = None

    @property
    def binary_name(self) -> str:
        return self.binary or self.name


def tool_from_manifest(entry: Mapping[str, Any], paths: InstallPaths) -> ToolSpec:
    name = str(entry.get("name") or "").strip()
    if not name:
        raise ValueError("tool entry needs a name")
    url = str(entry.get("repo") or "").strip()
    if not url:
        raise ValueError(f"tool {name}: repo is required")
    try:
        kind = BuildKind(str(entry.get("build", "")).lower())
    except ValueError as e:
        raise ValueError(f"tool {name}: unknown build kind {entry.get('build')!r}") from e

    checkout = entry.get("checkout")
    return ToolSpec(
        name=name,
        repo_url=url,
        checkout=Path(checkout) if checkout else paths.src_dir / name,
        kind=kind,
        prefix=str(entry.get("prefix") or "/usr/local"),
        binary=entry.get("binary"),
        artifact=entry.get("artifact"),
        module=entry.get("module"),
        fallback_binary=entry.get("fallback_binary"),
        check=entry.get("check"),
    )


def is_installed(spec: ToolSpec, paths: InstallPaths, *, env: Mapping[str, str] | None = None) -> bool:
    if spec.check:
        return python_ok(paths.venv_dir, spec.check)
    if spec.kind is BuildKind.COPY:
        target = paths.bin_dir / spec.binary_name
        return target.is_file() and os.access(target, os.X_OK)
    if spec.kind is BuildKind.PIP:
        return can_import(paths.venv_dir, spec.module or spec.name.replace("-", "_"))
    return which(spec.binary_name, env=env) is not None


def has_build_file(spec: ToolSpec) -> bool:
    if spec.kind is BuildKind.COPY:
        return (spec.checkout / (spec.artifact or spec.binary_name)).is_file()
    return any((spec.checkout / f).is_file() for f in _BUILD_FILES[spec.kind])


def build_commands(spec: ToolSpec, paths: InstallPaths, *, jobs: Optional[int] = None) -> List[List[str]]:
    """Commands that build and install `spec`, run in order from its checkout."""

    n = str(jobs or os.cpu_count() or 1)
    if spec.kind is BuildKind.COPY:
        src = spec.checkout / (spec.artifact or spec.binary_name)
        return [
            ["install", "-D", "-m", "755", str(src), str(paths.bin_dir / spec.binary_name)],
        ]
    if spec.kind is BuildKind.MAKE:
        return [
            ["make", f"-j{n}"],
            ["sudo", "make", "install", f"PREFIX={spec.prefix}"],
        ]
    if spec.kind is BuildKind.CMAKE:
        return [
            ["rm", "-rf", "build"],
            [
                "cmake",
                "-B",
                "build",
                "-S",
                ".",
                "-DCMAKE_BUILD_TYPE=Release",
                f"-DCMAKE_INSTALL_PREFIX={spec.prefix}",
            ],
            ["cmake", "--build", "build", f"-j{n}"],
            ["sudo", "cmake", "--install", "build"],
        ]
    if spec.kind is BuildKind.MESON:
        return [
            ["rm", "-rf", "build"],
            ["meson", "setup", "build", f"--prefix={spec.prefix}", "--buildtype=release"],
            ["ninja", "-C", "build"],
            ["sudo", "ninja", "-C", "build", "install"],
        ]
    if spec.kind is BuildKind.PIP:
        return [[str(paths.venv_pip), "install", "."]]
    raise ValueError(f"Unsupported build kind: {spec.kind}")


def _install_fallback(spec: ToolSpec, paths: InstallPaths, *, dry_run: bool) -> bool:
    if not spec.fallback_binary:
        return False
    src = spec.checkout / spec.fallback_binary
    if not src.is_file():
        return False
    logger.warning("%s: build failed, installing pre-built %s", spec.name, src)
    run_cmd(
        ["install", "-D", "-m", "755", str(src), str(paths.bin_dir / spec.binary_name)],
        dry_run=dry_run,
    )
    return True


def build_tool(
    spec: ToolSpec,
    paths: InstallPaths,
    *,
    env: Dict[str, str] | None = None,
    dry_run: bool = False,
) -> str:
    """Clone/update, build and install one tool.

    Returns "built" or "fallback". Raises StepError when neither worked.
    """

    ensure_repo(spec.repo_url, spec.checkout, dry_run=dry_run)

    if not dry_run and not has_build_file(spec):
        raise StepError(f"{spec.name}: no {spec.kind.value} build file in {spec.checkout}")

    try:
        for argv in build_commands(spec, paths):
            run_cmd(argv, cwd=str(spec.checkout), env=env, dry_run=dry_run)
    except CommandError as e:
        if _install_fallback(spec, paths, dry_run=dry_run):
            return "fallback"
        raise StepError(f"{spec.name}: {spec.kind.value} build failed") from e

    logger.info("%s installed (%s)", spec.name, spec.kind.value)
    return "built"
