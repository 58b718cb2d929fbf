from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from ..errors import CommandError
from .command import run_cmd, which

logger = logging.getLogger(__name__)


def has_package_manager() -> bool:
    return which("apt-get") is not None and which("dpkg-query") is not None


def apt_update(*, dry_run: bool = False) -> None:
    run_cmd(["sudo", "apt-get", "update"], dry_run=dry_run)


def dpkg_missing(packages: Sequence[str]) -> List[str]:
    """Return the packages dpkg does not report as installed, in input order."""

    if not packages:
        return []
    # Unknown names only produce stderr noise and a non-zero exit; known ones still print.
    r = run_cmd(["dpkg-query", "-W", "-f=${Package}\t${Status}\n", *packages], check=False)
    installed: set[str] = set()
    for line in r.stdout.splitlines():
        name, _, status = line.partition("\t")
        if status.strip() == "install ok installed":
            installed.add(name.split(":", 1)[0])
    return [p for p in packages if p not in installed]


def apt_has_package(package: str, *, dry_run: bool = False) -> bool:
    """Return True if apt knows about a package name.

    Used to drop names that only exist in some repos instead of failing the batch.
    """
    if dry_run:
        return True
    r = run_cmd(["apt-cache", "show", package], check=False)
    return r.ok and bool(r.stdout.strip())


def apt_install(packages: Sequence[str], *, dry_run: bool = False) -> None:
    if not packages:
        return
    # sudo resets the environment; pass the frontend as an assignment argument instead.
    run_cmd(
        ["sudo", "DEBIAN_FRONTEND=noninteractive", "apt-get", "install", "-y", *packages],
        dry_run=dry_run,
    )


def ensure_packages(names: Iterable[str], *, dry_run: bool = False) -> List[str]:
    """Install the packages that are not installed yet.

    Returns the names that could not be installed. Never raises for
    package-level failures: unknown packages are skipped and a failing
    batch is retried one package at a time.
    """

    wanted: list[str] = []
    for n in names:
        n = str(n).strip()
        if n and n not in wanted:
            wanted.append(n)

    missing = dpkg_missing(wanted)
    if not missing:
        logger.info("All %d packages already installed", len(wanted))
        return []

    try:
        apt_update(dry_run=dry_run)
    except CommandError as e:
        logger.warning("apt-get update failed, continuing with cached lists: %s", e)

    available: list[str] = []
    failed: list[str] = []
    for p in missing:
        if apt_has_package(p, dry_run=dry_run):
            available.append(p)
        else:
            failed.append(p)
    if failed:
        logger.warning("Packages unknown to apt, skipped: %s", ", ".join(failed))

    try:
        apt_install(available, dry_run=dry_run)
    except CommandError:
        logger.warning("Batch install failed; retrying packages one by one")
        for p in available:
            try:
                apt_install([p], dry_run=dry_run)
            except CommandError:
                logger.warning("Package failed to install: %s", p)
                failed.append(p)

    installed_now = [p for p in available if p not in failed]
    logger.info(
        "Packages: %d requested, %d installed now, %d failed",
        len(wanted),
        len(installed_now),
        len(failed),
    )
    return failed
