from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Sequence, Tuple

from ..errors import CommandError
from .command import run_cmd

logger = logging.getLogger(__name__)

FONT_KINDS = ("file", "zip")


@dataclass(frozen=True)
class FontSpec:
    name: str
    url: str
    kind: str
    # For "file" the font file itself, for "zip" the directory it is extracted into.
    target: Path


def font_from_manifest(entry: Mapping[str, Any], fonts_dir: Path) -> FontSpec:
    name = str(entry.get("name") or "").strip()
    url = str(entry.get("url") or "").strip()
    kind = str(entry.get("kind") or "file").lower()
    if not name or not url:
        raise ValueError(f"font entry needs name and url: {dict(entry)}")
    if kind not in FONT_KINDS:
        raise ValueError(f"font {name}: kind must be one of {FONT_KINDS}")
    target = str(entry.get("target") or (name if kind == "zip" else url.rsplit("/", 1)[-1]))
    return FontSpec(name=name, url=url, kind=kind, target=fonts_dir / target)


def _download(url: str, dest: Path, *, dry_run: bool) -> None:
    run_cmd(["curl", "-fsSL", "-o", str(dest), url], dry_run=dry_run)


def install_font(font: FontSpec, *, dry_run: bool = False) -> None:
    """Download (and extract) one font. Raises CommandError on failure."""

    part = font.target.parent / f".{font.target.name}.part"
    if not dry_run:
        font.target.parent.mkdir(parents=True, exist_ok=True)
    try:
        _download(font.url, part, dry_run=dry_run)
        if font.kind == "zip":
            if not dry_run:
                font.target.mkdir(parents=True, exist_ok=True)
            run_cmd(["unzip", "-q", "-o", str(part), "-d", str(font.target)], dry_run=dry_run)
        elif not dry_run:
            part.replace(font.target)
    except CommandError:
        if font.kind == "zip" and font.target.is_dir() and not any(font.target.iterdir()):
            font.target.rmdir()
        raise
    finally:
        if part.exists():
            part.unlink()


def refresh_font_cache(*, dry_run: bool = False) -> None:
    r = run_cmd(["fc-cache", "-f"], check=False, dry_run=dry_run)
    if not r.ok:
        logger.warning("fc-cache failed (%s)", r.returncode)


def ensure_fonts(fonts: Sequence[FontSpec], *, dry_run: bool = False) -> Tuple[List[str], List[str]]:
    """Install the fonts whose target is absent.

    Returns (installed, failed) font names. Download failures are logged
    and skipped.
    """

    installed: list[str] = []
    failed: list[str] = []
    for font in fonts:
        if font.target.exists():
            logger.info("Font %s already installed", font.name)
            continue
        try:
            install_font(font, dry_run=dry_run)
        except CommandError as e:
            logger.warning("Failed to install font %s: %s", font.name, e)
            failed.append(font.name)
            continue
        installed.append(font.name)

    if installed:
        refresh_font_cache(dry_run=dry_run)
    return installed, failed
