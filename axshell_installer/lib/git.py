from __future__ import annotations

import logging
from pathlib import Path

from ..errors import CommandError, StepError
from .command import run_cmd

logger = logging.getLogger(__name__)

CLONED = "cloned"
UPDATED = "updated"
KEPT = "kept"


def ensure_repo(url: str, local_path: str | Path, *, depth: int = 1, dry_run: bool = False) -> str:
    """Clone `url` shallowly into `local_path`, or fast-forward an existing checkout.

    A failed update keeps the existing checkout (returns KEPT). A failed
    clone raises StepError.
    """

    p = Path(local_path)
    if (p / ".git").exists():
        try:
            run_cmd(["git", "-C", str(p), "pull", "--ff-only"], dry_run=dry_run)
        except CommandError as e:
            logger.warning("Update of %s failed, using existing checkout: %s", p, e)
            return KEPT
        return UPDATED

    if p.exists() and any(p.iterdir()):
        raise StepError(f"{p} exists but is not a git checkout")

    if not dry_run:
        p.parent.mkdir(parents=True, exist_ok=True)
    try:
        run_cmd(["git", "clone", f"--depth={depth}", url, str(p)], dry_run=dry_run)
    except CommandError as e:
        raise StepError(f"Clone of {url} failed") from e
    return CLONED
