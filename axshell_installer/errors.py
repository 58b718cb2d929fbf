from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .lib.command import CmdResult


class InstallerError(RuntimeError):
    pass


class FatalPreconditionError(InstallerError):
    """Aborts the run before (or instead of) any further step."""


class StepError(InstallerError):
    """Recoverable: the pipeline records the step as failed and moves on."""


class CommandError(StepError):
    def __init__(self, message: str, result: "CmdResult") -> None:
        super().__init__(message)
        self.result = result
