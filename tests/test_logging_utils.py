from __future__ import annotations

import logging
from pathlib import Path

import pytest

from axshell_installer.logging_utils import CONSOLE_FORMAT, FILE_FORMAT, configure_logging


def _ours(r: logging.Logger) -> list[logging.Handler]:
    # pytest attaches its own capture handlers to the root logger as well.
    return [h for h in r.handlers if h.formatter is not None and h.formatter._fmt in (FILE_FORMAT, CONSOLE_FORMAT)]


@pytest.fixture
def root(monkeypatch):
    r = logging.getLogger()
    level = r.level
    earlier = _ours(r)
    for h in earlier:
        r.removeHandler(h)
    monkeypatch.delattr(r, "_axshell_log_path", raising=False)
    yield r
    for h in _ours(r):
        r.removeHandler(h)
        h.close()
    for h in earlier:
        r.addHandler(h)
    if hasattr(r, "_axshell_log_path"):
        delattr(r, "_axshell_log_path")
    r.setLevel(level)


def test_file_and_console_handlers(root, tmp_path):
    log = tmp_path / "state" / "install.log"

    assert configure_logging(str(log)) == str(log)

    file_h, console_h = _ours(root)
    assert isinstance(file_h, logging.FileHandler)
    assert console_h.formatter._fmt == CONSOLE_FORMAT
    logging.getLogger("axshell_installer.lib.pkg").info("CMD apt-get update")
    file_h.flush()
    assert " INFO axshell_installer.lib.pkg: CMD apt-get update" in log.read_text()


def test_second_call_adds_nothing(root, tmp_path):
    first = configure_logging(str(tmp_path / "a.log"))
    second = configure_logging(str(tmp_path / "b.log"))

    assert second == first
    assert len(_ours(root)) == 2
    assert not (tmp_path / "b.log").exists()


def test_unwritable_location_falls_back_to_cwd(root, tmp_path, monkeypatch):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    monkeypatch.chdir(tmp_path)

    chosen = configure_logging(str(blocker / "install.log"), also_console=False)

    assert Path(chosen) == tmp_path / "ax-shell-installer.log"
    assert len(_ours(root)) == 1
