from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

logger = logging.getLogger(__name__)


@dataclass
class InstallationReport:
    """Component name -> installed/verified, in the order components were checked."""

    components: Dict[str, bool] = field(default_factory=dict)

    def record(self, name: str, ok: bool) -> None:
        self.components[name] = bool(ok)

    @property
    def failed(self) -> List[str]:
        return [n for n, ok in self.components.items() if not ok]

    @property
    def all_ok(self) -> bool:
        return not self.failed

    def render(self) -> str:
        width = max((len(n) for n in self.components), default=0)
        lines = ["Component status:"]
        for name, ok in self.components.items():
            lines.append(f"  {name.ljust(width)}  {'ok' if ok else 'MISSING'}")
        passed = len(self.components) - len(self.failed)
        lines.append(f"{passed}/{len(self.components)} components verified")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {"components": dict(self.components), "failed": self.failed}


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"yaml", "yml"}:
        return "yaml"
    # Default to JSON for unknown extensions.
    return "json"


def save_report(path: str, report: InstallationReport, *, extra: Dict[str, Any] | None = None) -> None:
    data = report.to_dict()
    if extra:
        data.update(extra)

    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)
    if _detect_format(p) == "yaml":
        p.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(data, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.info("Report written to %s", p)
