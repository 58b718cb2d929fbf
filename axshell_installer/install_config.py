from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .lib.build import ToolSpec, tool_from_manifest
from .lib.env import InstallPaths
from .lib.fonts import FontSpec, font_from_manifest
from .lib.manifests import load_default_manifest, load_yaml
from .lib.systemd import ServiceSpec, service_from_manifest


@dataclass(frozen=True)
class RcLine:
    line: str
    marker: Optional[str] = None


@dataclass(frozen=True)
class InstallConfig:
    raw: Dict[str, Any]

    @property
    def repo_url(self) -> str:
        url = str(self.raw.get("repo_url") or "").strip()
        if not url:
            raise ValueError("repo_url is required")
        return url

    def paths(self, *, home: Optional[Path] = None) -> InstallPaths:
        raw = self.raw.get("paths") or {}
        if not isinstance(raw, Mapping):
            raise ValueError("paths must be a mapping")
        return InstallPaths.from_config(raw, home=home)

    @property
    def packages(self) -> List[str]:
        return [str(p) for p in (self.raw.get("packages") or [])]

    @property
    def pip_packages(self) -> List[str]:
        return [str(p) for p in (self.raw.get("pip_packages") or [])]

    def _entries(self, key: str, *, allow_str: bool = False) -> List[Any]:
        items = self.raw.get(key) or []
        if not isinstance(items, list):
            raise ValueError(f"{key} must be a list")
        for item in items:
            if not isinstance(item, Mapping) and not (allow_str and isinstance(item, str)):
                raise ValueError(f"{key}: entries must be mappings, got {item!r}")
        return items

    def tools(self, paths: InstallPaths) -> List[ToolSpec]:
        return [tool_from_manifest(t, paths) for t in self._entries("tools")]

    def fonts(self, paths: InstallPaths) -> List[FontSpec]:
        return [font_from_manifest(f, paths.fonts_dir) for f in self._entries("fonts")]

    @property
    def services(self) -> List[ServiceSpec]:
        return [service_from_manifest(s) for s in self._entries("services")]

    def rc_lines(self, paths: InstallPaths) -> List[RcLine]:
        out: list[RcLine] = []
        for entry in self._entries("rc_lines", allow_str=True):
            if isinstance(entry, str):
                entry = {"line": entry}
            line = (
                str(entry.get("line") or "")
                .replace("{venv_python}", str(paths.venv_python))
                .replace("{install_dir}", str(paths.install_dir))
            )
            if line:
                out.append(RcLine(line=line, marker=entry.get("marker")))
        return out

    @property
    def verify_imports(self) -> List[str]:
        return [str(m) for m in (self.raw.get("verify_imports") or [])]

    @property
    def launch(self) -> bool:
        return bool(self.raw.get("launch", True))

    def validate(self, paths: InstallPaths) -> None:
        """Resolve every entry once so a bad manifest fails before any step runs.

        Raises ValueError.
        """

        _ = self.repo_url
        self.tools(paths)
        self.fonts(paths)
        _ = self.services
        self.rc_lines(paths)


def load_install_config(path: Optional[str] = None) -> InstallConfig:
    """Packaged defaults, with top-level keys replaced by the user's YAML file."""

    raw = load_default_manifest()
    if path:
        p = Path(path).expanduser()
        if not p.exists():
            raise FileNotFoundError(path)
        if p.suffix.lower() not in {".yaml", ".yml"}:
            raise ValueError("install config must be YAML")
        raw.update(load_yaml(p))
    return InstallConfig(raw=raw)
