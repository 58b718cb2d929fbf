from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping

from ..errors import StepError
from .command import run_cmd

logger = logging.getLogger(__name__)

# `systemctl is-enabled` states that mean the unit starts on boot.
_ENABLED_STATES = {"enabled", "enabled-runtime", "alias", "linked", "linked-runtime"}
# Units that cannot be enabled by `systemctl enable`; they are pulled in by others.
_STATIC_STATES = {"static", "indirect", "generated", "transient"}
# Enablement under /run that `systemctl disable` does not remove.
_RUNTIME_STATES = {"enabled-runtime", "linked-runtime"}


@dataclass(frozen=True)
class ServiceSpec:
    name: str
    enabled: bool
    running: bool


@dataclass(frozen=True)
class UnitState:
    exists: bool
    enabled: bool
    active: bool
    # Raw `systemctl is-enabled` output.
    enablement: str = ""

    def enablement_ok(self, enabled: bool) -> bool:
        if enabled:
            return self.enabled or self.enablement in _STATIC_STATES
        return not self.enabled


def service_from_manifest(entry: Mapping[str, Any]) -> ServiceSpec:
    name = str(entry.get("name") or "").strip()
    if not name:
        raise ValueError("service entry needs a name")
    enabled = bool(entry.get("enabled", True))
    return ServiceSpec(name=name, enabled=enabled, running=bool(entry.get("running", enabled)))


def unit_state(name: str) -> UnitState:
    en = run_cmd(["systemctl", "is-enabled", name], check=False)
    enabled_txt = en.stdout.strip()
    # Older systemd prints nothing on stdout for unknown units, newer prints "not-found".
    exists = not (enabled_txt == "not-found" or (not enabled_txt and en.returncode != 0))
    act = run_cmd(["systemctl", "is-active", name], check=False)
    return UnitState(
        exists=exists,
        enabled=enabled_txt in _ENABLED_STATES,
        active=act.stdout.strip() == "active",
        enablement=enabled_txt,
    )


def configure_service(name: str, enabled: bool, running: bool, *, dry_run: bool = False) -> List[str]:
    """Bring a unit to the desired enabled/active state.

    Only the systemctl verbs needed to get there are issued. Returns them.
    A missing unit already satisfies disabled+stopped. CommandError propagates.
    """

    st = unit_state(name)
    actions: list[str] = []

    if not st.exists:
        if enabled or running:
            raise StepError(f"Unit {name} not found")
        logger.info("Unit %s not present; nothing to disable", name)
        return actions

    if enabled and not st.enabled:
        if st.enablement in _STATIC_STATES:
            logger.info("Unit %s is %s; it cannot be enabled directly", name, st.enablement)
        else:
            actions.append("enable")
    elif not enabled and st.enabled:
        if st.enablement in _RUNTIME_STATES:
            raise StepError(f"Unit {name} is {st.enablement}; disable it with systemctl --runtime")
        actions.append("disable")

    if running and not st.active:
        actions.append("start")
    elif not running and st.active:
        actions.append("stop")

    for verb in actions:
        run_cmd(["sudo", "systemctl", verb, name], dry_run=dry_run)

    if actions:
        logger.info("Unit %s: %s", name, ", ".join(actions))
    else:
        logger.info("Unit %s already in desired state", name)
    return actions
