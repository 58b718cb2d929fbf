from __future__ import annotations

import logging

from ..context import InstallCtx
from ..errors import StepError
from ..lib.systemd import configure_service, unit_state

logger = logging.getLogger(__name__)


class ConfigureServicesStep:
    step_id = "60_configure_services"
    fatal = False

    def is_satisfied(self, ctx: InstallCtx) -> bool:
        for svc in ctx.cfg.services:
            st = unit_state(svc.name)
            if not st.exists:
                if svc.enabled or svc.running:
                    return False
                continue
            if not st.enablement_ok(svc.enabled) or st.active != svc.running:
                return False
        return True

    def apply(self, ctx: InstallCtx) -> None:
        failed: list[str] = []
        for svc in ctx.cfg.services:
            try:
                configure_service(svc.name, svc.enabled, svc.running, dry_run=ctx.dry_run)
            except StepError as e:
                # Keep going with the remaining units.
                logger.warning("Service %s: %s", svc.name, e)
                failed.append(svc.name)
        if failed:
            raise StepError(f"service configuration failed: {', '.join(failed)}")
