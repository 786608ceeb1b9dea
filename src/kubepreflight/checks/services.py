"""
Service checks backed by the init system.

The init system is injected so the checks can be exercised without
systemd; when none is given it is detected on first use.
"""

import logging
from typing import List, Optional

from ..core.checker import Checker, LabeledChecker
from ..core.models import PreflightFinding
from ..utils.initsystem import InitSystem, InitSystemError, get_init_system

logger = logging.getLogger(__name__)


def _resolve(init_system: Optional[InitSystem]) -> InitSystem:
    return init_system if init_system is not None else get_init_system()


class ServiceCheck(LabeledChecker):
    """
    Checks that a service is enabled and, optionally, active.

    If no supported init system is detected the check is skipped with a
    warning.
    """

    def __init__(self, service: str, check_if_active: bool = True,
                 label: Optional[str] = None,
                 init_system: Optional[InitSystem] = None):
        super().__init__(label)
        self.service = service
        self.check_if_active = check_if_active
        self.init_system = init_system

    def default_name(self) -> str:
        return f"Service-{self.service.title()}"

    def check(self):
        logger.debug(f'validating if the "{self.service}" service is enabled and active')
        try:
            init_system = _resolve(self.init_system)
        except InitSystemError as e:
            return [e], []

        if not init_system.service_exists(self.service):
            return [PreflightFinding(f"{self.service} service does not exist")], []

        warnings, errors = [], []
        if not init_system.service_is_enabled(self.service):
            warnings.append(PreflightFinding(
                f"{self.service} service is not enabled, please run "
                f"'{init_system.enable_command(self.service)}'"))

        if self.check_if_active and not init_system.service_is_active(self.service):
            errors.append(PreflightFinding(
                f"{self.service} service is not active, please run "
                f"'systemctl start {self.service}.service'"))

        return warnings, errors


class FirewalldCheck(Checker):
    """Warns if firewalld is active, since it may block cluster ports."""

    def __init__(self, ports: List[int], init_system: Optional[InitSystem] = None):
        self.ports = list(ports)
        self.init_system = init_system

    def name(self) -> str:
        return "Firewalld"

    def check(self):
        logger.debug("validating if the firewall is enabled and active")
        try:
            init_system = _resolve(self.init_system)
        except InitSystemError as e:
            return [e], []

        if not init_system.service_exists('firewalld'):
            return [], []

        if init_system.service_is_active('firewalld'):
            ports = ' '.join(str(p) for p in self.ports)
            return [PreflightFinding(
                f"firewalld is active, please ensure ports [{ports}] are open "
                f"or your cluster may not function correctly")], []

        return [], []
