"""
Init System Abstraction

Answers the questions the service and firewall checks ask about a
service: does it exist, is it enabled, is it active, and how would the
operator enable it.

Usage:
    from kubepreflight.utils.initsystem import get_init_system

    init_system = get_init_system()
    if not init_system.service_is_active('kubelet'):
        print(init_system.enable_command('kubelet'))
"""

import logging
import shutil
from abc import ABC, abstractmethod
import subprocess
from typing import List

from ..core.models import KubePreflightError

logger = logging.getLogger(__name__)

# Timeout for init system queries (seconds)
QUERY_TIMEOUT = 5


class InitSystemError(KubePreflightError):
    """Raised when no supported init system can be detected."""


class InitSystem(ABC):
    """Base class for init systems."""

    @abstractmethod
    def enable_command(self, service: str) -> str:
        """Command the operator runs to enable service."""

    @abstractmethod
    def service_exists(self, service: str) -> bool:
        pass

    @abstractmethod
    def service_is_enabled(self, service: str) -> bool:
        pass

    @abstractmethod
    def service_is_active(self, service: str) -> bool:
        pass

    @staticmethod
    def _run(args: List[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=QUERY_TIMEOUT
        )


class SystemdInitSystem(InitSystem):
    """systemd, queried through systemctl."""

    def enable_command(self, service: str) -> str:
        return f"systemctl enable {service}.service"

    def service_exists(self, service: str) -> bool:
        try:
            result = self._run(['systemctl', 'status', service])
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
            logger.debug(f"systemctl status {service} failed: {e}")
            return False
        output = (result.stdout + result.stderr).lower()
        return 'could not be found' not in output and 'not-found' not in output

    def service_is_enabled(self, service: str) -> bool:
        try:
            result = self._run(['systemctl', 'is-enabled', service])
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
            logger.debug(f"systemctl is-enabled {service} failed: {e}")
            return False
        return result.returncode == 0

    def service_is_active(self, service: str) -> bool:
        try:
            result = self._run(['systemctl', 'is-active', service])
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
            logger.debug(f"systemctl is-active {service} failed: {e}")
            return False
        return result.stdout.strip() == 'active'


class OpenRCInitSystem(InitSystem):
    """OpenRC, queried through rc-service and rc-update."""

    def enable_command(self, service: str) -> str:
        return f"rc-update add {service} default"

    def service_exists(self, service: str) -> bool:
        try:
            result = self._run(['rc-service', service, 'status'])
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
            logger.debug(f"rc-service {service} status failed: {e}")
            return False
        return 'does not exist' not in (result.stdout + result.stderr)

    def service_is_enabled(self, service: str) -> bool:
        try:
            result = self._run(['rc-update', 'show', 'default'])
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
            logger.debug(f"rc-update show failed: {e}")
            return False
        return any(line.split('|')[0].strip() == service
                   for line in result.stdout.splitlines())

    def service_is_active(self, service: str) -> bool:
        try:
            result = self._run(['rc-service', service, 'status'])
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
            logger.debug(f"rc-service {service} status failed: {e}")
            return False
        return 'stopped' not in result.stdout and 'crashed' not in result.stdout


def get_init_system() -> InitSystem:
    """
    Detect the init system of this host.

    Raises:
        InitSystemError: if neither systemd nor OpenRC is present
    """
    if shutil.which('systemctl'):
        return SystemdInitSystem()
    if shutil.which('openrc'):
        return OpenRCInitSystem()
    raise InitSystemError("no supported init system detected, skipping checking for services")
