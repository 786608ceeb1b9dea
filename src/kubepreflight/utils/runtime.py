"""
Container Runtime Client

Thin wrapper over the runtime CLI used by the runtime and image pull
checks. CRI endpoints are driven through crictl, Docker through the
docker CLI.
"""

import logging
from typing import Optional

from ..core.models import KubePreflightError
from .system import Exec

logger = logging.getLogger(__name__)

DOCKER_SOCKET = 'unix:///var/run/dockershim.sock'
DEFAULT_CRI_SOCKET = 'unix:///var/run/containerd/containerd.sock'

# Image pulls can take a while on slow links
PULL_TIMEOUT = 600
QUERY_TIMEOUT = 30


class RuntimeCommandError(KubePreflightError):
    """Raised when a container runtime command fails."""


def is_docker_socket(cri_socket: Optional[str]) -> bool:
    """True when the CRI socket points at Docker rather than a CRI runtime"""
    return bool(cri_socket) and 'docker' in cri_socket


class ContainerRuntime:
    """Container runtime reached through its command line tool."""

    def __init__(self, cri_socket: Optional[str] = None, exec_: Optional[Exec] = None):
        self.cri_socket = cri_socket or DEFAULT_CRI_SOCKET
        self.exec = exec_ or Exec()

    @property
    def is_docker(self) -> bool:
        return is_docker_socket(self.cri_socket)

    def _command(self, *args):
        if self.is_docker:
            return ['docker', *args]
        return ['crictl', '-r', self.cri_socket, *args]

    def _run(self, args, timeout):
        result = self.exec.run(args, timeout=timeout)
        logger.debug(f"{' '.join(args)} -> {result['returncode']}")
        return result

    def is_running(self) -> None:
        """
        Raise RuntimeCommandError unless the runtime answers.
        """
        result = self._run(self._command('info'), QUERY_TIMEOUT)
        if not result['success']:
            raise RuntimeCommandError(
                f"container runtime is not running: output: {result['stdout']}, "
                f"error: {result['stderr'].strip()}"
            )

    def image_exists(self, image: str) -> bool:
        """Return True if image is present in the local image store."""
        if self.is_docker:
            result = self._run(self._command('image', 'inspect', image), QUERY_TIMEOUT)
        else:
            result = self._run(self._command('inspecti', image), QUERY_TIMEOUT)
        if result['returncode'] == -1:
            # The CLI could not run at all
            raise RuntimeCommandError(result['stderr'].strip())
        return result['success']

    def pull_image(self, image: str) -> None:
        """Pull image, raising RuntimeCommandError on failure."""
        result = self._run(self._command('pull', image), PULL_TIMEOUT)
        if not result['success']:
            raise RuntimeCommandError(
                f"output: {result['stdout'].strip()}, error: {result['stderr'].strip()}"
            )
