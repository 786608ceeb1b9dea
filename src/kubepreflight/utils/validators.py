"""
System validators used by the system verification check.

Each validator inspects one aspect of the host against a SysSpec and
returns (warnings, errors). Progress lines go to a StreamReporter so the
composite check can decide whether to show them.
"""

import logging
import platform
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, TextIO, Tuple

import distro

from ..core.models import PreflightFinding
from .system import Exec

logger = logging.getLogger(__name__)

CGROUPS_V1_PATH = '/proc/cgroups'
CGROUPS_V2_CONTROLLERS = '/sys/fs/cgroup/cgroup.controllers'


@dataclass
class SysSpec:
    """What a supported node looks like."""
    os: str = 'Linux'
    kernel_versions: List[str] = field(default_factory=lambda: [
        r'^3\.10.*$', r'^4\..*$', r'^5\..*$', r'^6\..*$',
    ])
    cgroups: List[str] = field(default_factory=lambda: [
        'cpu', 'cpuset', 'devices', 'memory', 'pids',
    ])
    cgroups_optional: List[str] = field(default_factory=lambda: ['hugetlb', 'blkio'])
    docker_versions: List[str] = field(default_factory=lambda: [
        r'^1\.1[1-3]\..*$', r'^17\.0[3,6,9]\..*$', r'^18\.0[6,9]\..*$',
        r'^19\.03\..*$', r'^2[0-9]\..*$',
    ])


DEFAULT_SYS_SPEC = SysSpec()


class StreamReporter:
    """Writes 'NAME: value' report lines to a stream."""

    def __init__(self, write_stream: TextIO):
        self.write_stream = write_stream

    def report(self, key: str, value: str, result: str) -> None:
        self.write_stream.write(f"{key}: {value} ({result})\n")


class Validator(ABC):
    """Base class for system validators."""

    name = 'validator'

    def __init__(self, reporter: StreamReporter):
        self.reporter = reporter

    @abstractmethod
    def validate(self, spec: SysSpec) -> Tuple[List[BaseException], List[BaseException]]:
        """Return (warnings, errors) for this aspect of the host."""


class KernelValidator(Validator):
    """Checks the running kernel release against the supported list."""

    name = 'kernel'

    def __init__(self, reporter: StreamReporter, release: Optional[str] = None):
        super().__init__(reporter)
        self.release = release

    def validate(self, spec):
        release = self.release or platform.release()
        for pattern in spec.kernel_versions:
            if re.match(pattern, release):
                self.reporter.report('KERNEL_VERSION', release, 'ok')
                return [], []
        self.reporter.report('KERNEL_VERSION', release, 'bad')
        return [], [PreflightFinding(
            f"unsupported kernel release: {release}")]


class OSValidator(Validator):
    """Checks the operating system family and reports the distribution."""

    name = 'os'

    def validate(self, spec):
        system = platform.system()
        if system != spec.os:
            self.reporter.report('OS', system, 'bad')
            return [], [PreflightFinding(f"unsupported operating system: {system}")]
        self.reporter.report('OS', system, 'ok')
        dist = distro.name(pretty=True) or distro.id()
        if dist:
            self.reporter.report('DISTRIBUTION', dist, 'ok')
        return [], []


class CgroupsValidator(Validator):
    """Checks that the required cgroup controllers are enabled."""

    name = 'cgroups'

    def __init__(self, reporter: StreamReporter,
                 v1_path: str = CGROUPS_V1_PATH,
                 v2_path: str = CGROUPS_V2_CONTROLLERS):
        super().__init__(reporter)
        self.v1_path = Path(v1_path)
        self.v2_path = Path(v2_path)

    def _enabled_controllers(self) -> List[str]:
        if self.v2_path.exists():
            self.reporter.report('CGROUPS_VERSION', 'v2', 'ok')
            return self.v2_path.read_text().split()

        self.reporter.report('CGROUPS_VERSION', 'v1', 'ok')
        enabled = []
        # "#subsys_name hierarchy num_cgroups enabled"
        for line in self.v1_path.read_text().splitlines():
            if line.startswith('#'):
                continue
            parts = line.split()
            if len(parts) >= 4 and parts[3] == '1':
                enabled.append(parts[0])
        return enabled

    def validate(self, spec):
        try:
            enabled = set(self._enabled_controllers())
        except OSError as e:
            return [], [PreflightFinding("failed to get cgroup subsystems", e)]

        # cgroup v2 has no separate devices controller
        if self.v2_path.exists():
            enabled.add('devices')

        warnings, errors = [], []
        for cgroup in spec.cgroups:
            state = 'enabled' if cgroup in enabled else 'missing'
            self.reporter.report(f"CGROUPS_{cgroup.upper()}", state, 'ok' if cgroup in enabled else 'bad')
        for cgroup in spec.cgroups_optional:
            if cgroup not in enabled:
                self.reporter.report(f"CGROUPS_{cgroup.upper()}", 'missing', 'warn')

        missing = [c for c in spec.cgroups if c not in enabled]
        if missing:
            errors.append(PreflightFinding(f"missing required cgroups: {' '.join(missing)}"))
        missing_optional = [c for c in spec.cgroups_optional if c not in enabled]
        if missing_optional:
            warnings.append(PreflightFinding(f"missing optional cgroups: {' '.join(missing_optional)}"))
        return warnings, errors


class DockerValidator(Validator):
    """Checks the Docker server version."""

    name = 'docker'

    def __init__(self, reporter: StreamReporter, exec_: Optional[Exec] = None):
        super().__init__(reporter)
        self.exec = exec_ or Exec()

    def validate(self, spec):
        result = self.exec.run(['docker', 'version', '--format', '{{.Server.Version}}'], timeout=30)
        if not result['success']:
            return [], [PreflightFinding(
                f"failed to get docker info: {result['stderr'].strip()}")]

        docker_version = result['stdout'].strip()
        for pattern in spec.docker_versions:
            if re.match(pattern, docker_version):
                self.reporter.report('DOCKER_VERSION', docker_version, 'ok')
                return [], []
        self.reporter.report('DOCKER_VERSION', docker_version, 'warn')
        return [PreflightFinding(
            f"this Docker version is not on the list of validated versions: {docker_version}")], []
