"""
Host checks: privileges, swap, CPUs, executables and the composite
system verification check.
"""

import io
import logging
import os
import platform
import sys
from typing import List, Optional, TextIO

from ..core.checker import Checker, LabeledChecker
from ..core.models import PreflightFinding
from ..utils import system
from ..utils.validators import (
    DEFAULT_SYS_SPEC,
    CgroupsValidator,
    DockerValidator,
    KernelValidator,
    OSValidator,
    StreamReporter,
    SysSpec,
    Validator,
)

logger = logging.getLogger(__name__)

SWAPS_PATH = '/proc/swaps'
VERIFICATION_FAILED_HEADER = (
    "[preflight] The system verification failed. "
    "Printing the output from the verification:"
)


class IsPrivilegedUserCheck(Checker):
    """Checks that the process runs as root."""

    def name(self) -> str:
        return "IsPrivilegedUser"

    def check(self):
        logger.debug("validating if the user is privileged")
        if not system.check_root():
            return [], [PreflightFinding("user is not running as root")]
        return [], []


class SwapCheck(Checker):
    """Fails if any swap device is active."""

    def __init__(self, swaps_path: str = SWAPS_PATH):
        self.swaps_path = swaps_path

    def name(self) -> str:
        return "Swap"

    def check(self):
        logger.debug("validating whether swap is enabled or not")
        try:
            with open(self.swaps_path, 'r') as f:
                lines = f.read().splitlines()
        except FileNotFoundError:
            # No /proc/swaps, nothing to warn about
            return [], []
        except (OSError, UnicodeDecodeError) as e:
            return [], [PreflightFinding(f"error parsing {self.swaps_path}", e)]

        # First line is the column header
        if len([line for line in lines if line.strip()]) > 1:
            return [], [PreflightFinding(
                "running with swap on is not supported. Please disable swap")]
        return [], []


class NumCPUCheck(Checker):
    """Checks that enough CPUs are available."""

    def __init__(self, num_cpu: int):
        self.num_cpu = num_cpu

    def name(self) -> str:
        return "NumCPU"

    def check(self):
        num_cpu = os.cpu_count() or 1
        if num_cpu < self.num_cpu:
            return [], [PreflightFinding(
                f"the number of available CPUs {num_cpu} is less than the required {self.num_cpu}")]
        return [], []


class InPathCheck(LabeledChecker):
    """Checks that an executable is on $PATH.

    A missing mandatory executable is an error; otherwise it is a warning
    with an optional suggestion.
    """

    def __init__(self, executable: str, mandatory: bool = True,
                 label: Optional[str] = None, suggestion: str = "",
                 exec_: Optional[system.Exec] = None):
        super().__init__(label)
        self.executable = executable
        self.mandatory = mandatory
        self.suggestion = suggestion
        self.exec = exec_ or system.Exec()

    def default_name(self) -> str:
        return f"FileExisting-{self.executable.replace('/', '-')}"

    def check(self):
        logger.debug(f"validating the presence of executable {self.executable}")
        try:
            self.exec.look_path(self.executable)
        except FileNotFoundError:
            message = f"{self.executable} not found in system path"
            if self.mandatory:
                return [], [PreflightFinding(message)]
            if self.suggestion:
                message += f"\nSuggestion: {self.suggestion}"
            return [PreflightFinding(message)], []
        return [], []


class SystemVerificationCheck(Checker):
    """
    Runs the kernel, OS, cgroups and (for Docker) docker validators and
    flattens their findings.

    The validators' report is buffered and only written to the output
    stream when at least one validator reported an error.
    """

    def __init__(self, is_docker: bool = False,
                 validators: Optional[List[Validator]] = None,
                 spec: SysSpec = DEFAULT_SYS_SPEC,
                 out: Optional[TextIO] = None,
                 os_family: Optional[str] = None):
        self.is_docker = is_docker
        self.validators = validators
        self.spec = spec
        self.out = out
        self.os_family = os_family

    def name(self) -> str:
        return "SystemVerification"

    def build_validators(self, reporter: StreamReporter) -> List[Validator]:
        """Select validators for this OS and runtime."""
        validators: List[Validator] = [KernelValidator(reporter)]

        if self.is_docker:
            validators.append(DockerValidator(reporter))

        if (self.os_family or platform.system()) == 'Linux':
            validators.extend([OSValidator(reporter), CgroupsValidator(reporter)])

        return validators

    def check(self):
        logger.debug("running all checks")
        buffer = io.StringIO()
        reporter = StreamReporter(buffer)

        if self.validators is not None:
            validators = self.validators
            for v in validators:
                v.reporter = reporter
        else:
            validators = self.build_validators(reporter)

        warnings, errors = [], []
        for v in validators:
            warn, errs = v.validate(self.spec)
            if errs:
                errors.extend(errs)
            if warn:
                warnings.extend(warn)

        if errors:
            out = self.out or sys.stdout
            out.write(VERIFICATION_FAILED_HEADER + "\n")
            out.write(buffer.getvalue())
            out.flush()
        return warnings, errors
