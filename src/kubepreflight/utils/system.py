"""System utilities for command execution and host inspection"""

import logging
import os
import re
import shutil
import subprocess

logger = logging.getLogger(__name__)

# Default timeout for external commands (seconds)
COMMAND_TIMEOUT = 300

_KUBELET_VERSION_RE = re.compile(r'\bv?(\d+\.\d+\.\d+\S*)')


def check_root():
    """Check if running with root privileges"""
    return os.geteuid() == 0


def run_command(command, shell=False, capture_output=True, timeout=COMMAND_TIMEOUT):
    """Run a system command and return the result"""
    try:
        if isinstance(command, str) and not shell:
            command = command.split()

        result = subprocess.run(
            command,
            shell=shell,
            capture_output=capture_output,
            text=True,
            timeout=timeout
        )

        return {
            'returncode': result.returncode,
            'stdout': result.stdout,
            'stderr': result.stderr,
            'success': result.returncode == 0
        }
    except subprocess.TimeoutExpired:
        return {
            'returncode': -1,
            'stdout': '',
            'stderr': 'Command timed out',
            'success': False
        }
    except (FileNotFoundError, OSError) as e:
        return {
            'returncode': -1,
            'stdout': '',
            'stderr': str(e),
            'success': False
        }


class Exec:
    """
    Executable lookup and invocation.

    Checks that need $PATH lookups or command output take an Exec so
    tests can substitute a fake.
    """

    def look_path(self, executable):
        """Return the full path of executable, or raise FileNotFoundError"""
        path = shutil.which(executable)
        if path is None:
            raise FileNotFoundError(f'executable file "{executable}" not found in $PATH')
        return path

    def run(self, command, timeout=COMMAND_TIMEOUT):
        return run_command(command, timeout=timeout)


def get_kubelet_version(exec_=None):
    """
    Run 'kubelet --version' and return the reported version string.

    Raises:
        RuntimeError: if kubelet cannot be run or its output has no version
    """
    exec_ = exec_ or Exec()
    result = exec_.run(['kubelet', '--version'], timeout=30)
    if not result['success']:
        raise RuntimeError(result['stderr'].strip() or 'kubelet --version failed')

    # Output looks like "Kubernetes v1.28.2"
    match = _KUBELET_VERSION_RE.search(result['stdout'])
    if not match:
        raise RuntimeError(f"unexpected kubelet version output: {result['stdout'].strip()!r}")
    return match.group(1)
