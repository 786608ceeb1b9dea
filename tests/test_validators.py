"""
Tests for the system validators.

Run: python3 -m pytest tests/test_validators.py -v
"""

import io
from unittest.mock import MagicMock, patch

import pytest

from kubepreflight.utils.validators import (
    DEFAULT_SYS_SPEC,
    CgroupsValidator,
    DockerValidator,
    KernelValidator,
    OSValidator,
    StreamReporter,
    Validator,
)

PROC_CGROUPS = """#subsys_name\thierarchy\tnum_cgroups\tenabled
cpuset\t2\t1\t1
cpu\t3\t64\t1
cpuacct\t3\t64\t1
blkio\t4\t64\t1
memory\t5\t90\t1
devices\t6\t64\t1
pids\t7\t64\t1
hugetlb\t8\t1\t0
"""


def reporter():
    stream = io.StringIO()
    return StreamReporter(stream), stream


class TestKernelValidator:
    """Tests for KernelValidator."""

    def test_supported(self):
        rep, stream = reporter()
        assert KernelValidator(rep, release='5.15.0-91-generic').validate(DEFAULT_SYS_SPEC) == ([], [])
        assert stream.getvalue() == "KERNEL_VERSION: 5.15.0-91-generic (ok)\n"

    def test_unsupported(self):
        rep, stream = reporter()
        warnings, errors = KernelValidator(rep, release='2.6.32').validate(DEFAULT_SYS_SPEC)
        assert [str(e) for e in errors] == ["unsupported kernel release: 2.6.32"]
        assert "(bad)" in stream.getvalue()


class TestOSValidator:
    """Tests for OSValidator."""

    def test_linux(self):
        rep, stream = reporter()
        with patch('platform.system', return_value='Linux'), \
                patch('distro.name', return_value='Ubuntu 22.04.3 LTS'):
            assert OSValidator(rep).validate(DEFAULT_SYS_SPEC) == ([], [])
        assert "DISTRIBUTION: Ubuntu 22.04.3 LTS (ok)" in stream.getvalue()

    def test_other_os(self):
        rep, _ = reporter()
        with patch('platform.system', return_value='Darwin'):
            warnings, errors = OSValidator(rep).validate(DEFAULT_SYS_SPEC)
        assert [str(e) for e in errors] == ["unsupported operating system: Darwin"]


class TestCgroupsValidator:
    """Tests for CgroupsValidator."""

    def test_v1_all_required(self, tmp_path):
        proc = tmp_path / 'cgroups'
        proc.write_text(PROC_CGROUPS)
        rep, _ = reporter()

        warnings, errors = CgroupsValidator(rep, str(proc), str(tmp_path / 'none')).validate(DEFAULT_SYS_SPEC)

        assert errors == []
        assert [str(w) for w in warnings] == ["missing optional cgroups: hugetlb"]

    def test_v1_missing_required(self, tmp_path):
        proc = tmp_path / 'cgroups'
        proc.write_text(PROC_CGROUPS.replace("pids\t7\t64\t1", "pids\t7\t64\t0"))
        rep, stream = reporter()

        warnings, errors = CgroupsValidator(rep, str(proc), str(tmp_path / 'none')).validate(DEFAULT_SYS_SPEC)

        assert [str(e) for e in errors] == ["missing required cgroups: pids"]
        assert "CGROUPS_PIDS: missing (bad)" in stream.getvalue()

    def test_v2_controllers(self, tmp_path):
        controllers = tmp_path / 'cgroup.controllers'
        controllers.write_text("cpuset cpu io memory hugetlb pids rdma misc\n")
        rep, stream = reporter()

        warnings, errors = CgroupsValidator(rep, str(tmp_path / 'none'), str(controllers)).validate(DEFAULT_SYS_SPEC)

        assert errors == []
        assert [str(w) for w in warnings] == ["missing optional cgroups: blkio"]
        assert "CGROUPS_VERSION: v2 (ok)" in stream.getvalue()

    def test_unreadable(self, tmp_path):
        rep, _ = reporter()

        warnings, errors = CgroupsValidator(rep, str(tmp_path / 'a'), str(tmp_path / 'b')).validate(DEFAULT_SYS_SPEC)

        assert str(errors[0]).startswith("failed to get cgroup subsystems")


class TestDockerValidator:
    """Tests for DockerValidator."""

    def _exec(self, stdout='24.0.7\n', success=True):
        exec_ = MagicMock()
        exec_.run.return_value = {
            'returncode': 0 if success else 1,
            'stdout': stdout,
            'stderr': '' if success else 'Cannot connect to the Docker daemon',
            'success': success,
        }
        return exec_

    def test_validated_version(self):
        rep, _ = reporter()
        assert DockerValidator(rep, exec_=self._exec()).validate(DEFAULT_SYS_SPEC) == ([], [])

    def test_unvalidated_version_warns(self):
        rep, _ = reporter()
        warnings, errors = DockerValidator(rep, exec_=self._exec('1.9.1\n')).validate(DEFAULT_SYS_SPEC)
        assert errors == []
        assert "1.9.1" in str(warnings[0])

    def test_docker_unreachable(self):
        rep, _ = reporter()
        warnings, errors = DockerValidator(rep, exec_=self._exec(success=False)).validate(DEFAULT_SYS_SPEC)
        assert str(errors[0]) == "failed to get docker info: Cannot connect to the Docker daemon"


class TestValidatorBase:
    """Tests for the Validator base class."""

    def test_is_abstract(self):
        rep, _ = reporter()
        with pytest.raises(TypeError):
            Validator(rep)
