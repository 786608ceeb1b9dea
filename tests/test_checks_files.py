"""
Tests for file and directory checks.

Run: python3 -m pytest tests/test_checks_files.py -v
"""

import os
from unittest.mock import patch

from kubepreflight.checks.files import (
    DirAvailableCheck,
    FileAvailableCheck,
    FileContentCheck,
    FileExistingCheck,
)


class TestNames:
    """Tests for default and labelled names."""

    def test_default_names_replace_slashes(self):
        assert FileAvailableCheck('/etc/kubernetes/admin.conf').name() == \
            'FileAvailable--etc-kubernetes-admin.conf'
        assert FileExistingCheck('/usr/bin/kubelet').name() == 'FileExisting--usr-bin-kubelet'
        assert DirAvailableCheck('/var/lib/etcd').name() == 'DirAvailable--var-lib-etcd'
        assert FileContentCheck('/proc/sys/net/ipv4/ip_forward', b'1').name() == \
            'FileContent--proc-sys-net-ipv4-ip_forward'

    def test_label_overrides_name(self):
        assert DirAvailableCheck('/var/lib/etcd', label='EtcdDir').name() == 'EtcdDir'


class TestDirAvailableCheck:
    """Tests for DirAvailableCheck."""

    def test_missing_dir_passes(self, tmp_path):
        warnings, errors = DirAvailableCheck(str(tmp_path / 'nope')).check()
        assert warnings == [] and errors == []

    def test_empty_dir_passes(self, tmp_path):
        warnings, errors = DirAvailableCheck(str(tmp_path)).check()
        assert errors == []

    def test_non_empty_dir_fails(self, tmp_path):
        (tmp_path / 'member').mkdir()

        warnings, errors = DirAvailableCheck(str(tmp_path)).check()

        assert [str(e) for e in errors] == [f"{tmp_path} is not empty"]

    def test_unreadable_dir_fails(self, tmp_path):
        with patch('os.scandir', side_effect=PermissionError("denied")):
            warnings, errors = DirAvailableCheck(str(tmp_path)).check()

        assert len(errors) == 1
        assert str(errors[0]) == f"unable to check if {tmp_path} is empty: denied"


class TestFileAvailableCheck:
    """Tests for FileAvailableCheck."""

    def test_absent_file_passes(self, tmp_path):
        warnings, errors = FileAvailableCheck(str(tmp_path / 'admin.conf')).check()
        assert errors == []

    def test_existing_file_fails(self, tmp_path):
        path = tmp_path / 'admin.conf'
        path.write_text('x')

        warnings, errors = FileAvailableCheck(str(path)).check()

        assert [str(e) for e in errors] == [f"{path} already exists"]


class TestFileExistingCheck:
    """Tests for FileExistingCheck."""

    def test_existing_file_passes(self, tmp_path):
        path = tmp_path / 'kubelet'
        path.write_text('x')
        assert FileExistingCheck(str(path)).check() == ([], [])

    def test_missing_file_fails(self, tmp_path):
        path = tmp_path / 'kubelet'
        warnings, errors = FileExistingCheck(str(path)).check()
        assert [str(e) for e in errors] == [f"{path} doesn't exist"]


class TestFileContentCheck:
    """Tests for FileContentCheck."""

    def test_matching_prefix_passes(self, tmp_path):
        path = tmp_path / 'ip_forward'
        path.write_bytes(b'1\n')

        assert FileContentCheck(str(path), b'1').check() == ([], [])

    def test_wrong_content_fails(self, tmp_path):
        path = tmp_path / 'ip_forward'
        path.write_bytes(b'0\n')

        warnings, errors = FileContentCheck(str(path), b'1').check()

        assert [str(e) for e in errors] == [f"{path} contents are not set to 1"]

    def test_missing_file_fails(self, tmp_path):
        path = tmp_path / 'bridge-nf-call-iptables'

        warnings, errors = FileContentCheck(str(path), b'1').check()

        assert [str(e) for e in errors] == [f"{path} does not exist"]

    def test_str_content_accepted(self, tmp_path):
        path = tmp_path / 'f'
        path.write_bytes(b'abc')
        assert FileContentCheck(str(path), 'ab').check() == ([], [])

    def test_runs_repeatedly(self, tmp_path):
        path = tmp_path / 'f'
        path.write_bytes(b'1')
        check = FileContentCheck(str(path), b'1')
        assert check.check() == check.check() == ([], [])
        assert os.path.exists(path)
