"""
Tests for init system detection and queries.

Run: python3 -m pytest tests/test_initsystem.py -v
"""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from kubepreflight.utils.initsystem import (
    InitSystem,
    InitSystemError,
    OpenRCInitSystem,
    SystemdInitSystem,
    get_init_system,
)


class TestGetInitSystem:
    """Tests for get_init_system."""

    def test_systemd(self):
        with patch('shutil.which', side_effect=lambda cmd: '/bin/systemctl' if cmd == 'systemctl' else None):
            assert isinstance(get_init_system(), SystemdInitSystem)

    def test_openrc(self):
        with patch('shutil.which', side_effect=lambda cmd: '/sbin/openrc' if cmd == 'openrc' else None):
            assert isinstance(get_init_system(), OpenRCInitSystem)

    def test_none(self):
        with patch('shutil.which', return_value=None):
            with pytest.raises(InitSystemError):
                get_init_system()


class TestSystemdInitSystem:
    """Tests for SystemdInitSystem."""

    def test_enable_command(self):
        assert SystemdInitSystem().enable_command('kubelet') == 'systemctl enable kubelet.service'

    def test_service_active(self):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout='active\n', stderr='')

            assert SystemdInitSystem().service_is_active('kubelet') is True
            args = mock_run.call_args[0][0]
            assert args == ['systemctl', 'is-active', 'kubelet']

    def test_service_inactive(self):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(returncode=3, stdout='inactive\n', stderr='')
            assert SystemdInitSystem().service_is_active('kubelet') is False

    def test_service_enabled(self):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout='enabled\n', stderr='')
            assert SystemdInitSystem().service_is_enabled('kubelet') is True

    def test_service_missing(self):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(
                returncode=4, stdout='', stderr='Unit kubelet.service could not be found.\n')
            assert SystemdInitSystem().service_exists('kubelet') is False

    def test_service_exists_when_stopped(self):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(
                returncode=3, stdout='kubelet.service - kubelet\n   Active: inactive (dead)\n', stderr='')
            assert SystemdInitSystem().service_exists('kubelet') is True

    def test_systemctl_not_found(self):
        with patch('subprocess.run', side_effect=FileNotFoundError("systemctl not found")):
            init_system = SystemdInitSystem()
            assert init_system.service_exists('kubelet') is False
            assert init_system.service_is_enabled('kubelet') is False
            assert init_system.service_is_active('kubelet') is False

    def test_timeout(self):
        with patch('subprocess.run', side_effect=subprocess.TimeoutExpired('systemctl', 5)):
            assert SystemdInitSystem().service_is_active('kubelet') is False


class TestOpenRCInitSystem:
    """Tests for OpenRCInitSystem."""

    def test_enable_command(self):
        assert OpenRCInitSystem().enable_command('kubelet') == 'rc-update add kubelet default'

    def test_enabled_from_runlevel(self):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(
                returncode=0, stdout='  kubelet | default\n   sshd | default\n', stderr='')
            assert OpenRCInitSystem().service_is_enabled('kubelet') is True
            assert OpenRCInitSystem().service_is_enabled('docker') is False

    def test_active(self):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(returncode=0, stdout=' * status: started\n', stderr='')
            assert OpenRCInitSystem().service_is_active('kubelet') is True

    def test_stopped(self):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(returncode=3, stdout=' * status: stopped\n', stderr='')
            assert OpenRCInitSystem().service_is_active('kubelet') is False

    def test_missing(self):
        with patch('subprocess.run') as mock_run:
            mock_run.return_value = MagicMock(
                returncode=1, stdout='', stderr=' * rc-service: service `kubelet\' does not exist\n')
            assert OpenRCInitSystem().service_exists('kubelet') is False


class TestInitSystemBase:
    """Tests for the InitSystem base class."""

    def test_is_abstract(self):
        with pytest.raises(TypeError):
            InitSystem()

    def test_partial_subclass_is_abstract(self):
        class EnableOnly(InitSystem):
            def enable_command(self, service):
                return f"enable {service}"

        with pytest.raises(TypeError):
            EnableOnly()
