"""Shared fixtures for kubepreflight tests."""

import os
import sys

import pytest

# Allow running the tests from a source checkout without installing
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'src'))

from kubepreflight.core.checker import Checker  # noqa: E402
from kubepreflight.core.models import PreflightFinding  # noqa: E402


class StaticCheck(Checker):
    """Check returning fixed findings and counting its runs."""

    def __init__(self, name, warnings=(), errors=(), raises=None):
        self._name = name
        self._warnings = list(warnings)
        self._errors = list(errors)
        self._raises = raises
        self.calls = 0

    def name(self):
        return self._name

    def check(self):
        self.calls += 1
        if self._raises is not None:
            raise self._raises
        return ([PreflightFinding(w) for w in self._warnings],
                [PreflightFinding(e) for e in self._errors])


@pytest.fixture
def make_check():
    """Factory for StaticCheck instances."""
    return StaticCheck


@pytest.fixture
def clean_env(monkeypatch):
    """Remove PREFLIGHT_* and proxy settings from the environment."""
    for key in list(os.environ):
        if key.startswith('PREFLIGHT_') or key.lower() in (
                'http_proxy', 'https_proxy', 'all_proxy', 'no_proxy'):
            monkeypatch.delenv(key, raising=False)
    return monkeypatch
