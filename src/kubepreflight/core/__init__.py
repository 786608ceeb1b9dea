"""
Preflight core: the check contract, the runner and the shared models.

Usage:
    from kubepreflight.core import run_checks, normalize_ignore_list

    run_checks(checks, sys.stderr, normalize_ignore_list("Swap"))
"""

from .checker import Checker, LabeledChecker
from .models import (
    CheckOutcome,
    ConfigError,
    KubePreflightError,
    PreflightError,
    PreflightFinding,
    PullPolicy,
    is_preflight_error,
    normalize_ignore_list,
)
from .runner import run_checks, run_root_check_only, set_has_item_or_all

__all__ = [
    'Checker',
    'LabeledChecker',
    'CheckOutcome',
    'ConfigError',
    'KubePreflightError',
    'PreflightError',
    'PreflightFinding',
    'PullPolicy',
    'is_preflight_error',
    'normalize_ignore_list',
    'run_checks',
    'run_root_check_only',
    'set_has_item_or_all',
]
