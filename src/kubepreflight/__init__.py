"""kubepreflight - preflight checks for cluster bootstrap operations"""

from .__version__ import __version__
from .core import (
    Checker,
    PreflightError,
    normalize_ignore_list,
    run_checks,
)

__all__ = [
    '__version__',
    'Checker',
    'PreflightError',
    'normalize_ignore_list',
    'run_checks',
]
