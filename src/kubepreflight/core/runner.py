"""
Preflight Runner

Runs an ordered list of checks exactly once each, applies the ignore
list, streams warnings to the output sink as they happen and raises a
single PreflightError at the end if any error survived.

Usage:
    from kubepreflight.core.runner import run_checks
    from kubepreflight.core.models import normalize_ignore_list

    run_checks(checks, sys.stderr, normalize_ignore_list("swap,numcpu"))
"""

import logging
import sys
import time
from typing import Iterable, List, Optional, TextIO

from .checker import Checker
from .models import (
    IGNORE_ALL,
    CheckOutcome,
    IgnoreSet,
    PreflightError,
    PreflightFinding,
)

logger = logging.getLogger(__name__)


def set_has_item_or_all(ignore_set: IgnoreSet, item: str) -> bool:
    """Return True if item (case-insensitive) or 'all' is in the ignore set."""
    return IGNORE_ALL in ignore_set or item.lower() in ignore_set


def _execute(check: Checker, name: str, isolate: bool):
    """Call check.check(), optionally turning an escaping exception into an error."""
    if not isolate:
        warnings, errors = check.check()
    else:
        try:
            warnings, errors = check.check()
        except Exception as e:
            logger.error(f"Check {name} raised {type(e).__name__}: {e}")
            return [], [PreflightFinding(f"check raised {type(e).__name__}", e)]
    return list(warnings or []), list(errors or [])


def run_checks(
    checks: Iterable[Checker],
    out: Optional[TextIO] = None,
    ignore_preflight_errors: IgnoreSet = frozenset(),
    isolate: bool = False,
    results: Optional[List[CheckOutcome]] = None,
) -> None:
    """
    Run each check, write its warnings and collect its errors.

    Args:
        checks: Checks to run, in order
        out: Sink for warning lines (default sys.stderr)
        ignore_preflight_errors: Lowercase check names (or 'all') whose
            errors are downgraded to warnings
        isolate: If True, an exception raised by a check becomes an error
            for that check instead of aborting the run
        results: Optional list that receives one CheckOutcome per check

    Raises:
        PreflightError: if at least one error remains after downgrade
    """
    if out is None:
        out = sys.stderr

    errs_buffer: List[str] = []

    for check in checks:
        name = check.name()
        started = time.monotonic()
        warnings, errors = _execute(check, name, isolate)
        duration_ms = (time.monotonic() - started) * 1000

        ignored = False
        if set_has_item_or_all(ignore_preflight_errors, name):
            # Decrease severity of errors to warnings for this check
            ignored = bool(errors)
            warnings = warnings + errors
            errors = []

        for w in warnings:
            out.write(f"\t[WARNING {name}]: {w}\n")
        for e in errors:
            errs_buffer.append(f"\t[ERROR {name}]: {e}\n")

        logger.debug(
            f"Check {name}: {len(warnings)} warning(s), {len(errors)} error(s)"
            f"{' (ignored)' if ignored else ''} in {duration_ms:.1f}ms"
        )

        if results is not None:
            results.append(CheckOutcome(
                name=name,
                warnings=[str(w) for w in warnings],
                errors=[str(e) for e in errors],
                ignored=ignored,
                duration_ms=duration_ms,
            ))

    if errs_buffer:
        raise PreflightError(''.join(errs_buffer))


def run_root_check_only(ignore_preflight_errors: IgnoreSet = frozenset(),
                        out: Optional[TextIO] = None) -> None:
    """Run only the privileged user check."""
    from ..checks.system import IsPrivilegedUserCheck

    run_checks([IsPrivilegedUserCheck()], out, ignore_preflight_errors)
