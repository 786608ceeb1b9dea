"""
Preflight Data Models

Shared types for checks, the runner and the reporting layers:
- PreflightFinding: one warning or error reported by a check
- PreflightError: the single aggregate failure raised by the runner
- CheckOutcome: per-check record for reports / JSON output
- PullPolicy: image pull policy used by the image pull check
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Union


PREFLIGHT_HEADER = "[preflight] Some fatal errors occurred:\n"
PREFLIGHT_HINT = (
    "[preflight] If you know what you are doing, you can make a check "
    "non-fatal with `--ignore-preflight-errors=...`"
)

# Reserved ignore-list token that downgrades every check
IGNORE_ALL = "all"


class KubePreflightError(Exception):
    """Base class for errors raised by kubepreflight collaborators."""


class ConfigError(KubePreflightError):
    """Raised when preflight configuration cannot be loaded or is invalid."""


class PreflightFinding(Exception):
    """A single finding (warning or error) reported by a check."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message}: {self.cause}"
        return self.message


class PreflightError(KubePreflightError):
    """
    Aggregate failure raised when at least one check error survives
    the ignore list.

    Attributes:
        msg: The buffered error lines, one ``\\t[ERROR <name>]: <message>``
             line per surviving error
    """

    def __init__(self, msg: str):
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return f"{PREFLIGHT_HEADER}{self.msg}{PREFLIGHT_HINT}"

    def preflight(self) -> bool:
        """Identifies this error as a preflight error."""
        return True

    @property
    def error_lines(self) -> List[str]:
        """The individual error lines, without trailing newlines."""
        return [line for line in self.msg.splitlines() if line]


def is_preflight_error(exc: BaseException) -> bool:
    """Return True if exc carries the preflight marker capability."""
    marker = getattr(exc, 'preflight', None)
    return callable(marker) and bool(marker())


class PullPolicy(Enum):
    """Image pull policies, named as in the Kubernetes API."""
    NEVER = "Never"                    # Never pull, assume images are present
    IF_NOT_PRESENT = "IfNotPresent"    # Pull only images missing locally
    ALWAYS = "Always"                  # Pull every image


IgnoreSet = FrozenSet[str]


def normalize_ignore_list(values: Union[str, Iterable[str], None]) -> IgnoreSet:
    """
    Build an IgnoreSet from user input.

    Accepts a comma-separated string or any iterable of strings (each of
    which may itself be comma-separated, as repeated CLI flags are).
    Tokens are stripped and lowercased; empty tokens are dropped.
    """
    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]

    tokens = set()
    for value in values:
        for token in str(value).split(','):
            token = token.strip().lower()
            if token:
                tokens.add(token)
    return frozenset(tokens)


@dataclass
class CheckOutcome:
    """
    What one check reported during a run, after the ignore list was applied.

    Attributes:
        name: Check name as reported by the check
        warnings: Rendered warning messages (includes downgraded errors)
        errors: Rendered error messages that survived the ignore list
        ignored: True if the check's errors were downgraded
        duration_ms: How long the check took
    """
    name: str
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    ignored: bool = False
    duration_ms: Optional[float] = None

    @property
    def passed(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for JSON output."""
        return {
            "name": self.name,
            "passed": self.passed,
            "ignored": self.ignored,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "duration_ms": self.duration_ms,
        }
