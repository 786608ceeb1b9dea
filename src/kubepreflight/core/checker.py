"""
Checker base class.

Every preflight check exposes two operations:

    name()   -> stable label, matched case-insensitively against the ignore list
    check()  -> (warnings, errors), two lists of exceptions

Warnings never block. Errors block unless the check is ignored. A check
with no findings returns two empty lists. Checks may have side effects
(an image pull mutates the runtime's image cache) but calling check()
more than once must be safe.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple


Findings = Tuple[List[BaseException], List[BaseException]]


class Checker(ABC):
    """Abstract preflight check."""

    @abstractmethod
    def name(self) -> str:
        """Return the label for this check."""

    @abstractmethod
    def check(self) -> Findings:
        """Run the validation and return (warnings, errors)."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name()!r}>"


class LabeledChecker(Checker):
    """
    Checker whose name is an optional label falling back to a default
    derived from its configuration.
    """

    def __init__(self, label: Optional[str] = None):
        self.label = label or ""

    def name(self) -> str:
        if self.label:
            return self.label
        return self.default_name()

    @abstractmethod
    def default_name(self) -> str:
        """Name used when no label was given."""


def path_label(prefix: str, path: str) -> str:
    """Build a name like 'FileAvailable--etc-kubernetes-admin.conf'."""
    return f"{prefix}-{path.replace('/', '-')}"
