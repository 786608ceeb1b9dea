"""File and directory checks."""

import logging
import os
from typing import Optional

from ..core.checker import LabeledChecker, path_label
from ..core.models import PreflightFinding

logger = logging.getLogger(__name__)


class DirAvailableCheck(LabeledChecker):
    """Checks that a directory either does not exist or is empty."""

    def __init__(self, path: str, label: Optional[str] = None):
        super().__init__(label)
        self.path = path

    def default_name(self) -> str:
        return path_label("DirAvailable", self.path)

    def check(self):
        logger.debug(f"validating the existence and emptiness of directory {self.path}")

        if not os.path.exists(self.path):
            return [], []

        try:
            with os.scandir(self.path) as entries:
                has_entry = next(entries, None) is not None
        except OSError as e:
            return [], [PreflightFinding(f"unable to check if {self.path} is empty", e)]

        if has_entry:
            return [], [PreflightFinding(f"{self.path} is not empty")]
        return [], []


class FileAvailableCheck(LabeledChecker):
    """Checks that a file does not already exist."""

    def __init__(self, path: str, label: Optional[str] = None):
        super().__init__(label)
        self.path = path

    def default_name(self) -> str:
        return path_label("FileAvailable", self.path)

    def check(self):
        logger.debug(f"validating the existence of file {self.path}")

        if os.path.exists(self.path):
            return [], [PreflightFinding(f"{self.path} already exists")]
        return [], []


class FileExistingCheck(LabeledChecker):
    """Checks that a file exists."""

    def __init__(self, path: str, label: Optional[str] = None):
        super().__init__(label)
        self.path = path

    def default_name(self) -> str:
        return path_label("FileExisting", self.path)

    def check(self):
        logger.debug(f"validating the existence of file {self.path}")

        if not os.path.exists(self.path):
            return [], [PreflightFinding(f"{self.path} doesn't exist")]
        return [], []


class FileContentCheck(LabeledChecker):
    """Checks that a file starts with the expected content.

    Only ``len(content)`` bytes are read, so "/proc/sys/net/ipv4/ip_forward"
    containing "1\\n" passes a check for b"1".
    """

    def __init__(self, path: str, content: bytes, label: Optional[str] = None):
        super().__init__(label)
        self.path = path
        self.content = content if isinstance(content, bytes) else str(content).encode()

    def default_name(self) -> str:
        return path_label("FileContent", self.path)

    def check(self):
        logger.debug(f"validating the contents of file {self.path}")

        try:
            f = open(self.path, 'rb')
        except OSError:
            return [], [PreflightFinding(f"{self.path} does not exist")]

        with f:
            try:
                data = f.read(len(self.content))
            except OSError:
                return [], [PreflightFinding(f"{self.path} could not be read")]

        if data != self.content:
            return [], [PreflightFinding(
                f"{self.path} contents are not set to {self.content.decode(errors='replace')}")]
        return [], []
