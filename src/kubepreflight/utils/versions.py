"""Semantic version parsing and precedence (semver.org 2.0.0)"""

import re
from dataclasses import dataclass, field
from functools import total_ordering
from typing import Tuple, Union

# Versions of "custom builds" where the build version was never set
DEV_BUILD_PREFIX = 'v0.0.0'

_IDENT = r'[0-9A-Za-z-]+'
_SEMVER_RE = re.compile(
    r'^v?(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)'
    rf'(?:-(?P<pre>{_IDENT}(?:\.{_IDENT})*))?'
    rf'(?:\+(?P<build>{_IDENT}(?:\.{_IDENT})*))?$'
)


def _has_leading_zero(part):
    return len(part) > 1 and part.startswith('0')


@total_ordering
@dataclass(frozen=True, eq=False)
class SemanticVersion:
    """
    A parsed semantic version.

    Ordering follows semver precedence: numeric core first, a release
    sorts above any of its pre-releases, pre-release identifiers compare
    numerically when numeric and lexically otherwise (numeric below
    alphanumeric), and a shorter identifier list sorts first when it is a
    prefix of the longer one. Build metadata is ignored.
    """
    major: int
    minor: int
    patch: int
    pre_release: Tuple[Union[int, str], ...] = ()
    build: str = field(default='')

    @property
    def is_pre_release(self):
        return bool(self.pre_release)

    def _precedence(self):
        pre = tuple((0, p, '') if isinstance(p, int) else (1, 0, p) for p in self.pre_release)
        return (self.major, self.minor, self.patch, 0 if pre else 1, pre)

    def __eq__(self, other):
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence() == other._precedence()

    def __lt__(self, other):
        if not isinstance(other, SemanticVersion):
            return NotImplemented
        return self._precedence() < other._precedence()

    def __hash__(self):
        return hash(self._precedence())

    def __str__(self):
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release:
            text += '-' + '.'.join(str(p) for p in self.pre_release)
        if self.build:
            text += f"+{self.build}"
        return text


def is_dev_build(ver_str):
    """True for the pinned dev-build sentinel version"""
    return ver_str.startswith(DEV_BUILD_PREFIX)


def parse_semantic(ver_str):
    """Parse a strict semantic version ('v1.28.0', '1.29.0-alpha.3.50+f5d1f4b')

    A leading 'v' is accepted. Core components and numeric pre-release
    identifiers must not have leading zeros.

    Raises:
        ValueError: if ver_str is not a semantic version
    """
    match = _SEMVER_RE.match(ver_str.strip()) if ver_str else None
    if not match:
        raise ValueError(f'could not parse "{ver_str}" as version')

    for part in (match['major'], match['minor'], match['patch']):
        if _has_leading_zero(part):
            raise ValueError(f'illegal zero-prefixed version component "{part}" in "{ver_str}"')

    pre_release = []
    if match['pre']:
        for ident in match['pre'].split('.'):
            if ident.isdigit():
                if _has_leading_zero(ident):
                    raise ValueError(
                        f'illegal zero-prefixed version component "{ident}" in "{ver_str}"')
                pre_release.append(int(ident))
            else:
                pre_release.append(ident)

    return SemanticVersion(
        int(match['major']),
        int(match['minor']),
        int(match['patch']),
        tuple(pre_release),
        match['build'] or '',
    )


def first_unsupported(ver):
    """Lowest version of the next minor release ('1.(m+1).0-0'), pre-releases included"""
    return SemanticVersion(ver.major, ver.minor + 1, 0, (0,))
