"""
Preflight check implementations.

Usage:
    from kubepreflight.checks import PortOpenCheck, SwapCheck
"""

from .files import (
    DirAvailableCheck,
    FileAvailableCheck,
    FileContentCheck,
    FileExistingCheck,
)
from .network import (
    HostnameCheck,
    HTTPProxyCheck,
    HTTPProxyCIDRCheck,
    PortOpenCheck,
)
from .runtime import ContainerRuntimeCheck, ImagePullCheck
from .services import FirewalldCheck, ServiceCheck
from .system import (
    InPathCheck,
    IsPrivilegedUserCheck,
    NumCPUCheck,
    SwapCheck,
    SystemVerificationCheck,
)
from .versions import KubeletVersionCheck, KubernetesVersionCheck

__all__ = [
    'ContainerRuntimeCheck',
    'DirAvailableCheck',
    'FileAvailableCheck',
    'FileContentCheck',
    'FileExistingCheck',
    'FirewalldCheck',
    'HostnameCheck',
    'HTTPProxyCheck',
    'HTTPProxyCIDRCheck',
    'ImagePullCheck',
    'InPathCheck',
    'IsPrivilegedUserCheck',
    'KubeletVersionCheck',
    'KubernetesVersionCheck',
    'NumCPUCheck',
    'PortOpenCheck',
    'ServiceCheck',
    'SwapCheck',
    'SystemVerificationCheck',
]
