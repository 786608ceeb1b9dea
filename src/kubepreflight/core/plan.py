"""
Check plans for the bootstrap phases.

The runner takes any list of checks; these builders assemble the lists
the command line runs for 'init' (new control plane) and 'join' (worker
node). Collaborators may be passed in; otherwise they are created from
the configuration.
"""

import logging
from typing import List, Optional

from ..checks import (
    ContainerRuntimeCheck,
    DirAvailableCheck,
    FileAvailableCheck,
    FileContentCheck,
    FirewalldCheck,
    HostnameCheck,
    HTTPProxyCheck,
    HTTPProxyCIDRCheck,
    ImagePullCheck,
    InPathCheck,
    IsPrivilegedUserCheck,
    KubeletVersionCheck,
    KubernetesVersionCheck,
    NumCPUCheck,
    PortOpenCheck,
    ServiceCheck,
    SwapCheck,
    SystemVerificationCheck,
)
from ..config.preflight_config import CONTROL_PLANE_COMPONENTS, KUBELET_PORT, PreflightConfig
from ..utils.initsystem import InitSystem
from ..utils.runtime import ContainerRuntime
from .checker import Checker

logger = logging.getLogger(__name__)

BRIDGE_NF_CALL_IPTABLES = '/proc/sys/net/bridge/bridge-nf-call-iptables'
IPV4_FORWARD = '/proc/sys/net/ipv4/ip_forward'

# Executables the node needs; (name, mandatory)
REQUIRED_EXECUTABLES = [
    ('crictl', True),
    ('conntrack', True),
    ('ip', True),
    ('iptables', True),
    ('mount', True),
    ('nsenter', True),
    ('ebtables', False),
    ('ethtool', False),
    ('socat', False),
    ('tc', False),
    ('touch', False),
]


def _common_node_checks(config: PreflightConfig, runtime: ContainerRuntime,
                        init_system: Optional[InitSystem]) -> List[Checker]:
    """Checks shared by control plane and worker nodes."""
    checks: List[Checker] = [
        FileContentCheck(BRIDGE_NF_CALL_IPTABLES, b'1'),
        FileContentCheck(IPV4_FORWARD, b'1'),
        SwapCheck(),
    ]
    for executable, mandatory in REQUIRED_EXECUTABLES:
        if executable == 'crictl' and runtime.is_docker:
            continue
        checks.append(InPathCheck(executable, mandatory=mandatory))
    checks.extend([
        SystemVerificationCheck(is_docker=runtime.is_docker),
        HostnameCheck(config.node_name),
        KubeletVersionCheck(config.kubernetes_version),
        ServiceCheck('kubelet', check_if_active=False, init_system=init_system),
        PortOpenCheck(KUBELET_PORT),
    ])
    return checks


def build_init_checks(config: PreflightConfig,
                      init_system: Optional[InitSystem] = None,
                      runtime: Optional[ContainerRuntime] = None) -> List[Checker]:
    """Checks run before bringing up a new control plane node."""
    runtime = runtime or ContainerRuntime(config.cri_socket)
    manifests = config.manifests_dir

    checks: List[Checker] = [
        IsPrivilegedUserCheck(),
        ContainerRuntimeCheck(runtime),
        NumCPUCheck(config.min_cpus),
        KubernetesVersionCheck(config.kubeadm_version, config.kubernetes_version),
        FirewalldCheck([config.api_server_port, KUBELET_PORT], init_system=init_system),
        PortOpenCheck(config.api_server_port),
    ]
    checks.extend(PortOpenCheck(port) for port in config.control_plane_ports
                  if port not in (config.api_server_port, KUBELET_PORT))
    checks.extend(FileAvailableCheck(f"{manifests}/{component}.yaml")
                  for component in CONTROL_PLANE_COMPONENTS
                  if component != 'etcd' or not config.external_etcd)
    checks.append(HTTPProxyCheck('https', config.advertise_address or config.node_name))
    checks.append(HTTPProxyCIDRCheck('https', config.service_cidr))
    checks.append(HTTPProxyCIDRCheck('https', config.pod_cidr))

    if not config.external_etcd:
        checks.append(DirAvailableCheck(config.etcd_data_dir))

    checks.extend(_common_node_checks(config, runtime, init_system))

    if config.images:
        checks.append(ImagePullCheck(runtime, config.images, config.image_pull_policy))

    logger.debug(f"init plan has {len(checks)} checks")
    return checks


def build_join_checks(config: PreflightConfig,
                      init_system: Optional[InitSystem] = None,
                      runtime: Optional[ContainerRuntime] = None) -> List[Checker]:
    """Checks run before joining a worker node to an existing cluster."""
    runtime = runtime or ContainerRuntime(config.cri_socket)
    kube_dir = config.kubernetes_dir

    checks: List[Checker] = [
        IsPrivilegedUserCheck(),
        ContainerRuntimeCheck(runtime),
        DirAvailableCheck(config.manifests_dir),
        FileAvailableCheck(f"{kube_dir}/kubelet.conf"),
        FileAvailableCheck(f"{kube_dir}/bootstrap-kubelet.conf"),
        FileAvailableCheck(f"{kube_dir}/pki/ca.crt"),
    ]
    checks.extend(_common_node_checks(config, runtime, init_system))

    logger.debug(f"join plan has {len(checks)} checks")
    return checks


PLANS = {
    'init': build_init_checks,
    'join': build_join_checks,
}
