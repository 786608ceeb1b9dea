"""
Preflight configuration loaded from YAML.

Example config.yaml:

    kubernetes_version: v1.28.2
    kubeadm_version: v1.28.0
    node_name: cp-1
    advertise_address: 192.168.1.10
    image_pull_policy: IfNotPresent
    images:
      - registry.k8s.io/kube-apiserver:v1.28.2
    ignore_preflight_errors: [Swap]

Values not present in the file come from the PREFLIGHT_* environment
settings (see utils.env_config) or the built-in defaults below.
"""

import logging
import socket
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from ..core.models import ConfigError, PullPolicy
from ..utils.env_config import get_config, get_config_bool, get_config_int, get_config_list

logger = logging.getLogger(__name__)

# Control plane component ports
KUBE_APISERVER_PORT = 6443
KUBE_CONTROLLER_MANAGER_PORT = 10257
KUBE_SCHEDULER_PORT = 10259
KUBELET_PORT = 10250
ETCD_CLIENT_PORT = 2379
ETCD_PEER_PORT = 2380

KUBERNETES_DIR = '/etc/kubernetes'
ETCD_DATA_DIR = '/var/lib/etcd'
CONTROL_PLANE_COMPONENTS = ['kube-apiserver', 'kube-controller-manager', 'kube-scheduler', 'etcd']

DEFAULT_SERVICE_CIDR = '10.96.0.0/12'


def _default_node_name() -> str:
    return socket.gethostname().lower()


@dataclass
class PreflightConfig:
    """Inputs the check plans are built from."""
    kubernetes_version: str = 'v1.28.0'
    kubeadm_version: str = 'v1.28.0'
    node_name: str = field(default_factory=_default_node_name)
    advertise_address: str = ''
    cri_socket: str = field(default_factory=lambda: get_config('PREFLIGHT_CRI_SOCKET'))
    image_pull_policy: str = field(default_factory=lambda: get_config('PREFLIGHT_IMAGE_PULL_POLICY'))
    images: List[str] = field(default_factory=list)
    min_cpus: int = field(default_factory=lambda: get_config_int('PREFLIGHT_MIN_CPUS', 2))
    service_cidr: str = DEFAULT_SERVICE_CIDR
    pod_cidr: str = ''
    api_server_port: int = KUBE_APISERVER_PORT
    external_etcd: bool = False
    kubernetes_dir: str = KUBERNETES_DIR
    etcd_data_dir: str = ETCD_DATA_DIR
    ignore_preflight_errors: List[str] = field(
        default_factory=lambda: get_config_list('PREFLIGHT_IGNORE_ERRORS'))
    isolate_checks: bool = field(
        default_factory=lambda: get_config_bool('PREFLIGHT_ISOLATE_CHECKS'))

    @property
    def manifests_dir(self) -> str:
        return f"{self.kubernetes_dir}/manifests"

    @property
    def control_plane_ports(self) -> List[int]:
        ports = [self.api_server_port, KUBE_CONTROLLER_MANAGER_PORT, KUBE_SCHEDULER_PORT, KUBELET_PORT]
        if not self.external_etcd:
            ports.extend([ETCD_CLIENT_PORT, ETCD_PEER_PORT])
        return ports

    def validate(self) -> None:
        """Raise ConfigError if a value is unusable."""
        try:
            PullPolicy(self.image_pull_policy)
        except ValueError:
            raise ConfigError(
                f"invalid image_pull_policy {self.image_pull_policy!r}, "
                f"expected one of {[p.value for p in PullPolicy]}")
        if not isinstance(self.min_cpus, int) or self.min_cpus < 0:
            raise ConfigError(f"min_cpus must be a non-negative integer, got {self.min_cpus!r}")
        if not isinstance(self.images, list) or not all(isinstance(i, str) for i in self.images):
            raise ConfigError("images must be a list of image references")
        if not isinstance(self.ignore_preflight_errors, list):
            raise ConfigError("ignore_preflight_errors must be a list")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PreflightConfig':
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
        try:
            config = cls(**data)
        except TypeError as e:
            raise ConfigError(f"invalid configuration: {e}") from e
        config.validate()
        return config


def load_config(path: Optional[str] = None, required: bool = False) -> PreflightConfig:
    """
    Load preflight configuration from a YAML file.

    Args:
        path: Config file path (default PREFLIGHT_CONFIG_PATH)
        required: Raise ConfigError if the file does not exist

    Raises:
        ConfigError: if the file is missing (when required), unreadable or invalid
    """
    config_path = Path(path or get_config('PREFLIGHT_CONFIG_PATH'))

    if not config_path.exists():
        if required:
            raise ConfigError(f"config file not found: {config_path}")
        logger.debug(f"No config file at {config_path}, using defaults")
        config = PreflightConfig()
        config.validate()
        return config

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"failed to read config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config file {config_path} must contain a mapping")

    logger.debug(f"Loaded config from {config_path}")
    return PreflightConfig.from_dict(data)
