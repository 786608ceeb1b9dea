"""Version skew checks."""

import logging
from typing import Optional

from ..core.checker import Checker
from ..core.models import PreflightFinding
from ..utils import system, versions

logger = logging.getLogger(__name__)

MINIMUM_KUBELET_VERSION = 'v1.22.0'


class KubernetesVersionCheck(Checker):
    """
    Warns when the cluster version is beyond what the bootstrap tool supports.

    Everything within the tool's own minor release is supported; the
    next minor release and later, pre-releases included, are not.
    """

    def __init__(self, kubeadm_version: str, kubernetes_version: str):
        self.kubeadm_version = kubeadm_version
        self.kubernetes_version = kubernetes_version

    def name(self) -> str:
        return "KubernetesVersion"

    def check(self):
        logger.debug("validating Kubernetes and kubeadm version")
        # Custom builds where the version was never set
        if versions.is_dev_build(self.kubeadm_version):
            return [], []

        try:
            kadm_version = versions.parse_semantic(self.kubeadm_version)
        except ValueError as e:
            return [], [PreflightFinding(
                f'couldn\'t parse kubeadm version "{self.kubeadm_version}"', e)]

        try:
            k8s_version = versions.parse_semantic(self.kubernetes_version)
        except ValueError as e:
            return [], [PreflightFinding(
                f'couldn\'t parse Kubernetes version "{self.kubernetes_version}"', e)]

        if k8s_version >= versions.first_unsupported(kadm_version):
            return [PreflightFinding(
                f"Kubernetes version is greater than kubeadm version. Please consider to "
                f"upgrade kubeadm. Kubernetes version: {self.kubernetes_version.lstrip('v')}. "
                f"Kubeadm version: {kadm_version.major}.{kadm_version.minor}.x")], []
        return [], []


class KubeletVersionCheck(Checker):
    """Checks the installed kubelet against the minimum and the control plane version."""

    def __init__(self, kubernetes_version: str = "",
                 exec_: Optional[system.Exec] = None,
                 minimum_version: str = MINIMUM_KUBELET_VERSION):
        self.kubernetes_version = kubernetes_version
        self.exec = exec_ or system.Exec()
        self.minimum_version = minimum_version

    def name(self) -> str:
        return "KubeletVersion"

    def check(self):
        logger.debug("validating kubelet version")
        try:
            raw = system.get_kubelet_version(self.exec)
            kubelet_version = versions.parse_semantic(raw)
        except (RuntimeError, ValueError) as e:
            return [], [PreflightFinding("couldn't get kubelet version", e)]

        if kubelet_version < versions.parse_semantic(self.minimum_version):
            return [], [PreflightFinding(
                f'Kubelet version "{raw}" is lower than kubeadm can support. Please upgrade kubelet')]

        if self.kubernetes_version:
            try:
                k8s_version = versions.parse_semantic(self.kubernetes_version)
            except ValueError as e:
                return [], [PreflightFinding(
                    f'couldn\'t parse Kubernetes version "{self.kubernetes_version}"', e)]
            if kubelet_version.major > k8s_version.major or kubelet_version.minor > k8s_version.minor:
                return [], [PreflightFinding(
                    f'the kubelet version is higher than the control plane version. This is not '
                    f'a supported version skew and may lead to a malfunctional cluster. '
                    f'Kubelet version: "{raw}" Control plane version: "{self.kubernetes_version}"')]
        return [], []
