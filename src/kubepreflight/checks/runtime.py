"""
Container runtime checks.

ImagePullCheck is a mutating check: running it may pull images into the
runtime's local image store.
"""

import logging
from typing import List, Union

from ..core.checker import Checker
from ..core.models import PreflightFinding, PullPolicy
from ..utils.runtime import ContainerRuntime, RuntimeCommandError

logger = logging.getLogger(__name__)


class ContainerRuntimeCheck(Checker):
    """Checks that the container runtime is up."""

    def __init__(self, runtime: ContainerRuntime):
        self.runtime = runtime

    def name(self) -> str:
        return "CRI"

    def check(self):
        logger.debug("validating the container runtime")
        try:
            self.runtime.is_running()
        except RuntimeCommandError as e:
            return [], [e]
        return [], []


class ImagePullCheck(Checker):
    """Pulls the images the cluster needs, according to the pull policy."""

    def __init__(self, runtime: ContainerRuntime, image_list: List[str],
                 image_pull_policy: Union[PullPolicy, str] = PullPolicy.IF_NOT_PRESENT):
        self.runtime = runtime
        self.image_list = list(image_list)
        self.image_pull_policy = image_pull_policy

    def name(self) -> str:
        return "ImagePull"

    def _policy(self):
        """Return the PullPolicy, or None if the configured value is unknown."""
        if isinstance(self.image_pull_policy, PullPolicy):
            return self.image_pull_policy
        try:
            return PullPolicy(self.image_pull_policy)
        except ValueError:
            return None

    def _needs_pull(self, image: str, policy: PullPolicy, errors: List[BaseException]) -> bool:
        """Decide whether image must be pulled; existence query failures go to errors."""
        if policy is PullPolicy.NEVER:
            logger.debug(f"skipping pull of image: {image}")
            return False
        if policy is PullPolicy.ALWAYS:
            return True

        try:
            exists = self.runtime.image_exists(image)
        except RuntimeCommandError as e:
            errors.append(PreflightFinding(f"failed to check if image {image} exists", e))
            return True
        if exists:
            logger.debug(f"image exists: {image}")
            return False
        return True

    def _pull(self, image: str, errors: List[BaseException]) -> None:
        logger.debug(f"pulling: {image}")
        try:
            self.runtime.pull_image(image)
        except RuntimeCommandError as e:
            errors.append(PreflightFinding(f"failed to pull image {image}", e))

    def check(self):
        policy = self._policy()
        policy_name = policy.value if policy else self.image_pull_policy
        logger.debug(f"using image pull policy: {policy_name}")

        errors: List[BaseException] = []
        if policy is None and self.image_list:
            # Unknown policy: stop with a single error
            errors.append(PreflightFinding(f'unsupported pull policy "{self.image_pull_policy}"'))
            return [], errors

        for image in self.image_list:
            if self._needs_pull(image, policy, errors):
                self._pull(image, errors)
        return [], errors
