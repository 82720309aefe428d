"""
Trivy scan executor.

Runs one disposable Trivy container per image and captures its report.
"""

import logging

from constants import TRIVY_CACHE_MOUNT
from core.exceptions import ExecutorLifecycleError
from core.models import ScanConfig, ScanResult
from utils.docker_utils import CONTAINER_ERRORS, DockerClient

logger = logging.getLogger(__name__)


class TrivyScanner:
    """
    Scans images by running Trivy inside a container.

    The vulnerability DB cache directory is bind-mounted into every
    container, so the DB is only downloaded once per run.
    """

    def __init__(self, docker_client: DockerClient, cache_dir: str, config: ScanConfig):
        """
        Initialize Trivy scanner.

        Args:
            docker_client: Docker client used for the container lifecycle
            cache_dir: Host directory holding the vulnerability DB cache
            config: Process-wide scan settings
        """
        self.docker = docker_client
        self.cache_dir = cache_dir
        self.config = config

    def build_command(self, image: str) -> list[str]:
        """
        Build the Trivy arguments for one image.

        Args:
            image: Image reference to scan

        Returns:
            Arguments for the Trivy entrypoint, image last
        """
        cmd = ["--cache-dir", TRIVY_CACHE_MOUNT]
        if self.config.json_output:
            cmd += ["-f", "json"]
        cmd.append("-d" if self.config.debug else "-q")
        cmd += self.config.trivy_args.split()
        cmd.append(image)
        return cmd

    def scan_image(self, image: str) -> ScanResult:
        """
        Scan a single image.

        Creates, starts and waits for a Trivy container, reads its stdout and
        removes it. The container's own exit status is not treated as a
        failure, so '--exit-code' passed through trivy_args does not stop the
        run.

        Args:
            image: Image reference to scan

        Returns:
            ScanResult with the unmodified Trivy output

        Raises:
            ExecutorLifecycleError: If any lifecycle step fails
        """
        cmd = self.build_command(image)

        try:
            container = self.docker.create_container(
                self.config.scanner_image,
                command=cmd,
                environment=self.config.credentials.environment(),
                volumes={self.cache_dir: {"bind": TRIVY_CACHE_MOUNT, "mode": "rw"}},
                user=self.config.trivy_user,
                tty=True,
            )
        except CONTAINER_ERRORS as e:
            raise ExecutorLifecycleError("create", str(e), image) from e

        try:
            logger.debug(f"Starting container with command: {cmd}")
            self._run_step("start", image, self.docker.start_container, container)
            status = self._run_step("wait for", image, self.docker.wait_container, container)
            logger.debug(f"Trivy container for {image} exited with status {status}")
            output = self._run_step("get logs of", image, self.docker.container_logs, container)
        finally:
            self._remove(container, image)

        return ScanResult(
            image=image,
            output=output.decode("utf-8", errors="replace"),
            mode=self.config.output_mode,
        )

    def _run_step(self, stage, image, step, container):
        try:
            return step(container)
        except CONTAINER_ERRORS as e:
            raise ExecutorLifecycleError(stage, str(e), image) from e

    def _remove(self, container, image: str) -> None:
        try:
            self.docker.remove_container(container)
        except CONTAINER_ERRORS as e:
            logger.warning(f"Could not remove trivy container for {image}: {e}")
