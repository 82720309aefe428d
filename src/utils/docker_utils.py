"""
Docker utility functions for scanner container operations.

Wraps the Docker Engine SDK with the small set of lifecycle operations the
scanner needs (pull, create, start, wait, logs, remove) and translates SDK
failures into helm-trivy exceptions.
"""

import logging
from typing import Optional

import docker
import requests
from docker.errors import DockerException
from docker.models.containers import Container

from core.exceptions import ExecutorLifecycleError, ImagePullError

logger = logging.getLogger(__name__)

# Errors surfaced by the SDK itself and by its HTTP transport.
CONTAINER_ERRORS = (DockerException, requests.exceptions.RequestException)


class DockerClient:
    """
    Thin client for the scanner container lifecycle.

    None of the calls have a timeout: waiting blocks until the container
    stops.
    """

    def __init__(self, client: Optional[docker.DockerClient] = None):
        """
        Initialize Docker client.

        Args:
            client: Preconfigured SDK client. If omitted, one is built from
                    the environment (DOCKER_HOST, DOCKER_TLS_VERIFY, ...).

        Raises:
            ExecutorLifecycleError: If no Docker client can be created
        """
        if client is None:
            try:
                client = docker.from_env()
            except DockerException as e:
                raise ExecutorLifecycleError("get docker client", str(e)) from e
        self.client = client

    def pull_image(self, repository: str, tag: str = "latest") -> None:
        """
        Pull an image from its registry.

        Raises:
            ImagePullError: If the pull fails
        """
        image = f"{repository}:{tag}"
        try:
            self.client.images.pull(repository, tag=tag)
        except CONTAINER_ERRORS as e:
            raise ImagePullError(image, str(e)) from e
        logger.debug(f"Pulled {image}")

    def create_container(
        self,
        image: str,
        command: list[str],
        environment: dict[str, str],
        volumes: dict[str, dict[str, str]],
        user: str,
        tty: bool = True,
    ) -> Container:
        """
        Create (but do not start) a container.

        Args:
            image: Image to run
            command: Arguments passed to the image entrypoint
            environment: Environment variables for the container
            volumes: Host path to {'bind': path, 'mode': mode} mapping
            user: User to run as inside the container
            tty: Allocate a pseudo-TTY, which keeps logs unmultiplexed

        Returns:
            Created container
        """
        return self.client.containers.create(
            image,
            command=command,
            environment=environment,
            volumes=volumes,
            user=user,
            tty=tty,
        )

    def start_container(self, container: Container) -> None:
        container.start()

    def wait_container(self, container: Container) -> int:
        """Block until the container is no longer running and return its exit status."""
        result = container.wait(condition="not-running")
        return result.get("StatusCode", 0)

    def container_logs(self, container: Container) -> bytes:
        """Return the container's full stdout, excluding stderr."""
        return container.logs(stdout=True, stderr=False)

    def remove_container(self, container: Container) -> None:
        container.remove(force=True)
