"""Utility modules for container operations and logging."""

from utils.docker_utils import DockerClient

__all__ = [
    "DockerClient",
]
