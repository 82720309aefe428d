"""
Pytest fixtures and configuration for helm-trivy tests.

Provides shared fixtures and test utilities across the test suite.
"""

import pytest
from unittest.mock import MagicMock

from core.models import ChartReference, OutputMode, ScanConfig, ScanCredentials
from utils.docker_utils import DockerClient


@pytest.fixture
def sample_rendered_manifest():
    """Rendered manifest with two distinct images and one duplicate."""
    return """---
# Source: mariadb/templates/primary/statefulset.yaml
apiVersion: apps/v1
kind: StatefulSet
spec:
  template:
    spec:
      containers:
        - name: mariadb
          image: docker.io/bitnami/mariadb:10.5.8-debian-10-r0
          imagePullPolicy: "IfNotPresent"
        - name: metrics
          image: "docker.io/bitnami/mysqld-exporter:0.12.1"
      initContainers:
        - name: volume-permissions
          image: docker.io/bitnami/mariadb:10.5.8-debian-10-r0
"""


@pytest.fixture
def sample_chart():
    """Chart reference without render overrides."""
    return ChartReference(chart="stable/mariadb")


@pytest.fixture
def sample_credentials():
    return ScanCredentials(username="robot", password="s3cret")


@pytest.fixture
def text_config(sample_credentials):
    """Scan configuration for human-readable output."""
    return ScanConfig(
        output_mode=OutputMode.TEXT,
        credentials=sample_credentials,
    )


@pytest.fixture
def json_config(sample_credentials):
    """Scan configuration for JSON output."""
    return ScanConfig(
        output_mode=OutputMode.JSON,
        credentials=sample_credentials,
    )


@pytest.fixture
def mock_container():
    """Container that runs to completion and returns a report."""
    container = MagicMock()
    container.wait.return_value = {"StatusCode": 0}
    container.logs.return_value = b"report"
    return container


@pytest.fixture
def mock_sdk_client(mock_container):
    """Docker SDK client whose containers.create returns mock_container."""
    client = MagicMock()
    client.containers.create.return_value = mock_container
    return client


@pytest.fixture
def docker_client(mock_sdk_client):
    """DockerClient wrapping the mock SDK client."""
    return DockerClient(client=mock_sdk_client)

