"""
Domain models for chart scanning.

This module defines the core data structures used throughout the application.
All models are immutable (frozen dataclasses) to prevent accidental mutation.
"""

from dataclasses import dataclass, field
from enum import Enum

from constants import (
    DEFAULT_TRIVY_USER,
    TRIVY_IMAGE,
    TRIVY_PASSWORD_ENV_VAR,
    TRIVY_USERNAME_ENV_VAR,
)


class OutputMode(str, Enum):
    """Format of the scanner output and of the combined result."""

    TEXT = "text"
    JSON = "json"


@dataclass(frozen=True)
class ChartReference:
    """
    Helm chart reference together with its render parameters.

    Attributes:
        chart: Chart reference (repo/name, local path or URL)
        set_values: Overrides in 'key1=value1,key2=value2' form
        values: Values file path or URL
        version: Chart version constraint
    """

    chart: str
    set_values: str = ""
    values: str = ""
    version: str = ""

    def template_args(self) -> list[str]:
        """Build the 'helm template' arguments for this chart."""
        args = ["template"]
        if self.set_values:
            args += ["--set", self.set_values]
        if self.values:
            args += ["--values", self.values]
        if self.version:
            args += ["--version", self.version]
        args.append(self.chart)
        return args


@dataclass(frozen=True)
class ScanCredentials:
    """Registry credentials handed to the scanner. The password never appears in repr."""

    username: str = ""
    password: str = field(default="", repr=False)

    def environment(self) -> dict[str, str]:
        """Environment variables Trivy reads registry credentials from."""
        return {
            TRIVY_USERNAME_ENV_VAR: self.username,
            TRIVY_PASSWORD_ENV_VAR: self.password,
        }


@dataclass(frozen=True)
class ScanConfig:
    """
    Process-wide scan settings, built once by the CLI.

    Attributes:
        output_mode: Human-readable or JSON output
        debug: Run Trivy verbosely instead of quietly
        trivy_args: Extra Trivy arguments, split on whitespace
        trivy_user: User the scanner container runs as
        credentials: Registry credentials for Trivy
        scanner_image: Trivy image to run
        pull_scanner_image: Whether to pull the scanner image before scanning
    """

    output_mode: OutputMode = OutputMode.TEXT
    debug: bool = False
    trivy_args: str = ""
    trivy_user: str = DEFAULT_TRIVY_USER
    credentials: ScanCredentials = field(default_factory=ScanCredentials)
    scanner_image: str = TRIVY_IMAGE
    pull_scanner_image: bool = True

    @property
    def json_output(self) -> bool:
        return self.output_mode == OutputMode.JSON


@dataclass(frozen=True)
class ScanResult:
    """Raw scanner output for one image."""

    image: str
    output: str
    mode: OutputMode = OutputMode.TEXT
