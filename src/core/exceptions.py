"""
Exception hierarchy for helm-trivy.

Every pipeline stage raises a subclass of HelmTrivyError. None of them are
recovered from: the CLI reports the error and exits non-zero.
"""

from typing import Optional


class HelmTrivyError(Exception):
    """Base exception for all helm-trivy errors."""
    pass


class RenderError(HelmTrivyError):
    """Rendering the chart with helm failed."""

    def __init__(self, chart: str, reason: str):
        """
        Initialize render error.

        Args:
            chart: Chart reference that failed to render
            reason: Reason for failure
        """
        self.chart = chart
        self.reason = reason
        super().__init__(f"Could not find images for chart {chart}: {reason}")


class EmptyResultError(HelmTrivyError):
    """Chart rendered successfully but no images were found."""

    def __init__(self, chart: str):
        self.chart = chart
        super().__init__(f"No images found in chart {chart}.")


class ExecutorLifecycleError(HelmTrivyError):
    """Scanner container could not be created, started, awaited or read."""

    def __init__(self, stage: str, reason: str, image: Optional[str] = None):
        """
        Initialize executor lifecycle error.

        Args:
            stage: Lifecycle stage that failed (create, start, wait, logs)
            reason: Reason for failure
            image: Image being scanned when the failure occurred (optional)
        """
        self.stage = stage
        self.reason = reason
        self.image = image
        if image:
            super().__init__(f"Could not {stage} trivy container for {image}: {reason}")
        else:
            super().__init__(f"Could not {stage}: {reason}")


class ImagePullError(HelmTrivyError):
    """Pulling the scanner image failed."""

    def __init__(self, image: str, reason: str):
        self.image = image
        self.reason = reason
        super().__init__(f"Could not pull {image}: {reason}")


class CacheError(HelmTrivyError):
    """Vulnerability DB cache directory could not be prepared."""
    pass


__all__ = [
    "HelmTrivyError",
    "RenderError",
    "EmptyResultError",
    "ExecutorLifecycleError",
    "ImagePullError",
    "CacheError",
]
