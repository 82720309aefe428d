"""Core business logic for chart image extraction and scanning."""

from core.models import (
    ChartReference,
    OutputMode,
    ScanConfig,
    ScanCredentials,
    ScanResult,
)
from core.exceptions import (
    HelmTrivyError,
    RenderError,
    EmptyResultError,
    ExecutorLifecycleError,
    ImagePullError,
    CacheError,
)

__all__ = [
    "ChartReference",
    "OutputMode",
    "ScanConfig",
    "ScanCredentials",
    "ScanResult",
    "HelmTrivyError",
    "RenderError",
    "EmptyResultError",
    "ExecutorLifecycleError",
    "ImagePullError",
    "CacheError",
]
