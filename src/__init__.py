"""
helm-trivy - Helm Chart Vulnerability Scanner

Scan every container image a Helm chart would deploy with Trivy, each scan
running in its own disposable container.
"""

__version__ = "0.3.0"

from core.models import (
    ChartReference,
    ScanConfig,
    ScanResult,
    OutputMode,
)

__all__ = [
    "ChartReference",
    "ScanConfig",
    "ScanResult",
    "OutputMode",
]
