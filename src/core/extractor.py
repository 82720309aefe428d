"""
Image extraction from rendered Helm charts.

Runs 'helm template' and collects every distinct image reference from the
rendered manifests, in first-seen order.
"""

import logging
import os
import subprocess
from typing import Optional

from constants import DEFAULT_HELM_BIN, HELM_BIN_ENV_VAR, IMAGE_MARKER
from core.exceptions import EmptyResultError, RenderError
from core.models import ChartReference

logger = logging.getLogger(__name__)


def resolve_helm_bin() -> str:
    """Return the helm binary exported to plugins, falling back to 'helm'."""
    return os.environ.get(HELM_BIN_ENV_VAR) or DEFAULT_HELM_BIN


def build_template_command(chart: ChartReference, helm_bin: str = DEFAULT_HELM_BIN) -> list[str]:
    """Build the full 'helm template' command line for a chart."""
    return [helm_bin] + chart.template_args()


def parse_images(rendered: str) -> list[str]:
    """
    Extract unique image references from rendered manifest text.

    A line is a candidate only if it contains the "image: " marker; the
    value is whatever follows the first marker, with surrounding double
    quotes stripped. This is a line heuristic rather than a YAML parse, so
    unrelated lines containing the marker are picked up as well.

    Args:
        rendered: Manifest text produced by 'helm template'

    Returns:
        Distinct image references in first-seen order
    """
    images = []
    seen = set()
    for line in rendered.split("\n"):
        if line.endswith("\r"):
            line = line[:-1]
        if IMAGE_MARKER not in line:
            continue
        image = line.split(IMAGE_MARKER, 1)[1].strip('"')
        logger.debug(f"Found image {image}")
        if image in seen:
            continue
        seen.add(image)
        images.append(image)
    return images


def get_chart_images(chart: ChartReference, helm_bin: Optional[str] = None) -> list[str]:
    """
    Render a chart and return the images it would deploy.

    The helm call has no timeout and blocks until helm exits.

    Args:
        chart: Chart reference and render parameters
        helm_bin: Helm binary (defaults to $HELM_BIN or 'helm')

    Returns:
        Distinct image references in first-seen order

    Raises:
        RenderError: If helm cannot be run or exits non-zero
        EmptyResultError: If rendering succeeds but no images are found
    """
    cmd = build_template_command(chart, helm_bin or resolve_helm_bin())
    logger.debug(f"Running helm cmd: {' '.join(cmd)}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        reason = f"helm exited with status {e.returncode}"
        if stderr:
            reason = f"{reason}: {stderr}"
        raise RenderError(chart.chart, reason) from e
    except OSError as e:
        raise RenderError(chart.chart, f"could not run {cmd[0]}: {e}") from e

    images = parse_images(result.stdout)
    if not images:
        raise EmptyResultError(chart.chart)

    logger.debug(f"Found images for chart {chart.chart}: {images}")
    return images
