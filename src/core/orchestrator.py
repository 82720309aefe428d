"""
Orchestrates a chart scan: extract images, scan each in turn, emit results.
"""
import logging
import sys
from typing import Optional, TextIO

from core.extractor import get_chart_images
from core.models import ChartReference, OutputMode
from core.scanner import TrivyScanner

logger = logging.getLogger(__name__)


def merge_json_outputs(outputs: list[str]) -> str:
    """
    Merge per-image Trivy JSON reports into a single JSON array.

    Each report is expected to be exactly one top-level array. The reports
    are concatenated and every "][" boundary is spliced into ",". Any other
    "][" sequence in the text is rewritten too.
    """
    return "".join(outputs).replace("][", ",")


class ChartScanOrchestrator:
    """
    Scans every image of a chart sequentially and writes the combined result.
    """

    def __init__(
        self,
        scanner: TrivyScanner,
        helm_bin: Optional[str] = None,
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            scanner: Scanner used for each image
            helm_bin: Helm binary (defaults to $HELM_BIN or 'helm')
            stream: Where results are written (defaults to stdout)
        """
        self.scanner = scanner
        self.helm_bin = helm_bin
        self.stream = stream

    def scan_chart(self, chart: ChartReference, output_mode: OutputMode = OutputMode.TEXT) -> list[str]:
        """
        Scan all images of a chart.

        Text reports are written as soon as each scan finishes; JSON reports
        are merged and written once at the end. Errors from extraction or
        from any scan propagate immediately and the remaining images are
        not scanned.

        Args:
            chart: Chart reference and render parameters
            output_mode: Human-readable or JSON output

        Returns:
            Images scanned, in scan order
        """
        stream = self.stream if self.stream is not None else sys.stdout
        logger.info(f"Scanning chart {chart.chart}")

        images = get_chart_images(chart, self.helm_bin)

        json_outputs = []
        for image in images:
            logger.debug(f"Scanning image {image}")
            result = self.scanner.scan_image(image)
            if result.mode == OutputMode.JSON:
                json_outputs.append(result.output)
            else:
                stream.write(result.output + "\n")
                stream.flush()

        if output_mode == OutputMode.JSON:
            stream.write(merge_json_outputs(json_outputs) + "\n")
            stream.flush()

        return images
