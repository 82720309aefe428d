"""
Command-line interface for helm-trivy.

Scans every image used by a Helm chart with Trivy. Flags keep the
single-dash names Helm plugin users type (e.g. 'helm trivy -json chart'),
each also accepted with a double dash.
"""

import argparse
import logging
import sys
from typing import Optional

from constants import (
    DEFAULT_TRIVY_USER,
    EXIT_FAILURE,
    EXIT_USAGE,
    TRIVY_IMAGE_TAG,
)
from core.cache import CacheDirectory
from core.exceptions import EmptyResultError, HelmTrivyError, RenderError
from core.models import ChartReference, OutputMode, ScanConfig, ScanCredentials
from core.orchestrator import ChartScanOrchestrator
from core.scanner import TrivyScanner
from utils.docker_utils import DockerClient
from utils.logging_helpers import log_error_section

logger = logging.getLogger(__name__)

USAGE = "helm trivy [options] <helm chart>"
EPILOG = "Example: helm trivy -json stable/mariadb"

# Flags whose value is handed to another tool and may itself look like an option.
PASSTHROUGH_FLAGS = ("-trivyargs", "--trivyargs")


def setup_logging(verbose: bool = False):
    """Configure logging. Logs go to stderr so stdout only carries reports."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="helm-trivy",
        usage=USAGE,
        description="Scan all images of a Helm chart for vulnerabilities with Trivy",
        epilog=EPILOG,
    )

    output_group = parser.add_argument_group("output options")
    trivy_group = parser.add_argument_group("trivy options")
    chart_group = parser.add_argument_group("chart options")

    parser.add_argument("chart", nargs="?", help="Helm chart to scan.")

    output_group.add_argument("-json", "--json", dest="json_output", action="store_true", help="Enable JSON output.")
    output_group.add_argument("-debug", "--debug", action="store_true", help="Enable debug logging.")

    trivy_group.add_argument("-nopull", "--nopull", dest="no_pull", action="store_true", help="Don't pull latest trivy image.")
    trivy_group.add_argument("-trivyargs", "--trivyargs", dest="trivy_args", default="", help="CLI args to passthrough to trivy.")
    trivy_group.add_argument("-trivyuser", "--trivyuser", dest="trivy_user", default=DEFAULT_TRIVY_USER, help="Specify user to run Trivy as.")
    trivy_group.add_argument("-dockeruser", "--dockeruser", dest="docker_user", default="", help="Specify Docker Auth username.")
    trivy_group.add_argument("-dockerpass", "--dockerpass", dest="docker_pass", default="", help="Specify Docker Auth password.")
    trivy_group.add_argument("-cachedir", "--cachedir", dest="cache_dir", default="", help="Set vuln cache dir, if empty a tmp dir is used.")

    chart_group.add_argument("-set", "--set", dest="template_set", default="", help="Values to set for helm chart, format: 'key1=value1,key2=value2'.")
    chart_group.add_argument("-values", "--values", dest="template_values", default="", help="Specify chart values in a YAML file or a URL.")
    chart_group.add_argument("-version", "--version", dest="chart_version", default="", help="Specify chart version.")

    return parser


def join_passthrough_args(argv: list[str]) -> list[str]:
    """
    Attach the value following a passthrough flag with '='.

    argparse refuses a separate value that looks like an option (e.g.
    '-trivyargs --ignore-unfixed'), but accepts it in '-trivyargs=--ignore-unfixed'
    form.
    """
    joined = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in PASSTHROUGH_FLAGS and i + 1 < len(argv):
            joined.append(f"{arg}={argv[i + 1]}")
            i += 2
            continue
        joined.append(arg)
        i += 1
    return joined


def parse_args(args: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments, exiting with status 2 if no chart is given."""
    parser = build_parser()
    argv = sys.argv[1:] if args is None else args
    parsed = parser.parse_args(join_passthrough_args(list(argv)))
    if not parsed.chart:
        sys.stderr.write("Error: No chart specified.\n")
        parser.print_help(sys.stderr)
        sys.exit(EXIT_USAGE)
    return parsed


def build_config(args: argparse.Namespace) -> ScanConfig:
    """Build the immutable scan configuration from parsed arguments."""
    return ScanConfig(
        output_mode=OutputMode.JSON if args.json_output else OutputMode.TEXT,
        debug=args.debug,
        trivy_args=args.trivy_args,
        trivy_user=args.trivy_user,
        credentials=ScanCredentials(username=args.docker_user, password=args.docker_pass),
        pull_scanner_image=not args.no_pull,
    )


def build_chart_reference(args: argparse.Namespace) -> ChartReference:
    return ChartReference(
        chart=args.chart,
        set_values=args.template_set,
        values=args.template_values,
        version=args.chart_version,
    )


def run(args: argparse.Namespace, docker_client: Optional[DockerClient] = None) -> None:
    """
    Execute a chart scan.

    Args:
        args: Parsed command-line arguments
        docker_client: Docker client to use (built from the environment if omitted)

    Raises:
        HelmTrivyError: If any stage fails
    """
    config = build_config(args)
    chart = build_chart_reference(args)

    docker_client = docker_client or DockerClient()

    if config.pull_scanner_image:
        logger.info("Pulling latest trivy image")
        docker_client.pull_image(config.scanner_image, tag=TRIVY_IMAGE_TAG)
        logger.info("Pulled latest trivy image")

    with CacheDirectory(args.cache_dir) as cache_dir:
        cache_dir.install_signal_handlers()
        logger.debug(f"Using {config.trivy_user} as user for vulnerability scanning")

        scanner = TrivyScanner(docker_client, cache_dir.path, config)
        orchestrator = ChartScanOrchestrator(scanner)
        orchestrator.scan_chart(chart, config.output_mode)


def main(argv: Optional[list[str]] = None):
    """Main entry point for the helm-trivy command."""
    args = parse_args(argv)
    setup_logging(args.debug)

    try:
        run(args)
    except RenderError as e:
        log_error_section(
            f"Could not find images for chart {e.chart}.",
            [f"Error: {e.reason}", "Did you run 'helm repo update' ?"],
            logger=logger,
        )
        sys.exit(EXIT_FAILURE)
    except EmptyResultError as e:
        log_error_section(str(e), [], logger=logger)
        sys.exit(EXIT_FAILURE)
    except HelmTrivyError as e:
        log_error_section("Chart scan failed.", [f"Error: {e}"], logger=logger)
        sys.exit(EXIT_FAILURE)


if __name__ == "__main__":
    main()
