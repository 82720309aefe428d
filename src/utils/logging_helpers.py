"""
Logging helper utilities for the helm-trivy CLI.

Provides consistent formatting for fatal error reports.
"""

import logging
from typing import List, Optional


def log_error_section(
    title: str,
    messages: List[str],
    logger: Optional[logging.Logger] = None,
    width: int = 60
) -> None:
    """
    Log an error section with separator lines and multiple messages.

    Args:
        title: Title message for the error section
        messages: List of error messages to display
        logger: Logger instance (defaults to root logger if not provided)
        width: Width of separator line in characters

    Examples:
        >>> log_error_section(
        ...     "Could not find images for chart stable/mariadb.",
        ...     ["Error: helm exited with status 1", "Did you run 'helm repo update' ?"]
        ... )
        ============================================================
        Could not find images for chart stable/mariadb.
        Error: helm exited with status 1
        Did you run 'helm repo update' ?
        ============================================================
    """
    logger = logger or logging.getLogger()
    separator = "=" * width

    for line in [separator, title, *messages, separator]:
        logger.error(line)
