"""
Centralized configuration constants for helm-trivy.

This module provides a single source of truth for the names, paths and
defaults shared by the extractor, the scanner and the CLI.
"""

# ============================================================================
# Helm
# ============================================================================

DEFAULT_HELM_BIN = "helm"
"""Helm binary used when HELM_BIN is not set in the environment."""

HELM_BIN_ENV_VAR = "HELM_BIN"
"""Environment variable Helm exports to plugins with its own binary path."""

IMAGE_MARKER = "image: "
"""Substring identifying an image reference line in rendered manifests."""

# ============================================================================
# Trivy
# ============================================================================

TRIVY_IMAGE = "aquasec/trivy"
"""Scanner image run once per chart image."""

TRIVY_IMAGE_TAG = "latest"
"""Tag pulled for the scanner image unless pulling is disabled."""

TRIVY_CACHE_MOUNT = "/.cache"
"""Path the vulnerability DB cache directory is bound to inside the scanner."""

DEFAULT_TRIVY_USER = "1000"
"""Default non-root user the scanner container runs as."""

TRIVY_USERNAME_ENV_VAR = "TRIVY_USERNAME"
TRIVY_PASSWORD_ENV_VAR = "TRIVY_PASSWORD"

# ============================================================================
# Cache
# ============================================================================

CACHE_DIR_PREFIX = "helm-trivy"
"""Prefix for the temporary vulnerability DB cache directory."""

# ============================================================================
# Exit codes
# ============================================================================

EXIT_USAGE = 2
"""Exit status when no chart is given."""

EXIT_FAILURE = 1
"""Exit status for any failed pipeline stage."""
