#!/usr/bin/env python3
"""
CMXCTL DEFAULTS
---------------
Flag defaults and environment overrides, resolved once at import time
and passed explicitly to the components that need them.
"""

import os
import logging

VERSION = "0.1.0"

# cluster create
DEFAULT_NODE_COUNT = 1
DEFAULT_DISK_GIB = 50
DEFAULT_NODE_GROUP_NAME = "default"
OUTPUT_FORMATS = ("table", "json", "wide")

# init-kots-app layout, relative to the chart directory
KOTS_DIR_NAME = "kots"
MANIFESTS_DIR_NAME = "manifests"
CHART_FILE_NAME = "Chart.yaml"


def default_output_format() -> str:
    """CMXCTL_OUTPUT overrides the table default when it names a known format."""
    value = os.environ.get("CMXCTL_OUTPUT", "table").strip().lower()
    return value if value in OUTPUT_FORMATS else "table"


def log_level(verbose: bool = False) -> str:
    """--verbose forces DEBUG; otherwise CMXCTL_LOG_LEVEL, falling back to WARNING."""
    if verbose:
        return "DEBUG"
    value = os.environ.get("CMXCTL_LOG_LEVEL", "WARNING").upper()
    return value if isinstance(logging.getLevelName(value), int) else "WARNING"
