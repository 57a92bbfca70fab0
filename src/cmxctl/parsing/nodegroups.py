#!/usr/bin/env python3
"""
CMXCTL NODE GROUP PARSER
------------------------
Turns `--default-nodegroup` / `--additional-nodegroup` descriptors into
NodeGroup records.

A descriptor is a comma-separated list of key=value pairs:

    name=ng1,instance-type=t2.medium,nodes=3,disk=20

Parsing is all-or-nothing: one bad descriptor fails the whole batch.
"""

import re
import logging
from typing import Dict, Any, List, Optional, Sequence

from cmxctl.core.models import NodeGroup
from cmxctl.core.errors import (
    UnknownFieldError,
    InvalidNodeCountError,
    InvalidDiskSizeError,
    InvalidNodeBoundError,
    MalformedDescriptorError,
)

logger = logging.getLogger("cmxctl.parser")

# Base-10 with an optional sign, ASCII digits only.
_INT_RE = re.compile(r"[+-]?[0-9]+")

# Descriptor key -> NodeGroup attribute
FIELD_NAMES = {
    "name": "name",
    "instance-type": "instance_type",
    "nodes": "nodes",
    "min-nodes": "min_nodes",
    "max-nodes": "max_nodes",
    "disk": "disk",
}


def parse_int(value: str) -> Optional[int]:
    """Returns the base-10 value of `value`, or None when it is not a plain integer."""
    if not _INT_RE.fullmatch(value):
        return None
    return int(value)


def parse_node_group(descriptor: str) -> NodeGroup:
    """
    Parses a single descriptor.

    Keys may repeat; the last occurrence wins.

    Raises:
        MalformedDescriptorError: a comma-separated part has no '='.
        UnknownFieldError: a key is not one of FIELD_NAMES.
        InvalidNodeCountError / InvalidDiskSizeError: non-integer count or size.
        InvalidNodeBoundError: min-nodes / max-nodes not a non-negative integer.
    """
    values: Dict[str, Any] = {}

    for part in descriptor.split(","):
        key, sep, value = part.partition("=")
        if not sep:
            raise MalformedDescriptorError(descriptor)

        if key not in FIELD_NAMES:
            raise UnknownFieldError(key, descriptor)

        if key in ("name", "instance-type"):
            parsed: Any = value
        elif key == "nodes":
            parsed = parse_int(value)
            if parsed is None:
                raise InvalidNodeCountError(value, descriptor)
        elif key == "disk":
            parsed = parse_int(value)
            if parsed is None:
                raise InvalidDiskSizeError(value, descriptor)
        else:
            parsed = parse_int(value)
            if parsed is None or parsed < 0:
                raise InvalidNodeBoundError(key, value, descriptor)

        values[FIELD_NAMES[key]] = parsed

    return NodeGroup(**values)


def parse_node_groups(descriptors: Sequence[str]) -> List[NodeGroup]:
    """
    Parses descriptors in order. Returns one NodeGroup per descriptor, or
    raises the first NodeGroupError encountered.
    """
    node_groups = [parse_node_group(d) for d in descriptors]
    logger.debug(f"Parsed {len(node_groups)} node group descriptor(s)")
    return node_groups
