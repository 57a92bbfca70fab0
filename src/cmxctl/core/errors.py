#!/usr/bin/env python3
"""
CMXCTL ERRORS
-------------
Exception taxonomy shared by the parsers, the request builder and the
scaffolder. The CLI catches CmxError at the top level, prints the message
and exits non-zero.
"""


class CmxError(Exception):
    """Root of every error the CLI reports to the user."""


class NodeGroupError(CmxError, ValueError):
    """
    A node-group descriptor failed validation.

    Attributes:
        descriptor: The raw descriptor text that was rejected.
        kind: Short machine-readable error category.
    """
    kind = "NodeGroupError"

    def __init__(self, message: str, descriptor: str = ""):
        super().__init__(message)
        self.descriptor = descriptor


class UnknownFieldError(NodeGroupError):
    kind = "UnknownField"

    def __init__(self, field_name: str, descriptor: str = ""):
        super().__init__(f"invalid node group field: {field_name}", descriptor)
        self.field_name = field_name


class InvalidNodeCountError(NodeGroupError):
    kind = "InvalidNodeCount"

    def __init__(self, value: str, descriptor: str = ""):
        super().__init__(f"failed to parse nodes value: {value}", descriptor)
        self.value = value


class InvalidDiskSizeError(NodeGroupError):
    kind = "InvalidDiskSize"

    def __init__(self, value: str, descriptor: str = ""):
        super().__init__(f"failed to parse disk value: {value}", descriptor)
        self.value = value


class InvalidNodeBoundError(NodeGroupError):
    """min-nodes / max-nodes is not a non-negative integer."""
    kind = "InvalidNodeBound"

    def __init__(self, field_name: str, value: str, descriptor: str = ""):
        super().__init__(
            f"{field_name} must be a non-negative number: {value}", descriptor
        )
        self.field_name = field_name
        self.value = value


class MalformedDescriptorError(NodeGroupError):
    kind = "MalformedDescriptor"

    def __init__(self, descriptor: str):
        super().__init__(f"invalid node group format: {descriptor}", descriptor)


class InvalidTagError(CmxError, ValueError):
    def __init__(self, tag: str):
        super().__init__(f"invalid tag format: {tag}")
        self.tag = tag


class ClusterRequestError(CmxError):
    """Wraps a parse failure with the flag it came from."""


class ScaffoldError(CmxError):
    """The app scaffolder could not read its inputs or write its outputs."""
