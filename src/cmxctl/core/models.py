#!/usr/bin/env python3
"""
CMXCTL CORE MODELS
------------------
Defines the records exchanged between the descriptor parsers, the request
builder and the scaffolding writers. Every model is frozen: once a record
is built from user input it is never mutated.
"""

from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any


@dataclass(frozen=True)
class NodeGroup:
    """
    One requested pool of compute nodes.

    Empty strings and zero counts mean "let the backend pick its default".
    """
    name: str = ""                      # Node group identifier
    instance_type: str = ""             # Machine type (e.g. 't2.medium')
    nodes: int = 0                      # Node count
    disk: int = 0                       # Disk size per node, in GiB
    min_nodes: Optional[int] = None     # Autoscaling lower bound
    max_nodes: Optional[int] = None     # Autoscaling upper bound

    def to_payload(self) -> Dict[str, Any]:
        """Renders the node group in the backend's JSON field names."""
        return {
            "name": self.name,
            "instance_type": self.instance_type,
            "node_count": self.nodes,
            "min_node_count": self.min_nodes,
            "max_node_count": self.max_nodes,
            "disk_gib": self.disk,
        }


@dataclass(frozen=True)
class Tag:
    key: str
    value: str

    def to_payload(self) -> Dict[str, str]:
        return {"key": self.key, "value": self.value}


@dataclass(frozen=True)
class ChartYaml:
    """The subset of a Helm chart's Chart.yaml used for scaffolding."""
    name: str
    version: str = ""
    icon: str = ""


@dataclass(frozen=True)
class ClusterRequest:
    """
    A fully validated cluster-creation request.

    The default node group is always resolved, regardless of whether the
    user supplied it as a descriptor or through the individual flags.
    """
    name: str
    distribution: str
    default_node_group: NodeGroup
    version: str = ""
    license_id: str = ""
    ttl: str = ""
    instance_type: str = ""
    additional_node_groups: List[NodeGroup] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)
    dry_run: bool = False

    @property
    def node_groups(self) -> List[NodeGroup]:
        return [self.default_node_group] + list(self.additional_node_groups)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "kubernetes_distribution": self.distribution,
            "kubernetes_version": self.version,
            "license_id": self.license_id,
            "ttl": self.ttl,
            "instance_type": self.instance_type,
            "node_groups": [ng.to_payload() for ng in self.node_groups],
            "tags": [t.to_payload() for t in self.tags],
        }
