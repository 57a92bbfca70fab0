#!/usr/bin/env python3
"""
CMXCTL CLUSTER REQUEST BUILDER
------------------------------
Assembles a ClusterRequest from `cluster create` options. The CLI supports
setting the default node group either through the flat flags (--nodes,
--disk, --instance-type, ...) or through a single --default-nodegroup
descriptor; additional groups always come from descriptors.
"""

import random
import logging
from typing import Optional, Sequence

from cmxctl.core import defaults
from cmxctl.core.models import NodeGroup, ClusterRequest
from cmxctl.core.errors import CmxError, ClusterRequestError
from cmxctl.parsing.nodegroups import parse_node_groups
from cmxctl.parsing.tags import parse_tags

logger = logging.getLogger("cmxctl.cluster")

_ADJECTIVES = [
    "admiring", "brave", "clever", "dreamy", "eager", "focused", "gallant",
    "happy", "jolly", "keen", "loving", "modest", "nifty", "optimistic",
    "quirky", "relaxed", "serene", "tender", "upbeat", "vibrant", "wizardly",
    "youthful", "zealous",
]

_SURNAMES = [
    "albattani", "babbage", "curie", "darwin", "euclid", "feynman", "goodall",
    "hopper", "johnson", "kepler", "lovelace", "meitner", "noether", "pascal",
    "ritchie", "shannon", "turing", "villani", "wozniak", "yalow",
]


def generate_cluster_name(rng: Optional[random.Random] = None) -> str:
    """Returns an `adjective_surname` name such as 'brave_turing'."""
    rng = rng or random
    return f"{rng.choice(_ADJECTIVES)}_{rng.choice(_SURNAMES)}"


class ClusterRequestBuilder:
    """
    Validates `cluster create` options and resolves the default node group.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    def build(self, distribution: str, name: str = "", version: str = "",
              license_id: str = "", ttl: str = "", instance_type: str = "",
              nodes: int = defaults.DEFAULT_NODE_COUNT,
              min_nodes: int = 0, max_nodes: int = 0,
              disk: int = defaults.DEFAULT_DISK_GIB,
              default_node_group: str = "",
              additional_node_groups: Sequence[str] = (),
              tags: Sequence[str] = (),
              dry_run: bool = False) -> ClusterRequest:
        if not name:
            name = generate_cluster_name(self.rng)
            logger.debug(f"No cluster name given, generated '{name}'")

        try:
            parsed_tags = parse_tags(tags)
        except CmxError as e:
            raise ClusterRequestError(f"parse tags: {e}") from e

        try:
            additional = parse_node_groups(additional_node_groups)
        except CmxError as e:
            raise ClusterRequestError(f"parse node groups: {e}") from e

        if default_node_group:
            try:
                parsed = parse_node_groups([default_node_group])
            except CmxError as e:
                raise ClusterRequestError(f"parse default node group: {e}") from e
            if len(parsed) != 1:
                raise ClusterRequestError("invalid default node group format")
            default_group = parsed[0]
        else:
            default_group = self._flag_node_group(instance_type, nodes, min_nodes, max_nodes, disk)

        return ClusterRequest(
            name=name,
            distribution=distribution,
            version=version,
            license_id=license_id,
            ttl=ttl,
            instance_type=instance_type,
            default_node_group=default_group,
            additional_node_groups=additional,
            tags=parsed_tags,
            dry_run=dry_run,
        )

    def _flag_node_group(self, instance_type: str, nodes: int, min_nodes: int,
                         max_nodes: int, disk: int) -> NodeGroup:
        """Builds the default group from the flat flags."""
        if min_nodes < 0:
            raise ClusterRequestError(f"min-nodes must be a non-negative number: {min_nodes}")
        if max_nodes < 0:
            raise ClusterRequestError(f"max-nodes must be a non-negative number: {max_nodes}")

        # An explicit node count wins over the autoscaling bounds
        if nodes > 0:
            return NodeGroup(
                name=defaults.DEFAULT_NODE_GROUP_NAME,
                instance_type=instance_type,
                nodes=nodes,
                disk=disk,
            )
        return NodeGroup(
            name=defaults.DEFAULT_NODE_GROUP_NAME,
            instance_type=instance_type,
            disk=disk,
            min_nodes=min_nodes,
            max_nodes=max_nodes,
        )
