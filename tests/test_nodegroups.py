import pytest

from cmxctl.core.models import NodeGroup
from cmxctl.core.errors import (
    NodeGroupError,
    UnknownFieldError,
    InvalidNodeCountError,
    InvalidDiskSizeError,
    InvalidNodeBoundError,
    MalformedDescriptorError,
)
from cmxctl.parsing.nodegroups import parse_node_groups, parse_node_group, parse_int

VALID_DESCRIPTORS = [
    (
        "name=ng1,instance-type=t2.medium,nodes=3,disk=20",
        NodeGroup(name="ng1", instance_type="t2.medium", nodes=3, disk=20),
    ),
    (
        "name=ng1,instance-type=t2.medium,nodes=3",
        NodeGroup(name="ng1", instance_type="t2.medium", nodes=3),
    ),
    ("name=ng1,nodes=3", NodeGroup(name="ng1", nodes=3)),
    ("nodes=3", NodeGroup(nodes=3)),
    ("disk=100,nodes=2,name=pool", NodeGroup(name="pool", nodes=2, disk=100)),
    ("name=,instance-type=", NodeGroup()),
    ("nodes=0,disk=0", NodeGroup()),
    ("nodes=-1", NodeGroup(nodes=-1)),
    ("nodes=+4", NodeGroup(nodes=4)),
    ("nodes=007", NodeGroup(nodes=7)),
    ("name=a=b", NodeGroup(name="a=b")),
    (
        "name=auto,min-nodes=1,max-nodes=5,disk=50",
        NodeGroup(name="auto", min_nodes=1, max_nodes=5, disk=50),
    ),
]

INVALID_DESCRIPTORS = [
    ("name=ng1,instance-type=t2.medium,nodes=3,disk=20,invalid=invalid", UnknownFieldError),
    ("Name=ng1", UnknownFieldError),
    ("name=ng1,instance-type=t2.medium,nodes=invalid,disk=20", InvalidNodeCountError),
    ("nodes=", InvalidNodeCountError),
    ("nodes= 3", InvalidNodeCountError),
    ("nodes=1_000", InvalidNodeCountError),
    ("nodes=3.5", InvalidNodeCountError),
    ("name=ng1,instance-type=t2.medium,nodes=3,disk=invalid", InvalidDiskSizeError),
    ("disk=20GiB", InvalidDiskSizeError),
    ("nodes=3\n", InvalidNodeCountError),
    ("disk=20\n", InvalidDiskSizeError),
    ("min-nodes=-1", InvalidNodeBoundError),
    ("max-nodes=many", InvalidNodeBoundError),
    ("invalid", MalformedDescriptorError),
    ("", MalformedDescriptorError),
    ("name=ng1,nodes", MalformedDescriptorError),
    ("name=ng1,,nodes=3", MalformedDescriptorError),
]


@pytest.mark.parametrize("descriptor,expected", VALID_DESCRIPTORS)
def test_valid_descriptor(descriptor, expected):
    assert parse_node_groups([descriptor]) == [expected]


@pytest.mark.parametrize("descriptor,error_cls", INVALID_DESCRIPTORS)
def test_invalid_descriptor(descriptor, error_cls):
    with pytest.raises(error_cls) as exc_info:
        parse_node_groups([descriptor])
    assert exc_info.value.descriptor == descriptor
    assert isinstance(exc_info.value, ValueError)


def test_error_kinds_match_taxonomy():
    cases = {
        "bogus=1": "UnknownField",
        "nodes=x": "InvalidNodeCount",
        "disk=x": "InvalidDiskSize",
        "invalid": "MalformedDescriptor",
    }
    for descriptor, kind in cases.items():
        with pytest.raises(NodeGroupError) as exc_info:
            parse_node_group(descriptor)
        assert exc_info.value.kind == kind


def test_error_messages_name_the_problem():
    with pytest.raises(UnknownFieldError, match="invalid node group field: invalid"):
        parse_node_group("nodes=3,invalid=invalid")
    with pytest.raises(InvalidNodeCountError, match="failed to parse nodes value: abc"):
        parse_node_group("nodes=abc")
    with pytest.raises(MalformedDescriptorError, match="invalid node group format: invalid"):
        parse_node_group("invalid")


def test_empty_batch():
    assert parse_node_groups([]) == []


def test_batch_preserves_order():
    result = parse_node_groups(["name=a,nodes=1", "name=b,nodes=2", "name=c,nodes=3"])
    assert [ng.name for ng in result] == ["a", "b", "c"]
    assert [ng.nodes for ng in result] == [1, 2, 3]


def test_batch_is_all_or_nothing():
    """
    ATOMICITY TEST: a single bad descriptor anywhere in the batch fails
    the whole call, even after earlier descriptors parsed cleanly.
    """
    with pytest.raises(InvalidDiskSizeError):
        parse_node_groups(["name=a,nodes=1", "name=b,disk=big", "name=c,nodes=3"])


def test_first_violation_wins():
    # Unknown field appears before the bad node count
    with pytest.raises(UnknownFieldError):
        parse_node_group("colour=red,nodes=x")
    with pytest.raises(InvalidNodeCountError):
        parse_node_group("nodes=x,colour=red")


def test_duplicate_key_last_value_wins():
    assert parse_node_group("nodes=1,nodes=5,name=a,name=b") == NodeGroup(name="b", nodes=5)


def test_node_group_is_immutable():
    ng = parse_node_group("nodes=3")
    with pytest.raises(AttributeError):
        ng.nodes = 4


def test_payload_field_names():
    ng = parse_node_group("name=ng1,instance-type=t2.medium,nodes=3,disk=20")
    assert ng.to_payload() == {
        "name": "ng1",
        "instance_type": "t2.medium",
        "node_count": 3,
        "min_node_count": None,
        "max_node_count": None,
        "disk_gib": 20,
    }


@pytest.mark.parametrize("value,expected", [
    ("3", 3), ("-2", -2), ("+7", 7),
    ("3\n", None), (" 3", None), ("1_000", None), ("٣", None), ("", None),
])
def test_parse_int_matches_atoi(value, expected):
    assert parse_int(value) == expected
