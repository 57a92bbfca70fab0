"""Parses `--tag key=value` flags."""

from typing import List, Sequence

from cmxctl.core.models import Tag
from cmxctl.core.errors import InvalidTagError


def parse_tags(tags: Sequence[str]) -> List[Tag]:
    parsed = []
    for tag in tags:
        key, sep, value = tag.partition("=")
        if not sep:
            raise InvalidTagError(tag)
        parsed.append(Tag(key=key, value=value))
    return parsed
