"""The closed set of worldviews every prompt, chart and chat agent covers."""

from enum import Enum
from typing import List


class Worldview(str, Enum):
    """Declaration order is the order of chart labels and comparison rows."""

    ATHEISM = "atheism"
    AGNOSTICISM = "agnosticism"
    CHRISTIANITY = "christianity"
    ISLAM = "islam"
    HINDUISM = "hinduism"
    BUDDHISM = "buddhism"
    JUDAISM = "judaism"
    SIKHISM = "sikhism"

    @property
    def display_name(self) -> str:
        return capitalize(self.value)


def capitalize(name: str) -> str:
    """Upper-case the first letter only ("christianity" -> "Christianity")."""
    return name[:1].upper() + name[1:]


def display_names() -> List[str]:
    return [wv.display_name for wv in Worldview]


def parse_worldview(value: str) -> Worldview:
    """Case-insensitive lookup. Raises ValueError for unknown names."""
    return Worldview(value.strip().lower())
