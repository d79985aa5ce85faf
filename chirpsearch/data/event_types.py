"""
Event Type Enumerations and Constants

Defines the compact-binary source classes used by the event catalog,
together with their display names and descriptions. Single source of truth
for source-class constants across the project.
"""

from enum import Enum
from typing import Dict


class EventType(str, Enum):
    """
    Compact-binary coalescence source classes.

    Values are stable identifiers suitable for JSON export.
    """
    BINARY_BLACK_HOLE = "binary_black_hole"
    BINARY_NEUTRON_STAR = "binary_neutron_star"
    NEUTRON_STAR_BLACK_HOLE = "neutron_star_black_hole"

    @property
    def display_name(self) -> str:
        return EVENT_TYPE_NAMES[self]

    @property
    def description(self) -> str:
        return EVENT_TYPE_DESCRIPTIONS[self]


# Human-readable names
EVENT_TYPE_NAMES: Dict[EventType, str] = {
    EventType.BINARY_BLACK_HOLE: "Binary Black Hole",
    EventType.BINARY_NEUTRON_STAR: "Binary Neutron Star",
    EventType.NEUTRON_STAR_BLACK_HOLE: "Neutron Star - Black Hole",
}

EVENT_TYPE_DESCRIPTIONS: Dict[EventType, str] = {
    EventType.BINARY_BLACK_HOLE: "Coalescence of two stellar-mass or intermediate-mass black holes",
    EventType.BINARY_NEUTRON_STAR: "Coalescence of two neutron stars, possibly with an electromagnetic counterpart",
    EventType.NEUTRON_STAR_BLACK_HOLE: "A neutron star disrupted by or swallowed by a black hole companion",
}

# Rich console styles for tables
EVENT_TYPE_STYLES: Dict[EventType, str] = {
    EventType.BINARY_BLACK_HOLE: "magenta",
    EventType.BINARY_NEUTRON_STAR: "yellow",
    EventType.NEUTRON_STAR_BLACK_HOLE: "cyan",
}


def parse_event_type(value) -> EventType:
    """Accept an EventType, its value, its member name or its display name."""
    if isinstance(value, EventType):
        return value
    text = str(value).strip()
    for member in EventType:
        if text in (member.value, member.name, member.display_name):
            return member
    raise ValueError(f"Unknown event type: {value!r}")
