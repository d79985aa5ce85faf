"""
Catalog of confirmed compact-binary coalescences.

The catalog is an immutable value: build it once (``load_default_catalog``)
and pass it to whoever needs it. Derived physics for an entry is computed on
demand by ``chirpsearch.inference.detection_engine``, never stored here.
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, Iterator, Optional, Tuple

from .event_types import EventType
from .gw_signal_params import Event

logger = logging.getLogger(__name__)


def _utc(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


# name, UTC timestamp, type, m1, m2, final mass, distance (Mpc), peak strain, sigma, description
KNOWN_EVENTS = [
    ("GW150914", 1442304517, EventType.BINARY_BLACK_HOLE, 36.0, 29.0, 62.0, 410.0, 1.0e-21, 5.1,
     "First gravitational wave detection. Binary black hole merger."),
    ("GW170817", 1503137191, EventType.BINARY_NEUTRON_STAR, 1.46, 1.27, 2.74, 40.0, 2.5e-22, 32.4,
     "First neutron star merger with electromagnetic counterpart (GRB 170817A, kilonova AT 2017gfo)"),
    ("GW190521", 1558474154, EventType.BINARY_BLACK_HOLE, 85.0, 66.0, 142.0, 5300.0, 8.0e-22, 14.7,
     "Most massive black hole merger. First intermediate-mass black hole."),
    ("GW200115", 1579089767, EventType.NEUTRON_STAR_BLACK_HOLE, 5.7, 1.5, 7.2, 300.0, 4.2e-22, 8.4,
     "First confirmed neutron star - black hole merger"),
    ("GW230529", 1685361600, EventType.BINARY_NEUTRON_STAR, 1.4, 1.3, 2.5, 650.0, 1.8e-22, 11.2,
     "Recent neutron star merger with possible r-process nucleosynthesis"),
]


class EventCatalog:
    """
    Read-only collection of historical events.

    Entries keep their insertion order for ``all()``; ``sorted_by_date()``
    returns them chronologically. Names are unique (case-insensitive).
    """

    def __init__(self, events: Iterable[Event]):
        events = tuple(events)
        names = [e.name.upper() for e in events]
        if len(set(names)) != len(names):
            raise ValueError("Duplicate event names in catalog")
        self._events: Tuple[Event, ...] = events
        self._by_name = {e.name.upper(): e for e in events}

    def all(self) -> Tuple[Event, ...]:
        return self._events

    def by_name(self, name: str) -> Optional[Event]:
        """Look up an event by name; returns None if absent."""
        return self._by_name.get(name.strip().upper())

    def sorted_by_date(self) -> Tuple[Event, ...]:
        return tuple(sorted(self._events, key=lambda e: e.date))

    def by_type(self, event_type: EventType) -> Tuple[Event, ...]:
        return tuple(e for e in self._events if e.event_type == event_type)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().upper() in self._by_name


def load_default_catalog() -> EventCatalog:
    """Build the catalog of confirmed detections bundled with the engine."""
    events = [
        Event(
            name=name,
            date=_utc(timestamp),
            event_type=event_type,
            m1=m1,
            m2=m2,
            final_mass=final_mass,
            distance_mpc=distance,
            peak_strain=peak_strain,
            significance_sigma=sigma,
            description=description,
        )
        for (name, timestamp, event_type, m1, m2, final_mass, distance,
             peak_strain, sigma, description) in KNOWN_EVENTS
    ]
    logger.debug(f"Loaded {len(events)} catalog events")
    return EventCatalog(events)
