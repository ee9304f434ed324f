"""
Filter criteria applied to an event collection before aggregation
"""

from typing import List, Optional, Sequence

from eventlens.core.event_model import DeviceType, Event, EventType
from eventlens.core.errors import InvalidArgument
from eventlens.core.fingerprint import params_fingerprint


class FilterCriteria:
    """
    Optional predicates, ANDed together.

    A None or empty predicate imposes no constraint. Date bounds are
    inclusive epoch-ms values.
    """

    def __init__(
        self,
        date_from: Optional[int] = None,
        date_to: Optional[int] = None,
        countries: Optional[Sequence[str]] = None,
        devices: Optional[Sequence[str]] = None,
        event_types: Optional[Sequence[str]] = None,
        purchases_only: bool = False,
    ):
        if date_from is not None and date_to is not None and date_from > date_to:
            raise InvalidArgument(f"date_from ({date_from}) is after date_to ({date_to})")

        try:
            device_set = frozenset(DeviceType(d) for d in devices or ())
            event_type_set = frozenset(EventType(t) for t in event_types or ())
        except ValueError as e:
            raise InvalidArgument(str(e)) from e

        self.date_from = date_from
        self.date_to = date_to
        self.countries = frozenset(countries or ())
        self.devices = device_set
        self.event_types = event_type_set
        self.purchases_only = bool(purchases_only)

    def is_empty(self) -> bool:
        return (
            self.date_from is None
            and self.date_to is None
            and not self.countries
            and not self.devices
            and not self.event_types
            and not self.purchases_only
        )

    def matches(self, event: Event) -> bool:
        if self.date_from is not None and event.timestamp < self.date_from:
            return False
        if self.date_to is not None and event.timestamp > self.date_to:
            return False
        if self.countries and event.country not in self.countries:
            return False
        if self.devices and event.device not in self.devices:
            return False
        if self.event_types and event.event_type not in self.event_types:
            return False
        if self.purchases_only and not event.is_purchase:
            return False
        return True

    def fingerprint(self) -> str:
        return params_fingerprint([
            self.date_from,
            self.date_to,
            ",".join(sorted(self.countries)),
            ",".join(sorted(d.value for d in self.devices)),
            ",".join(sorted(t.value for t in self.event_types)),
            self.purchases_only,
        ])


def apply_filters(events: Sequence[Event], criteria: Optional[FilterCriteria]) -> List[Event]:
    """Return a new list with the matching events, in input order"""
    if criteria is None or criteria.is_empty():
        return list(events)
    return [event for event in events if criteria.matches(event)]
