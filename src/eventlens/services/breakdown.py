"""
Categorical breakdown - counts and shares per value of one dimension
"""

from typing import Dict, List, Optional, Sequence

from eventlens.core.errors import InvalidArgument

# API field name -> Event attribute
BREAKDOWN_FIELDS = {
    'device': 'device',
    'country': 'country',
    'event_type': 'event_type',
    'eventType': 'event_type',
}


class BreakdownEntry:
    def __init__(self, value: str, count: int, percentage: float):
        self.value = value
        self.count = count
        self.percentage = percentage

    def __repr__(self):
        return f"BreakdownEntry({self.value!r}, {self.count}, {self.percentage:.1f}%)"

    def __eq__(self, other):
        if not isinstance(other, BreakdownEntry):
            return NotImplemented
        return (self.value, self.count, self.percentage) == (other.value, other.count, other.percentage)

    def to_dict(self) -> Dict:
        return {'value': self.value, 'count': self.count, 'percentage': self.percentage}

    @classmethod
    def from_dict(cls, data: Dict) -> 'BreakdownEntry':
        return cls(data['value'], data['count'], data['percentage'])


def _field_value(event, attribute: str) -> str:
    value = getattr(event, attribute)
    # Enum members report their wire value
    return getattr(value, 'value', value)


def breakdown_by(events: Sequence, field: str, top_n: Optional[int] = None) -> List[BreakdownEntry]:
    """
    Group events by the exact value of `field` and rank by count.

    Percentages are shares of the whole input, so a truncated breakdown sums
    to less than 100. Ties keep first-encountered order.
    """
    attribute = BREAKDOWN_FIELDS.get(field)
    if attribute is None:
        raise InvalidArgument(f"Cannot break down by {field!r}; expected one of device, country, event_type")
    if top_n is not None and (isinstance(top_n, bool) or not isinstance(top_n, int) or top_n < 0):
        raise InvalidArgument(f"top_n must be a non-negative integer, got {top_n!r}")

    total = len(events)
    if total == 0:
        return []

    # dicts keep insertion order, which gives first-encountered tie order
    counts: Dict[str, int] = {}
    for event in events:
        key = _field_value(event, attribute)
        counts[key] = counts.get(key, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    if top_n is not None:
        ranked = ranked[:top_n]

    return [BreakdownEntry(value, count, count / total * 100) for value, count in ranked]
